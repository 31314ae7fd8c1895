"""
Core Game
=========

Session controller combining physics, spawning, progression and scoring.

States: NotStarted -> Playing -> GameOver -> Playing (reset) -> ...
A single trigger input starts, flaps or restarts depending on the state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from gapflight.flight_core.config_loader import GameConfig, get_config
from gapflight.flight_core.physics_world import FrameEvents, PhysicsWorld
from gapflight.flight_core.progression import ProgressionPolicy
from gapflight.flight_core.scoring import ScoreTracker
from gapflight.flight_core.state_snapshot import GameSnapshot, SnapshotBuilder


# Cue names sent to the cue sink
CUE_FLAP = "flap"
CUE_TOKEN = "token"
CUE_HIT = "hit"
CUE_MUSIC_START = "music_start"
CUE_MUSIC_STOP = "music_stop"


class Phase(Enum):
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class SessionState:
    """Mutable per-run session record."""
    started: bool = False
    running: bool = False
    game_over: bool = False
    grace_frames: int = 0
    game_over_alpha: float = 0.0
    game_over_reason: str = ""

    @property
    def phase(self) -> Phase:
        if not self.started:
            return Phase.NOT_STARTED
        if self.game_over:
            return Phase.GAME_OVER
        return Phase.PLAYING

    @property
    def grace_active(self) -> bool:
        return self.grace_frames > 0


@dataclass
class StepResult:
    """Result of a single frame."""
    events: FrameEvents
    delta_score: int
    game_over: bool
    game_over_reason: str
    dt: float
    cues: List[str] = field(default_factory=list)


class CoreGame:
    """
    Main session controller.

    Orchestrates:
    - Physics world (avatar, obstacles, tokens)
    - Progression policy (speed and gap from score)
    - Score tracking (score, best, tokens)
    - Grace window and game-over latch/fade
    - Fire-and-forget cues for the audio collaborator

    One step = one display frame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        cue_sink: Optional[Callable[[str], Any]] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for spawn placement.
            cue_sink: Optional callable receiving cue names. Errors it raises
                are ignored.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._cue_sink = cue_sink

        self._scorer = ScoreTracker()
        self._physics = PhysicsWorld(config, scorer=self._scorer, seed=seed)
        self._progression = ProgressionPolicy(config)
        self._snapshot_builder = SnapshotBuilder(config)

        self._state = SessionState()
        self._frames: int = 0

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def physics(self) -> PhysicsWorld:
        return self._physics

    @property
    def progression(self) -> ProgressionPolicy:
        return self._progression

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def score(self) -> int:
        return self._scorer.score

    @property
    def best_score(self) -> int:
        return self._scorer.best

    @property
    def tokens(self) -> int:
        return self._scorer.tokens

    @property
    def is_over(self) -> bool:
        return self._state.game_over

    @property
    def frames(self) -> int:
        """Frames stepped since the last (re)start."""
        return self._frames

    def set_cue_sink(self, cue_sink: Optional[Callable[[str], Any]]) -> None:
        self._cue_sink = cue_sink

    def _emit(self, cue: str, cues: Optional[List[str]] = None) -> None:
        """Send a cue without ever letting the sink disturb the frame."""
        if cues is not None:
            cues.append(cue)
        if self._cue_sink is None:
            return
        try:
            self._cue_sink(cue)
        except Exception:
            pass

    def trigger(self) -> Phase:
        """
        Handle the single player input.

        - NotStarted: start a session.
        - GameOver: reset to a fresh session.
        - Playing: flap.

        Returns:
            Phase after handling the input.
        """
        phase = self._state.phase
        if phase is Phase.NOT_STARTED:
            self.start()
        elif phase is Phase.GAME_OVER:
            self.reset()
        else:
            self._physics.flap()
            self._emit(CUE_FLAP)
        return self._state.phase

    def start(self, seed: Optional[int] = None) -> None:
        """Leave NotStarted. No effect once started."""
        if self._state.started:
            return
        self._state.started = True
        self._state.running = True
        self.reset(seed)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset to a fresh Playing session.

        Clears entities, re-centers the avatar, zeroes score, tokens and
        spawn timers, and arms the grace window. Best score is kept.

        Args:
            seed: New spawn seed. Keeps the current stream if None.
        """
        if seed is not None:
            self._seed = seed

        self._physics.clear(seed)
        self._scorer.reset()

        self._state.started = True
        self._state.running = True
        self._state.game_over = False
        self._state.game_over_alpha = 0.0
        self._state.game_over_reason = ""
        self._state.grace_frames = self._config.session.grace_frames
        self._frames = 0

        self._emit(CUE_MUSIC_START)

    def step(self, dt: float) -> StepResult:
        """
        Advance one frame.

        Args:
            dt: Seconds since the previous frame; clamped to
                [0, max_frame_dt].

        Returns:
            StepResult describing the frame.
        """
        dt = max(0.0, min(self._config.session.max_frame_dt, dt))
        state = self._state

        if state.phase is Phase.NOT_STARTED:
            return StepResult(FrameEvents(), 0, False, "", dt)

        if state.game_over:
            state.game_over_alpha = min(1.0, state.game_over_alpha + dt * self._config.session.fade_rate)
            return StepResult(FrameEvents(), 0, True, state.game_over_reason, dt)

        # The frame that consumes the last grace frame is still protected
        grace_active = state.grace_active
        if state.grace_frames > 0:
            state.grace_frames -= 1

        score_before = self._scorer.score
        speed = self._progression.speed(score_before)
        gap = self._progression.gap(score_before)

        events = self._physics.step(dt, speed, gap, grace_active=grace_active)
        self._frames += 1

        cues: List[str] = []
        if events.tokens_collected:
            self._emit(CUE_TOKEN, cues)

        if events.collided:
            reason = "obstacle" if events.obstacle_hit else "ground"
            self._trigger_game_over(reason, cues)

        return StepResult(
            events=events,
            delta_score=self._scorer.score - score_before,
            game_over=state.game_over,
            game_over_reason=state.game_over_reason,
            dt=dt,
            cues=cues
        )

    def _trigger_game_over(self, reason: str, cues: Optional[List[str]] = None) -> None:
        """Latch game over; repeated calls have no effect."""
        if self._state.game_over:
            return
        self._state.game_over = True
        self._state.game_over_reason = reason
        self._emit(CUE_MUSIC_STOP, cues)
        self._emit(CUE_HIT, cues)

    def get_info(self) -> Dict[str, Any]:
        """HUD / env info dict."""
        return {
            "score": self._scorer.score,
            "best_score": self._scorer.best,
            "tokens": self._scorer.tokens,
            "phase": self._state.phase.value,
            "game_over": self._state.game_over,
            "terminated_reason": self._state.game_over_reason,
            "grace_frames": self._state.grace_frames,
            "level": self._progression.level(self._scorer.score),
            "frames": self._frames,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with entity positions and overlay state. Plain values only.
        """
        avatar = self._physics.avatar
        return {
            "board_width": self._physics.board_width,
            "board_height": self._physics.board_height,
            "ground_y": self._physics.ground_y,
            "avatar": {
                "x": avatar.x,
                "y": avatar.y,
                "vy": avatar.vy,
                "radius": avatar.radius,
            },
            "obstacles": [
                {"x": o.x, "gap_top": o.gap_top, "gap": o.gap, "scored": o.scored}
                for o in self._physics.obstacles
            ],
            "tokens": [
                {"x": t.x, "y": t.y, "radius": t.radius, "angle": t.angle}
                for t in self._physics.tokens
            ],
            "score": self._scorer.score,
            "best_score": self._scorer.best,
            "tokens_collected": self._scorer.tokens,
            "started": self._state.started,
            "game_over": self._state.game_over,
            "game_over_alpha": self._state.game_over_alpha,
        }

    def snapshot(self) -> GameSnapshot:
        """Fixed-size numpy snapshot of the current state."""
        return self._snapshot_builder.build(
            physics=self._physics,
            score=self._scorer.score,
            tokens=self._scorer.tokens,
            grace_frames=self._state.grace_frames,
            speed=self._progression.speed(self._scorer.score),
            gap=self._progression.gap(self._scorer.score),
            game_over=self._state.game_over
        )
