"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the game, one frame per step.
Reward is obstacles cleared plus tokens collected during the frame.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from gapflight.flight_core.config_loader import GameConfig, load_config
from gapflight.flight_core.game import CoreGame

ACTION_IDLE = 0
ACTION_TRIGGER = 1


class FlightEnv(gym.Env):
    """
    Gap Flight as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = do nothing, 1 = trigger (flap).

    Observation Space:
        Dict of avatar state, difficulty, and fixed-size obstacle/token
        arrays with masks.

    Episode:
        reset() starts a fresh session (grace window armed); the episode
        terminates when game over latches.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        frame_dt: Optional[float] = None,
        max_frames: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
            frame_dt: Seconds per step. Defaults to 1 / frame_rate.
            max_frames: Truncate episodes after this many frames.
            debug: If True, prints per-step diagnostics.
        """
        super().__init__()

        self._config = load_config(config_path)
        self.render_mode = render_mode
        self._frame_dt = frame_dt if frame_dt is not None else 1.0 / self._config.session.frame_rate
        self._max_frames = max_frames
        self._debug = debug

        self._game = CoreGame(config=self._config)
        self._renderer = None

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] FlightEnv initialized")
            print(f"[DEBUG]   Board: {self._config.board.width}x{self._config.board.height}")
            print(f"[DEBUG]   Frame dt: {self._frame_dt:.4f}s")

    def _build_observation_space(self) -> spaces.Dict:
        board = self._config.board
        max_obs = self._config.observation.max_obstacles
        max_tok = self._config.observation.max_tokens
        wide = board.width + self._config.obstacles.sprite_width + self._config.tokens.spawn_offset_x

        return spaces.Dict({
            "avatar_y": spaces.Box(low=0, high=board.height, shape=(), dtype=np.float32),
            "avatar_vy": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "tokens": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "grace_frames": spaces.Box(low=0, high=self._config.session.grace_frames, shape=(), dtype=np.int32),
            "speed": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "gap": spaces.Box(low=0, high=board.height, shape=(), dtype=np.float32),
            "obs_x": spaces.Box(low=-wide, high=wide, shape=(max_obs,), dtype=np.float32),
            "obs_gap_top": spaces.Box(low=0, high=board.height, shape=(max_obs,), dtype=np.float32),
            "obs_gap": spaces.Box(low=0, high=board.height, shape=(max_obs,), dtype=np.float32),
            "obs_mask": spaces.MultiBinary(max_obs),
            "tok_x": spaces.Box(low=-wide, high=wide, shape=(max_tok,), dtype=np.float32),
            "tok_y": spaces.Box(low=0, high=board.height, shape=(max_tok,), dtype=np.float32),
            "tok_mask": spaces.MultiBinary(max_tok),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for spawn placement.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        if not self._game.state.started:
            self._game.start(seed=seed)
        else:
            self._game.reset(seed=seed)

        obs = self._game.snapshot().to_obs_dict()
        info = self._game.get_info()
        info["delta_score"] = 0
        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one frame.

        Args:
            action: 0 (idle) or 1 (trigger).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())

        if int(action) == ACTION_TRIGGER and not self._game.is_over:
            self._game.trigger()

        result = self._game.step(self._frame_dt)

        obs = self._game.snapshot().to_obs_dict()
        reward = float(result.delta_score + result.events.tokens_collected)
        terminated = result.game_over
        truncated = (
            not terminated
            and self._max_frames is not None
            and self._game.frames >= self._max_frames
        )

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["tokens_collected"] = result.events.tokens_collected

        if self._debug:
            print(f"[DEBUG] Step: action={action}, y={float(obs['avatar_y']):.1f}, "
                  f"vy={float(obs['avatar_vy']):.2f}, score={info['score']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current frame.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode != "rgb_array":
            return None

        if self._renderer is None:
            from gapflight.flight_core.render_pygame import PygameRenderer
            self._renderer = PygameRenderer(self._config)
        return self._renderer.render(self._game.get_render_data())

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
