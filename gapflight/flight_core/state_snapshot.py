"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

import numpy as np

from gapflight.flight_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from gapflight.flight_core.physics_world import PhysicsWorld


@dataclass
class GameSnapshot:
    """
    Game state snapshot.

    Obstacle and token arrays are fixed-size with masking. Obstacles are the
    ones nearest the avatar that it has not yet passed, in spawn order.
    """
    # Avatar
    avatar_y: float
    avatar_vy: float

    # Session
    score: int
    tokens: int
    grace_frames: int
    game_over: bool

    # Difficulty at this frame
    speed: float
    gap: float

    # Obstacle arrays (fixed size, padded)
    obs_x: np.ndarray        # (MAX_OBS,) float32
    obs_gap_top: np.ndarray  # (MAX_OBS,) float32
    obs_gap: np.ndarray      # (MAX_OBS,) float32
    obs_mask: np.ndarray     # (MAX_OBS,) bool

    # Token arrays (fixed size, padded)
    tok_x: np.ndarray        # (MAX_TOK,) float32
    tok_y: np.ndarray        # (MAX_TOK,) float32
    tok_mask: np.ndarray     # (MAX_TOK,) bool

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "avatar_y": np.array(self.avatar_y, dtype=np.float32),
            "avatar_vy": np.array(self.avatar_vy, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "tokens": np.array(self.tokens, dtype=np.int64),
            "grace_frames": np.array(self.grace_frames, dtype=np.int32),
            "speed": np.array(self.speed, dtype=np.float32),
            "gap": np.array(self.gap, dtype=np.float32),
            "obs_x": self.obs_x,
            "obs_gap_top": self.obs_gap_top,
            "obs_gap": self.obs_gap,
            "obs_mask": self.obs_mask.astype(np.int8),
            "tok_x": self.tok_x,
            "tok_y": self.tok_y,
            "tok_mask": self.tok_mask.astype(np.int8),
        }


class SnapshotBuilder:
    """Builds GameSnapshot instances from the physics world."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_obstacles = config.observation.max_obstacles
        self._max_tokens = config.observation.max_tokens

    def build(
        self,
        physics: "PhysicsWorld",
        score: int,
        tokens: int,
        grace_frames: int,
        speed: float,
        gap: float,
        game_over: bool
    ) -> GameSnapshot:
        obs_x = np.zeros(self._max_obstacles, dtype=np.float32)
        obs_gap_top = np.zeros(self._max_obstacles, dtype=np.float32)
        obs_gap = np.zeros(self._max_obstacles, dtype=np.float32)
        obs_mask = np.zeros(self._max_obstacles, dtype=bool)

        upcoming = [o for o in physics.obstacles if not o.scored][:self._max_obstacles]
        for i, obstacle in enumerate(upcoming):
            obs_x[i] = obstacle.x
            obs_gap_top[i] = obstacle.gap_top
            obs_gap[i] = obstacle.gap
            obs_mask[i] = True

        tok_x = np.zeros(self._max_tokens, dtype=np.float32)
        tok_y = np.zeros(self._max_tokens, dtype=np.float32)
        tok_mask = np.zeros(self._max_tokens, dtype=bool)

        for i, token in enumerate(physics.tokens[:self._max_tokens]):
            tok_x[i] = token.x
            tok_y[i] = token.y
            tok_mask[i] = True

        avatar = physics.avatar
        return GameSnapshot(
            avatar_y=avatar.y,
            avatar_vy=avatar.vy,
            score=score,
            tokens=tokens,
            grace_frames=grace_frames,
            game_over=game_over,
            speed=speed,
            gap=gap,
            obs_x=obs_x,
            obs_gap_top=obs_gap_top,
            obs_gap=obs_gap,
            obs_mask=obs_mask,
            tok_x=tok_x,
            tok_y=tok_y,
            tok_mask=tok_mask
        )
