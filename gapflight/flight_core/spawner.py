"""
Spawner - Frame-Normalized Spawn Timers
=======================================

Obstacles and tokens are spawned by two independent timers that count
normalized frames (dt * frame_rate), so spawn pacing does not depend on the
display refresh rate.
"""

from __future__ import annotations

import math
import random
from typing import Optional

from gapflight.flight_core.config_loader import GameConfig, get_config
from gapflight.flight_core.entities import BonusToken, Obstacle


class Spawner:
    """
    Owns both spawn timers and the random source used to place new entities.

    A fixed seed gives a reproducible sequence of spawns for the same
    sequence of dt values.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._frame_rate = config.session.frame_rate

        self._obstacle_timer: float = 0.0
        self._token_timer: float = 0.0

    @property
    def obstacle_timer(self) -> float:
        return self._obstacle_timer

    @property
    def token_timer(self) -> float:
        return self._token_timer

    def tick_obstacle(self, dt: float, gap: float) -> Optional[Obstacle]:
        """
        Advance the obstacle timer.

        Args:
            dt: Frame time in seconds.
            gap: Gap height for a new obstacle.

        Returns:
            A new unscored Obstacle at the right edge, or None.
        """
        cfg = self._config.obstacles
        self._obstacle_timer += dt * self._frame_rate
        if self._obstacle_timer <= cfg.spawn_threshold:
            return None

        self._obstacle_timer = 0.0
        gap_top = cfg.gap_top_min + self._rng.randrange(cfg.gap_top_range)
        return Obstacle(
            x=float(self._config.board.width),
            gap_top=float(gap_top),
            gap=gap,
            scored=False
        )

    def tick_token(self, dt: float) -> Optional[BonusToken]:
        """
        Advance the token timer.

        The threshold is re-drawn from [base, base + jitter) on every check.

        Returns:
            A new BonusToken past the right edge, or None.
        """
        cfg = self._config.tokens
        self._token_timer += dt * self._frame_rate
        threshold = cfg.spawn_threshold_base + self._rng.random() * cfg.spawn_threshold_jitter
        if self._token_timer <= threshold:
            return None

        self._token_timer = 0.0
        return self._make_token()

    def _make_token(self) -> BonusToken:
        cfg = self._config.tokens
        band = int(self._config.ground_y - 2 * cfg.y_margin)
        y = cfg.y_margin + self._rng.randrange(band)
        return BonusToken(
            x=self._config.board.width + cfg.spawn_offset_x,
            y=float(y),
            radius=cfg.radius,
            angle=self._rng.random() * math.pi * 2,
            angular_velocity=cfg.angular_velocity_min + self._rng.random() * cfg.angular_velocity_range
        )

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Zero both timers.

        Args:
            seed: New random seed. Keeps current stream if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._obstacle_timer = 0.0
        self._token_timer = 0.0
