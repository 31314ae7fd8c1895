"""
Progression Policy
==================

Derives obstacle speed and gap width from cumulative score.
"""

from __future__ import annotations

from typing import Optional

from gapflight.flight_core.config_loader import GameConfig, get_config


class ProgressionPolicy:
    """
    Pure difficulty curve.

    - level = score // level_size
    - speed = base_speed + level * speed_step (unbounded)
    - gap = max(base_gap - level * gap_step, min_gap)
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._prog = config.progression

    def level(self, score: int) -> int:
        """Difficulty level for a score."""
        return max(0, score) // self._prog.level_size

    def speed(self, score: int) -> float:
        """Leftward obstacle and token speed per frame."""
        return self._prog.base_speed + self.level(score) * self._prog.speed_step

    def gap(self, score: int) -> float:
        """Vertical gap height for newly spawned obstacles."""
        shrunk = self._prog.base_gap - self.level(score) * self._prog.gap_step
        return max(shrunk, self._prog.min_gap)
