"""
Entities
========

Avatar, obstacle and bonus token records mutated by the physics step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass
class Avatar:
    """
    The player's avatar.

    x is fixed for the lifetime of a session; y and vy change every frame.
    """
    x: float
    y: float
    vy: float
    radius: float

    @property
    def top(self) -> float:
        return self.y - self.radius

    @property
    def bottom(self) -> float:
        return self.y + self.radius

    def reset(self, y: float) -> None:
        """Re-center the avatar and drop any velocity."""
        self.y = y
        self.vy = 0.0


@dataclass
class Obstacle:
    """
    A gapped obstacle.

    The gap spans [gap_top, gap_top + gap] vertically. ``scored`` flips
    exactly once, when the right edge passes the avatar.
    """
    x: float
    gap_top: float
    gap: float
    scored: bool = False

    @property
    def gap_bottom(self) -> float:
        return self.gap_top + self.gap

    def right_edge(self, width: float) -> float:
        return self.x + width

    def hitbox_x(self, width: float, hitbox_scale: float) -> Tuple[float, float]:
        """
        Horizontal extent of the collision box.

        The box keeps the central ``hitbox_scale`` fraction of the sprite
        width, trimming equally from both sides.

        Returns:
            (left, box_width) tuple.
        """
        box_width = width * hitbox_scale
        left = self.x + (1.0 - hitbox_scale) * width / 2.0
        return left, box_width


@dataclass
class BonusToken:
    """A spinning collectible token."""
    x: float
    y: float
    radius: float
    angle: float
    angular_velocity: float

    @property
    def right_edge(self) -> float:
        return self.x + self.radius
