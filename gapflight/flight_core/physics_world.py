"""
Physics World
=============

Owns the avatar, obstacles and tokens and advances them one frame at a time.

The avatar integrates gravity once per frame (not scaled by dt) while spawn
timers are frame-rate normalized. Movement of obstacles and tokens is also
per frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from gapflight.flight_core.config_loader import GameConfig, get_config
from gapflight.flight_core.entities import Avatar, BonusToken, Obstacle
from gapflight.flight_core.scoring import ScoreEvent, ScoreTracker
from gapflight.flight_core.spawner import Spawner


@dataclass
class FrameEvents:
    """What happened during a single physics step."""
    obstacles_cleared: int = 0
    tokens_collected: int = 0
    obstacle_hit: bool = False
    ground_hit: bool = False
    obstacle_spawned: bool = False
    token_spawned: bool = False
    score_events: List[ScoreEvent] = field(default_factory=list)

    @property
    def collided(self) -> bool:
        return self.obstacle_hit or self.ground_hit


def circles_overlap(
    x0: float, y0: float, r0: float,
    x1: float, y1: float, r1: float
) -> bool:
    """Touching or overlapping circles, compared on squared distance."""
    dx = x0 - x1
    dy = y0 - y1
    min_dist = r0 + r1
    return dx * dx + dy * dy <= min_dist * min_dist


def avatar_hits_obstacle(
    avatar: Avatar,
    obstacle: Obstacle,
    sprite_width: float,
    hitbox_scale: float
) -> bool:
    """
    Inset-rectangle test of the avatar against an obstacle.

    The avatar collides when it overlaps the hitbox horizontally and its top
    is above the gap or its bottom is below it.
    """
    hit_x, hit_w = obstacle.hitbox_x(sprite_width, hitbox_scale)
    overlaps_x = avatar.x + avatar.radius > hit_x and avatar.x - avatar.radius < hit_x + hit_w
    outside_gap = avatar.top < obstacle.gap_top or avatar.bottom > obstacle.gap_bottom
    return overlaps_x and outside_gap


class PhysicsWorld:
    """
    Frame-stepped simulation of the playfield.

    Handles:
    - Avatar gravity, fall-speed cap and top clamp
    - Flap (velocity assignment)
    - Obstacle and token spawning via Spawner
    - Leftward movement, token rotation, scoring and removal
    - Obstacle, token and ground collisions
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scorer: Optional[ScoreTracker] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize physics world.

        Args:
            config: Game configuration. Uses default if None.
            scorer: Score tracker credited on clears and tokens.
            seed: Random seed for the spawner.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._scorer = scorer if scorer is not None else ScoreTracker()
        self._spawner = Spawner(config, seed)

        self._avatar = Avatar(
            x=config.avatar.x,
            y=config.start_y,
            vy=0.0,
            radius=config.avatar.radius
        )
        self._obstacles: List[Obstacle] = []
        self._tokens: List[BonusToken] = []

    @property
    def avatar(self) -> Avatar:
        return self._avatar

    @property
    def obstacles(self) -> List[Obstacle]:
        """Live obstacles in spawn order."""
        return self._obstacles

    @property
    def tokens(self) -> List[BonusToken]:
        """Live tokens in spawn order."""
        return self._tokens

    @property
    def spawner(self) -> Spawner:
        return self._spawner

    @property
    def board_width(self) -> float:
        return float(self._config.board.width)

    @property
    def board_height(self) -> float:
        return float(self._config.board.height)

    @property
    def ground_y(self) -> float:
        return self._config.ground_y

    def clear(self, seed: Optional[int] = None) -> None:
        """Remove all entities, re-center the avatar and zero spawn timers."""
        self._obstacles.clear()
        self._tokens.clear()
        self._avatar.reset(self._config.start_y)
        self._spawner.reset(seed)

    def add_obstacle(self, obstacle: Obstacle) -> Obstacle:
        """Append an obstacle (spawn order is preserved)."""
        self._obstacles.append(obstacle)
        return obstacle

    def add_token(self, token: BonusToken) -> BonusToken:
        """Append a token."""
        self._tokens.append(token)
        return token

    def flap(self) -> None:
        """Set the avatar's velocity to the flap velocity."""
        self._avatar.vy = self._config.avatar.flap_velocity

    def step(
        self,
        dt: float,
        speed: float,
        gap: float,
        grace_active: bool = False
    ) -> FrameEvents:
        """
        Advance the world by one frame.

        Args:
            dt: Clamped frame time in seconds (drives spawn timers only).
            speed: Leftward movement per frame for obstacles and tokens.
            gap: Gap height for obstacles spawned this frame.
            grace_active: Suppress gravity and all collisions.

        Returns:
            FrameEvents for this frame.
        """
        events = FrameEvents()

        if not grace_active:
            self._integrate_avatar()
        self._clamp_top()

        obstacle = self._spawner.tick_obstacle(dt, gap)
        if obstacle is not None:
            self.add_obstacle(obstacle)
            events.obstacle_spawned = True

        token = self._spawner.tick_token(dt)
        if token is not None:
            self.add_token(token)
            events.token_spawned = True

        self._advance_obstacles(speed, grace_active, events)
        self._advance_tokens(speed, grace_active, events)

        if not grace_active:
            self._check_ground(events)

        return events

    def _integrate_avatar(self) -> None:
        avatar = self._avatar
        cfg = self._config.avatar
        avatar.vy += cfg.gravity
        if avatar.vy > cfg.max_fall_speed:
            avatar.vy = cfg.max_fall_speed
        avatar.y += avatar.vy

    def _clamp_top(self) -> None:
        avatar = self._avatar
        if avatar.y < avatar.radius:
            avatar.y = avatar.radius
            avatar.vy = 0.0

    def _advance_obstacles(
        self,
        speed: float,
        grace_active: bool,
        events: FrameEvents
    ) -> None:
        width = self._config.obstacles.sprite_width
        hitbox_scale = self._config.obstacles.hitbox_scale
        avatar = self._avatar

        # Newest first so removal by index is safe
        for i in range(len(self._obstacles) - 1, -1, -1):
            obstacle = self._obstacles[i]
            obstacle.x -= speed

            if not obstacle.scored and obstacle.right_edge(width) < avatar.x:
                obstacle.scored = True
                events.score_events.append(self._scorer.apply_obstacle_cleared())
                events.obstacles_cleared += 1

            if obstacle.right_edge(width) < 0:
                del self._obstacles[i]

            if not grace_active and avatar_hits_obstacle(avatar, obstacle, width, hitbox_scale):
                events.obstacle_hit = True

    def _advance_tokens(
        self,
        speed: float,
        grace_active: bool,
        events: FrameEvents
    ) -> None:
        avatar = self._avatar

        for i in range(len(self._tokens) - 1, -1, -1):
            token = self._tokens[i]
            token.x -= speed
            token.angle += token.angular_velocity

            if not grace_active and circles_overlap(
                avatar.x, avatar.y, avatar.radius,
                token.x, token.y, token.radius
            ):
                events.score_events.append(self._scorer.apply_token())
                events.tokens_collected += 1
                del self._tokens[i]
                continue

            if token.right_edge < 0:
                del self._tokens[i]

    def _check_ground(self, events: FrameEvents) -> None:
        avatar = self._avatar
        ground_y = self._config.ground_y
        if avatar.bottom >= ground_y:
            avatar.y = ground_y - avatar.radius
            events.ground_hit = True
