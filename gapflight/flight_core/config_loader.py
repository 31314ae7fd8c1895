"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


@dataclass(frozen=True)
class BoardConfig:
    """Logical playfield geometry."""
    width: int           # Logical width
    height: int          # Logical height
    ground_height: int   # Height of the ground band at the bottom

    @property
    def ground_y(self) -> float:
        """Y coordinate of the ground line."""
        return float(self.height - self.ground_height)


@dataclass(frozen=True)
class AvatarConfig:
    """Avatar physics and drawing parameters."""
    x: float
    radius: float
    gravity: float
    flap_velocity: float
    max_fall_speed: float
    sprite_size: int
    tilt_divisor: float
    tilt_min: float
    tilt_max: float


@dataclass(frozen=True)
class ObstacleConfig:
    """Obstacle sprite size, hitbox and spawn parameters."""
    sprite_width: float
    sprite_height: float
    hitbox_scale: float
    spawn_threshold: float
    gap_top_min: int
    gap_top_range: int


@dataclass(frozen=True)
class TokenConfig:
    """Bonus token spawn parameters."""
    radius: float
    spawn_offset_x: float
    spawn_threshold_base: float
    spawn_threshold_jitter: float
    y_margin: int
    angular_velocity_min: float
    angular_velocity_range: float


@dataclass(frozen=True)
class ProgressionConfig:
    """Difficulty curve driven by score."""
    level_size: int
    base_speed: float
    speed_step: float
    base_gap: float
    gap_step: float
    min_gap: float


@dataclass(frozen=True)
class SessionConfig:
    """Session timing parameters."""
    grace_frames: int
    max_frame_dt: float
    fade_rate: float
    frame_rate: int


@dataclass(frozen=True)
class PresentationConfig:
    """HUD and splash timings for the front end."""
    hud_pulse_seconds: float
    splash_delay_ms: int
    splash_animation_ms: int
    splash_hold_ms: int
    splash_fade_ms: int
    max_pixel_ratio: float


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_obstacles: int
    max_tokens: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    avatar: AvatarConfig
    obstacles: ObstacleConfig
    tokens: TokenConfig
    progression: ProgressionConfig
    session: SessionConfig
    presentation: PresentationConfig
    observation: ObservationConfig

    @property
    def ground_y(self) -> float:
        return self.board.ground_y

    @property
    def start_y(self) -> float:
        """Avatar Y on every (re)start."""
        return self.board.height / 2


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.avatar.radius <= 0:
        raise ValueError(f"avatar.radius must be positive, got {config.avatar.radius}")
    if config.tokens.radius <= 0:
        raise ValueError(f"tokens.radius must be positive, got {config.tokens.radius}")

    if config.board.ground_height <= 0 or config.board.ground_y <= 2 * config.avatar.radius:
        raise ValueError(
            f"ground line ({config.board.ground_y}) leaves no room for the avatar"
        )

    prog = config.progression
    if prog.level_size <= 0:
        raise ValueError(f"progression.level_size must be positive, got {prog.level_size}")
    if prog.min_gap <= 0:
        raise ValueError(f"progression.min_gap must be positive, got {prog.min_gap}")
    if prog.min_gap > prog.base_gap:
        raise ValueError(
            f"progression.min_gap ({prog.min_gap}) exceeds base_gap ({prog.base_gap})"
        )

    if not 0.0 < config.obstacles.hitbox_scale <= 1.0:
        raise ValueError(
            f"obstacles.hitbox_scale must be in (0, 1], got {config.obstacles.hitbox_scale}"
        )

    obstacles = config.obstacles
    if obstacles.spawn_threshold <= 0:
        raise ValueError(f"obstacles.spawn_threshold must be positive, got {obstacles.spawn_threshold}")
    if obstacles.gap_top_range <= 0:
        raise ValueError(f"obstacles.gap_top_range must be positive, got {obstacles.gap_top_range}")

    # Token spawn band must fit above the ground
    if config.board.ground_y - 2 * config.tokens.y_margin <= 0:
        raise ValueError(
            f"tokens.y_margin ({config.tokens.y_margin}) leaves no spawn band above ground"
        )

    if config.session.grace_frames <= 0:
        raise ValueError(f"session.grace_frames must be positive, got {config.session.grace_frames}")
    if config.session.max_frame_dt <= 0:
        raise ValueError(f"session.max_frame_dt must be positive, got {config.session.max_frame_dt}")
    if config.session.frame_rate <= 0:
        raise ValueError(f"session.frame_rate must be positive, got {config.session.frame_rate}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"]),
        ground_height=int(board_data["ground_height"])
    )

    avatar_data = raw["avatar"]
    avatar = AvatarConfig(
        x=float(avatar_data["x"]),
        radius=float(avatar_data["radius"]),
        gravity=float(avatar_data["gravity"]),
        flap_velocity=float(avatar_data["flap_velocity"]),
        max_fall_speed=float(avatar_data["max_fall_speed"]),
        sprite_size=int(avatar_data.get("sprite_size", 35)),
        tilt_divisor=float(avatar_data.get("tilt_divisor", 8.0)),
        tilt_min=float(avatar_data.get("tilt_min", -0.6)),
        tilt_max=float(avatar_data.get("tilt_max", 0.8))
    )

    obstacle_data = raw["obstacles"]
    obstacles = ObstacleConfig(
        sprite_width=float(obstacle_data["sprite_width"]),
        sprite_height=float(obstacle_data["sprite_height"]),
        hitbox_scale=float(obstacle_data.get("hitbox_scale", 0.8)),
        spawn_threshold=float(obstacle_data["spawn_threshold"]),
        gap_top_min=int(obstacle_data["gap_top_min"]),
        gap_top_range=int(obstacle_data["gap_top_range"])
    )

    token_data = raw["tokens"]
    tokens = TokenConfig(
        radius=float(token_data["radius"]),
        spawn_offset_x=float(token_data.get("spawn_offset_x", 20)),
        spawn_threshold_base=float(token_data["spawn_threshold_base"]),
        spawn_threshold_jitter=float(token_data.get("spawn_threshold_jitter", 0)),
        y_margin=int(token_data["y_margin"]),
        angular_velocity_min=float(token_data["angular_velocity_min"]),
        angular_velocity_range=float(token_data["angular_velocity_range"])
    )

    prog_data = raw["progression"]
    progression = ProgressionConfig(
        level_size=int(prog_data["level_size"]),
        base_speed=float(prog_data["base_speed"]),
        speed_step=float(prog_data["speed_step"]),
        base_gap=float(prog_data["base_gap"]),
        gap_step=float(prog_data["gap_step"]),
        min_gap=float(prog_data["min_gap"])
    )

    session_data = raw["session"]
    session = SessionConfig(
        grace_frames=int(session_data["grace_frames"]),
        max_frame_dt=float(session_data["max_frame_dt"]),
        fade_rate=float(session_data.get("fade_rate", 2.0)),
        frame_rate=int(session_data.get("frame_rate", 60))
    )

    # Presentation and observation sections are optional
    pres_data = raw.get("presentation", {})
    presentation = PresentationConfig(
        hud_pulse_seconds=float(pres_data.get("hud_pulse_seconds", 0.42)),
        splash_delay_ms=int(pres_data.get("splash_delay_ms", 250)),
        splash_animation_ms=int(pres_data.get("splash_animation_ms", 1200)),
        splash_hold_ms=int(pres_data.get("splash_hold_ms", 1000)),
        splash_fade_ms=int(pres_data.get("splash_fade_ms", 500)),
        max_pixel_ratio=float(pres_data.get("max_pixel_ratio", 2.0))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_obstacles=int(obs_data.get("max_obstacles", 4)),
        max_tokens=int(obs_data.get("max_tokens", 4))
    )

    config = GameConfig(
        board=board,
        avatar=avatar,
        obstacles=obstacles,
        tokens=tokens,
        progression=progression,
        session=session,
        presentation=presentation,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
