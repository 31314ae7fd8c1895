"""
Pygame Renderer
===============

Paints one frame of the game from render data. Supports drawing onto a
caller-owned surface (human play) and headless RGB output.

Rendering only reads render data; it never touches the simulation.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from gapflight.flight_core.config_loader import GameConfig, get_config


def avatar_tilt(vy: float, divisor: float = 8.0, low: float = -0.6, high: float = 0.8) -> float:
    """Avatar rotation in radians for a vertical velocity."""
    return max(low, min(high, vy / divisor))


class PygameRenderer:
    """
    Renderer for the logical playfield.

    Draw order: background, obstacles, tokens, avatar, ground, game-over
    overlay. Every sprite has a plain-shape fallback.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        use_sprites: bool = True,
        sprite_loader: Optional[Any] = None
    ):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
            use_sprites: Whether to load and use sprite graphics.
            sprite_loader: Explicit loader (tests); the global loader is used
                lazily if None.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config
        self._use_sprites = use_sprites
        self._sprite_loader: Optional[Any] = sprite_loader

        if not pygame.get_init():
            pygame.init()

        pygame.font.init()
        self._font_title = pygame.font.Font(None, 40)
        self._font_hint = pygame.font.Font(None, 20)

        self._sky_color = (111, 195, 247)
        self._ground_color = (222, 216, 149)
        self._ground_edge_color = (185, 169, 107)
        self._obstacle_color = (92, 184, 72)
        self._obstacle_edge_color = (52, 120, 40)
        self._token_color = (255, 215, 0)
        self._avatar_color = (255, 107, 107)
        self._title_color = (255, 51, 0)
        self._hint_color = (0, 0, 0)

        # Logical-size surface reused by render()
        self._frame: Optional[pygame.Surface] = None

    def _get_sprite_loader(self):
        """Lazy load the sprite loader."""
        if self._sprite_loader is None and self._use_sprites:
            try:
                from gapflight.flight_core.sprite_loader import get_sprite_loader
                self._sprite_loader = get_sprite_loader()
            except (ImportError, pygame.error):
                self._sprite_loader = False  # Mark as unavailable
        return self._sprite_loader if self._sprite_loader else None

    def _sprite(self, name: str, width: float, height: float):
        loader = self._get_sprite_loader()
        if loader is None or not loader.is_ready(name):
            return None
        return loader.get_sprite(name, int(width), int(height))

    @property
    def logical_size(self) -> Tuple[int, int]:
        return (self._config.board.width, self._config.board.height)

    def render(
        self,
        render_data: Dict[str, Any],
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> np.ndarray:
        """
        Render to RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width (logical width if None).
            height: Output image height (logical height if None).

        Returns:
            (height, width, 3) uint8 array.
        """
        logical = self.logical_size
        if self._frame is None:
            self._frame = pygame.Surface(logical)
        self.render_frame(self._frame, render_data)

        out_size = (width or logical[0], height or logical[1])
        surface = self._frame
        if out_size != logical:
            surface = pygame.transform.smoothscale(self._frame, out_size)

        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_frame(self, surface: pygame.Surface, render_data: Dict[str, Any]) -> None:
        """Paint a full frame onto a logical-size surface."""
        self._draw_background(surface, render_data)

        for obstacle in render_data["obstacles"]:
            self._draw_obstacle(surface, obstacle)

        for token in render_data["tokens"]:
            self._draw_token(surface, token)

        self._draw_avatar(surface, render_data["avatar"])
        self._draw_ground(surface, render_data)

        if render_data.get("game_over"):
            self._draw_game_over(surface, render_data.get("game_over_alpha", 1.0))

    def _draw_background(self, surface: pygame.Surface, render_data: Dict[str, Any]) -> None:
        width, height = int(render_data["board_width"]), int(render_data["board_height"])
        sprite = self._sprite("background", width, height)
        if sprite is not None:
            surface.blit(sprite, (0, 0))
        else:
            surface.fill(self._sky_color)

    def _draw_obstacle(self, surface: pygame.Surface, obstacle: Dict[str, Any]) -> None:
        """Top piece is flipped and ends at gap_top; bottom piece starts at the gap bottom."""
        pw = self._config.obstacles.sprite_width
        ph = self._config.obstacles.sprite_height
        x = int(obstacle["x"])
        top = obstacle["gap_top"]
        bottom = top + obstacle["gap"]

        sprite = self._sprite("obstacle", pw, ph)
        if sprite is not None:
            surface.blit(sprite, (x, int(bottom)))
            surface.blit(pygame.transform.flip(sprite, False, True), (x, int(top - ph)))
            return

        for rect in (
            pygame.Rect(x, int(top - ph), int(pw), int(ph)),
            pygame.Rect(x, int(bottom), int(pw), int(ph)),
        ):
            pygame.draw.rect(surface, self._obstacle_color, rect)
            pygame.draw.rect(surface, self._obstacle_edge_color, rect, 2)

    def _draw_token(self, surface: pygame.Surface, token: Dict[str, Any]) -> None:
        r = token["radius"]
        cx, cy = int(token["x"]), int(token["y"])
        sprite = self._sprite("token", r * 2, r * 2)
        if sprite is not None:
            rotated = pygame.transform.rotate(sprite, -math.degrees(token["angle"]))
            surface.blit(rotated, rotated.get_rect(center=(cx, cy)))
        else:
            pygame.draw.circle(surface, self._token_color, (cx, cy), int(r))

    def _draw_avatar(self, surface: pygame.Surface, avatar: Dict[str, Any]) -> None:
        cfg = self._config.avatar
        tilt = avatar_tilt(avatar["vy"], cfg.tilt_divisor, cfg.tilt_min, cfg.tilt_max)
        cx, cy = int(avatar["x"]), int(avatar["y"])

        sprite = self._sprite("avatar", cfg.sprite_size, cfg.sprite_size)
        if sprite is not None:
            rotated = pygame.transform.rotate(sprite, -math.degrees(tilt))
            surface.blit(rotated, rotated.get_rect(center=(cx, cy)))
        else:
            pygame.draw.circle(surface, self._avatar_color, (cx, cy), int(avatar["radius"]))

    def _draw_ground(self, surface: pygame.Surface, render_data: Dict[str, Any]) -> None:
        ground_y = int(render_data["ground_y"])
        width = int(render_data["board_width"])
        height = int(render_data["board_height"])
        pygame.draw.rect(surface, self._ground_color, (0, ground_y, width, height - ground_y))
        pygame.draw.line(surface, self._ground_edge_color, (0, ground_y), (width, ground_y), 1)

    def _draw_text(
        self,
        surface: pygame.Surface,
        font: "pygame.font.Font",
        text: str,
        color: Tuple[int, int, int],
        center_y: int,
        alpha: float,
        glow: bool = False
    ) -> None:
        """Centered text with optional glow, faded by alpha in [0, 1]."""
        alpha_byte = int(max(0.0, min(1.0, alpha)) * 255)
        if alpha_byte == 0:
            return
        center_x = surface.get_width() // 2
        text_surface = font.render(text, True, color)

        if glow:
            halo = text_surface.copy()
            halo.set_alpha(alpha_byte // 4)
            for dx, dy in ((-2, 0), (2, 0), (0, -2), (0, 2)):
                surface.blit(halo, halo.get_rect(center=(center_x + dx, center_y + dy)))

        text_surface.set_alpha(alpha_byte)
        surface.blit(text_surface, text_surface.get_rect(center=(center_x, center_y)))

    def _draw_game_over(self, surface: pygame.Surface, alpha: float) -> None:
        mid = surface.get_height() // 2
        self._draw_text(surface, self._font_title, "GAME OVER!", self._title_color, mid - 20, alpha, glow=True)
        self._draw_text(
            surface, self._font_hint, "Click or press Space to Restart",
            self._hint_color, mid + 20, alpha
        )

    def close(self) -> None:
        """Drop cached surfaces."""
        self._frame = None
