"""
Sprite Loader
==============

Loads optional sprite images and reports per-sprite readiness so the
renderer can fall back to plain shapes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

SPRITES_DIR = Path(__file__).parent.parent.parent / "assets" / "images"

# Sprite name -> file in SPRITES_DIR
SPRITE_FILES = {
    "avatar": "avatar.png",
    "obstacle": "obstacle.png",
    "background": "bg.png",
    "token": "token.png",
}


class SpriteLoader:
    """
    Loads and caches sprites.

    A sprite that is missing or fails to decode is reported once and marked
    not ready; nothing here raises during rendering.
    """

    def __init__(self, sprites_dir: Optional[Path] = None, verbose: bool = True):
        """
        Initialize sprite loader.

        Args:
            sprites_dir: Path to sprites directory. Uses default if None.
            verbose: Print one line per loaded or failed sprite.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required for sprite loading")

        self._sprites_dir = Path(sprites_dir) if sprites_dir is not None else SPRITES_DIR
        self._verbose = verbose
        self._sprites: Dict[str, pygame.Surface] = {}
        self._failed: List[str] = []
        self._scaled_cache: Dict[Tuple[str, int, int], pygame.Surface] = {}

        self._load_sprites()

    def _load_sprites(self) -> None:
        for name, filename in SPRITE_FILES.items():
            path = self._sprites_dir / filename
            if not path.exists():
                self._report_failure(path)
                continue
            try:
                img = pygame.image.load(str(path))
                if pygame.display.get_surface() is not None:
                    img = img.convert_alpha()
                self._sprites[name] = img
                if self._verbose:
                    print(f"Loaded: {path}")
            except pygame.error:
                self._report_failure(path)

    def _report_failure(self, path: Path) -> None:
        self._failed.append(path.name)
        if self._verbose:
            print(f"Image failed to load: {path}")

    def is_ready(self, name: str) -> bool:
        """True if the sprite loaded and can be drawn."""
        return name in self._sprites

    def get_sprite(self, name: str, width: int, height: int) -> Optional[pygame.Surface]:
        """
        Get a sprite scaled to (width, height).

        Returns:
            Scaled surface, or None if the sprite is not ready.
        """
        if name not in self._sprites:
            return None

        width = max(1, int(width))
        height = max(1, int(height))
        cache_key = (name, width, height)
        if cache_key not in self._scaled_cache:
            self._scaled_cache[cache_key] = pygame.transform.smoothscale(
                self._sprites[name], (width, height)
            )
        return self._scaled_cache[cache_key]

    @property
    def available_sprites(self) -> List[str]:
        """Names of sprites that loaded."""
        return list(self._sprites.keys())

    @property
    def failed_files(self) -> List[str]:
        """Files that were missing or could not be decoded."""
        return list(self._failed)


# Global sprite loader instance
_sprite_loader: Optional[SpriteLoader] = None


def get_sprite_loader() -> SpriteLoader:
    """Get or create the global sprite loader."""
    global _sprite_loader
    if _sprite_loader is None:
        pygame.init()  # Ensure pygame is initialized
        _sprite_loader = SpriteLoader()
    return _sprite_loader
