"""
HUD and Startup Sequence
========================

Display-side state that mirrors the session: score/best/token counters with
a short pulse on token pickup, and the splash timing that gates the start
prompt.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from gapflight.flight_core.config_loader import GameConfig, get_config


class HudModel:
    """Score, best score and token counters plus the token pulse timer."""

    def __init__(self, pulse_seconds: float = 0.42):
        self._pulse_seconds = pulse_seconds
        self._pulse_left: float = 0.0
        self.score: int = 0
        self.best: int = 0
        self.tokens: int = 0

    @classmethod
    def from_config(cls, config: Optional[GameConfig] = None) -> "HudModel":
        if config is None:
            config = get_config()
        return cls(config.presentation.hud_pulse_seconds)

    def sync(self, info: Dict[str, Any]) -> None:
        """Copy counters from CoreGame.get_info()."""
        self.score = int(info["score"])
        self.best = int(info["best_score"])
        self.tokens = int(info["tokens"])

    def pulse(self) -> None:
        """Start (or restart) the token emphasis."""
        self._pulse_left = self._pulse_seconds

    def update(self, dt: float) -> None:
        self._pulse_left = max(0.0, self._pulse_left - dt)

    @property
    def pulse_active(self) -> bool:
        return self._pulse_left > 0.0

    @property
    def pulse_progress(self) -> float:
        """1.0 right after a pulse, falling to 0.0 when it ends."""
        if self._pulse_seconds <= 0:
            return 0.0
        return self._pulse_left / self._pulse_seconds


class StartupSequence:
    """
    Splash timing.

    The splash stays opaque for delay + animation + hold, then fades out.
    The start prompt becomes interactive 20 ms after the fade finishes.
    """

    REVEAL_MARGIN_MS = 20

    def __init__(
        self,
        delay_ms: int = 250,
        animation_ms: int = 1200,
        hold_ms: int = 1000,
        fade_ms: int = 500
    ):
        self._fade_start = delay_ms + animation_ms + hold_ms
        self._fade_ms = fade_ms
        self._elapsed_ms: float = 0.0

    @classmethod
    def from_config(cls, config: Optional[GameConfig] = None) -> "StartupSequence":
        if config is None:
            config = get_config()
        pres = config.presentation
        return cls(pres.splash_delay_ms, pres.splash_animation_ms, pres.splash_hold_ms, pres.splash_fade_ms)

    @property
    def interactive_at_ms(self) -> int:
        return self._fade_start + self._fade_ms + self.REVEAL_MARGIN_MS

    def advance(self, dt_ms: float) -> None:
        self._elapsed_ms += max(0.0, dt_ms)

    def skip(self) -> None:
        self._elapsed_ms = max(self._elapsed_ms, float(self.interactive_at_ms))

    @property
    def splash_alpha(self) -> float:
        """Splash opacity in [0, 1]."""
        if self._elapsed_ms <= self._fade_start:
            return 1.0
        if self._fade_ms <= 0:
            return 0.0
        t = (self._elapsed_ms - self._fade_start) / self._fade_ms
        return max(0.0, 1.0 - t)

    @property
    def splash_visible(self) -> bool:
        return self._elapsed_ms < self._fade_start + self._fade_ms + self.REVEAL_MARGIN_MS

    @property
    def interactive(self) -> bool:
        """True once the start prompt accepts input."""
        return self._elapsed_ms >= self.interactive_at_ms
