"""
Frame Clock
===========

Turns wall-clock frame timestamps into a bounded delta-time and drives a
step function once per frame.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from gapflight.flight_core.config_loader import GameConfig, get_config


class FrameClock:
    """
    Bounded delta-time source.

    tick() returns seconds since the previous tick, clamped to
    [0, max_frame_dt] so a stalled frame (e.g. an unfocused window) never
    produces a large physics step.
    """

    def __init__(self, max_frame_dt: float = 0.032):
        self._max_frame_dt = max_frame_dt
        self._last_ms: Optional[float] = None

    @classmethod
    def from_config(cls, config: Optional[GameConfig] = None) -> "FrameClock":
        if config is None:
            config = get_config()
        return cls(config.session.max_frame_dt)

    @property
    def max_frame_dt(self) -> float:
        return self._max_frame_dt

    def reset(self, now_ms: float) -> None:
        """Restart timing from now_ms (used on session start/reset)."""
        self._last_ms = now_ms

    def tick(self, now_ms: float) -> float:
        """
        Advance to now_ms.

        Args:
            now_ms: Current timestamp in milliseconds.

        Returns:
            Clamped delta-time in seconds.
        """
        if self._last_ms is None:
            self._last_ms = now_ms
            return 0.0

        elapsed_ms = now_ms - self._last_ms
        self._last_ms = now_ms
        elapsed_ms = max(0.0, min(self._max_frame_dt * 1000.0, elapsed_ms))
        return elapsed_ms / 1000.0


class FrameLoop:
    """
    Explicit frame scheduler.

    Calls ``step(dt)`` once per frame while ``is_running()`` holds, pacing
    frames with ``pace()`` (pygame.time.Clock.tick in the front end).
    """

    def __init__(
        self,
        step: Callable[[float], None],
        is_running: Callable[[], bool],
        clock: Optional[FrameClock] = None,
        pace: Optional[Callable[[], None]] = None,
        now_ms: Optional[Callable[[], float]] = None
    ):
        self._step = step
        self._is_running = is_running
        self._clock = clock if clock is not None else FrameClock()
        self._pace = pace
        self._now_ms = now_ms if now_ms is not None else (lambda: time.perf_counter() * 1000.0)
        self._frames = 0

    @property
    def frames(self) -> int:
        """Number of frames executed so far."""
        return self._frames

    def run(self, max_frames: Optional[int] = None) -> int:
        """
        Run until the running predicate turns false.

        Args:
            max_frames: Optional safety cap on frames (used by tests and tools).

        Returns:
            Number of frames executed by this call.
        """
        executed = 0
        self._clock.reset(self._now_ms())

        while self._is_running():
            if max_frames is not None and executed >= max_frames:
                break
            if self._pace is not None:
                self._pace()
            dt = self._clock.tick(self._now_ms())
            self._step(dt)
            executed += 1
            self._frames += 1

        return executed
