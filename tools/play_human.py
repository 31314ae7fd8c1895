"""
Human Play Mode
================

Play Gap Flight interactively.

Controls:
    - Space / Up / Click / Touch: Start, flap, restart
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--scale SCALE] [--mute] [--skip-splash]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from gapflight.flight_core.audio import AudioBoard
from gapflight.flight_core.clock import FrameClock, FrameLoop
from gapflight.flight_core.config_loader import GameConfig, load_config
from gapflight.flight_core.game import CoreGame, Phase
from gapflight.flight_core.hud import HudModel, StartupSequence
from gapflight.flight_core.render_pygame import PygameRenderer

TRIGGER_KEYS = (pygame.K_SPACE, pygame.K_UP) if PYGAME_AVAILABLE else ()


def viewport_scale(
    logical_height: int,
    display_height: int,
    max_ratio: float,
    requested: Optional[float] = None
) -> float:
    """
    Scale from logical to window pixels, clamped to [1, max_ratio].

    With no explicit request the largest scale that fits 90% of the display
    height is used.
    """
    if requested is None:
        requested = (display_height * 0.9) / logical_height if display_height > 0 else 1.0
    return max(1.0, min(max_ratio, requested))


class HudOverlay:
    """Draws HUD counters, the start prompt and the splash on the window."""

    def __init__(self, window_width: int, window_height: int, scale: float):
        self._window_width = window_width
        self._window_height = window_height
        self._scale = scale

        pygame.font.init()
        self._font_value = pygame.font.Font(None, int(30 * scale))
        self._font_label = pygame.font.Font(None, int(16 * scale))
        self._font_title = pygame.font.Font(None, int(44 * scale))
        self._font_prompt = pygame.font.Font(None, int(20 * scale))

        self._text_color = (255, 255, 255)
        self._shadow_color = (40, 40, 60)
        self._pulse_color = (255, 215, 0)
        self._splash_color = (24, 28, 48)

    def _blit_shadowed(self, screen, font, text, color, center, alpha: int = 255) -> None:
        shadow = font.render(text, True, self._shadow_color)
        face = font.render(text, True, color)
        shadow.set_alpha(alpha)
        face.set_alpha(alpha)
        offset = max(1, int(self._scale))
        screen.blit(shadow, shadow.get_rect(center=(center[0] + offset, center[1] + offset)))
        screen.blit(face, face.get_rect(center=center))

    def draw_counters(self, screen: pygame.Surface, hud: HudModel) -> None:
        columns = (
            ("SCORE", hud.score, False),
            ("BEST", hud.best, False),
            ("TOKENS", hud.tokens, hud.pulse_active),
        )
        column_width = self._window_width / len(columns)
        top = int(10 * self._scale)
        for i, (label, value, pulsing) in enumerate(columns):
            cx = int(column_width * i + column_width / 2)
            self._blit_shadowed(screen, self._font_label, label, self._text_color, (cx, top))
            color = self._pulse_color if pulsing else self._text_color
            font = self._font_value
            if pulsing:
                grow = 1.0 + 0.35 * hud.pulse_progress
                font = pygame.font.Font(None, int(30 * self._scale * grow))
            self._blit_shadowed(screen, font, str(value), color, (cx, top + int(22 * self._scale)))

    def draw_start_prompt(self, screen: pygame.Surface) -> None:
        mid = self._window_height // 2
        self._blit_shadowed(screen, self._font_title, "GAP FLIGHT", self._text_color,
                            (self._window_width // 2, mid - int(30 * self._scale)))
        self._blit_shadowed(screen, self._font_prompt, "Click or press Space to Start",
                            self._text_color, (self._window_width // 2, mid + int(15 * self._scale)))

    def draw_splash(self, screen: pygame.Surface, alpha: float) -> None:
        alpha_byte = int(max(0.0, min(1.0, alpha)) * 255)
        if alpha_byte == 0:
            return
        veil = pygame.Surface((self._window_width, self._window_height))
        veil.fill(self._splash_color)
        veil.set_alpha(alpha_byte)
        screen.blit(veil, (0, 0))
        self._blit_shadowed(screen, self._font_title, "GAP FLIGHT", self._pulse_color,
                            (self._window_width // 2, self._window_height // 2), alpha_byte)


class HumanPlayer:
    """
    Interactive front end.

    Routes input to CoreGame.trigger(), steps the game once per frame with a
    bounded dt, and draws the logical frame scaled to the window.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        scale: Optional[float] = None,
        target_fps: Optional[int] = None,
        mute: bool = False,
        skip_splash: bool = False
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps or config.session.frame_rate

        pygame.init()
        info = pygame.display.Info()
        self._scale = viewport_scale(
            config.board.height, info.current_h, config.presentation.max_pixel_ratio, scale
        )
        self._logical_size = (config.board.width, config.board.height)
        self._window_size = (
            int(config.board.width * self._scale),
            int(config.board.height * self._scale)
        )
        self._screen = pygame.display.set_mode(self._window_size)
        pygame.display.set_caption("Gap Flight")
        self._logical = pygame.Surface(self._logical_size)
        self._pg_clock = pygame.time.Clock()

        self._audio = None if mute else AudioBoard.from_directory()
        self._game = CoreGame(config=config, seed=seed, cue_sink=self._audio)
        self._renderer = PygameRenderer(config)
        self._hud = HudModel.from_config(config)
        self._startup = StartupSequence.from_config(config)
        if skip_splash:
            self._startup.skip()
        self._overlay = HudOverlay(self._window_size[0], self._window_size[1], self._scale)

        self._frame_clock = FrameClock.from_config(config)
        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns best score."""
        print("=== Gap Flight ===")
        print("Space / Up / Click to flap, ESC to quit")
        print()

        loop = FrameLoop(
            step=self._frame,
            is_running=lambda: self._running,
            clock=self._frame_clock,
            pace=lambda: self._pg_clock.tick(self._target_fps),
            now_ms=lambda: float(pygame.time.get_ticks())
        )
        loop.run()

        if self._audio is not None:
            self._audio.stop_all()
        pygame.quit()
        return self._game.best_score

    def _frame(self, dt: float) -> None:
        # Splash timing follows wall time, not the clamped simulation dt
        self._startup.advance(self._pg_clock.get_time())
        self._handle_events()

        result = self._game.step(dt)
        if any(event.is_token for event in result.events.score_events):
            self._hud.pulse()
        if result.events.obstacles_cleared:
            print(f"  +{result.delta_score} (Score: {self._game.score})")
        if result.game_over and result.cues:
            print(f"\nGAME OVER ({result.game_over_reason}) - Score: {self._game.score}, "
                  f"Best: {self._game.best_score}, Tokens: {self._game.tokens}")

        self._hud.update(dt)
        self._hud.sync(self._game.get_info())
        self._render()

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key in TRIGGER_KEYS:
                    self._on_trigger()
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._on_trigger()
            elif event.type == pygame.FINGERDOWN:
                self._on_trigger()

    def _on_trigger(self) -> None:
        if self._audio is not None:
            self._audio.notify_gesture()

        phase = self._game.phase
        if phase is Phase.NOT_STARTED and not self._startup.interactive:
            return

        self._game.trigger()
        if phase is not Phase.PLAYING:
            self._frame_clock.reset(float(pygame.time.get_ticks()))
            print("\n=== Game Started ===\n" if phase is Phase.NOT_STARTED else "\n=== Game Restarted ===\n")

    def _render(self) -> None:
        """Render the game."""
        self._renderer.render_frame(self._logical, self._game.get_render_data())
        if self._window_size != self._logical_size:
            pygame.transform.scale(self._logical, self._window_size, self._screen)
        else:
            self._screen.blit(self._logical, (0, 0))

        if self._game.phase is Phase.NOT_STARTED:
            if self._startup.splash_visible:
                self._overlay.draw_splash(self._screen, self._startup.splash_alpha)
            else:
                self._overlay.draw_start_prompt(self._screen)
        else:
            self._overlay.draw_counters(self._screen, self._hud)

        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Gap Flight interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--scale", type=float, default=None, help="Window scale (clamped to [1, 2])")
    parser.add_argument("--fps", type=int, default=None, help="Target FPS")
    parser.add_argument("--mute", action="store_true", help="Disable audio")
    parser.add_argument("--skip-splash", action="store_true", help="Start prompt immediately")

    args = parser.parse_args()

    try:
        config = load_config()
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            scale=args.scale,
            target_fps=args.fps,
            mute=args.mute,
            skip_splash=args.skip_splash
        )
        best = player.run()
        print(f"\nBest Score: {best}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
