"""
Tests for the HUD counters and the startup sequence.
"""

import pytest

from gapflight.flight_core.config_loader import load_config
from gapflight.flight_core.hud import HudModel, StartupSequence


class TestHudModel:
    """Test counter sync and the token pulse."""

    def test_sync_from_info(self):
        hud = HudModel()
        hud.sync({"score": 4, "best_score": 9, "tokens": 2})
        assert (hud.score, hud.best, hud.tokens) == (4, 9, 2)

    def test_pulse_duration(self):
        """The pulse lasts 0.42 seconds."""
        hud = HudModel.from_config(load_config())
        hud.pulse()
        assert hud.pulse_active
        assert hud.pulse_progress == pytest.approx(1.0)

        hud.update(0.40)
        assert hud.pulse_active

        hud.update(0.03)
        assert not hud.pulse_active
        assert hud.pulse_progress == 0.0

    def test_pulse_restarts(self):
        hud = HudModel(pulse_seconds=0.42)
        hud.pulse()
        hud.update(0.3)
        hud.pulse()
        assert hud.pulse_progress == pytest.approx(1.0)


class TestStartupSequence:
    """Test splash timing and the interactive gate."""

    def test_interactive_gate(self):
        """Input is accepted from 2970 ms on."""
        seq = StartupSequence.from_config(load_config())
        assert seq.interactive_at_ms == 2970

        seq.advance(2969)
        assert not seq.interactive
        seq.advance(1)
        assert seq.interactive

    def test_splash_opaque_until_fade(self):
        seq = StartupSequence()
        seq.advance(2450)
        assert seq.splash_alpha == 1.0
        assert seq.splash_visible

    def test_splash_fades(self):
        seq = StartupSequence()
        seq.advance(2700)
        assert seq.splash_alpha == pytest.approx(0.5)

        seq.advance(250)
        assert seq.splash_alpha == 0.0

    def test_splash_hidden_once_interactive(self):
        seq = StartupSequence()
        seq.advance(3000)
        assert not seq.splash_visible

    def test_skip(self):
        seq = StartupSequence()
        seq.skip()
        assert seq.interactive
        assert seq.splash_alpha == 0.0
