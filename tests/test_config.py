"""
Tests for configuration loading and validation.
"""

import os

import pytest
import yaml

from gapflight.flight_core.config_loader import load_config

DEFAULT_CONFIG = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "gapflight", "game_config.yaml"
)


def _write_variant(tmp_path, section, key, value):
    with open(DEFAULT_CONFIG, "r") as f:
        raw = yaml.safe_load(f)
    raw[section][key] = value
    path = tmp_path / "game_config.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(raw, f)
    return str(path)


class TestLoadConfig:
    """Test the default configuration values."""

    def test_default_values(self):
        config = load_config()
        assert config.board.width == 288
        assert config.board.height == 512
        assert config.ground_y == 400
        assert config.start_y == 256
        assert config.avatar.x == 60
        assert config.avatar.radius == 18
        assert config.avatar.gravity == pytest.approx(0.11)
        assert config.avatar.flap_velocity == pytest.approx(-3.6)
        assert config.obstacles.hitbox_scale == pytest.approx(0.8)
        assert config.session.grace_frames == 60
        assert config.session.max_frame_dt == pytest.approx(0.032)

    def test_explicit_path(self):
        config = load_config(DEFAULT_CONFIG)
        assert config.progression.min_gap == 110

    def test_config_is_frozen(self):
        config = load_config()
        with pytest.raises(Exception):
            config.avatar.radius = 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))


class TestValidation:
    """Test rejection of inconsistent values."""

    def test_min_gap_above_base_gap(self, tmp_path):
        path = _write_variant(tmp_path, "progression", "min_gap", 200)
        with pytest.raises(ValueError, match="min_gap"):
            load_config(path)

    def test_hitbox_scale_out_of_range(self, tmp_path):
        path = _write_variant(tmp_path, "obstacles", "hitbox_scale", 1.5)
        with pytest.raises(ValueError, match="hitbox_scale"):
            load_config(path)

    def test_non_positive_grace(self, tmp_path):
        path = _write_variant(tmp_path, "session", "grace_frames", 0)
        with pytest.raises(ValueError, match="grace_frames"):
            load_config(path)

    def test_token_band_too_small(self, tmp_path):
        path = _write_variant(tmp_path, "tokens", "y_margin", 250)
        with pytest.raises(ValueError, match="y_margin"):
            load_config(path)

    @pytest.mark.parametrize("section, key", [
        ("obstacles", "gap_top_range"),
        ("obstacles", "spawn_threshold"),
        ("session", "frame_rate"),
        ("progression", "level_size"),
        ("tokens", "radius"),
    ])
    def test_non_positive_values_rejected(self, tmp_path, section, key):
        """Values the spawner and physics divide or draw by must be positive."""
        path = _write_variant(tmp_path, section, key, 0)
        with pytest.raises(ValueError, match=key):
            load_config(path)


class TestCachedConfig:
    """Test the cached configuration accessors."""

    def test_reload_replaces_cache(self, tmp_path):
        from gapflight.flight_core.config_loader import get_config, reload_config

        path = _write_variant(tmp_path, "session", "grace_frames", 30)
        try:
            assert reload_config(path).session.grace_frames == 30
            assert get_config().session.grace_frames == 30
        finally:
            reload_config()
        assert get_config().session.grace_frames == 60
