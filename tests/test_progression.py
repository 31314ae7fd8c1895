"""
Tests for the difficulty curve and score tracking.
"""

import pytest

from gapflight.flight_core.config_loader import load_config
from gapflight.flight_core.progression import ProgressionPolicy
from gapflight.flight_core.scoring import ScoreTracker


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def policy(config):
    return ProgressionPolicy(config)


class TestProgressionPolicy:
    """Test speed and gap derived from score."""

    def test_level_zero_below_fifty(self, policy):
        """Scores 0-49 are level 0 with base speed and gap."""
        for score in (0, 1, 25, 49):
            assert policy.level(score) == 0
            assert policy.speed(score) == pytest.approx(1.45)
            assert policy.gap(score) == pytest.approx(155)

    def test_first_step_at_fifty(self, policy):
        """Score 50 adds one speed increment and removes one gap decrement."""
        assert policy.level(50) == 1
        assert policy.speed(50) == pytest.approx(1.60)
        assert policy.gap(50) == pytest.approx(145)

    def test_gap_is_floored(self, policy):
        """Gap shrinks to the floor and stays there."""
        assert policy.gap(200) == pytest.approx(115)
        assert policy.gap(250) == pytest.approx(110)
        assert policy.gap(5000) == pytest.approx(110)

    def test_speed_is_unbounded(self, policy):
        """Speed keeps growing with level."""
        assert policy.speed(5000) == pytest.approx(1.45 + 100 * 0.15)
        assert policy.speed(5050) > policy.speed(5000)

    def test_monotonic(self, policy):
        """Speed never decreases and gap never increases with score."""
        speeds = [policy.speed(s) for s in range(0, 1000, 7)]
        gaps = [policy.gap(s) for s in range(0, 1000, 7)]
        assert speeds == sorted(speeds)
        assert gaps == sorted(gaps, reverse=True)


class TestScoreTracker:
    """Test score, best score and token counters."""

    def test_clear_increments_score_and_best(self):
        """Each cleared obstacle is one point and raises best."""
        tracker = ScoreTracker()
        tracker.apply_obstacle_cleared()
        tracker.apply_obstacle_cleared()
        assert tracker.score == 2
        assert tracker.best == 2

    def test_best_survives_reset(self):
        """Reset clears score and tokens but not best."""
        tracker = ScoreTracker()
        for _ in range(3):
            tracker.apply_obstacle_cleared()
        tracker.apply_token()

        tracker.reset()

        assert tracker.score == 0
        assert tracker.tokens == 0
        assert tracker.best == 3

    def test_best_never_decreases(self):
        """A shorter later session does not lower best."""
        tracker = ScoreTracker()
        history = []
        for session_length in (5, 2, 7, 0, 3):
            tracker.reset()
            for _ in range(session_length):
                tracker.apply_obstacle_cleared()
            history.append(tracker.best)

        assert history == [5, 5, 7, 7, 7]

    def test_events_describe_source(self):
        """Clears and tokens return distinct score events."""
        tracker = ScoreTracker()
        clear = tracker.apply_obstacle_cleared()
        token = tracker.apply_token()
        assert clear.points == 1 and not clear.is_token
        assert token.points == 1 and token.is_token
