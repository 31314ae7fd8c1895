"""
Scoring System
==============

Tracks obstacles cleared, best score and collected tokens.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    is_token: bool = False

    def __repr__(self) -> str:
        if self.is_token:
            return f"ScoreEvent(token={self.points})"
        return f"ScoreEvent(obstacle={self.points})"


class ScoreTracker:
    """
    Tracks session score and the best score of the run.

    Best score only ever grows; reset() clears score and tokens but keeps it.
    """

    def __init__(self):
        self._score: int = 0
        self._best: int = 0
        self._tokens: int = 0

    @property
    def score(self) -> int:
        """Obstacles cleared this session."""
        return self._score

    @property
    def best(self) -> int:
        """Highest score reached since the tracker was created."""
        return self._best

    @property
    def tokens(self) -> int:
        """Tokens collected this session."""
        return self._tokens

    def apply_obstacle_cleared(self) -> ScoreEvent:
        """Add one point and raise best score if needed."""
        self._score += 1
        self._best = max(self._best, self._score)
        return ScoreEvent(points=1)

    def apply_token(self) -> ScoreEvent:
        """Count a collected token."""
        self._tokens += 1
        return ScoreEvent(points=1, is_token=True)

    def reset(self) -> None:
        """Reset score and tokens; best score persists."""
        self._score = 0
        self._tokens = 0
