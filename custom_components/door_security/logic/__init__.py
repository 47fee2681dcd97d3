"""Logic components for Door Security.

This package holds the pure evaluation steps: the night-mode window, the
transition counter and the posture classifier.
"""

from .night_mode import is_within_night_mode, time_to_minutes
from .posture import evaluate_posture, open_duration_seconds
from .transitions import (
    TransitionSummary,
    count_entries,
    find_door_opened_at,
    summarize_transitions,
)

__all__ = [
    "TransitionSummary",
    "count_entries",
    "evaluate_posture",
    "find_door_opened_at",
    "is_within_night_mode",
    "open_duration_seconds",
    "summarize_transitions",
    "time_to_minutes",
]
