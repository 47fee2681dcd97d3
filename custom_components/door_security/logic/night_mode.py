"""Night-mode window evaluation for Door Security."""

from __future__ import annotations

from datetime import datetime, time

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(value: str | time | datetime) -> int:
    """Convert a time of day to minutes since midnight.

    Args:
        value: ``HH:MM`` string, ``time`` or ``datetime``. Datetimes must
            already be in local wall-clock time.

    Returns:
        Minutes since midnight in the range [0, 1440).

    Raises:
        ValueError: If a string is not a valid ``HH:MM`` value.

    """
    if isinstance(value, (datetime, time)):
        return value.hour * 60 + value.minute

    parts = str(value).strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid time of day: {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Invalid time of day: {value!r}")
    return hours * 60 + minutes


def is_within_night_mode(
    now: datetime | time, start: str | time, end: str | time
) -> bool:
    """Return True if ``now`` falls inside the [start, end) night window.

    A window whose start is later than its end spans midnight, e.g.
    23:00-06:00 covers 23:00..23:59 and 00:00..05:59.
    """
    current = time_to_minutes(now)
    start_minutes = time_to_minutes(start)
    end_minutes = time_to_minutes(end)

    if start_minutes <= end_minutes:
        return start_minutes <= current < end_minutes
    return current >= start_minutes or current < end_minutes
