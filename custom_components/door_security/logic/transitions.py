"""Transition counting over the rolling reading window."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from ..models import DoorStatus, Reading


@dataclass(frozen=True)
class TransitionSummary:
    """Entries and open-period start derived from a reading window."""

    entries: int
    current_status: DoorStatus
    door_opened_at: datetime | None
    latest_reading_id: int | None = None


def count_entries(readings: Sequence[Reading]) -> int:
    """Count CLOSED -> OPEN transitions between adjacent readings."""
    return sum(
        1
        for previous, current in zip(readings, readings[1:])
        if previous.door_status == DoorStatus.CLOSED
        and current.door_status == DoorStatus.OPEN
    )


def find_door_opened_at(readings: Sequence[Reading]) -> datetime | None:
    """Find when the current open period began.

    Scans backward for the most recent CLOSED reading; the reading right
    after it starts the open period. If the window holds no CLOSED reading
    the first reading is used, which underestimates an open period that
    began before the window (left-censored).

    Returns:
        Start of the open period, or None when the latest reading is not OPEN.

    """
    if not readings or readings[-1].door_status != DoorStatus.OPEN:
        return None

    for index in range(len(readings) - 1, -1, -1):
        if readings[index].door_status == DoorStatus.CLOSED:
            return readings[index + 1].recorded_at

    return readings[0].recorded_at


def summarize_transitions(readings: Sequence[Reading]) -> TransitionSummary:
    """Summarize a window of readings.

    Readings are sorted by ``recorded_at`` (stable, so duplicates at the same
    instant keep their fetch order). An empty window yields zero entries and
    an unknown status.
    """
    ordered = sorted(readings, key=lambda reading: reading.recorded_at)
    if not ordered:
        return TransitionSummary(
            entries=0, current_status=DoorStatus.UNKNOWN, door_opened_at=None
        )

    latest = ordered[-1]
    return TransitionSummary(
        entries=count_entries(ordered),
        current_status=latest.door_status,
        door_opened_at=find_door_opened_at(ordered),
        latest_reading_id=latest.reading_id,
    )
