"""Security posture classification."""

from __future__ import annotations

from datetime import datetime

from ..models import (
    DoorMetricsSnapshot,
    DoorStatus,
    PostureResult,
    SecurityConfig,
    SecurityPosture,
)
from .night_mode import is_within_night_mode


def open_duration_seconds(snapshot: DoorMetricsSnapshot, now: datetime) -> float:
    """Return how long the door has been open, or 0 when it is not open."""
    if snapshot.door_opened_at is None:
        return 0.0
    return max(0.0, (now - snapshot.door_opened_at).total_seconds())


def evaluate_posture(
    door_status: DoorStatus,
    open_duration: float,
    now: datetime,
    config: SecurityConfig,
) -> PostureResult:
    """Classify the door into one of the four security postures.

    Args:
        door_status: Current door status
        open_duration: Seconds the door has been open
        now: Current time in local wall-clock time
        config: Security settings

    Returns:
        PostureResult with red/amber flags. Night mode takes precedence over
        the open-duration threshold.

    """
    if door_status != DoorStatus.OPEN:
        return PostureResult(SecurityPosture.SECURE)

    if is_within_night_mode(now, config.night_mode_start, config.night_mode_end):
        return PostureResult(SecurityPosture.INTRUSION, is_red_alert=True)

    if open_duration >= config.max_open_duration_seconds:
        return PostureResult(SecurityPosture.DOOR_OPEN_TOO_LONG, is_red_alert=True)

    return PostureResult(SecurityPosture.DOOR_OPEN, is_amber_warning=True)
