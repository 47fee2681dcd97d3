"""Data models for Door Security."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from .const import (
    DEFAULT_MAX_OPEN_DURATION,
    DEFAULT_NIGHT_MODE_END,
    DEFAULT_NIGHT_MODE_START,
    DEFAULT_NOTIFY_DOOR_OPEN_TOO_LONG,
    DOOR_STATUS_CLOSED,
    DOOR_STATUS_OPEN,
)


class DoorStatus(StrEnum):
    """Binary door signal, plus unknown when no reading exists."""

    OPEN = DOOR_STATUS_OPEN
    CLOSED = DOOR_STATUS_CLOSED
    UNKNOWN = "unknown"


class SecurityPosture(StrEnum):
    """Classified security state of the door."""

    SECURE = "secure"
    DOOR_OPEN = "door_open"
    DOOR_OPEN_TOO_LONG = "door_open_too_long"
    INTRUSION = "intrusion"


class AlertKind(StrEnum):
    """Alert types accepted by the notification channel."""

    INTRUSION = "intrusion"
    DOOR_OPEN_TOO_LONG = "door_open_too_long"


@dataclass(frozen=True)
class Reading:
    """A single door reading from the reading store."""

    recorded_at: datetime
    door_status: DoorStatus
    reading_id: int | None = None


@dataclass(frozen=True)
class SecurityConfig:
    """Operator-tunable security settings."""

    night_mode_start: str = DEFAULT_NIGHT_MODE_START
    night_mode_end: str = DEFAULT_NIGHT_MODE_END
    max_open_duration_seconds: int = DEFAULT_MAX_OPEN_DURATION
    notify_door_open_too_long: bool = DEFAULT_NOTIFY_DOOR_OPEN_TOO_LONG

    def as_dict(self) -> dict[str, Any]:
        """Return the settings as a plain dict for persistence."""
        return asdict(self)


@dataclass(frozen=True)
class DoorMetricsSnapshot:
    """Door metrics derived from the rolling window.

    ``door_opened_at`` is set exactly when the door is currently open.
    """

    total_entries_in_window: int
    current_door_status: DoorStatus
    door_opened_at: datetime | None
    last_updated: datetime
    latest_reading_id: int | None = None
    possibly_incomplete: bool = False

    def __post_init__(self) -> None:
        """Validate the snapshot invariants."""
        if self.total_entries_in_window < 0:
            raise ValueError("total_entries_in_window must not be negative")
        is_open = self.current_door_status == DoorStatus.OPEN
        if is_open != (self.door_opened_at is not None):
            raise ValueError("door_opened_at must be set if and only if door is OPEN")

    @property
    def is_open(self) -> bool:
        """Return True if the door is currently open."""
        return self.current_door_status == DoorStatus.OPEN


@dataclass(frozen=True)
class PostureResult:
    """Result of a posture evaluation."""

    status: SecurityPosture
    is_red_alert: bool = False
    is_amber_warning: bool = False


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a reconciliation call."""

    success: bool
    synced_count: int = 0
    error: str | None = None
