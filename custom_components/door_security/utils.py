"""Utility functions for Door Security."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.util import dt as dt_util

from .const import (
    DEFAULT_NAME,
    DEVICE_MANUFACTURER,
    DEVICE_MODEL,
    DEVICE_SW_VERSION,
    DOMAIN,
)

if TYPE_CHECKING:
    from .coordinator import DoorSecurityCoordinator


def ensure_timezone_aware(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware, assuming UTC if naive.

    Args:
        dt: The datetime object to make timezone-aware

    Returns:
        A timezone-aware datetime object

    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_util.UTC)
    return dt


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO timestamp from the backend into an aware UTC datetime."""
    if isinstance(value, datetime):
        return dt_util.as_utc(ensure_timezone_aware(value))
    if not isinstance(value, str) or not value:
        return None
    parsed = dt_util.parse_datetime(value)
    if parsed is None:
        return None
    return dt_util.as_utc(ensure_timezone_aware(parsed))


def device_info(entry_id: str) -> DeviceInfo:
    """Return the device info shared by all Door Security entities."""
    return DeviceInfo(
        identifiers={(DOMAIN, entry_id)},
        name=DEFAULT_NAME,
        manufacturer=DEVICE_MANUFACTURER,
        model=DEVICE_MODEL,
        sw_version=DEVICE_SW_VERSION,
    )


def get_coordinator(hass: HomeAssistant) -> DoorSecurityCoordinator:
    """Get the coordinator from hass.data.

    Raises:
        HomeAssistantError: If the integration is not set up
    """
    coordinator = hass.data.get(DOMAIN)
    if coordinator is None:
        raise HomeAssistantError(
            "Door Security coordinator not found. Ensure integration is configured."
        )
    return coordinator
