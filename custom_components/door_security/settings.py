"""Persistent storage for the operator security settings."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import time
import logging
from typing import Any

import voluptuous as vol

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from .const import (
    CONF_MAX_OPEN_DURATION,
    CONF_NIGHT_MODE_END,
    CONF_NIGHT_MODE_START,
    CONF_NOTIFY_DOOR_OPEN_TOO_LONG,
    MAX_MAX_OPEN_DURATION,
    MIN_MAX_OPEN_DURATION,
    STORAGE_KEY,
    STORAGE_VERSION,
)
from .exceptions import ConfigurationError
from .logic.night_mode import time_to_minutes
from .models import SecurityConfig

_LOGGER = logging.getLogger(__name__)


def time_of_day(value: Any) -> str:
    """Validate and normalize an ``HH:MM`` value.

    ``time`` objects and ``HH:MM:SS`` strings, as produced by the time
    selector, are accepted and truncated to the minute.
    """
    if isinstance(value, time):
        value = value.strftime("%H:%M")
    elif isinstance(value, str) and value.count(":") == 2:
        value = value.rsplit(":", 1)[0]
    try:
        minutes = time_to_minutes(str(value))
    except ValueError as err:
        raise vol.Invalid(f"Expected HH:MM, got {value!r}") from err
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_NIGHT_MODE_START): time_of_day,
        vol.Required(CONF_NIGHT_MODE_END): time_of_day,
        vol.Required(CONF_MAX_OPEN_DURATION): vol.All(
            vol.Coerce(int),
            vol.Clamp(min=MIN_MAX_OPEN_DURATION, max=MAX_MAX_OPEN_DURATION),
        ),
        vol.Required(CONF_NOTIFY_DOOR_OPEN_TOO_LONG): vol.Boolean(),
    },
    extra=vol.REMOVE_EXTRA,
)


def build_settings(
    data: Mapping[str, Any], base: SecurityConfig | None = None
) -> SecurityConfig:
    """Merge ``data`` over ``base`` and validate the result.

    Raises:
        vol.Invalid: If the merged record fails validation

    """
    merged = (base or SecurityConfig()).as_dict()
    merged.update(data)
    return SecurityConfig(**SETTINGS_SCHEMA(merged))


class SecuritySettingsStore:
    """Load and save SecurityConfig under a fixed storage key."""

    def __init__(self, hass: HomeAssistant) -> None:
        """Initialize the settings store."""
        self._store: Store[dict[str, Any]] = Store(hass, STORAGE_VERSION, STORAGE_KEY)
        self._settings = SecurityConfig()

    @property
    def settings(self) -> SecurityConfig:
        """Return the current settings."""
        return self._settings

    async def async_load(self) -> SecurityConfig:
        """Load settings, falling back to defaults on absent or malformed data."""
        try:
            stored = await self._store.async_load()
        except Exception:  # noqa: BLE001
            _LOGGER.warning(
                "Failed to read security settings, using defaults", exc_info=True
            )
            stored = None

        if stored is None:
            self._settings = SecurityConfig()
        elif not isinstance(stored, Mapping):
            _LOGGER.warning("Stored security settings are malformed, using defaults")
            self._settings = SecurityConfig()
        else:
            try:
                self._settings = build_settings(stored)
            except vol.Invalid as err:
                _LOGGER.warning(
                    "Stored security settings are invalid (%s), using defaults", err
                )
                self._settings = SecurityConfig()

        _LOGGER.debug("Loaded security settings: %s", self._settings)
        return self._settings

    async def async_save(self, partial: Mapping[str, Any]) -> SecurityConfig:
        """Merge ``partial`` into the current settings and persist them.

        Unspecified fields keep their current values.

        Raises:
            ConfigurationError: If the merged settings are invalid

        """
        try:
            updated = build_settings(partial, self._settings)
        except vol.Invalid as err:
            raise ConfigurationError(f"Invalid security settings: {err}") from err

        await self._store.async_save(updated.as_dict())
        self._settings = updated
        _LOGGER.info("Saved security settings: %s", updated)
        return updated
