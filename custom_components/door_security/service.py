"""Service definitions for the Door Security integration."""

import logging
from typing import Any

import voluptuous as vol

from homeassistant.core import HomeAssistant, ServiceCall, SupportsResponse
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from .const import (
    CONF_MAX_OPEN_DURATION,
    CONF_NIGHT_MODE_END,
    CONF_NIGHT_MODE_START,
    CONF_NOTIFY_DOOR_OPEN_TOO_LONG,
    DOMAIN,
    MAX_MAX_OPEN_DURATION,
    MIN_MAX_OPEN_DURATION,
    SERVICE_REFRESH,
    SERVICE_SAVE_SETTINGS,
    SERVICE_TRIGGER_SYNC,
)
from .exceptions import ConfigurationError
from .settings import time_of_day
from .utils import get_coordinator

_LOGGER = logging.getLogger(__name__)

SAVE_SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_NIGHT_MODE_START): time_of_day,
        vol.Optional(CONF_NIGHT_MODE_END): time_of_day,
        vol.Optional(CONF_MAX_OPEN_DURATION): vol.All(
            vol.Coerce(int),
            vol.Range(min=MIN_MAX_OPEN_DURATION, max=MAX_MAX_OPEN_DURATION),
        ),
        vol.Optional(CONF_NOTIFY_DOOR_OPEN_TOO_LONG): cv.boolean,
    }
)

SERVICES = (SERVICE_SAVE_SETTINGS, SERVICE_REFRESH, SERVICE_TRIGGER_SYNC)


async def _save_settings(hass: HomeAssistant, call: ServiceCall) -> None:
    """Persist a partial settings update and re-evaluate the door."""
    coordinator = get_coordinator(hass)
    try:
        settings = await coordinator.settings_store.async_save(dict(call.data))
    except ConfigurationError as err:
        _LOGGER.error("Rejected security settings update: %s", err)
        raise
    except OSError as err:
        error_msg = f"Failed to save security settings: {err}"
        _LOGGER.error(error_msg)
        raise HomeAssistantError(error_msg) from err

    _LOGGER.debug("Security settings updated to %s, refreshing", settings)
    await coordinator.async_refresh()


async def _refresh(hass: HomeAssistant, call: ServiceCall) -> None:
    """Refresh the door metrics immediately."""
    coordinator = get_coordinator(hass)
    await coordinator.async_refresh()


async def _trigger_sync(hass: HomeAssistant, call: ServiceCall) -> dict[str, Any]:
    """Ask the reconciliation scheduler to run now.

    Returns:
        Whether an attempt was made, how many readings it added and whether
        reconciliation has been disabled for this session.
    """
    coordinator = get_coordinator(hass)
    scheduler = coordinator.reconciliation
    result = await scheduler.async_trigger("service")
    return {
        "triggered": result is not None,
        "synced_count": result.synced_count if result is not None else 0,
        "disabled": scheduler.disabled,
    }


async def async_setup_services(hass: HomeAssistant) -> None:
    """Register custom services for door security."""

    async def handle_save_settings(call: ServiceCall) -> None:
        await _save_settings(hass, call)

    async def handle_refresh(call: ServiceCall) -> None:
        await _refresh(hass, call)

    async def handle_trigger_sync(call: ServiceCall) -> dict[str, Any]:
        return await _trigger_sync(hass, call)

    hass.services.async_register(
        DOMAIN,
        SERVICE_SAVE_SETTINGS,
        handle_save_settings,
        schema=SAVE_SETTINGS_SCHEMA,
    )

    hass.services.async_register(
        DOMAIN,
        SERVICE_REFRESH,
        handle_refresh,
        schema=None,
    )

    hass.services.async_register(
        DOMAIN,
        SERVICE_TRIGGER_SYNC,
        handle_trigger_sync,
        schema=None,
        supports_response=SupportsResponse.OPTIONAL,
    )

    _LOGGER.info("Registered %d services for %s integration", len(SERVICES), DOMAIN)


def async_unload_services(hass: HomeAssistant) -> None:
    """Remove the door security services."""
    for service in SERVICES:
        hass.services.async_remove(DOMAIN, service)
