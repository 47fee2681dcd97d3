"""The Door Security integration."""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.typing import ConfigType

from .api import DoorSecurityApiClient
from .const import (
    CONF_API_KEY,
    CONF_BASE_URL,
    CONF_TABLE,
    CONF_WEBHOOK_ID,
    DEFAULT_TABLE,
    DOMAIN,
    PLATFORMS,
)
from .coordinator import DoorSecurityCoordinator
from .service import async_setup_services, async_unload_services
from .settings import SecuritySettingsStore
from .webhook import async_register_webhook, async_unregister_webhook

_LOGGER = logging.getLogger(__name__)


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Set up the Door Security integration."""
    _LOGGER.debug("Starting async_setup for %s", DOMAIN)
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Door Security from a config entry."""
    client = DoorSecurityApiClient(
        async_get_clientsession(hass),
        entry.data[CONF_BASE_URL],
        entry.data[CONF_API_KEY],
        entry.data.get(CONF_TABLE, DEFAULT_TABLE),
    )

    settings_store = SecuritySettingsStore(hass)
    await settings_store.async_load()

    _LOGGER.debug("Creating coordinator for entry %s", entry.entry_id)
    coordinator = DoorSecurityCoordinator(hass, entry, client, settings_store)

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady:
        raise
    except Exception as err:
        _LOGGER.error("Failed to setup coordinator: %s", err)
        raise ConfigEntryNotReady(f"Failed to setup coordinator: {err}") from err

    entry.runtime_data = coordinator
    hass.data[DOMAIN] = coordinator

    async_register_webhook(hass, entry.data[CONF_WEBHOOK_ID])
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    await async_setup_services(hass)

    coordinator.reconciliation.async_start()
    entry.async_on_unload(coordinator.reconciliation.async_stop)

    _LOGGER.debug("Setup complete for entry %s", entry.entry_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    _LOGGER.debug("Unloading Door Security config entry")

    if unload_ok := await hass.config_entries.async_unload_platforms(entry, PLATFORMS):
        async_unregister_webhook(hass, entry.data[CONF_WEBHOOK_ID])
        async_unload_services(hass)
        coordinator = entry.runtime_data
        await coordinator.async_shutdown()
        hass.data.pop(DOMAIN, None)

    return unload_ok
