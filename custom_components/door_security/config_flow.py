"""Config flow for the Door Security integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant.components import webhook
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.helpers import selector
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.util import dt as dt_util

from .api import DoorSecurityApiClient
from .const import (
    CONF_API_KEY,
    CONF_BASE_URL,
    CONF_TABLE,
    CONF_WEBHOOK_ID,
    DEFAULT_NAME,
    DEFAULT_TABLE,
    DOMAIN,
    READING_WINDOW,
)
from .exceptions import ReadingStoreError

_LOGGER = logging.getLogger(__name__)


def get_config_schema(defaults: dict[str, Any] | None = None) -> vol.Schema:
    """Get the connection schema with optional defaults."""
    defaults = defaults or {}
    return vol.Schema(
        {
            vol.Required(
                CONF_BASE_URL, default=defaults.get(CONF_BASE_URL, "")
            ): selector.TextSelector(
                selector.TextSelectorConfig(type=selector.TextSelectorType.URL)
            ),
            vol.Required(
                CONF_API_KEY, default=defaults.get(CONF_API_KEY, "")
            ): selector.TextSelector(
                selector.TextSelectorConfig(type=selector.TextSelectorType.PASSWORD)
            ),
            vol.Optional(
                CONF_TABLE, default=defaults.get(CONF_TABLE, DEFAULT_TABLE)
            ): str,
        }
    )


class DoorSecurityConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Door Security."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        await self.async_set_unique_id(DOMAIN)
        self._abort_if_unique_id_configured()

        errors: dict[str, str] = {}
        if user_input is not None:
            user_input[CONF_BASE_URL] = user_input[CONF_BASE_URL].strip().rstrip("/")
            client = DoorSecurityApiClient(
                async_get_clientsession(self.hass),
                user_input[CONF_BASE_URL],
                user_input[CONF_API_KEY],
                user_input.get(CONF_TABLE, DEFAULT_TABLE),
            )
            try:
                await client.async_fetch_latest_reading(
                    dt_util.utcnow() - READING_WINDOW
                )
            except ReadingStoreError as err:
                _LOGGER.warning("Cannot reach the reading store: %s", err)
                errors["base"] = "cannot_connect"
            else:
                return self.async_create_entry(
                    title=DEFAULT_NAME,
                    data={
                        **user_input,
                        CONF_WEBHOOK_ID: webhook.async_generate_id(),
                    },
                )

        return self.async_show_form(
            step_id="user",
            data_schema=get_config_schema(user_input),
            errors=errors,
        )
