"""Push channel for newly inserted door readings."""

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
import logging
from typing import Any

from aiohttp import web

from homeassistant.components import webhook
from homeassistant.const import METH_POST
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from .const import DEFAULT_NAME, DOMAIN
from .models import Reading
from .readings import parse_reading
from .utils import get_coordinator

_LOGGER = logging.getLogger(__name__)

INSERT_EVENT = "INSERT"


def parse_push_payload(data: Any) -> Reading | None:
    """Extract a reading from a push body.

    Accepts either a bare row or a database-webhook envelope of the form
    ``{"type": "INSERT", "record": {...}}``. Anything else yields None.
    """
    if not isinstance(data, Mapping):
        return None

    if "record" in data or "type" in data:
        if str(data.get("type", "")).upper() != INSERT_EVENT:
            return None
        data = data.get("record")
        if not isinstance(data, Mapping):
            return None

    return parse_reading(data)


async def async_handle_webhook(
    hass: HomeAssistant, webhook_id: str, request: web.Request
) -> web.Response:
    """Handle a pushed reading.

    Always answers 200 so the sender does not keep retrying bodies we will
    never accept.
    """
    try:
        data = await request.json()
    except ValueError:
        _LOGGER.debug("Ignoring push with unparseable body on %s", webhook_id)
        return web.Response(status=HTTPStatus.OK)

    reading = parse_push_payload(data)
    if reading is None:
        _LOGGER.debug("Ignoring push without a usable reading: %s", data)
        return web.Response(status=HTTPStatus.OK)

    try:
        coordinator = get_coordinator(hass)
    except HomeAssistantError:
        _LOGGER.debug("Push received before setup completed, dropping it")
        return web.Response(status=HTTPStatus.OK)

    hass.async_create_task(
        coordinator.async_handle_push(reading), f"{DOMAIN} push {reading.reading_id}"
    )
    return web.Response(status=HTTPStatus.OK)


def async_register_webhook(hass: HomeAssistant, webhook_id: str) -> None:
    """Register the push webhook."""
    webhook.async_register(
        hass,
        DOMAIN,
        DEFAULT_NAME,
        webhook_id,
        async_handle_webhook,
        allowed_methods=[METH_POST],
    )
    _LOGGER.debug("Registered push webhook %s", webhook_id)


def async_unregister_webhook(hass: HomeAssistant, webhook_id: str) -> None:
    """Remove the push webhook."""
    webhook.async_unregister(hass, webhook_id)
