"""Throttled dispatch of security alerts."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
import logging
from typing import TYPE_CHECKING

from homeassistant.util import dt as dt_util

from .const import ALERT_COOLDOWN
from .models import AlertKind

if TYPE_CHECKING:
    from .api import DoorSecurityApiClient

_LOGGER = logging.getLogger(__name__)


class AlertDispatcher:
    """Forward security alerts to the notification channel.

    An alert kind is suppressed while another alert of the same kind was
    successfully sent within the cooldown. Failed sends do not start the
    cooldown, so the next trigger retries naturally. The push and poll paths
    share one dispatcher, and therefore one cooldown per kind.
    """

    def __init__(
        self,
        client: DoorSecurityApiClient,
        cooldown: timedelta = ALERT_COOLDOWN,
    ) -> None:
        """Initialize the dispatcher."""
        self._client = client
        self._cooldown = cooldown
        self._last_sent: dict[AlertKind, datetime] = {}

    def last_sent(self, kind: AlertKind) -> datetime | None:
        """Return when ``kind`` was last dispatched successfully."""
        return self._last_sent.get(kind)

    def is_cooling_down(self, kind: AlertKind, now: datetime | None = None) -> bool:
        """Return True if ``kind`` is inside its cooldown."""
        last = self._last_sent.get(kind)
        if last is None:
            return False
        now = now or dt_util.utcnow()
        return now - last < self._cooldown

    def reset(self) -> None:
        """Forget all cooldowns."""
        self._last_sent.clear()

    async def async_maybe_send_alert(
        self,
        kind: AlertKind,
        *,
        reading_id: int | None = None,
        door_opened_at: datetime | None = None,
        now: datetime | None = None,
    ) -> bool:
        """Send ``kind`` unless it is cooling down.

        Never raises; the outcome is logged.

        Returns:
            True if an alert was dispatched successfully.

        """
        now = now or dt_util.utcnow()
        if self.is_cooling_down(kind, now):
            _LOGGER.debug(
                "Suppressing %s alert for reading %s, last sent at %s",
                kind,
                reading_id,
                self._last_sent[kind],
            )
            return False

        try:
            response = await self._client.async_send_alert(
                kind, reading_id=reading_id, door_opened_at=door_opened_at
            )
        except Exception as err:  # noqa: BLE001
            _LOGGER.warning("Failed to dispatch %s alert: %s", kind, err)
            return False

        if not isinstance(response, Mapping) or response.get("success") is not True:
            _LOGGER.warning("Alert channel rejected %s alert: %s", kind, response)
            return False

        self._last_sent[kind] = now
        _LOGGER.info(
            "Dispatched %s alert for reading %s (door opened at %s)",
            kind,
            reading_id,
            door_opened_at,
        )
        return True
