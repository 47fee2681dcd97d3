"""Rate-limited reconciliation against the secondary data source."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
import logging
from typing import TYPE_CHECKING

from homeassistant.core import CALLBACK_TYPE, HomeAssistant
from homeassistant.helpers.event import async_track_time_interval
from homeassistant.util import dt as dt_util

from .api import is_authorization_error
from .const import SYNC_INTERVAL, SYNC_MIN_INTERVAL
from .exceptions import ReconciliationUnauthorizedError
from .models import SyncResult

if TYPE_CHECKING:
    from .api import DoorSecurityApiClient

_LOGGER = logging.getLogger(__name__)


class ReconciliationScheduler:
    """Ask the secondary source to backfill readings the live feed missed.

    At most one sync runs at a time and attempts start at least
    ``min_interval`` apart, however many triggers fire. The first
    authorization failure disables the scheduler for the rest of the process
    lifetime.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        client: DoorSecurityApiClient,
        on_synced: Callable[[], Awaitable[None]] | None = None,
        *,
        min_interval: timedelta = SYNC_MIN_INTERVAL,
        interval: timedelta = SYNC_INTERVAL,
    ) -> None:
        """Initialize the scheduler."""
        self.hass = hass
        self._client = client
        self._on_synced = on_synced
        self._min_interval = min_interval
        self._interval = interval
        self._disabled = False
        self._in_flight = False
        self._last_attempt: datetime | None = None
        self._unsub_interval: CALLBACK_TYPE | None = None

    @property
    def disabled(self) -> bool:
        """Return True once an authorization failure has been seen."""
        return self._disabled

    @property
    def in_flight(self) -> bool:
        """Return True while a sync call is running."""
        return self._in_flight

    @property
    def last_attempt(self) -> datetime | None:
        """Return when the last sync attempt started."""
        return self._last_attempt

    def async_start(self) -> None:
        """Start the periodic sync timer."""
        if self._unsub_interval is None:
            self._unsub_interval = async_track_time_interval(
                self.hass, self._async_interval_tick, self._interval
            )

    def async_stop(self) -> None:
        """Stop the periodic sync timer."""
        if self._unsub_interval is not None:
            self._unsub_interval()
            self._unsub_interval = None

    async def _async_interval_tick(self, now: datetime) -> None:
        await self.async_trigger("interval")

    async def async_trigger(
        self, reason: str = "manual", now: datetime | None = None
    ) -> SyncResult | None:
        """Run a sync unless disabled, already running or throttled.

        Returns:
            The SyncResult of the attempt, or None when no attempt was made
            or the attempt raised.

        """
        if self._disabled:
            return None
        if self._in_flight:
            _LOGGER.debug("Sync already in progress, ignoring %s trigger", reason)
            return None

        now = now or dt_util.utcnow()
        if (
            self._last_attempt is not None
            and now - self._last_attempt < self._min_interval
        ):
            _LOGGER.debug("Sync throttled, ignoring %s trigger", reason)
            return None

        self._in_flight = True
        self._last_attempt = now
        try:
            result = await self._async_attempt(reason)
        finally:
            self._in_flight = False

        if result is not None and result.success and result.synced_count > 0:
            _LOGGER.debug("Sync added %d readings, refreshing", result.synced_count)
            if self._on_synced is not None:
                await self._on_synced()
        return result

    async def _async_attempt(self, reason: str) -> SyncResult | None:
        _LOGGER.debug("Triggering reconciliation (%s)", reason)
        try:
            result = await self._client.async_trigger_sync()
        except ReconciliationUnauthorizedError as err:
            self._disable(str(err))
            return None
        except Exception as err:  # noqa: BLE001
            _LOGGER.warning("Reconciliation failed, will retry later: %s", err)
            return None

        if not result.success:
            if is_authorization_error(result.error):
                self._disable(result.error)
            else:
                _LOGGER.warning(
                    "Reconciliation reported failure, will retry later: %s",
                    result.error,
                )
        return result

    def _disable(self, reason: str | None) -> None:
        self._disabled = True
        self.async_stop()
        _LOGGER.info("Reconciliation disabled for this session: %s", reason)
