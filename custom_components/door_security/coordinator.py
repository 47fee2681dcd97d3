"""Door Security Coordinator."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from homeassistant.util import dt as dt_util

from .alerts import AlertDispatcher
from .api import DoorSecurityApiClient
from .const import (
    DEFAULT_NAME,
    DOMAIN,
    POLL_INTERVAL,
    READING_WINDOW,
    STALE_FEED_THRESHOLD,
)
from .exceptions import ReadingStoreError
from .logic.night_mode import is_within_night_mode
from .logic.posture import evaluate_posture, open_duration_seconds
from .logic.transitions import summarize_transitions
from .models import (
    AlertKind,
    DoorMetricsSnapshot,
    DoorStatus,
    PostureResult,
    Reading,
    SecurityConfig,
    SecurityPosture,
)
from .readings import async_fetch_window, parse_reading
from .reconciliation import ReconciliationScheduler
from .settings import SecuritySettingsStore

_LOGGER = logging.getLogger(__name__)


def build_snapshot(
    readings: Sequence[Reading], now: datetime, possibly_incomplete: bool = False
) -> DoorMetricsSnapshot:
    """Derive a DoorMetricsSnapshot from a window of readings."""
    summary = summarize_transitions(readings)
    return DoorMetricsSnapshot(
        total_entries_in_window=summary.entries,
        current_door_status=summary.current_status,
        door_opened_at=summary.door_opened_at,
        last_updated=now,
        latest_reading_id=summary.latest_reading_id,
        possibly_incomplete=possibly_incomplete,
    )


class DoorSecurityCoordinator(DataUpdateCoordinator[DoorMetricsSnapshot]):
    """Keep the live door snapshot and raise security alerts.

    Refreshes come from the poll interval, from pushed readings and from
    successful reconciliations. Refreshes may overlap; each one computes a
    complete snapshot from its own fetch and the last one to finish wins.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        client: DoorSecurityApiClient,
        settings_store: SecuritySettingsStore,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=DEFAULT_NAME,
            update_interval=POLL_INTERVAL,
        )
        self.client = client
        self.settings_store = settings_store
        self.alerts = AlertDispatcher(client)
        self.reconciliation = ReconciliationScheduler(hass, client, self.async_refresh)
        self._reconciliation_task: asyncio.Task | None = None

    @property
    def settings(self) -> SecurityConfig:
        """Return the current security settings."""
        return self.settings_store.settings

    async def _async_update_data(self) -> DoorMetricsSnapshot:
        """Fetch the rolling window and recompute the snapshot."""
        now = dt_util.utcnow()
        since = now - READING_WINDOW
        try:
            latest_row = await self.client.async_fetch_latest_reading(since)
            readings, possibly_incomplete = await async_fetch_window(self.client, since)
        except ReadingStoreError as err:
            self._request_reconciliation("refresh failed")
            raise UpdateFailed(f"Error fetching door readings: {err}") from err

        latest = parse_reading(latest_row) if latest_row else None
        if latest is not None and (
            not readings or latest.recorded_at > readings[-1].recorded_at
        ):
            readings.append(latest)

        newest = readings[-1].recorded_at if readings else None
        if newest is None or now - newest > STALE_FEED_THRESHOLD:
            self._request_reconciliation("stale feed")

        snapshot = build_snapshot(readings, now, possibly_incomplete)
        _LOGGER.debug(
            "Door snapshot: %s, %d entries, opened at %s",
            snapshot.current_door_status,
            snapshot.total_entries_in_window,
            snapshot.door_opened_at,
        )
        await self._async_check_alerts(snapshot, now)
        return snapshot

    async def _async_check_alerts(
        self, snapshot: DoorMetricsSnapshot, now: datetime
    ) -> None:
        posture = self._evaluate(snapshot, now)
        if posture.status == SecurityPosture.INTRUSION:
            kind = AlertKind.INTRUSION
        elif (
            posture.status == SecurityPosture.DOOR_OPEN_TOO_LONG
            and self.settings.notify_door_open_too_long
        ):
            kind = AlertKind.DOOR_OPEN_TOO_LONG
        else:
            return

        await self.alerts.async_maybe_send_alert(
            kind,
            reading_id=snapshot.latest_reading_id,
            door_opened_at=snapshot.door_opened_at,
            now=now,
        )

    def _evaluate(self, snapshot: DoorMetricsSnapshot, now: datetime) -> PostureResult:
        return evaluate_posture(
            snapshot.current_door_status,
            open_duration_seconds(snapshot, now),
            dt_util.as_local(now),
            self.settings,
        )

    def evaluate_posture(self, now: datetime | None = None) -> PostureResult:
        """Return the current posture, secure when nothing is known yet."""
        if self.data is None:
            return PostureResult(SecurityPosture.SECURE)
        return self._evaluate(self.data, now or dt_util.utcnow())

    def is_night_mode(self, now: datetime | None = None) -> bool:
        """Return True if the night window is active."""
        local_now = dt_util.as_local(now or dt_util.utcnow())
        settings = self.settings
        return is_within_night_mode(
            local_now, settings.night_mode_start, settings.night_mode_end
        )

    def open_duration(self, now: datetime | None = None) -> float:
        """Return seconds the door has been open, 0 when closed."""
        if self.data is None:
            return 0.0
        return open_duration_seconds(self.data, now or dt_util.utcnow())

    async def async_handle_push(
        self, reading: Reading, now: datetime | None = None
    ) -> None:
        """Apply a pushed reading, alert on night-time openings, then refresh.

        The night window is checked on the push itself so an intrusion is
        reported without waiting for the next poll.
        """
        now = now or dt_util.utcnow()
        previous = self.data
        previous_status = (
            previous.current_door_status if previous is not None else DoorStatus.UNKNOWN
        )
        _LOGGER.debug(
            "Pushed reading %s: %s at %s (was %s)",
            reading.reading_id,
            reading.door_status,
            reading.recorded_at,
            previous_status,
        )

        is_duplicate = (
            previous is not None
            and reading.reading_id is not None
            and reading.reading_id == previous.latest_reading_id
        )
        opened_at: datetime | None = None
        if reading.door_status == DoorStatus.OPEN:
            if previous_status == DoorStatus.OPEN and previous is not None:
                opened_at = previous.door_opened_at
            else:
                opened_at = reading.recorded_at

        if not is_duplicate:
            self.async_set_updated_data(
                DoorMetricsSnapshot(
                    total_entries_in_window=(
                        previous.total_entries_in_window if previous is not None else 0
                    ),
                    current_door_status=reading.door_status,
                    door_opened_at=opened_at,
                    last_updated=now,
                    latest_reading_id=reading.reading_id,
                    possibly_incomplete=(
                        previous.possibly_incomplete if previous is not None else False
                    ),
                )
            )

        if (
            reading.door_status == DoorStatus.OPEN
            and previous_status != DoorStatus.OPEN
            and self.is_night_mode(now)
        ):
            _LOGGER.warning(
                "Door opened during night mode (reading %s)", reading.reading_id
            )
            await self.alerts.async_maybe_send_alert(
                AlertKind.INTRUSION,
                reading_id=reading.reading_id,
                door_opened_at=opened_at,
                now=now,
            )

        await self.async_refresh()

    def _request_reconciliation(self, reason: str) -> None:
        if self.reconciliation.disabled or self.reconciliation.in_flight:
            return
        self._reconciliation_task = self.hass.async_create_task(
            self.reconciliation.async_trigger(reason), f"{DOMAIN} reconciliation"
        )

    async def async_shutdown(self) -> None:
        """Stop background activity."""
        self.reconciliation.async_stop()
        if self._reconciliation_task is not None:
            if not self._reconciliation_task.done():
                self._reconciliation_task.cancel()
            self._reconciliation_task = None
        await super().async_shutdown()
