"""Backend client for the reading store, alert channel and sync job."""

from __future__ import annotations

from datetime import datetime
import logging
import re
from typing import Any

import aiohttp

from .const import (
    ALERT_FUNCTION_PATH,
    DEFAULT_TABLE,
    REQUEST_TIMEOUT,
    REST_PATH,
    SYNC_FUNCTION_PATH,
)
from .exceptions import (
    NotificationError,
    ReadingStoreError,
    ReconciliationError,
    ReconciliationUnauthorizedError,
)
from .models import AlertKind, SyncResult

_LOGGER = logging.getLogger(__name__)

READING_COLUMNS = "id,recorded_at,door_status"
AUTHORIZATION_STATUSES = (401, 403)
AUTHORIZATION_PATTERN = re.compile(
    r"\b(?:admin(?:istrator)?(?: access| privileges?)? (?:is )?required"
    r"|admin access|admins? only|forbidden|not authori[sz]ed|unauthori[sz]ed"
    r"|permission denied|insufficient privileges?)\b",
    re.IGNORECASE,
)


def is_authorization_error(message: str | None) -> bool:
    """Return True if a failure message reads as an authorization failure."""
    if not message:
        return False
    return AUTHORIZATION_PATTERN.search(message) is not None


async def _async_error_message(response: aiohttp.ClientResponse) -> str | None:
    """Return the ``error`` field of a failed response body, if any."""
    try:
        body = await response.json(content_type=None)
    except (aiohttp.ClientError, ValueError):
        return None
    if isinstance(body, dict) and body.get("error") is not None:
        return str(body["error"])
    return None


class DoorSecurityApiClient:
    """Talk to the REST reading store and its edge functions."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        api_key: str,
        table: str = DEFAULT_TABLE,
    ) -> None:
        """Initialize the client."""
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._table = table
        self._timeout = aiohttp.ClientTimeout(total=REQUEST_TIMEOUT)

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def _async_select(self, params: dict[str, str]) -> list[dict[str, Any]]:
        url = f"{self._base_url}{REST_PATH}/{self._table}"
        try:
            async with self._session.get(
                url, params=params, headers=self._headers, timeout=self._timeout
            ) as response:
                response.raise_for_status()
                rows = await response.json()
        except (aiohttp.ClientError, TimeoutError, ValueError) as err:
            raise ReadingStoreError(f"Error querying {self._table}: {err}") from err

        if not isinstance(rows, list):
            raise ReadingStoreError(f"Unexpected response from {self._table}")
        return rows

    async def async_fetch_latest_reading(
        self, since: datetime
    ) -> dict[str, Any] | None:
        """Return the most recent reading recorded at or after ``since``."""
        rows = await self._async_select(
            {
                "select": READING_COLUMNS,
                "recorded_at": f"gte.{since.isoformat()}",
                "order": "recorded_at.desc",
                "limit": "1",
            }
        )
        return rows[0] if rows else None

    async def async_fetch_readings_page(
        self, since: datetime, page_size: int, offset: int
    ) -> list[dict[str, Any]]:
        """Return one ascending page of readings recorded at or after ``since``."""
        return await self._async_select(
            {
                "select": READING_COLUMNS,
                "recorded_at": f"gte.{since.isoformat()}",
                "order": "recorded_at.asc",
                "limit": str(page_size),
                "offset": str(offset),
            }
        )

    async def async_send_alert(
        self,
        alert_type: AlertKind,
        reading_id: int | None = None,
        door_opened_at: datetime | None = None,
    ) -> Any:
        """Ask the notification channel to send a security alert.

        Returns:
            The decoded response body. Interpreting it is up to the caller.

        Raises:
            NotificationError: On transport errors or non-2xx responses

        """
        payload: dict[str, Any] = {"alert_type": str(alert_type)}
        if reading_id is not None:
            payload["reading_id"] = reading_id
        if door_opened_at is not None:
            payload["door_opened_at"] = door_opened_at.isoformat()

        url = f"{self._base_url}{ALERT_FUNCTION_PATH}"
        try:
            async with self._session.post(
                url, json=payload, headers=self._headers, timeout=self._timeout
            ) as response:
                response.raise_for_status()
                return await response.json()
        except (aiohttp.ClientError, TimeoutError, ValueError) as err:
            raise NotificationError(f"Error sending {alert_type} alert: {err}") from err

    async def async_trigger_sync(self) -> SyncResult:
        """Ask the secondary source to fill in missed readings.

        Raises:
            ReconciliationUnauthorizedError: If the caller lacks permission
            ReconciliationError: On any other transport or HTTP failure

        """
        url = f"{self._base_url}{SYNC_FUNCTION_PATH}"
        try:
            async with self._session.post(
                url, headers=self._headers, timeout=self._timeout
            ) as response:
                if response.status in AUTHORIZATION_STATUSES:
                    raise ReconciliationUnauthorizedError(
                        f"Sync rejected with HTTP {response.status}"
                    )
                if response.status >= 400:
                    # The sync function reports its failures as 500 with a
                    # JSON body carrying the reason
                    error = await _async_error_message(response)
                    if is_authorization_error(error):
                        raise ReconciliationUnauthorizedError(
                            f"Sync rejected: {error}"
                        )
                    raise ReconciliationError(
                        f"Sync failed with HTTP {response.status}: "
                        f"{error or 'no reason given'}"
                    )
                body = await response.json()
        except (aiohttp.ClientError, TimeoutError, ValueError) as err:
            raise ReconciliationError(f"Error triggering sync: {err}") from err

        if not isinstance(body, dict):
            raise ReconciliationError("Unexpected response from sync")

        _LOGGER.debug("Sync response: %s", body)
        try:
            synced_count = int(body.get("synced_count") or 0)
        except (TypeError, ValueError):
            synced_count = 0
        error = body.get("error")
        return SyncResult(
            success=body.get("success") is True,
            synced_count=synced_count,
            error=str(error) if error is not None else None,
        )
