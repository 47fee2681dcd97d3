"""Reading parsing and rolling-window retrieval."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
import logging
from typing import TYPE_CHECKING, Any

from .const import WINDOW_MAX_ROWS, WINDOW_PAGE_SIZE
from .models import DoorStatus, Reading
from .utils import parse_timestamp

if TYPE_CHECKING:
    from .api import DoorSecurityApiClient

_LOGGER = logging.getLogger(__name__)

VALID_STATUSES = {DoorStatus.OPEN.value, DoorStatus.CLOSED.value}


def parse_reading(row: Mapping[str, Any]) -> Reading | None:
    """Convert a reading-store row into a Reading.

    Returns None for rows without a usable timestamp or door status.
    """
    recorded_at = parse_timestamp(row.get("recorded_at"))
    status = row.get("door_status")
    if isinstance(status, str):
        status = status.strip().upper()
    if recorded_at is None or status not in VALID_STATUSES:
        _LOGGER.debug("Skipping unusable reading row: %s", row)
        return None

    reading_id = row.get("id")
    if isinstance(reading_id, bool) or not isinstance(reading_id, int):
        reading_id = None
    return Reading(
        recorded_at=recorded_at,
        door_status=DoorStatus(status),
        reading_id=reading_id,
    )


def parse_readings(rows: Iterable[Mapping[str, Any]]) -> list[Reading]:
    """Parse rows, dropping unusable ones."""
    readings = []
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        if (reading := parse_reading(row)) is not None:
            readings.append(reading)
    return readings


async def async_fetch_window(
    client: DoorSecurityApiClient,
    since: datetime,
    page_size: int = WINDOW_PAGE_SIZE,
    max_rows: int = WINDOW_MAX_ROWS,
) -> tuple[list[Reading], bool]:
    """Fetch every reading since ``since`` page by page.

    Pages are requested until one comes back shorter than ``page_size`` or
    ``max_rows`` rows have been collected.

    Returns:
        Tuple of (ascending readings, possibly_incomplete). The flag is set
        when the row cap stopped the pagination.

    """
    rows: list[Mapping[str, Any]] = []
    offset = 0
    while True:
        page = await client.async_fetch_readings_page(since, page_size, offset)
        rows.extend(page)
        if len(page) < page_size:
            return parse_readings(rows), False

        offset += len(page)
        if len(rows) >= max_rows:
            _LOGGER.warning(
                "Reading window since %s hit the %d row cap, count may be incomplete",
                since.isoformat(),
                max_rows,
            )
            return parse_readings(rows[:max_rows]), True
