"""Pytest configuration and fixtures for Door Security tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, Mock, patch

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.door_security.api import DoorSecurityApiClient
from custom_components.door_security.const import (
    CONF_API_KEY,
    CONF_BASE_URL,
    CONF_TABLE,
    CONF_WEBHOOK_ID,
    DEFAULT_TABLE,
    DOMAIN,
)
from custom_components.door_security.coordinator import DoorSecurityCoordinator
from custom_components.door_security.models import DoorStatus, Reading, SyncResult
from custom_components.door_security.settings import SecuritySettingsStore
from homeassistant.core import HomeAssistant
from homeassistant.util import dt as dt_util

TEST_BASE_URL = "https://example.supabase.co"
TEST_API_KEY = "test-api-key"
TEST_WEBHOOK_ID = "test_webhook_id"


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: None) -> None:
    """Enable loading custom_components in every test."""
    return


def make_row(reading_id: int, status: str, recorded_at: datetime) -> dict[str, Any]:
    """Build a reading-store row as the REST API returns it."""
    return {
        "id": reading_id,
        "door_status": status,
        "recorded_at": recorded_at.isoformat(),
    }


def make_reading(
    status: DoorStatus, recorded_at: datetime, reading_id: int | None = None
) -> Reading:
    """Build a parsed reading."""
    return Reading(recorded_at=recorded_at, door_status=status, reading_id=reading_id)


def local_time(hour: int, minute: int, second: int = 0) -> datetime:
    """Return a fixed-date UTC instant that is ``hour:minute`` on the local clock."""
    return dt_util.as_utc(
        datetime(
            2026, 1, 15, hour, minute, second, tzinfo=dt_util.get_default_time_zone()
        )
    )


def set_rows(client: Mock, rows: list[dict[str, Any]]) -> None:
    """Make ``client`` serve ``rows`` as the reading window."""
    client.async_fetch_latest_reading.return_value = rows[-1] if rows else None
    client.async_fetch_readings_page.return_value = rows


@pytest.fixture
def mock_client() -> Mock:
    """Create a mock API client with a quiet, empty backend."""
    client = Mock(spec=DoorSecurityApiClient)
    client.async_fetch_latest_reading = AsyncMock(return_value=None)
    client.async_fetch_readings_page = AsyncMock(return_value=[])
    client.async_send_alert = AsyncMock(return_value={"success": True})
    client.async_trigger_sync = AsyncMock(
        return_value=SyncResult(success=True, synced_count=0)
    )
    return client


@pytest.fixture
def config_entry_data() -> dict[str, Any]:
    """Return connection data for a config entry."""
    return {
        CONF_BASE_URL: TEST_BASE_URL,
        CONF_API_KEY: TEST_API_KEY,
        CONF_TABLE: DEFAULT_TABLE,
        CONF_WEBHOOK_ID: TEST_WEBHOOK_ID,
    }


@pytest.fixture
def mock_config_entry(
    hass: HomeAssistant, config_entry_data: dict[str, Any]
) -> MockConfigEntry:
    """Create a config entry registered with hass."""
    entry = MockConfigEntry(
        domain=DOMAIN,
        title="Door Security",
        data=config_entry_data,
        entry_id="test_entry_id",
        unique_id=DOMAIN,
    )
    entry.add_to_hass(hass)
    return entry


@pytest.fixture
def settings_store(hass: HomeAssistant) -> SecuritySettingsStore:
    """Create a settings store holding the defaults."""
    return SecuritySettingsStore(hass)


@pytest.fixture
def coordinator(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,
    mock_client: Mock,
    settings_store: SecuritySettingsStore,
) -> DoorSecurityCoordinator:
    """Create a coordinator backed by the mock client."""
    return DoorSecurityCoordinator(hass, mock_config_entry, mock_client, settings_store)


@pytest.fixture
def frozen_utcnow(hass: HomeAssistant) -> Generator[Mock]:
    """Pin the coordinator clock; set ``return_value`` to move it."""
    with patch(
        "custom_components.door_security.coordinator.dt_util", wraps=dt_util
    ) as mock_dt:
        mock_dt.utcnow.return_value = local_time(12, 0)
        yield mock_dt.utcnow


@pytest.fixture
def setup_integration(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry, mock_client: Mock
) -> Generator[MockConfigEntry]:
    """Patch the API client so the whole integration can be set up."""
    with patch(
        "custom_components.door_security.DoorSecurityApiClient",
        return_value=mock_client,
    ):
        yield mock_config_entry


@pytest.fixture
async def loaded_entry(
    hass: HomeAssistant, setup_integration: MockConfigEntry
) -> AsyncGenerator[MockConfigEntry]:
    """Set up the integration and unload it after the test."""
    assert await hass.config_entries.async_setup(setup_integration.entry_id)
    await hass.async_block_till_done()
    yield setup_integration
    await hass.config_entries.async_unload(setup_integration.entry_id)
    await hass.async_block_till_done()
