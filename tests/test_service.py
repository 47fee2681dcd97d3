"""Tests for service module."""

from datetime import timedelta
from typing import Any
from unittest.mock import Mock

import pytest
import voluptuous as vol

from custom_components.door_security.const import (
    CONF_MAX_OPEN_DURATION,
    CONF_NIGHT_MODE_END,
    CONF_NIGHT_MODE_START,
    CONF_NOTIFY_DOOR_OPEN_TOO_LONG,
    DOMAIN,
    SERVICE_REFRESH,
    SERVICE_SAVE_SETTINGS,
    SERVICE_TRIGGER_SYNC,
    STORAGE_KEY,
)
from custom_components.door_security.exceptions import (
    ReconciliationUnauthorizedError,
)
from custom_components.door_security.models import SecurityConfig, SyncResult
from custom_components.door_security.service import (
    SAVE_SETTINGS_SCHEMA,
    async_setup_services,
)
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.util import dt as dt_util
from pytest_homeassistant_custom_component.common import MockConfigEntry
from tests.conftest import make_row, set_rows

# Setting up the integration leaves HA-internal timers behind
pytestmark = [pytest.mark.parametrize("expected_lingering_timers", [True])]


@pytest.fixture(autouse=True)
def fresh_backend(mock_client: Mock) -> None:
    """Serve a recent CLOSED reading so setup does not start a sync."""
    set_rows(
        mock_client, [make_row(1, "CLOSED", dt_util.utcnow() - timedelta(seconds=1))]
    )


class TestSaveSettingsSchema:
    """Test SAVE_SETTINGS_SCHEMA."""

    def test_partial(self):
        """Test every field is optional."""
        assert SAVE_SETTINGS_SCHEMA({}) == {}
        assert SAVE_SETTINGS_SCHEMA({CONF_NIGHT_MODE_END: "5:30"}) == {
            CONF_NIGHT_MODE_END: "05:30"
        }

    def test_coerces(self):
        """Test selector output is normalized."""
        assert SAVE_SETTINGS_SCHEMA(
            {
                CONF_NIGHT_MODE_START: "22:15:00",
                CONF_MAX_OPEN_DURATION: "120",
                CONF_NOTIFY_DOOR_OPEN_TOO_LONG: "on",
            }
        ) == {
            CONF_NIGHT_MODE_START: "22:15",
            CONF_MAX_OPEN_DURATION: 120,
            CONF_NOTIFY_DOOR_OPEN_TOO_LONG: True,
        }

    @pytest.mark.parametrize(
        "data",
        [
            {CONF_NIGHT_MODE_START: "late"},
            {CONF_MAX_OPEN_DURATION: 10},
            {CONF_MAX_OPEN_DURATION: 7200},
            {"unknown": 1},
        ],
    )
    def test_rejects(self, data):
        """Test invalid service data."""
        with pytest.raises(vol.Invalid):
            SAVE_SETTINGS_SCHEMA(data)


class TestServices:
    """Test the registered services."""

    async def test_services_registered(
        self, hass: HomeAssistant, loaded_entry: MockConfigEntry
    ):
        """Test all services are available after setup."""
        for service in (SERVICE_SAVE_SETTINGS, SERVICE_REFRESH, SERVICE_TRIGGER_SYNC):
            assert hass.services.has_service(DOMAIN, service)

    async def test_save_settings(
        self,
        hass: HomeAssistant,
        hass_storage: dict[str, Any],
        loaded_entry: MockConfigEntry,
        mock_client: Mock,
    ):
        """Test saving settings persists them and refreshes."""
        coordinator = loaded_entry.runtime_data
        fetches = mock_client.async_fetch_readings_page.await_count

        await hass.services.async_call(
            DOMAIN,
            SERVICE_SAVE_SETTINGS,
            {CONF_NIGHT_MODE_START: "22:00", CONF_MAX_OPEN_DURATION: 120},
            blocking=True,
        )

        assert coordinator.settings == SecurityConfig(
            night_mode_start="22:00", max_open_duration_seconds=120
        )
        assert hass_storage[STORAGE_KEY]["data"][CONF_NIGHT_MODE_START] == "22:00"
        assert mock_client.async_fetch_readings_page.await_count == fetches + 1

    async def test_save_settings_invalid(
        self, hass: HomeAssistant, loaded_entry: MockConfigEntry
    ):
        """Test invalid settings are rejected and nothing changes."""
        with pytest.raises((vol.Invalid, HomeAssistantError)):
            await hass.services.async_call(
                DOMAIN,
                SERVICE_SAVE_SETTINGS,
                {CONF_NIGHT_MODE_END: "31:00"},
                blocking=True,
            )
        assert loaded_entry.runtime_data.settings == SecurityConfig()

    async def test_refresh(
        self, hass: HomeAssistant, loaded_entry: MockConfigEntry, mock_client: Mock
    ):
        """Test the refresh service fetches the window again."""
        fetches = mock_client.async_fetch_readings_page.await_count
        await hass.services.async_call(DOMAIN, SERVICE_REFRESH, {}, blocking=True)
        assert mock_client.async_fetch_readings_page.await_count == fetches + 1

    async def test_trigger_sync(
        self, hass: HomeAssistant, loaded_entry: MockConfigEntry, mock_client: Mock
    ):
        """Test the sync service reports the attempt."""
        mock_client.async_trigger_sync.return_value = SyncResult(True, synced_count=2)
        fetches = mock_client.async_fetch_readings_page.await_count

        response = await hass.services.async_call(
            DOMAIN, SERVICE_TRIGGER_SYNC, {}, blocking=True, return_response=True
        )

        assert response == {"triggered": True, "synced_count": 2, "disabled": False}
        assert mock_client.async_fetch_readings_page.await_count == fetches + 1

    async def test_trigger_sync_unauthorized(
        self, hass: HomeAssistant, loaded_entry: MockConfigEntry, mock_client: Mock
    ):
        """Test the sync service reports a disabled scheduler."""
        mock_client.async_trigger_sync.side_effect = ReconciliationUnauthorizedError(
            "Sync rejected with HTTP 403"
        )

        response = await hass.services.async_call(
            DOMAIN, SERVICE_TRIGGER_SYNC, {}, blocking=True, return_response=True
        )

        assert response == {"triggered": False, "synced_count": 0, "disabled": True}

    async def test_services_without_setup(self, hass: HomeAssistant):
        """Test services fail cleanly when the integration is not loaded."""
        await async_setup_services(hass)
        with pytest.raises(HomeAssistantError, match="not found"):
            await hass.services.async_call(DOMAIN, SERVICE_REFRESH, {}, blocking=True)
