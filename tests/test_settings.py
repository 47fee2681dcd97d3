"""Tests for the security settings store."""

from datetime import time
from typing import Any
from unittest.mock import patch

import pytest
import voluptuous as vol

from custom_components.door_security.const import (
    CONF_MAX_OPEN_DURATION,
    CONF_NIGHT_MODE_END,
    CONF_NIGHT_MODE_START,
    CONF_NOTIFY_DOOR_OPEN_TOO_LONG,
    STORAGE_KEY,
    STORAGE_VERSION,
)
from custom_components.door_security.exceptions import ConfigurationError
from custom_components.door_security.models import SecurityConfig
from custom_components.door_security.settings import (
    SecuritySettingsStore,
    build_settings,
    time_of_day,
)
from homeassistant.core import HomeAssistant


def _stored(data: Any) -> dict[str, Any]:
    return {"version": STORAGE_VERSION, "key": STORAGE_KEY, "data": data}


class TestTimeOfDay:
    """Test the HH:MM validator."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("23:00", "23:00"),
            ("7:05", "07:05"),
            ("06:30:00", "06:30"),
            (time(22, 45), "22:45"),
        ],
    )
    def test_normalizes(self, value, expected):
        """Test accepted inputs are normalized to HH:MM."""
        assert time_of_day(value) == expected

    @pytest.mark.parametrize("value", ["25:00", "ab:cd", "", None, 2300])
    def test_rejects(self, value):
        """Test malformed inputs raise vol.Invalid."""
        with pytest.raises(vol.Invalid):
            time_of_day(value)


class TestBuildSettings:
    """Test build_settings."""

    def test_partial_merges_over_defaults(self):
        """Test unspecified fields keep their default values."""
        settings = build_settings({CONF_MAX_OPEN_DURATION: 600})
        assert settings == SecurityConfig(max_open_duration_seconds=600)

    def test_merges_over_base(self):
        """Test fields are merged over a non-default base."""
        base = SecurityConfig(night_mode_start="22:00")
        settings = build_settings({CONF_NIGHT_MODE_END: "05:00"}, base)
        assert settings.night_mode_start == "22:00"
        assert settings.night_mode_end == "05:00"

    def test_clamps_duration(self):
        """Test the open-duration threshold is clamped to its range."""
        assert build_settings({CONF_MAX_OPEN_DURATION: 5}).max_open_duration_seconds == 30
        assert (
            build_settings({CONF_MAX_OPEN_DURATION: "99999"}).max_open_duration_seconds
            == 3600
        )

    def test_ignores_unknown_keys(self):
        """Test extra keys are dropped."""
        assert build_settings({"legacy_field": 1}) == SecurityConfig()


class TestSecuritySettingsStore:
    """Test SecuritySettingsStore."""

    async def test_load_without_data(self, hass: HomeAssistant):
        """Test defaults when nothing has been stored."""
        store = SecuritySettingsStore(hass)
        assert await store.async_load() == SecurityConfig()

    async def test_load_partial_record(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ):
        """Test a partial record is merged over the defaults."""
        hass_storage[STORAGE_KEY] = _stored({CONF_NIGHT_MODE_START: "22:30"})
        store = SecuritySettingsStore(hass)
        settings = await store.async_load()
        assert settings.night_mode_start == "22:30"
        assert settings.night_mode_end == "06:00"
        assert store.settings is settings

    @pytest.mark.parametrize(
        "data",
        [
            "not a mapping",
            [1, 2, 3],
            {CONF_NIGHT_MODE_START: "99:99"},
            {CONF_MAX_OPEN_DURATION: "soon"},
        ],
    )
    async def test_load_malformed_record(
        self, hass: HomeAssistant, hass_storage: dict[str, Any], data: Any
    ):
        """Test malformed records fall back to defaults without raising."""
        hass_storage[STORAGE_KEY] = _stored(data)
        store = SecuritySettingsStore(hass)
        assert await store.async_load() == SecurityConfig()

    async def test_load_store_failure(self, hass: HomeAssistant):
        """Test a failing store falls back to defaults."""
        store = SecuritySettingsStore(hass)
        with patch.object(store._store, "async_load", side_effect=ValueError("bad")):
            assert await store.async_load() == SecurityConfig()

    async def test_save_round_trip(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ):
        """Test saved settings are persisted and reloaded."""
        store = SecuritySettingsStore(hass)
        await store.async_load()
        saved = await store.async_save(
            {CONF_NIGHT_MODE_START: "21:00", CONF_NOTIFY_DOOR_OPEN_TOO_LONG: True}
        )

        assert saved.night_mode_start == "21:00"
        assert saved.notify_door_open_too_long is True
        assert saved.max_open_duration_seconds == 300
        assert hass_storage[STORAGE_KEY]["data"] == saved.as_dict()

        reloaded = SecuritySettingsStore(hass)
        assert await reloaded.async_load() == saved

    async def test_save_keeps_unspecified_fields(self, hass: HomeAssistant):
        """Test a partial save keeps previously saved values."""
        store = SecuritySettingsStore(hass)
        await store.async_save({CONF_MAX_OPEN_DURATION: 120})
        settings = await store.async_save({CONF_NIGHT_MODE_END: "07:00"})
        assert settings.max_open_duration_seconds == 120
        assert settings.night_mode_end == "07:00"

    async def test_save_invalid(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ):
        """Test invalid updates raise and leave the settings untouched."""
        store = SecuritySettingsStore(hass)
        with pytest.raises(ConfigurationError):
            await store.async_save({CONF_NIGHT_MODE_START: "late"})
        assert store.settings == SecurityConfig()
        assert STORAGE_KEY not in hass_storage
