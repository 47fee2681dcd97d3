"""Sensor platform for Door Security integration."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory, UnitOfTime
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import (
    ATTR_IS_AMBER_WARNING,
    ATTR_IS_RED_ALERT,
    ATTR_NIGHT_MODE_ACTIVE,
    ATTR_POSSIBLY_INCOMPLETE,
    CONF_MAX_OPEN_DURATION,
    CONF_NIGHT_MODE_END,
    CONF_NIGHT_MODE_START,
)
from .coordinator import DoorSecurityCoordinator
from .models import SecurityPosture
from .utils import device_info

NAME_ENTRIES_SENSOR = "Entries Today"
NAME_OPEN_DURATION_SENSOR = "Door Open Duration"
NAME_POSTURE_SENSOR = "Security Status"
NAME_LAST_UPDATED_SENSOR = "Last Updated"


class DoorSecuritySensorBase(CoordinatorEntity[DoorSecurityCoordinator], SensorEntity):
    """Base class for door security sensors."""

    def __init__(
        self, coordinator: DoorSecurityCoordinator, entry_id: str, name: str
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._attr_has_entity_name = True
        self._attr_name = name
        self._attr_unique_id = f"{entry_id}_{name.lower().replace(' ', '_')}"
        self._attr_device_info = device_info(entry_id)


class EntriesSensor(DoorSecuritySensorBase):
    """Number of door entries in the rolling window."""

    def __init__(self, coordinator: DoorSecurityCoordinator, entry_id: str) -> None:
        """Initialize the entries sensor."""
        super().__init__(coordinator, entry_id, NAME_ENTRIES_SENSOR)
        self._attr_state_class = SensorStateClass.MEASUREMENT
        self._attr_icon = "mdi:door-open"

    @property
    def native_value(self) -> int | None:
        """Return the number of entries."""
        if self.coordinator.data is None:
            return None
        return self.coordinator.data.total_entries_in_window

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Flag counts that may be truncated."""
        if self.coordinator.data is None:
            return {}
        return {ATTR_POSSIBLY_INCOMPLETE: self.coordinator.data.possibly_incomplete}


class OpenDurationSensor(DoorSecuritySensorBase):
    """Seconds the door has been open."""

    def __init__(self, coordinator: DoorSecurityCoordinator, entry_id: str) -> None:
        """Initialize the open duration sensor."""
        super().__init__(coordinator, entry_id, NAME_OPEN_DURATION_SENSOR)
        self._attr_device_class = SensorDeviceClass.DURATION
        self._attr_native_unit_of_measurement = UnitOfTime.SECONDS
        self._attr_state_class = SensorStateClass.MEASUREMENT
        self._attr_suggested_display_precision = 0

    @property
    def native_value(self) -> int:
        """Return the open duration, 0 while closed."""
        return int(self.coordinator.open_duration())


class SecurityPostureSensor(DoorSecuritySensorBase):
    """Classified security posture of the door."""

    def __init__(self, coordinator: DoorSecurityCoordinator, entry_id: str) -> None:
        """Initialize the posture sensor."""
        super().__init__(coordinator, entry_id, NAME_POSTURE_SENSOR)
        self._attr_device_class = SensorDeviceClass.ENUM
        self._attr_options = [posture.value for posture in SecurityPosture]

    @property
    def icon(self) -> str:
        """Return the icon to use in the frontend."""
        if self.coordinator.evaluate_posture().status == SecurityPosture.SECURE:
            return "mdi:shield-check"
        return "mdi:shield-alert"

    @property
    def native_value(self) -> str:
        """Return the current posture."""
        return self.coordinator.evaluate_posture().status.value

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the alert flags and the active thresholds."""
        posture = self.coordinator.evaluate_posture()
        settings = self.coordinator.settings
        return {
            ATTR_IS_RED_ALERT: posture.is_red_alert,
            ATTR_IS_AMBER_WARNING: posture.is_amber_warning,
            ATTR_NIGHT_MODE_ACTIVE: self.coordinator.is_night_mode(),
            CONF_NIGHT_MODE_START: settings.night_mode_start,
            CONF_NIGHT_MODE_END: settings.night_mode_end,
            CONF_MAX_OPEN_DURATION: settings.max_open_duration_seconds,
        }


class LastUpdatedSensor(DoorSecuritySensorBase):
    """When the door metrics were last recomputed."""

    def __init__(self, coordinator: DoorSecurityCoordinator, entry_id: str) -> None:
        """Initialize the last updated sensor."""
        super().__init__(coordinator, entry_id, NAME_LAST_UPDATED_SENSOR)
        self._attr_device_class = SensorDeviceClass.TIMESTAMP
        self._attr_entity_category = EntityCategory.DIAGNOSTIC

    @property
    def native_value(self) -> datetime | None:
        """Return the snapshot timestamp."""
        if self.coordinator.data is None:
            return None
        return self.coordinator.data.last_updated


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Door Security sensors."""
    coordinator: DoorSecurityCoordinator = config_entry.runtime_data
    entry_id = config_entry.entry_id

    async_add_entities(
        [
            EntriesSensor(coordinator, entry_id),
            OpenDurationSensor(coordinator, entry_id),
            SecurityPostureSensor(coordinator, entry_id),
            LastUpdatedSensor(coordinator, entry_id),
        ]
    )
