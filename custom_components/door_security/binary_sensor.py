"""Binary sensor entities for Door Security."""

from __future__ import annotations

from typing import Any

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import ATTR_DOOR_OPENED_AT, ATTR_LATEST_READING_ID
from .coordinator import DoorSecurityCoordinator
from .models import DoorStatus, SecurityPosture
from .utils import device_info

NAME_DOOR_SENSOR = "Door"
NAME_INTRUSION_SENSOR = "Intrusion"


class Door(CoordinatorEntity[DoorSecurityCoordinator], BinarySensorEntity):
    """Binary sensor for the door contact."""

    def __init__(self, coordinator: DoorSecurityCoordinator, entry_id: str) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._attr_has_entity_name = True
        self._attr_unique_id = f"{entry_id}_{NAME_DOOR_SENSOR.lower()}"
        self._attr_name = NAME_DOOR_SENSOR
        self._attr_device_class = BinarySensorDeviceClass.DOOR
        self._attr_device_info = device_info(entry_id)

    @property
    def is_on(self) -> bool | None:
        """Return true if the door is open, None while unknown."""
        data = self.coordinator.data
        if data is None or data.current_door_status == DoorStatus.UNKNOWN:
            return None
        return data.is_open

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return when the door opened and the reading it came from."""
        data = self.coordinator.data
        if data is None:
            return {}
        return {
            ATTR_DOOR_OPENED_AT: (
                data.door_opened_at.isoformat() if data.door_opened_at else None
            ),
            ATTR_LATEST_READING_ID: data.latest_reading_id,
        }


class Intrusion(CoordinatorEntity[DoorSecurityCoordinator], BinarySensorEntity):
    """Binary sensor that is on while the door is open during night mode."""

    def __init__(self, coordinator: DoorSecurityCoordinator, entry_id: str) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._attr_has_entity_name = True
        self._attr_unique_id = f"{entry_id}_{NAME_INTRUSION_SENSOR.lower()}"
        self._attr_name = NAME_INTRUSION_SENSOR
        self._attr_device_class = BinarySensorDeviceClass.SAFETY
        self._attr_device_info = device_info(entry_id)

    @property
    def icon(self) -> str:
        """Return the icon to use in the frontend."""
        return "mdi:shield-alert" if self.is_on else "mdi:shield-home"

    @property
    def is_on(self) -> bool:
        """Return true if an intrusion is in progress."""
        return self.coordinator.evaluate_posture().status == SecurityPosture.INTRUSION


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Door Security binary sensors."""
    coordinator: DoorSecurityCoordinator = config_entry.runtime_data

    async_add_entities(
        [
            Door(coordinator, config_entry.entry_id),
            Intrusion(coordinator, config_entry.entry_id),
        ]
    )
