"""Constants for the Door Security integration."""

from __future__ import annotations

from datetime import timedelta
from typing import Final

from homeassistant.const import Platform

DOMAIN: Final = "door_security"
PLATFORMS = [Platform.BINARY_SENSOR, Platform.SENSOR]

# Device information
DEVICE_MANUFACTURER: Final = "Door Security"
DEVICE_MODEL: Final = "Door Security Monitor"
DEVICE_SW_VERSION: Final = "1.0.0"
DEFAULT_NAME: Final = "Door Security"

# Config entry keys
CONF_BASE_URL: Final = "base_url"
CONF_API_KEY: Final = "api_key"
CONF_TABLE: Final = "table"
CONF_WEBHOOK_ID: Final = "webhook_id"

DEFAULT_TABLE: Final = "processed_sensor_readings"

# Security settings keys (persisted record)
CONF_NIGHT_MODE_START: Final = "night_mode_start"
CONF_NIGHT_MODE_END: Final = "night_mode_end"
CONF_MAX_OPEN_DURATION: Final = "max_open_duration_seconds"
CONF_NOTIFY_DOOR_OPEN_TOO_LONG: Final = "notify_door_open_too_long"

DEFAULT_NIGHT_MODE_START: Final = "23:00"
DEFAULT_NIGHT_MODE_END: Final = "06:00"
DEFAULT_MAX_OPEN_DURATION: Final = 300  # seconds
DEFAULT_NOTIFY_DOOR_OPEN_TOO_LONG: Final = False
MIN_MAX_OPEN_DURATION: Final = 30
MAX_MAX_OPEN_DURATION: Final = 3600

STORAGE_KEY: Final = f"{DOMAIN}.security_settings"
STORAGE_VERSION: Final = 1

# Reading store
READING_WINDOW: Final = timedelta(hours=24)
WINDOW_PAGE_SIZE: Final = 1000
WINDOW_MAX_ROWS: Final = 20000
REQUEST_TIMEOUT: Final = 10  # seconds

# Wire values
DOOR_STATUS_OPEN: Final = "OPEN"
DOOR_STATUS_CLOSED: Final = "CLOSED"

# Scheduling
POLL_INTERVAL: Final = timedelta(seconds=3)
ALERT_COOLDOWN: Final = timedelta(minutes=5)
SYNC_MIN_INTERVAL: Final = timedelta(seconds=5)
SYNC_INTERVAL: Final = timedelta(minutes=5)
STALE_FEED_THRESHOLD: Final = timedelta(seconds=60)

# Backend endpoints
REST_PATH: Final = "/rest/v1"
ALERT_FUNCTION_PATH: Final = "/functions/v1/security-alert"
SYNC_FUNCTION_PATH: Final = "/functions/v1/sync-rds-data"

# Services
SERVICE_SAVE_SETTINGS: Final = "save_settings"
SERVICE_REFRESH: Final = "refresh"
SERVICE_TRIGGER_SYNC: Final = "trigger_sync"

# Entity attributes
ATTR_DOOR_OPENED_AT: Final = "door_opened_at"
ATTR_POSSIBLY_INCOMPLETE: Final = "possibly_incomplete"
ATTR_LATEST_READING_ID: Final = "latest_reading_id"
ATTR_IS_RED_ALERT: Final = "is_red_alert"
ATTR_IS_AMBER_WARNING: Final = "is_amber_warning"
ATTR_NIGHT_MODE_ACTIVE: Final = "night_mode_active"
