"""Custom exceptions for Door Security."""

from homeassistant.exceptions import HomeAssistantError


class DoorSecurityError(HomeAssistantError):
    """Base exception for Door Security errors."""


class ConfigurationError(DoorSecurityError):
    """Raised when security settings fail validation."""


class ApiError(DoorSecurityError):
    """Raised when a backend call fails."""


class ReadingStoreError(ApiError):
    """Raised when readings cannot be fetched from the reading store."""


class NotificationError(ApiError):
    """Raised when the alert channel cannot be reached."""


class ReconciliationError(ApiError):
    """Raised when a reconciliation call fails."""


class ReconciliationUnauthorizedError(ReconciliationError):
    """Raised when the caller is not allowed to trigger reconciliation."""
