class AlertError(Exception):
    """Base exception for completion sound and notification delivery."""


class AlertDependencyError(AlertError):
    """Raised when an optional audio dependency is missing."""


class AlertDeliveryError(AlertError):
    """Raised when playing a sound or showing a notification fails."""
