"""
Domain-specific exceptions for notifications app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class NotificationsServiceError(Exception):
    """Base exception for all notifications service errors."""
    pass


class NotificationNotFoundError(NotificationsServiceError):
    """Raised when a notification does not exist or belongs to someone else."""
    pass


class InvalidReminderError(NotificationsServiceError):
    """Raised for an unknown reminder type."""
    pass


class InsufficientPermissionsError(NotificationsServiceError):
    """Raised when a user may not notify the target user or room."""
    pass
