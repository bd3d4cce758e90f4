"""
Domain-specific exceptions for bills app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class BillsServiceError(Exception):
    """Base exception for all bills service errors."""
    pass


class BillNotFoundError(BillsServiceError):
    """Raised when a bill does not exist."""
    pass


class ShareNotFoundError(BillsServiceError):
    """Raised when a bill has no share for the given user."""
    pass


class InvalidShareError(BillsServiceError):
    """Raised for shares naming users outside the room, or duplicates."""
    pass


class InvalidShareStatusError(BillsServiceError):
    """Raised for a share status outside ShareStatus."""
    pass


class NoRoomError(BillsServiceError):
    """Raised when the caller has no room."""
    pass


class InsufficientPermissionsError(BillsServiceError):
    """Raised when user lacks permissions for an operation."""
    pass
