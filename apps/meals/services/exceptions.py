"""
Domain-specific exceptions for meals app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class MealsServiceError(Exception):
    """Base exception for all meals service errors."""
    pass


class DateFinalizedError(MealsServiceError):
    """Raised when a member edits meals of a finalized date."""
    pass


class MemberNotFoundError(MealsServiceError):
    """Raised when the target user is not an approved member of the room."""
    pass


class InvalidDayError(MealsServiceError):
    """Raised for a weekday name outside Monday..Sunday."""
    pass


class InsufficientPermissionsError(MealsServiceError):
    """Raised when user lacks permissions for an operation."""
    pass
