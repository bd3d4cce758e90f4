"""
Domain-specific exceptions for periods app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class PeriodsServiceError(Exception):
    """Base exception for all periods service errors."""
    pass


class PeriodNotFoundError(PeriodsServiceError):
    """Raised when a calculation period does not exist."""
    pass


class ActivePeriodExistsError(PeriodsServiceError):
    """Raised when starting a period while another is still active."""
    pass


class PeriodAlreadyEndedError(PeriodsServiceError):
    """Raised when ending a period twice."""
    pass


class NoRoomError(PeriodsServiceError):
    """Raised when the caller has no room."""
    pass


class InsufficientPermissionsError(PeriodsServiceError):
    """Raised when user lacks permissions for an operation."""
    pass
