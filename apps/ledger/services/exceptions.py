"""
Domain-specific exceptions for ledger app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""

from apps.core.exceptions import InvalidTransitionError


class LedgerServiceError(Exception):
    """Base exception for all ledger service errors."""
    pass


class DepositNotFoundError(LedgerServiceError):
    """Raised when a deposit does not exist in the room."""
    pass


class ExpenseNotFoundError(LedgerServiceError):
    """Raised when an expense does not exist in the room."""
    pass


class MemberNotFoundError(LedgerServiceError):
    """Raised when the target user is not an approved member of the room."""
    pass


class InvalidAdjustmentError(LedgerServiceError):
    """Raised for a fund adjustment with missing fields or an unknown type."""
    pass


class InsufficientPermissionsError(LedgerServiceError):
    """Raised when user lacks permissions for an operation."""
    pass


__all__ = [
    'LedgerServiceError',
    'DepositNotFoundError',
    'ExpenseNotFoundError',
    'MemberNotFoundError',
    'InvalidAdjustmentError',
    'InsufficientPermissionsError',
    'InvalidTransitionError',
]
