"""Exceptions shared across BillKhata apps."""


class InvalidTransitionError(Exception):
    """Raised when a status change is not allowed from the current state."""
    pass
