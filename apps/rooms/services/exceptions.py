"""
Domain-specific exceptions for rooms app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class RoomsServiceError(Exception):
    """Base exception for all rooms service errors."""
    pass


class RoomNotFoundError(RoomsServiceError):
    """Raised when a room code does not match any room."""
    pass


class DuplicateRoomError(RoomsServiceError):
    """Raised when a room code is already taken."""
    pass


class AlreadyInRoomError(RoomsServiceError):
    """Raised when a user already lives in, or asked to join, a room."""
    pass


class NotMemberError(RoomsServiceError):
    """Raised when a user is not a member of the room."""
    pass


class MemberNotFoundError(RoomsServiceError):
    """Raised when the target user does not exist or is not in the room."""
    pass


class ManagerCannotLeaveError(RoomsServiceError):
    """Raised when a room's manager tries to leave instead of deleting it."""
    pass


class InvalidMemberDataError(RoomsServiceError):
    """Raised for unusable data when creating a member directly."""
    pass


class StaffNotFoundError(RoomsServiceError):
    """Raised when a staff entry does not exist in the room."""
    pass


class InsufficientPermissionsError(RoomsServiceError):
    """Raised when user lacks permissions for an operation."""
    pass
