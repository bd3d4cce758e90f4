"""
Role and room-membership permissions.

Room-scoped endpoints carry the room code as ``khata_id`` in the URL. The
caller must be an approved member of exactly that room.
"""

from rest_framework.permissions import BasePermission


class IsManager(BasePermission):
    """Permission: Manager or MasterManager role."""

    message = 'Manager access required'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_manager)


class IsMasterManager(BasePermission):
    """Permission: MasterManager role."""

    message = 'Master Manager access required'

    def has_permission(self, request, view):
        return bool(
            request.user and request.user.is_authenticated and request.user.is_master_manager
        )


class IsVerified(BasePermission):
    """Permission: email address verified."""

    message = 'Please verify your email to continue'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_verified)


class BelongsToKhata(BasePermission):
    """Permission: approved member of the room named by ``khata_id`` in the URL."""

    message = 'Access denied to this room'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.belongs_to(view.kwargs.get('khata_id'))


def manages_room(user, room) -> bool:
    """Room's own manager, or a master manager living in that room."""
    if room is None or not user.belongs_to(room.khata_id):
        return False
    return room.manager_id == user.id or user.is_master_manager


class IsKhataManager(BelongsToKhata):
    """Permission: manager of the room named by ``khata_id`` in the URL."""

    message = 'Manager access required'

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            self.message = BelongsToKhata.message
            return False
        self.message = IsKhataManager.message
        return manages_room(request.user, request.user.room)
