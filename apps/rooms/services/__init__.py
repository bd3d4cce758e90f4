"""
Rooms app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    RoomsServiceError,
    RoomNotFoundError,
    DuplicateRoomError,
    AlreadyInRoomError,
    NotMemberError,
    MemberNotFoundError,
    ManagerCannotLeaveError,
    InvalidMemberDataError,
    StaffNotFoundError,
    InsufficientPermissionsError,
)

from .room_management import (
    get_room,
    create_room,
    get_room_details,
    delete_room,
    regenerate_room_code,
    get_pending_counts,
)

from .membership_management import (
    join_room,
    approve_member,
    reject_member,
    leave_room,
    list_members,
    list_pending_members,
    create_member,
)

from .staff_management import (
    list_staff,
    add_staff,
    update_staff,
    remove_staff,
)


__all__ = [
    # Exceptions
    'RoomsServiceError',
    'RoomNotFoundError',
    'DuplicateRoomError',
    'AlreadyInRoomError',
    'NotMemberError',
    'MemberNotFoundError',
    'ManagerCannotLeaveError',
    'InvalidMemberDataError',
    'StaffNotFoundError',
    'InsufficientPermissionsError',
    # Room management
    'get_room',
    'create_room',
    'get_room_details',
    'delete_room',
    'regenerate_room_code',
    'get_pending_counts',
    # Membership management
    'join_room',
    'approve_member',
    'reject_member',
    'leave_room',
    'list_members',
    'list_pending_members',
    'create_member',
    # Staff
    'list_staff',
    'add_staff',
    'update_staff',
    'remove_staff',
]
