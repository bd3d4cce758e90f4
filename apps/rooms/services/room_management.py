"""
Room management service.

Creating, inspecting, re-coding and deleting rooms.
"""

import logging
from typing import Dict

from django.db import transaction, IntegrityError

from apps.accounts.models import User, RoomStatus
from apps.accounts.services import invalidate_user, invalidate_users
from apps.rooms.models import Room, RoomMembership, MembershipStatus, generate_khata_id

from .exceptions import (
    AlreadyInRoomError,
    DuplicateRoomError,
    InsufficientPermissionsError,
    RoomNotFoundError,
)

logger = logging.getLogger(__name__)


def get_room(*, khata_id: str) -> Room:
    """
    Get a room by its public code.

    Raises:
        RoomNotFoundError: If no room has this code
    """
    try:
        return Room.objects.select_related('manager').get(khata_id=khata_id)
    except Room.DoesNotExist:
        raise RoomNotFoundError("Room not found")


def _require_manager(room: Room, user: User) -> None:
    if room.manager_id != user.id and not (user.is_master_manager and user.room_id == room.id):
        raise InsufficientPermissionsError("Only the room manager can do this")


@transaction.atomic
def create_room(*, manager: User, name: str, khata_id: str) -> Room:
    """
    Create a room and make the caller its approved manager.

    Args:
        manager: User with the Manager (or MasterManager) role
        name: Display name
        khata_id: Public room code chosen by the manager

    Returns:
        Created Room instance

    Raises:
        InsufficientPermissionsError: Caller is not a manager
        AlreadyInRoomError: Caller already lives in a room
        DuplicateRoomError: Code already taken
    """
    if not manager.is_manager:
        raise InsufficientPermissionsError("Only managers can create rooms")

    manager = User.objects.select_for_update().get(id=manager.id)
    if manager.room_id is not None:
        raise AlreadyInRoomError("You already have a room")

    if Room.objects.filter(khata_id=khata_id).exists():
        raise DuplicateRoomError("Room ID already exists")

    try:
        with transaction.atomic():
            room = Room.objects.create(name=name, khata_id=khata_id, manager=manager)
    except IntegrityError:
        raise DuplicateRoomError("Room ID already exists")

    RoomMembership.objects.create(room=room, user=manager, status=MembershipStatus.APPROVED)
    manager.room = room
    manager.room_status = RoomStatus.APPROVED
    manager.save(update_fields=['room', 'room_status', 'updated_at'])
    invalidate_user(manager.id)

    logger.info("Room %s created by %s", room.khata_id, manager.id)
    return room


def get_room_details(*, khata_id: str, user: User) -> Dict:
    """
    Room details with manager and member count.

    Raises:
        RoomNotFoundError: Unknown code
        InsufficientPermissionsError: Caller is neither manager nor approved member
    """
    room = get_room(khata_id=khata_id)
    if room.manager_id != user.id and not user.belongs_to(room.khata_id):
        raise InsufficientPermissionsError("Not authorized to view this room")

    return {
        'room': room,
        'member_count': room.memberships.filter(status=MembershipStatus.APPROVED).count(),
    }


@transaction.atomic
def delete_room(*, khata_id: str, user: User) -> None:
    """
    Delete a room and everything recorded in it.

    Every resident is reset to NoRoom first; bills, meals, deposits,
    expenses, periods and notifications cascade with the room.

    Raises:
        RoomNotFoundError: Unknown code
        InsufficientPermissionsError: Caller is not the room manager
    """
    try:
        room = Room.objects.select_for_update().get(khata_id=khata_id)
    except Room.DoesNotExist:
        raise RoomNotFoundError("Room not found")

    if room.manager_id != user.id:
        raise InsufficientPermissionsError("Only the room manager can delete the room")

    affected = list(room.residents.values_list('id', flat=True))
    affected.append(room.manager_id)

    User.objects.filter(id__in=affected).update(room=None, room_status=RoomStatus.NO_ROOM)
    room.delete()
    invalidate_users(affected)

    logger.info("Room %s deleted by %s (%d users reset)", khata_id, user.id, len(set(affected)))


@transaction.atomic
def regenerate_room_code(*, khata_id: str, user: User, max_retries: int = 5) -> str:
    """
    Give the room a fresh random 6-character code.

    Residents reference the room by key, so they follow the new code;
    only their cached sessions need refreshing.

    Returns:
        The new code

    Raises:
        RoomNotFoundError: Unknown code
        InsufficientPermissionsError: Caller is not the room manager
        RuntimeError: If a unique code cannot be found
    """
    try:
        room = Room.objects.select_for_update().get(khata_id=khata_id)
    except Room.DoesNotExist:
        raise RoomNotFoundError("Room not found")

    _require_manager(room, user)

    for _ in range(max_retries):
        new_code = generate_khata_id()
        if not Room.objects.filter(khata_id=new_code).exists():
            break
    else:
        raise RuntimeError(f"Failed to generate unique room code after {max_retries} attempts")

    room.khata_id = new_code
    room.save(update_fields=['khata_id', 'updated_at'])
    invalidate_users(room.residents.values_list('id', flat=True))

    logger.info("Room code %s regenerated as %s", khata_id, new_code)
    return new_code


def get_pending_counts(*, room: Room) -> Dict[str, int]:
    """Items waiting for the manager: join requests, deposits, expenses, bill payments."""
    from apps.bills.models import BillShare, ShareStatus
    from apps.ledger.models import Deposit, Expense
    from apps.core.approvals import ApprovalStatus

    breakdown = {
        'members': room.memberships.filter(status=MembershipStatus.PENDING).count(),
        'expenses': Expense.objects.filter(room=room, status=ApprovalStatus.PENDING).count(),
        'deposits': Deposit.objects.filter(room=room, status=ApprovalStatus.PENDING).count(),
        'bill_payments': BillShare.objects.filter(
            bill__room=room, status=ShareStatus.PENDING_APPROVAL
        ).count(),
    }
    return {'total': sum(breakdown.values()), 'breakdown': breakdown}
