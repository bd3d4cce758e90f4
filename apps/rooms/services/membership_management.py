"""
Membership management service.

Join requests, approval and rejection by the manager, leaving, and
direct member creation by a master manager.
"""

import logging
import secrets
import string
import time
from typing import Dict, List, Optional
from uuid import UUID

from django.contrib.auth.password_validation import validate_password
from django.db import transaction

from apps.accounts.models import User, Role, RoomStatus
from apps.accounts.services import invalidate_user
from apps.core.approvals import ApprovalStatus, check_transition
from apps.notifications.services import notify_user, realtime, after_commit
from apps.rooms.models import Room, RoomMembership, MembershipStatus

from .exceptions import (
    AlreadyInRoomError,
    InsufficientPermissionsError,
    InvalidMemberDataError,
    ManagerCannotLeaveError,
    MemberNotFoundError,
    NotMemberError,
    RoomNotFoundError,
)

logger = logging.getLogger(__name__)

DUMMY_EMAIL_DOMAIN = 'dummy.local'


def _lock_room(khata_id: str) -> Room:
    try:
        return Room.objects.select_for_update().get(khata_id=khata_id)
    except Room.DoesNotExist:
        raise RoomNotFoundError("Room not found")


def _require_manager(room: Room, user: User) -> None:
    if room.manager_id != user.id and not (user.is_master_manager and user.room_id == room.id):
        raise InsufficientPermissionsError("Only the room manager can do this")


@transaction.atomic
def join_room(*, user: User, khata_id: str) -> RoomMembership:
    """
    Ask to join a room by its code.

    Args:
        user: Caller without a room
        khata_id: Code shared by the manager

    Returns:
        Pending RoomMembership

    Raises:
        RoomNotFoundError: Unknown code
        AlreadyInRoomError: Caller already in a room or already asked
    """
    room = _lock_room(khata_id)
    user = User.objects.select_for_update().get(id=user.id)

    if user.room_id is not None:
        if user.room_status == RoomStatus.PENDING:
            raise AlreadyInRoomError("Join request already pending")
        raise AlreadyInRoomError("You are already in a room")

    if RoomMembership.objects.filter(room=room, user=user).exists():
        raise AlreadyInRoomError("Join request already pending")

    membership = RoomMembership.objects.create(room=room, user=user, status=MembershipStatus.PENDING)
    user.room = room
    user.room_status = RoomStatus.PENDING
    user.save(update_fields=['room', 'room_status', 'updated_at'])
    invalidate_user(user.id)

    notify_user(
        user_id=room.manager_id,
        room_id=room.id,
        title='New Join Request',
        message=f'{user.name} has requested to join your room.',
        event='room-join-request',
        link='/pending-approvals',
        related_id=user.id,
        action_text='Review Request',
    )
    after_commit(realtime.push_to_manager, room.manager_id, realtime.NEW_JOIN_REQUEST, {
        'user_id': user.id,
        'name': user.name,
        'khata_id': room.khata_id,
    })

    logger.info("User %s requested to join room %s", user.id, room.khata_id)
    return membership


def _get_request(room: Room, user_id: UUID, target: str) -> RoomMembership:
    try:
        membership = (
            RoomMembership.objects
            .select_for_update()
            .select_related('user')
            .get(room=room, user_id=user_id)
        )
    except RoomMembership.DoesNotExist:
        raise MemberNotFoundError("Join request not found")
    check_transition(membership.status, target, 'Join request')
    return membership


@transaction.atomic
def approve_member(*, khata_id: str, user_id: UUID, approved_by: User) -> RoomMembership:
    """
    Approve a pending join request.

    Raises:
        RoomNotFoundError: Unknown code
        InsufficientPermissionsError: Caller is not the room manager
        MemberNotFoundError: No request from this user
        InvalidTransitionError: The request was already approved
    """
    room = _lock_room(khata_id)
    _require_manager(room, approved_by)
    membership = _get_request(room, user_id, ApprovalStatus.APPROVED)

    membership.status = MembershipStatus.APPROVED
    membership.save(update_fields=['status'])
    User.objects.filter(id=user_id).update(room=room, room_status=RoomStatus.APPROVED)
    invalidate_user(user_id)

    notify_user(
        user_id=user_id,
        room_id=room.id,
        title='Welcome to BillKhata!',
        message=f'Your request to join room "{room.name}" has been approved.',
        event='room-approved',
        link='/dashboard',
        related_id=room.id,
        action_text='Go to Dashboard',
    )
    after_commit(realtime.push_to_user, user_id, realtime.MEMBER_APPROVED, {
        'khata_id': room.khata_id,
        'room_name': room.name,
    })

    logger.info("Member %s approved in room %s by %s", user_id, room.khata_id, approved_by.id)
    return membership


@transaction.atomic
def reject_member(*, khata_id: str, user_id: UUID, rejected_by: User) -> None:
    """
    Reject a pending join request and send the user back to NoRoom.

    Raises:
        RoomNotFoundError: Unknown code
        InsufficientPermissionsError: Caller is not the room manager
        MemberNotFoundError: No request from this user
        InvalidTransitionError: The request was already approved
    """
    room = _lock_room(khata_id)
    _require_manager(room, rejected_by)
    membership = _get_request(room, user_id, ApprovalStatus.REJECTED)

    membership.delete()
    User.objects.filter(id=user_id).update(room=None, room_status=RoomStatus.NO_ROOM)
    invalidate_user(user_id)

    # The user no longer has a room, so the notification is filed under this one.
    notify_user(
        user_id=user_id,
        room_id=room.id,
        title='Join Request Declined',
        message=f'Your request to join room "{room.name}" was declined.',
        event='room-rejected',
        related_id=room.id,
    )
    after_commit(realtime.push_to_user, user_id, realtime.MEMBER_REJECTED, {
        'khata_id': room.khata_id,
        'room_name': room.name,
    })

    logger.info("Member %s rejected from room %s by %s", user_id, room.khata_id, rejected_by.id)


@transaction.atomic
def leave_room(*, khata_id: str, user: User) -> None:
    """
    Leave a room, or withdraw a pending request.

    Raises:
        RoomNotFoundError: Unknown code
        NotMemberError: Caller is not in this room
        ManagerCannotLeaveError: Caller manages the room
    """
    room = _lock_room(khata_id)
    user = User.objects.select_for_update().get(id=user.id)

    if user.room_id != room.id:
        raise NotMemberError("You are not in this room")
    if room.manager_id == user.id:
        raise ManagerCannotLeaveError("Managers cannot leave. Use Delete Room instead.")

    RoomMembership.objects.filter(room=room, user=user).delete()
    user.reset_room()
    invalidate_user(user.id)

    notify_user(
        user_id=room.manager_id,
        room_id=room.id,
        title='Member Left',
        message=f'{user.name} has left the room.',
        event='room-member-left',
        related_id=user.id,
    )

    logger.info("User %s left room %s", user.id, room.khata_id)


def list_members(*, room: Room) -> List[User]:
    """Approved residents, manager included."""
    return list(room.approved_members().order_by('name'))


def list_pending_members(*, room: Room) -> List[RoomMembership]:
    return list(
        room.memberships
        .filter(status=MembershipStatus.PENDING)
        .select_related('user')
        .order_by('joined_at')
    )


def _dummy_email() -> str:
    suffix = ''.join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(6))
    return f"member_{int(time.time() * 1000)}_{suffix}@{DUMMY_EMAIL_DOMAIN}"


@transaction.atomic
def create_member(
    *,
    khata_id: str,
    created_by: User,
    name: str,
    email: Optional[str] = None,
    password: Optional[str] = None,
    avatar_url: str = '',
) -> Dict:
    """
    Create an approved member directly, without a join request.

    Missing credentials are generated; the account is then flagged as a
    dummy account and the generated credentials are returned once.

    Args:
        khata_id: Room to place the member in
        created_by: Master manager of that room
        name: At least 2 characters
        email: Optional real email
        password: Optional password, validated when given

    Returns:
        Dict with ``member`` (User) and ``generated_credentials`` (dict or None)

    Raises:
        InsufficientPermissionsError: Caller is not a master manager of the room
        InvalidMemberDataError: Short name or email already used
        ValidationError: Password fails validation
    """
    if created_by.role != Role.MASTER_MANAGER:
        raise InsufficientPermissionsError("Only MasterManagers can create members directly")
    if not created_by.belongs_to(khata_id):
        raise InsufficientPermissionsError("Access denied to this room")

    name = (name or '').strip()
    if len(name) < 2:
        raise InvalidMemberDataError("Name is required and must be at least 2 characters")

    room = _lock_room(khata_id)

    email = (email or '').strip().lower()
    password = (password or '').strip()
    is_dummy = not email or not password
    final_email = email or _dummy_email()
    if password:
        validate_password(password)
    final_password = password or secrets.token_urlsafe(12)

    if User.objects.filter(email=final_email).exists():
        raise InvalidMemberDataError("Email already exists. Please use a different email.")

    member = User.objects.create_user(
        email=final_email,
        password=final_password,
        name=name,
        role=Role.MEMBER,
        room=room,
        room_status=RoomStatus.APPROVED,
        is_verified=True,
        is_dummy_account=is_dummy,
        avatar_url=avatar_url or '',
    )
    RoomMembership.objects.create(room=room, user=member, status=MembershipStatus.APPROVED)

    after_commit(realtime.push_to_room, room.khata_id, realtime.MEMBER_ADDED, {
        'type': 'member-added',
        'message': f'{created_by.name} added {member.name} to the room',
        'member_name': member.name,
    })

    logger.info("Member %s created in room %s by %s", member.id, room.khata_id, created_by.id)
    return {
        'member': member,
        'generated_credentials': (
            {'email': final_email, 'password': final_password} if is_dummy else None
        ),
    }
