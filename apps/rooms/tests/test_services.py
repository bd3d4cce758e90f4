"""
Service layer unit tests for rooms app.

Tests cover:
- Room lifecycle
- Join, approve, reject and leave
- Direct member creation
- Side effects deferred to commit
"""

import pytest
from unittest.mock import patch

from apps.accounts.models import User, Role, RoomStatus
from apps.core.exceptions import InvalidTransitionError
from apps.notifications.models import Notification
from apps.rooms.models import Room, RoomMembership, MembershipStatus
from apps.rooms.services import (
    create_room,
    get_room_details,
    delete_room,
    regenerate_room_code,
    get_pending_counts,
    join_room,
    approve_member,
    reject_member,
    leave_room,
    list_members,
    create_member,
    add_staff,
    update_staff,
    remove_staff,
)
from apps.rooms.services.exceptions import (
    AlreadyInRoomError,
    DuplicateRoomError,
    InsufficientPermissionsError,
    InvalidMemberDataError,
    ManagerCannotLeaveError,
    MemberNotFoundError,
    NotMemberError,
    RoomNotFoundError,
    StaffNotFoundError,
)


# =============================================================================
# Room Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestRoomManagement:
    """Tests for room_management.py service functions."""

    def test_create_room_makes_manager_approved(self, manager):
        room = create_room(manager=manager, name='Green Villa', khata_id='GREEN1')

        manager.refresh_from_db()
        assert manager.room == room
        assert manager.room_status == RoomStatus.APPROVED
        assert RoomMembership.objects.get(room=room, user=manager).status == MembershipStatus.APPROVED

    def test_member_cannot_create_room(self, outsider):
        with pytest.raises(InsufficientPermissionsError):
            create_room(manager=outsider, name='Nope', khata_id='NOPE1')

    def test_manager_with_room_cannot_create_another(self, manager, room):
        with pytest.raises(AlreadyInRoomError):
            create_room(manager=manager, name='Second', khata_id='SECOND')

    def test_duplicate_code(self, room, make_user):
        other = make_user('another@example.com', role=Role.MANAGER)

        with pytest.raises(DuplicateRoomError):
            create_room(manager=other, name='Copy', khata_id=room.khata_id)

    def test_room_details_counts_approved_members(self, room, member, pending_user):
        details = get_room_details(khata_id=room.khata_id, user=member)

        assert details['room'] == room
        assert details['member_count'] == 2

    def test_room_details_hidden_from_outsiders(self, room, outsider):
        with pytest.raises(InsufficientPermissionsError):
            get_room_details(khata_id=room.khata_id, user=outsider)

    def test_room_details_unknown_code(self, outsider):
        with pytest.raises(RoomNotFoundError):
            get_room_details(khata_id='MISSING', user=outsider)

    def test_delete_room_resets_residents(self, room, manager, member, pending_user):
        delete_room(khata_id=room.khata_id, user=manager)

        assert not Room.objects.filter(id=room.id).exists()
        for user in (manager, member, pending_user):
            user.refresh_from_db()
            assert user.room is None
            assert user.room_status == RoomStatus.NO_ROOM

    def test_only_manager_deletes_room(self, room, member):
        with pytest.raises(InsufficientPermissionsError):
            delete_room(khata_id=room.khata_id, user=member)

    def test_regenerate_code(self, room, manager, member):
        new_code = regenerate_room_code(khata_id='FLAT42', user=manager)

        room.refresh_from_db()
        member.refresh_from_db()
        assert room.khata_id == new_code
        assert len(new_code) == 6
        assert member.khata_id == new_code

    def test_pending_counts(self, room, pending_user):
        counts = get_pending_counts(room=room)

        assert counts['breakdown']['members'] == 1
        assert counts['total'] == 1


# =============================================================================
# Membership Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestMembershipManagement:
    """Tests for membership_management.py service functions."""

    def test_join_room_creates_pending_request(self, room, manager, outsider):
        membership = join_room(user=outsider, khata_id=room.khata_id)

        outsider.refresh_from_db()
        assert membership.status == MembershipStatus.PENDING
        assert outsider.room == room
        assert outsider.room_status == RoomStatus.PENDING
        assert Notification.objects.filter(user=manager, title='New Join Request').exists()

    def test_join_room_twice(self, room, pending_user):
        with pytest.raises(AlreadyInRoomError, match='pending'):
            join_room(user=pending_user, khata_id=room.khata_id)

    def test_join_while_in_another_room(self, room, member, other_room):
        with pytest.raises(AlreadyInRoomError):
            join_room(user=member, khata_id=other_room.khata_id)

    def test_join_unknown_room(self, outsider):
        with pytest.raises(RoomNotFoundError):
            join_room(user=outsider, khata_id='NOPE99')

    def test_join_pushes_to_manager_after_commit(self, room, manager, outsider, django_capture_on_commit_callbacks):
        with patch('apps.notifications.services.realtime.push_to_manager') as push, \
                patch('apps.notifications.services.realtime.push_to_user'), \
                patch('apps.notifications.services.web_push.send_to_user'):
            with django_capture_on_commit_callbacks(execute=True):
                join_room(user=outsider, khata_id=room.khata_id)

        push.assert_called_once()
        assert push.call_args[0][0] == manager.id

    def test_approve_member(self, room, manager, pending_user):
        membership = approve_member(khata_id=room.khata_id, user_id=pending_user.id, approved_by=manager)

        pending_user.refresh_from_db()
        assert membership.status == MembershipStatus.APPROVED
        assert pending_user.room_status == RoomStatus.APPROVED
        assert Notification.objects.filter(user=pending_user, room=room).count() == 1

    def test_member_cannot_approve(self, room, member, pending_user):
        with pytest.raises(InsufficientPermissionsError):
            approve_member(khata_id=room.khata_id, user_id=pending_user.id, approved_by=member)

    def test_approve_without_request(self, room, manager, outsider):
        with pytest.raises(MemberNotFoundError):
            approve_member(khata_id=room.khata_id, user_id=outsider.id, approved_by=manager)

    def test_approve_twice(self, room, manager, pending_user):
        approve_member(khata_id=room.khata_id, user_id=pending_user.id, approved_by=manager)

        with pytest.raises(InvalidTransitionError):
            approve_member(khata_id=room.khata_id, user_id=pending_user.id, approved_by=manager)
        with pytest.raises(InvalidTransitionError):
            reject_member(khata_id=room.khata_id, user_id=pending_user.id, rejected_by=manager)

        assert RoomMembership.objects.get(user=pending_user).status == MembershipStatus.APPROVED

    def test_reject_member(self, room, manager, pending_user):
        reject_member(khata_id=room.khata_id, user_id=pending_user.id, rejected_by=manager)

        pending_user.refresh_from_db()
        assert pending_user.room is None
        assert pending_user.room_status == RoomStatus.NO_ROOM
        assert not RoomMembership.objects.filter(user=pending_user).exists()
        assert Notification.objects.filter(user=pending_user, room=room, title='Join Request Declined').exists()

    def test_leave_room(self, room, member):
        leave_room(khata_id=room.khata_id, user=member)

        member.refresh_from_db()
        assert member.room is None
        assert not RoomMembership.objects.filter(user=member).exists()

    def test_pending_user_can_withdraw(self, room, pending_user):
        leave_room(khata_id=room.khata_id, user=pending_user)

        pending_user.refresh_from_db()
        assert pending_user.room_status == RoomStatus.NO_ROOM

    def test_manager_cannot_leave(self, room, manager):
        with pytest.raises(ManagerCannotLeaveError):
            leave_room(khata_id=room.khata_id, user=manager)

    def test_outsider_cannot_leave(self, room, outsider):
        with pytest.raises(NotMemberError):
            leave_room(khata_id=room.khata_id, user=outsider)

    def test_list_members_excludes_pending(self, room, manager, member, pending_user):
        members = list_members(room=room)

        assert {user.id for user in members} == {manager.id, member.id}


@pytest.mark.django_db
class TestCreateMember:
    """Direct member creation by a master manager."""

    @pytest.fixture
    def master(self, room_master):
        return room_master

    def test_create_member_without_credentials(self, room, master):
        result = create_member(khata_id=room.khata_id, created_by=master, name='Cook Bhai')

        member = result['member']
        credentials = result['generated_credentials']
        assert member.is_dummy_account
        assert member.room_status == RoomStatus.APPROVED
        assert credentials['email'].endswith('@dummy.local')
        assert member.check_password(credentials['password'])

    def test_create_member_with_credentials(self, room, master):
        result = create_member(
            khata_id=room.khata_id,
            created_by=master,
            name='Real Person',
            email='Real@Example.com',
            password='RealPass2024!',
        )

        assert result['generated_credentials'] is None
        assert result['member'].email == 'real@example.com'
        assert not result['member'].is_dummy_account

    def test_short_name(self, room, master):
        with pytest.raises(InvalidMemberDataError):
            create_member(khata_id=room.khata_id, created_by=master, name='X')

    def test_existing_email(self, room, master, member):
        with pytest.raises(InvalidMemberDataError):
            create_member(
                khata_id=room.khata_id,
                created_by=master,
                name='Copy',
                email=member.email,
                password='RealPass2024!',
            )

    def test_regular_manager_cannot(self, room, manager):
        with pytest.raises(InsufficientPermissionsError):
            create_member(khata_id=room.khata_id, created_by=manager, name='Nobody')

    def test_master_manager_of_other_room_cannot(self, room, make_user):
        stranger = make_user('strangemaster@example.com', role=Role.MASTER_MANAGER)

        with pytest.raises(InsufficientPermissionsError):
            create_member(khata_id=room.khata_id, created_by=stranger, name='Nobody')


@pytest.mark.django_db
class TestStaffManagement:
    """Tests for staff_management.py service functions."""

    def test_staff_lifecycle(self, room):
        staff = add_staff(room=room, name='Rina', designation='Cook', phone='01711111111')

        updated = update_staff(room=room, staff_id=staff.id, phone='01822222222')
        assert updated.phone == '01822222222'
        assert updated.designation == 'Cook'

        remove_staff(room=room, staff_id=staff.id)
        assert not room.staff.exists()

    def test_staff_of_other_room_not_found(self, room, other_room):
        staff = add_staff(room=other_room, name='Guard', designation='Guard', phone='1')

        with pytest.raises(StaffNotFoundError):
            update_staff(room=room, staff_id=staff.id, name='Mine now')
