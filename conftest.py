import pytest
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, Role, RoomStatus
from apps.notifications.services import realtime
from apps.rooms.models import Room, RoomMembership, MembershipStatus


@pytest.fixture(autouse=True)
def fresh_cache():
    """Cached users, throttles and the realtime client never leak between tests."""
    cache.clear()
    realtime.get_client.cache_clear()
    yield
    cache.clear()
    realtime.get_client.cache_clear()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for():
    """Return a factory building a JWT-authenticated client for a user."""
    def _client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _client


@pytest.fixture
def make_user(db):
    """Return a factory for verified users."""
    def _make(email, name='Test User', role=Role.MEMBER, **extra):
        extra.setdefault('is_verified', True)
        return User.objects.create_user(
            email=email,
            password='TestPass123!',
            name=name,
            role=role,
            **extra,
        )
    return _make


def add_to_room(user, room, status=MembershipStatus.APPROVED):
    """Place a user in a room with the given membership status."""
    RoomMembership.objects.create(room=room, user=user, status=status)
    user.room = room
    user.room_status = RoomStatus.APPROVED if status == MembershipStatus.APPROVED else RoomStatus.PENDING
    user.save(update_fields=['room', 'room_status'])
    return user


@pytest.fixture
def manager(make_user):
    """Create and return a manager (room is attached by the room fixture)."""
    return make_user('manager@example.com', name='Rahim Manager', role=Role.MANAGER)


@pytest.fixture
def room(manager):
    """Create a room managed by ``manager`` with an approved membership."""
    room = Room.objects.create(khata_id='FLAT42', name='Flat 42', manager=manager)
    add_to_room(manager, room)
    return room


@pytest.fixture
def member(make_user, room):
    """Create and return an approved member of ``room``."""
    return add_to_room(make_user('member@example.com', name='Karim Member'), room)


@pytest.fixture
def second_member(make_user, room):
    """Create and return another approved member of ``room``."""
    return add_to_room(make_user('second@example.com', name='Salma Second'), room)


@pytest.fixture
def pending_user(make_user, room):
    """Create and return a user whose join request to ``room`` is pending."""
    return add_to_room(
        make_user('pending@example.com', name='Pending User'), room, status=MembershipStatus.PENDING
    )


@pytest.fixture
def outsider(make_user):
    """Create and return a verified user without a room."""
    return make_user('outsider@example.com', name='Outside User')


@pytest.fixture
def other_room(make_user):
    """A second room with its own manager."""
    other_manager = make_user('othermanager@example.com', name='Other Manager', role=Role.MANAGER)
    room = Room.objects.create(khata_id='OTHER1', name='Other Flat', manager=other_manager)
    add_to_room(other_manager, room)
    return room


@pytest.fixture
def manager_client(client_for, manager, room):
    """Return API client authenticated as the room manager."""
    return client_for(manager)


@pytest.fixture
def member_client(client_for, member):
    """Return API client authenticated as an approved member."""
    return client_for(member)


@pytest.fixture
def room_master(make_user, room):
    """Create and return a master manager living in ``room``."""
    return add_to_room(make_user('roommaster@example.com', name='Room Master', role=Role.MASTER_MANAGER), room)


@pytest.fixture
def pending_manager(make_user, room):
    """Create and return a Manager-role user whose join request to ``room`` is pending."""
    return add_to_room(
        make_user('pendingmanager@example.com', name='Pending Manager', role=Role.MANAGER),
        room,
        status=MembershipStatus.PENDING,
    )
