import pytest
from datetime import timedelta
from django.contrib.auth.hashers import make_password
from django.utils import timezone

from apps.accounts.models import Role

KNOWN_OTP = '123456'


@pytest.fixture
def fixed_otp(monkeypatch):
    """Make every issued one-time code equal ``KNOWN_OTP``."""
    monkeypatch.setattr('apps.accounts.services.otp.generate_otp', lambda: KNOWN_OTP)
    return KNOWN_OTP


@pytest.fixture
def user(make_user):
    """Create and return a verified user without a room."""
    return make_user('testuser@example.com', name='Test User')


@pytest.fixture
def unverified_user(make_user):
    """Create a user with a pending verification code ``KNOWN_OTP``."""
    return make_user(
        'unverified@example.com',
        name='Unverified User',
        is_verified=False,
        otp=make_password(KNOWN_OTP),
        otp_expires_at=timezone.now() + timedelta(minutes=10),
    )


@pytest.fixture
def inactive_user(make_user):
    """Create and return an inactive user."""
    return make_user('inactive@example.com', name='Inactive User', is_active=False)


@pytest.fixture
def master_manager(make_user):
    """Create and return a master manager."""
    return make_user('master@example.com', name='Master Manager', role=Role.MASTER_MANAGER)


@pytest.fixture
def authenticated_client(client_for, user):
    """Return an authenticated API client using JWT."""
    return client_for(user)
