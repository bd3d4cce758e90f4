import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Role
from apps.accounts.services.otp import is_locked, reset_throttle

from .conftest import KNOWN_OTP


# =============================================================================
# Signup Tests
# =============================================================================

@pytest.mark.django_db
class TestSignup:
    """Tests for POST /api/auth/signup/"""

    def test_signup_success(self, api_client, fixed_otp, mailoutbox):
        """Successfully register a new user."""
        url = reverse('accounts:signup')
        data = {
            'name': 'New User',
            'email': 'NewUser@Example.com',
            'password': 'SecurePass123!',
            'role': 'Member',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['email'] == 'newuser@example.com'
        assert response.data['user']['is_verified'] is False
        assert 'accessToken' in response.cookies

        user = User.objects.get(email='newuser@example.com')
        assert user.role == Role.MEMBER
        assert user.otp and user.otp != KNOWN_OTP

        assert len(mailoutbox) == 1
        assert KNOWN_OTP in mailoutbox[0].body

    def test_signup_as_manager(self, api_client):
        """A new account may pick the Manager role."""
        url = reverse('accounts:signup')
        data = {
            'name': 'New Manager',
            'email': 'newmanager@example.com',
            'password': 'SecurePass123!',
            'role': 'Manager',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['role'] == 'Manager'

    def test_signup_cannot_pick_master_manager(self, api_client):
        """MasterManager is not a self-service role."""
        url = reverse('accounts:signup')
        data = {
            'name': 'Sneaky',
            'email': 'sneaky@example.com',
            'password': 'SecurePass123!',
            'role': 'MasterManager',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not User.objects.filter(email='sneaky@example.com').exists()

    def test_signup_duplicate_email(self, api_client, user):
        """Cannot register with existing email."""
        url = reverse('accounts:signup')
        data = {
            'name': 'Copy Cat',
            'email': user.email.upper(),
            'password': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'User already exists'

    def test_signup_weak_password(self, api_client):
        """Registration fails with a short password."""
        url = reverse('accounts:signup')
        data = {
            'name': 'Weak User',
            'email': 'weak@example.com',
            'password': '123',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data

    def test_signup_short_name(self, api_client):
        """Names need at least two characters."""
        url = reverse('accounts:signup')
        data = {
            'name': 'A',
            'email': 'short@example.com',
            'password': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'name' in response.data


# =============================================================================
# Login / Logout / Refresh Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Successfully login with valid credentials."""
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['id'] == str(user.id)
        assert 'access' in response.data['tokens']
        assert 'refreshToken' in response.cookies

        user.refresh_from_db()
        assert user.last_login is not None

    def test_login_wrong_password(self, api_client, user):
        """Login fails with wrong password."""
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': user.email, 'password': 'WrongPass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid credentials'

    def test_login_nonexistent_user(self, api_client):
        """Login fails for non-existent user."""
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': 'nobody@example.com', 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, api_client, inactive_user):
        """Login is refused for a deactivated account."""
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': inactive_user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout/"""

    def test_logout_clears_cookies(self, authenticated_client):
        url = reverse('accounts:logout')
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.cookies['accessToken'].value == ''
        assert response.cookies['refreshToken'].value == ''

    def test_logout_unauthenticated(self, api_client):
        response = api_client.post(reverse('accounts:logout'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestRefresh:
    """Tests for POST /api/auth/refresh/"""

    def test_refresh_with_body_token(self, api_client, user):
        login = api_client.post(reverse('accounts:login'), {'email': user.email, 'password': 'TestPass123!'})
        refresh = login.data['tokens']['refresh']

        response = api_client.post(reverse('accounts:refresh'), {'refresh': refresh})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['id'] == str(user.id)
        assert 'access' in response.data['tokens']

    def test_refresh_with_cookie(self, api_client, user):
        """The refresh cookie set at login is enough."""
        api_client.post(reverse('accounts:login'), {'email': user.email, 'password': 'TestPass123!'})

        response = api_client.post(reverse('accounts:refresh'))

        assert response.status_code == status.HTTP_200_OK

    def test_refresh_missing_token(self, api_client):
        response = api_client.post(reverse('accounts:refresh'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_invalid_token(self, api_client):
        response = api_client.post(reverse('accounts:refresh'), {'refresh': 'not-a-token'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.cookies['refreshToken'].value == ''


@pytest.mark.django_db
class TestGetCurrentUser:
    """Tests for GET /api/auth/me/"""

    def test_get_current_user(self, authenticated_client, user):
        response = authenticated_client.get(reverse('accounts:me'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['name'] == 'Test User'
        assert response.data['khata_id'] is None
        assert response.data['room_status'] == 'NoRoom'

    def test_room_member_sees_khata_id(self, member_client, room):
        response = member_client.get(reverse('accounts:me'))

        assert response.data['khata_id'] == room.khata_id
        assert response.data['room_status'] == 'Approved'

    def test_get_current_user_unauthenticated(self, api_client):
        response = api_client.get(reverse('accounts:me'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestSessionResolution:
    """Tests for resolving the caller from the header or the access cookie."""

    def test_access_cookie_alone(self, api_client, user):
        api_client.cookies['accessToken'] = str(RefreshToken.for_user(user).access_token)

        response = api_client.get(reverse('accounts:me'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email

    def test_header_wins_over_cookie(self, client_for, user, master_manager):
        client = client_for(master_manager)
        client.cookies['accessToken'] = str(RefreshToken.for_user(user).access_token)

        response = client.get(reverse('accounts:me'))

        assert response.data['email'] == master_manager.email

    def test_refresh_token_as_bearer_rejected(self, api_client, user):
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {RefreshToken.for_user(user)}')

        response = api_client.get(reverse('accounts:me'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_garbage_cookie_rejected(self, api_client):
        api_client.cookies['accessToken'] = 'not-a-token'

        response = api_client.get(reverse('accounts:me'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Email Verification Tests
# =============================================================================

@pytest.mark.django_db
class TestEmailVerification:
    """Tests for POST /api/auth/verify-email/"""

    def test_verify_email_success(self, api_client, unverified_user):
        url = reverse('accounts:verify-email')
        response = api_client.post(url, {'email': unverified_user.email, 'otp': KNOWN_OTP})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['is_verified'] is True
        assert 'access' in response.data['tokens']

        unverified_user.refresh_from_db()
        assert unverified_user.is_verified
        assert unverified_user.otp is None

    def test_verify_email_wrong_code(self, api_client, unverified_user):
        url = reverse('accounts:verify-email')
        response = api_client.post(url, {'email': unverified_user.email, 'otp': '000000'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid OTP'

    def test_verify_email_already_verified(self, api_client, user):
        url = reverse('accounts:verify-email')
        response = api_client.post(url, {'email': user.email, 'otp': KNOWN_OTP})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Email is already verified'

    def test_verify_email_malformed_code(self, api_client, unverified_user):
        url = reverse('accounts:verify-email')
        response = api_client.post(url, {'email': unverified_user.email, 'otp': '12ab'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'otp' in response.data

    def test_verify_email_rate_limited(self, api_client, unverified_user):
        """Repeated wrong codes lock the address out."""
        url = reverse('accounts:verify-email')
        for _ in range(5):
            api_client.post(url, {'email': unverified_user.email, 'otp': '000000'})

        response = api_client.post(url, {'email': unverified_user.email, 'otp': KNOWN_OTP})

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        unverified_user.refresh_from_db()
        assert not unverified_user.is_verified

    def test_lock_after_five_failures(self, api_client, unverified_user):
        url = reverse('accounts:verify-email')
        for _ in range(5):
            response = api_client.post(url, {'email': unverified_user.email, 'otp': '000000'})
            assert response.status_code == status.HTTP_400_BAD_REQUEST

        key = f'verify:{unverified_user.email}'
        assert is_locked(key)

        # Clearing the attempt counter leaves the lock in place
        reset_throttle(key)
        response = api_client.post(url, {'email': unverified_user.email, 'otp': KNOWN_OTP})

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert 'failed attempts' in response.data['error']

    def test_resend_otp(self, api_client, unverified_user, fixed_otp, mailoutbox):
        url = reverse('accounts:resend-otp')
        response = api_client.post(url, {'email': unverified_user.email})

        assert response.status_code == status.HTTP_200_OK
        assert len(mailoutbox) == 1
        assert fixed_otp in mailoutbox[0].body

    def test_resend_otp_unknown_email_is_quiet(self, api_client, mailoutbox):
        url = reverse('accounts:resend-otp')
        response = api_client.post(url, {'email': 'ghost@example.com'})

        assert response.status_code == status.HTTP_200_OK
        assert len(mailoutbox) == 0

    def test_resend_otp_rate_limited(self, api_client, unverified_user):
        url = reverse('accounts:resend-otp')
        for _ in range(3):
            api_client.post(url, {'email': unverified_user.email})

        response = api_client.post(url, {'email': unverified_user.email})

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS


# =============================================================================
# Password Reset Tests
# =============================================================================

@pytest.mark.django_db
class TestPasswordReset:
    """Tests for forgot-password and reset-password."""

    def test_forgot_password_sends_code(self, api_client, user, fixed_otp, mailoutbox):
        url = reverse('accounts:forgot-password')
        response = api_client.post(url, {'email': user.email})

        assert response.status_code == status.HTTP_200_OK
        assert len(mailoutbox) == 1
        assert fixed_otp in mailoutbox[0].body

    def test_forgot_password_same_answer_for_unknown_email(self, api_client, user, mailoutbox):
        url = reverse('accounts:forgot-password')
        known = api_client.post(url, {'email': user.email})
        unknown = api_client.post(url, {'email': 'ghost@example.com'})

        assert known.data == unknown.data

    def test_forgot_password_rate_limited(self, api_client, user, mailoutbox):
        url = reverse('accounts:forgot-password')
        for _ in range(3):
            assert api_client.post(url, {'email': user.email}).status_code == status.HTTP_200_OK

        response = api_client.post(url, {'email': user.email})

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert len(mailoutbox) == 3
        assert len(mailoutbox) == 1

    def test_reset_password_with_code(self, api_client, user, fixed_otp):
        api_client.post(reverse('accounts:forgot-password'), {'email': user.email})

        response = api_client.post(reverse('accounts:reset-password'), {
            'email': user.email,
            'otp': fixed_otp,
            'new_password': 'BrandNewPass456!',
        })

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.check_password('BrandNewPass456!')
        assert user.otp is None

    def test_reset_password_wrong_code(self, api_client, user, fixed_otp):
        api_client.post(reverse('accounts:forgot-password'), {'email': user.email})

        response = api_client.post(reverse('accounts:reset-password'), {
            'email': user.email,
            'otp': '999999',
            'new_password': 'BrandNewPass456!',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        user.refresh_from_db()
        assert user.check_password('TestPass123!')

    def test_reset_password_weak_password(self, api_client, user, fixed_otp):
        api_client.post(reverse('accounts:forgot-password'), {'email': user.email})

        response = api_client.post(reverse('accounts:reset-password'), {
            'email': user.email,
            'otp': fixed_otp,
            'new_password': 'short',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestProfile:
    """Tests for /api/user/profile/ and /api/user/change-password/"""

    def test_update_name_and_phone(self, authenticated_client, user):
        url = reverse('accounts:profile')
        response = authenticated_client.patch(url, {'name': 'Updated Name', 'phone': '01700000000'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Updated Name'

        user.refresh_from_db()
        assert user.phone == '01700000000'

    def test_food_preferences_are_merged(self, authenticated_client, user):
        url = reverse('accounts:profile')
        authenticated_client.patch(url, {'food_preferences': {'likes': ['biryani']}}, format='json')
        response = authenticated_client.patch(
            url, {'food_preferences': {'dislikes': ['karela']}}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['food_preferences']['likes'] == ['biryani']
        assert response.data['food_preferences']['dislikes'] == ['karela']

    def test_update_is_visible_on_next_request(self, authenticated_client):
        """The cached session user is refreshed after an update."""
        authenticated_client.get(reverse('accounts:me'))
        authenticated_client.patch(reverse('accounts:profile'), {'name': 'Fresh Name'})

        response = authenticated_client.get(reverse('accounts:me'))

        assert response.data['name'] == 'Fresh Name'

    def test_cannot_update_email(self, authenticated_client, user):
        response = authenticated_client.patch(reverse('accounts:profile'), {'email': 'new@example.com'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.email == 'testuser@example.com'

    def test_update_profile_unauthenticated(self, api_client):
        response = api_client.patch(reverse('accounts:profile'), {'name': 'Nope'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_change_password(self, authenticated_client, user):
        url = reverse('accounts:change-password')
        response = authenticated_client.post(url, {
            'current_password': 'TestPass123!',
            'new_password': 'AnotherPass789!',
        })

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.check_password('AnotherPass789!')

    def test_change_password_wrong_current(self, authenticated_client):
        url = reverse('accounts:change-password')
        response = authenticated_client.post(url, {
            'current_password': 'WrongPass123!',
            'new_password': 'AnotherPass789!',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Current password is incorrect'

    def test_change_password_same_as_current(self, authenticated_client):
        url = reverse('accounts:change-password')
        response = authenticated_client.post(url, {
            'current_password': 'TestPass123!',
            'new_password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Master Manager Administration Tests
# =============================================================================

@pytest.mark.django_db
class TestAdminUpdateMember:
    """Tests for PUT /api/admin/members/<user_id>/"""

    def test_master_manager_edits_member(self, client_for, master_manager, user):
        url = reverse('accounts:admin-update-member', kwargs={'user_id': user.id})
        response = client_for(master_manager).patch(url, {'name': 'Renamed', 'role': 'Manager'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.name == 'Renamed'
        assert user.role == Role.MANAGER

    def test_setting_password_clears_dummy_flag(self, client_for, master_manager, make_user):
        dummy = make_user('dummy@example.com', name='Dummy', is_dummy_account=True)
        url = reverse('accounts:admin-update-member', kwargs={'user_id': dummy.id})

        response = client_for(master_manager).patch(url, {'password': 'RealPass2024!'})

        assert response.status_code == status.HTTP_200_OK
        dummy.refresh_from_db()
        assert not dummy.is_dummy_account
        assert dummy.check_password('RealPass2024!')

    def test_email_must_be_unique(self, client_for, master_manager, user, make_user):
        other = make_user('other@example.com', name='Other')
        url = reverse('accounts:admin-update-member', kwargs={'user_id': other.id})

        response = client_for(master_manager).patch(url, {'email': user.email})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cannot_change_own_role(self, client_for, master_manager):
        url = reverse('accounts:admin-update-member', kwargs={'user_id': master_manager.id})
        response = client_for(master_manager).patch(url, {'role': 'Member'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_member(self, client_for, master_manager):
        url = reverse(
            'accounts:admin-update-member',
            kwargs={'user_id': '00000000-0000-0000-0000-000000000000'},
        )
        response = client_for(master_manager).patch(url, {'name': 'Ghost'})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_regular_manager_forbidden(self, manager_client, member):
        url = reverse('accounts:admin-update-member', kwargs={'user_id': member.id})
        response = manager_client.patch(url, {'name': 'Nope'})

        assert response.status_code == status.HTTP_403_FORBIDDEN
