"""Login and token lifecycle."""

from typing import Dict, Tuple

from django.contrib.auth import authenticate, get_user_model
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import InvalidCredentialsError, InactiveAccountError, InvalidTokenError
from .session_cache import cache_user, load_user

User = get_user_model()


def issue_tokens(user) -> Dict[str, str]:
    """Create a refresh/access pair for the user."""
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


def authenticate_user(*, email: str, password: str, request=None) -> User:
    """
    Check credentials and stamp the login time.

    Raises:
        InvalidCredentialsError: If email/password do not match
        InactiveAccountError: If the account is deactivated
    """
    email = (email or '').strip().lower()
    user = authenticate(request, username=email, password=password)

    if user is None:
        # ModelBackend refuses inactive users, tell them apart
        candidate = User.objects.filter(email=email, is_active=False).first()
        if candidate is not None and candidate.check_password(password):
            raise InactiveAccountError("Account is deactivated")
        raise InvalidCredentialsError("Invalid credentials")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    cache_user(user)
    return user


def rotate_tokens(*, raw_refresh: str) -> Tuple[User, Dict[str, str]]:
    """
    Exchange a refresh token for a fresh token pair.

    Raises:
        InvalidTokenError: If the token is missing, invalid, expired, not a
            refresh token, or its user no longer exists
    """
    if not raw_refresh:
        raise InvalidTokenError("No refresh token provided")

    try:
        refresh = RefreshToken(raw_refresh)
    except TokenError as e:
        raise InvalidTokenError(str(e))

    user = load_user(refresh.get(api_settings.USER_ID_CLAIM))
    if user is None or not user.is_active:
        raise InvalidTokenError("User not found")

    return user, issue_tokens(user)
