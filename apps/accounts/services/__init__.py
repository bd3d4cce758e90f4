"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    InvalidOTPError,
    AlreadyVerifiedError,
    RateLimitedError,
    UserNotFoundError,
    PasswordChangeError,
    InsufficientPermissionsError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, issue_tokens, rotate_tokens
from .password_reset import request_password_reset, confirm_password_reset
from .email_verification import verify_user_email, resend_verification_otp
from .account_management import update_profile, change_password, update_member_as_admin
from .session_cache import cache_user, get_cached_user, invalidate_user, invalidate_users, load_user

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    'InvalidOTPError',
    'AlreadyVerifiedError',
    'RateLimitedError',
    'UserNotFoundError',
    'PasswordChangeError',
    'InsufficientPermissionsError',
    # Services
    'register_user',
    'authenticate_user',
    'issue_tokens',
    'rotate_tokens',
    'request_password_reset',
    'confirm_password_reset',
    'verify_user_email',
    'resend_verification_otp',
    'update_profile',
    'change_password',
    'update_member_as_admin',
    # Session cache
    'cache_user',
    'get_cached_user',
    'invalidate_user',
    'invalidate_users',
    'load_user',
]
