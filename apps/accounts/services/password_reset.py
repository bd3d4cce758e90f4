"""Password reset service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password

from .emails import send_otp_email
from .exceptions import InvalidOTPError
from .otp import clear_otp, issue_otp, otp_expired, otp_matches, throttle
from .session_cache import invalidate_user

User = get_user_model()
logger = logging.getLogger(__name__)

RESET_LIMIT = 3
RESET_WINDOW = 60


def request_password_reset(*, email: str) -> None:
    """
    Email a reset code if an active account exists.

    The caller always answers with the same generic message, so nothing here
    reveals whether the address is registered.

    Raises:
        RateLimitedError: More than three requests per minute for this email
    """
    email = (email or '').strip().lower()
    throttle(
        f'reset:{email}',
        limit=RESET_LIMIT,
        window=RESET_WINDOW,
        message="Too many requests. Please wait a minute.",
    )

    user = User.objects.filter(email=email, is_active=True).first()
    if user is None:
        return

    code = issue_otp(user)
    send_otp_email(user, code, purpose='reset')


@transaction.atomic
def confirm_password_reset(*, email: str, otp: str, new_password: str) -> User:
    """
    Reset user password with an emailed code.

    Args:
        email: Account email
        otp: Code from the reset email
        new_password: New password (validated against AUTH_PASSWORD_VALIDATORS)

    Returns:
        User instance

    Raises:
        InvalidOTPError: If the code is wrong, missing or expired
        ValidationError: If the new password fails validation
    """
    email = (email or '').strip().lower()
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email=email, is_active=True)
        )
    except User.DoesNotExist:
        raise InvalidOTPError("Invalid or expired reset code")

    if otp_expired(user) or not otp_matches(user, otp):
        raise InvalidOTPError("Invalid or expired reset code")

    validate_password(new_password, user=user)

    # Set new password and clear code
    user.set_password(new_password)
    clear_otp(user)
    user.save(update_fields=['password', 'otp', 'otp_expires_at', 'updated_at'])

    invalidate_user(user.id)
    logger.info("Password reset for user %s", user.id)
    return user
