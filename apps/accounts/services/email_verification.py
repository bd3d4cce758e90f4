"""Email verification with one-time codes."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model

from .emails import send_otp_email
from .exceptions import AlreadyVerifiedError, InvalidOTPError, RateLimitedError
from .otp import (
    clear_failures,
    clear_otp,
    is_locked,
    issue_otp,
    otp_expired,
    otp_matches,
    record_failure,
    reset_throttle,
    throttle,
)
from .session_cache import invalidate_user

User = get_user_model()
logger = logging.getLogger(__name__)

VERIFY_ATTEMPTS = 5
VERIFY_WINDOW = 15 * 60
RESEND_LIMIT = 3
RESEND_WINDOW = 60


@transaction.atomic
def verify_user_email(*, email: str, otp: str) -> User:
    """
    Mark a user verified when the code matches.

    Args:
        email: Address the code was sent to
        otp: Six digit code

    Returns:
        The verified User

    Raises:
        RateLimitedError: Too many attempts, or locked out after repeated failures
        AlreadyVerifiedError: Account is already verified
        InvalidOTPError: Unknown email, wrong, missing or expired code
    """
    email = (email or '').strip().lower()
    key = f'verify:{email}'

    if is_locked(key):
        raise RateLimitedError("Too many failed attempts. Try again in 15 minutes.")
    throttle(
        key,
        limit=VERIFY_ATTEMPTS,
        window=VERIFY_WINDOW,
        message="Too many verification attempts. Try again later.",
    )

    try:
        user = User.objects.select_for_update().get(email=email)
    except User.DoesNotExist:
        raise InvalidOTPError("Invalid OTP")

    if user.is_verified:
        raise AlreadyVerifiedError("Email is already verified")

    if not user.otp or not user.otp_expires_at:
        raise InvalidOTPError("No OTP found. Please request a new one.")

    if otp_expired(user):
        raise InvalidOTPError("OTP has expired. Please request a new one.")

    if not otp_matches(user, otp):
        if record_failure(key, limit=VERIFY_ATTEMPTS, lock_seconds=VERIFY_WINDOW):
            logger.warning("Verification locked for %s after repeated failures", email)
        raise InvalidOTPError("Invalid OTP")

    user.is_verified = True
    clear_otp(user)
    user.save(update_fields=['is_verified', 'otp', 'otp_expires_at', 'updated_at'])

    reset_throttle(key)
    clear_failures(key)
    invalidate_user(user.id)
    logger.info("User %s verified their email", user.id)
    return user


def resend_verification_otp(*, email: str) -> None:
    """
    Issue and mail a new verification code.

    Unknown addresses are ignored so callers cannot probe for accounts.

    Raises:
        RateLimitedError: More than three requests in a minute
        AlreadyVerifiedError: Account is already verified
    """
    email = (email or '').strip().lower()
    throttle(
        f'resend:{email}',
        limit=RESEND_LIMIT,
        window=RESEND_WINDOW,
        message="Too many requests. Please wait a minute.",
    )

    user = User.objects.filter(email=email, is_active=True).first()
    if user is None:
        return
    if user.is_verified:
        raise AlreadyVerifiedError("Email is already verified")

    code = issue_otp(user)
    send_otp_email(user, code, purpose='verify')
