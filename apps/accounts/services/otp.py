"""
One-time codes and attempt throttling.

Codes are six digits, stored with Django's password hasher and expire after
``OTP_EXPIRY_MINUTES``. Attempt counters live in the Django cache.
"""

import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.core.cache import cache
from django.utils import timezone

from .exceptions import RateLimitedError


def generate_otp() -> str:
    return f'{secrets.randbelow(1_000_000):06d}'


def issue_otp(user) -> str:
    """Store a fresh hashed code on the user and return the plain code."""
    code = generate_otp()
    user.otp = make_password(code)
    user.otp_expires_at = timezone.now() + timedelta(minutes=settings.OTP_EXPIRY_MINUTES)
    user.save(update_fields=['otp', 'otp_expires_at', 'updated_at'])
    return code


def otp_expired(user) -> bool:
    return user.otp_expires_at is None or timezone.now() > user.otp_expires_at


def otp_matches(user, code: str) -> bool:
    if not user.otp or not code:
        return False
    return check_password(str(code), user.otp)


def clear_otp(user) -> None:
    user.otp = None
    user.otp_expires_at = None


def throttle(key: str, *, limit: int, window: int, message: str) -> None:
    """
    Count one attempt under ``key`` and refuse once ``limit`` is exceeded.

    Raises:
        RateLimitedError: If more than ``limit`` attempts happened in ``window`` seconds
    """
    cache_key = f'rate:{key}'
    if cache.add(cache_key, 1, timeout=window):
        return
    try:
        attempts = cache.incr(cache_key)
    except ValueError:
        # Expired between add() and incr()
        cache.add(cache_key, 1, timeout=window)
        return
    if attempts > limit:
        raise RateLimitedError(message)


def reset_throttle(key: str) -> None:
    cache.delete(f'rate:{key}')


def is_locked(key: str) -> bool:
    return cache.get(f'lock:{key}') is not None


def lock(key: str, *, seconds: int) -> None:
    cache.set(f'lock:{key}', True, timeout=seconds)


def record_failure(key: str, *, limit: int, lock_seconds: int) -> bool:
    """Count a failed attempt; lock ``key`` once ``limit`` failures accumulate."""
    cache_key = f'fail:{key}'
    if cache.add(cache_key, 1, timeout=lock_seconds):
        failures = 1
    else:
        try:
            failures = cache.incr(cache_key)
        except ValueError:
            cache.add(cache_key, 1, timeout=lock_seconds)
            failures = 1
    if failures >= limit:
        lock(key, seconds=lock_seconds)
        cache.delete(cache_key)
        return True
    return False


def clear_failures(key: str) -> None:
    cache.delete(f'fail:{key}')
