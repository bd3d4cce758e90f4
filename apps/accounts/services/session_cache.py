"""
Short-lived cache of authenticated users.

Every request resolves its user from the JWT subject. To avoid a database
hit per request the user (with its room) is kept in Django's cache for
``USER_CACHE_TIMEOUT`` seconds under ``user:{id}``. Services that change a
user, its room or its membership must call ``invalidate_user`` so the next
request sees fresh data.
"""

import logging
from typing import Iterable, Optional

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)


def _key(user_id) -> str:
    return f'user:{user_id}'


def get_cached_user(user_id):
    return cache.get(_key(user_id))


def cache_user(user) -> None:
    cache.set(_key(user.id), user, timeout=settings.USER_CACHE_TIMEOUT)


def invalidate_user(user_id) -> None:
    cache.delete(_key(user_id))


def invalidate_users(user_ids: Iterable) -> None:
    keys = [_key(user_id) for user_id in user_ids]
    if keys:
        cache.delete_many(keys)
        logger.debug("Invalidated %d cached user(s)", len(keys))


def load_user(user_id) -> Optional[object]:
    """Cached user or a fresh database read that is then cached."""
    from apps.accounts.models import User

    user = get_cached_user(user_id)
    if user is not None:
        return user
    try:
        user = User.objects.select_related('room').get(id=user_id)
    except (User.DoesNotExist, ValueError):
        return None
    cache_user(user)
    return user
