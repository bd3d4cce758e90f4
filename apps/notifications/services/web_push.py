"""
Browser Web Push delivery with VAPID.

Expired endpoints (404/410 from the push service) are deleted so they are
not retried. Other failures are logged and ignored.
"""

import json
import logging

import requests
from django.conf import settings
from pywebpush import webpush, WebPushException

from ..models import PushSubscription

logger = logging.getLogger(__name__)

PUSH_TTL_SECONDS = 86400
GONE_STATUS_CODES = (404, 410)


def build_payload(title: str, body: str, url: str = '/dashboard') -> dict:
    return {
        'title': title,
        'body': body,
        'data': {'url': url or '/dashboard'},
    }


def is_configured() -> bool:
    return bool(settings.VAPID_PRIVATE_KEY)


def send_to_subscription(subscription: PushSubscription, payload: dict) -> bool:
    """
    Deliver one payload to one endpoint.

    Returns:
        True if the push service accepted the message
    """
    if not is_configured():
        logger.debug("VAPID keys not configured; skipped push to %s", subscription.user_id)
        return False

    try:
        webpush(
            subscription_info=subscription.as_subscription_info(),
            data=json.dumps(payload),
            vapid_private_key=settings.VAPID_PRIVATE_KEY,
            vapid_claims={'sub': settings.VAPID_SUBJECT},
            ttl=PUSH_TTL_SECONDS,
        )
    except WebPushException as e:
        status_code = e.response.status_code if e.response is not None else None
        if status_code in GONE_STATUS_CODES:
            logger.info("Removing expired push subscription %s", subscription.id)
            subscription.delete()
        else:
            logger.warning("Web push to %s failed: %s", subscription.user_id, e)
        return False
    except requests.RequestException as e:
        logger.warning("Web push to %s failed: %s", subscription.user_id, e)
        return False
    return True


def send_to_user(user_id, payload: dict) -> int:
    """Deliver to every subscription of a user. Returns the number delivered."""
    delivered = 0
    for subscription in PushSubscription.objects.filter(user_id=user_id):
        if send_to_subscription(subscription, payload):
            delivered += 1
    return delivered


def send_to_room(room, payload: dict, exclude_user_id=None) -> int:
    """Deliver to all approved residents of a room."""
    subscriptions = PushSubscription.objects.filter(
        user__room=room,
        user__room_status='Approved',
    )
    if exclude_user_id is not None:
        subscriptions = subscriptions.exclude(user_id=exclude_user_id)

    delivered = 0
    for subscription in subscriptions:
        if send_to_subscription(subscription, payload):
            delivered += 1
    return delivered
