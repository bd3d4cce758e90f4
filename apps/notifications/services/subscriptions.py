"""Web Push subscription registry."""

import logging
from typing import Dict

from apps.accounts.models import User
from ..models import PushSubscription
from . import web_push
from .exceptions import NotificationNotFoundError

logger = logging.getLogger(__name__)


def subscribe(*, user: User, endpoint: str, p256dh: str, auth: str) -> PushSubscription:
    """Register a browser endpoint, taking it over if another user had it."""
    subscription, created = PushSubscription.objects.update_or_create(
        endpoint=endpoint,
        defaults={'user': user, 'p256dh': p256dh, 'auth': auth},
    )
    if created:
        logger.info("Push subscription registered for %s", user.id)
    return subscription


def unsubscribe(*, user: User, endpoint: str) -> int:
    deleted, _ = PushSubscription.objects.filter(user=user, endpoint=endpoint).delete()
    return deleted


def send_test_push(*, user: User) -> Dict[str, int]:
    """
    Send a test message to every device of the user.

    Raises:
        NotificationNotFoundError: The user has no subscriptions
    """
    subscriptions = list(PushSubscription.objects.filter(user=user))
    if not subscriptions:
        raise NotificationNotFoundError("No subscriptions found")

    payload = web_push.build_payload('Test Notification', 'This is a test notification from BillKhata!')
    success = sum(1 for subscription in subscriptions if web_push.send_to_subscription(subscription, payload))
    return {'success': success, 'failed': len(subscriptions) - success}
