"""
Fan-out of user notifications.

A notification is stored first, then announced on the user's Pusher
channel and sent as a Web Push. Gateway calls run after the surrounding
transaction commits so a rollback never leaks an event.
"""

import logging
from typing import Iterable, Optional

from django.db import transaction

from apps.accounts.models import User
from ..models import Notification, NotificationType
from . import realtime, web_push

logger = logging.getLogger(__name__)

# Checked in order; the first matching keyword wins.
EVENT_TYPE_KEYWORDS = [
    ('deposit', NotificationType.DEPOSIT),
    ('expense', NotificationType.EXPENSE),
    ('bill', NotificationType.BILL),
    ('meal', NotificationType.MEAL),
    ('room', NotificationType.ROOM),
    ('payment', NotificationType.PAYMENT),
]


def notification_type_for(event: str) -> str:
    """Map an event name such as 'deposit-approved' to a notification type."""
    event = (event or '').lower()
    for keyword, notification_type in EVENT_TYPE_KEYWORDS:
        if keyword in event:
            return notification_type
    return NotificationType.BILL


def serialize_for_push(notification: Notification) -> dict:
    return {
        'id': str(notification.id),
        'type': notification.type,
        'title': notification.title,
        'message': notification.message,
        'link': notification.link,
        'action_text': notification.action_text,
        'related_id': notification.related_id,
        'read': notification.read,
        'created_at': notification.created_at.isoformat(),
    }


def deliver(notification: Notification) -> None:
    """Announce a stored notification over Pusher and Web Push."""
    realtime.push_to_user(notification.user_id, realtime.NOTIFICATION, serialize_for_push(notification))
    web_push.send_to_user(
        notification.user_id,
        web_push.build_payload(notification.title, notification.message, notification.link),
    )


def notify_user(
    *,
    user_id,
    title: str,
    message: str,
    event: str = '',
    link: str = '',
    related_id=None,
    room_id=None,
    action_text: str = '',
    notification_type: str = '',
) -> Optional[Notification]:
    """
    Store and deliver a notification for one user.

    Args:
        user_id: Recipient
        title: Short heading
        message: Body text
        event: Event name, used to derive the notification type
        link: Client route opened by the notification
        related_id: Id of the record the notification is about
        room_id: Room to file it under; defaults to the user's room
        notification_type: Stored type; derived from the event when empty

    Returns:
        The stored Notification, or None when the user has no room
    """
    if room_id is None:
        room_id = User.objects.filter(id=user_id).values_list('room_id', flat=True).first()
    if room_id is None:
        logger.info("Skipped notification '%s' for %s: user has no room", title, user_id)
        return None

    notification = Notification.objects.create(
        user_id=user_id,
        room_id=room_id,
        type=notification_type or notification_type_for(event),
        title=title,
        message=message,
        link=link or '',
        action_text=action_text or '',
        related_id=str(related_id) if related_id else '',
    )
    transaction.on_commit(lambda: deliver(notification))
    return notification


def notify_users(*, user_ids: Iterable, **kwargs) -> list:
    """notify_user for several recipients; returns the stored notifications."""
    notifications = []
    for user_id in user_ids:
        notification = notify_user(user_id=user_id, **kwargs)
        if notification is not None:
            notifications.append(notification)
    return notifications


def after_commit(func, *args, **kwargs) -> None:
    """Run a gateway call once the current transaction commits."""
    transaction.on_commit(lambda: func(*args, **kwargs))
