"""A user's stored notifications: listing, creating, reading and deleting."""

import logging
from typing import List
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from ..models import Notification
from .dispatch import notify_user
from .exceptions import InsufficientPermissionsError, NotificationNotFoundError

logger = logging.getLogger(__name__)

INBOX_LIMIT = 50


def list_notifications(*, user: User, limit: int = INBOX_LIMIT) -> List[Notification]:
    return list(Notification.objects.filter(user=user).order_by('-created_at')[:limit])


def unread_count(*, user: User) -> int:
    return Notification.objects.filter(user=user, read=False).count()


def create_notification(
    *,
    sender: User,
    title: str,
    message: str,
    recipient_id: UUID = None,
    type: str = '',
    link: str = '',
    action_text: str = '',
    related_id: str = '',
) -> Notification:
    """
    Create a notification through the API.

    Anyone may notify themself; a manager may also notify an approved
    member of their own room.

    Raises:
        InsufficientPermissionsError: Recipient is someone else and the
            sender may not notify them, or the recipient has no room
    """
    recipient_id = recipient_id or sender.id

    if str(recipient_id) != str(sender.id):
        allowed = (
            sender.is_manager
            and sender.khata_id is not None
            and User.objects.filter(
                id=recipient_id, room_id=sender.room_id, room_status='Approved'
            ).exists()
        )
        if not allowed:
            raise InsufficientPermissionsError("You can only notify members of your own room")

    notification = notify_user(
        user_id=recipient_id,
        title=title,
        message=message,
        notification_type=type,
        link=link,
        related_id=related_id,
        action_text=action_text,
    )
    if notification is None:
        raise InsufficientPermissionsError("Notifications require a room")
    return notification


def _get_own(user: User, notification_id: UUID) -> Notification:
    try:
        return Notification.objects.get(id=notification_id, user=user)
    except Notification.DoesNotExist:
        raise NotificationNotFoundError("Notification not found")


def mark_read(*, user: User, notification_id: UUID, read: bool = True) -> Notification:
    """
    Raises:
        NotificationNotFoundError: Not found among the user's notifications
    """
    notification = _get_own(user, notification_id)
    if notification.read != read:
        notification.read = read
        notification.save(update_fields=['read'])
    return notification


@transaction.atomic
def mark_all_read(*, user: User) -> int:
    return Notification.objects.filter(user=user, read=False).update(read=True)


def delete_notification(*, user: User, notification_id: UUID) -> None:
    notification = _get_own(user, notification_id)
    notification.delete()
