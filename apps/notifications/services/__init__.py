"""
Notifications app services layer.

Every other app reports state changes through ``notify_user`` and the
``realtime`` channel helpers; gateway calls are deferred to commit time.
"""

from .exceptions import (
    NotificationsServiceError,
    NotificationNotFoundError,
    InvalidReminderError,
    InsufficientPermissionsError,
)

from . import realtime, web_push

from .dispatch import (
    notification_type_for,
    notify_user,
    notify_users,
    after_commit,
)

from .inbox import (
    list_notifications,
    unread_count,
    create_notification,
    mark_read,
    mark_all_read,
    delete_notification,
)

from .subscriptions import (
    subscribe,
    unsubscribe,
    send_test_push,
)

from .reminders import (
    REMINDER_MESSAGES,
    send_reminder,
)


__all__ = [
    # Exceptions
    'NotificationsServiceError',
    'NotificationNotFoundError',
    'InvalidReminderError',
    'InsufficientPermissionsError',
    # Gateways
    'realtime',
    'web_push',
    # Dispatch
    'notification_type_for',
    'notify_user',
    'notify_users',
    'after_commit',
    # Inbox
    'list_notifications',
    'unread_count',
    'create_notification',
    'mark_read',
    'mark_all_read',
    'delete_notification',
    # Push subscriptions
    'subscribe',
    'unsubscribe',
    'send_test_push',
    # Reminders
    'REMINDER_MESSAGES',
    'send_reminder',
]
