"""
Real-time events over Pusher.

Channels:
    user-{user_id}       personal events (notifications, approvals)
    room-{khata_id}      everyone in a room (menu, meals, roster, funds)
    manager-{user_id}    a room manager's work queue

Delivery is best effort. A missing configuration or a failed trigger is
logged and never reaches the caller.
"""

import logging
from functools import lru_cache

import pusher
import requests
from django.conf import settings
from pusher.errors import PusherError

logger = logging.getLogger(__name__)

# Event names
NOTIFICATION = 'notification'
MEMBER_APPROVED = 'member-approved'
MEMBER_REJECTED = 'member-rejected'
MEMBER_ADDED = 'member-added'
NEW_JOIN_REQUEST = 'new-join-request'
NEW_BILL = 'new-bill'
NEW_BILL_PAYMENT = 'new-bill-payment'
BILL_APPROVED = 'bill-approved'
BILL_REJECTED = 'bill-rejected'
NEW_DEPOSIT = 'new-deposit'
DEPOSIT_APPROVED = 'deposit-approved'
DEPOSIT_REJECTED = 'deposit-rejected'
NEW_EXPENSE = 'new-expense'
EXPENSE_APPROVED = 'expense-approved'
EXPENSE_REJECTED = 'expense-rejected'
FUND_UPDATE = 'fund-update'
MENU_UPDATED = 'menu-updated'
MEAL_UPDATED = 'meal-updated'
SHOPPING_ROSTER_UPDATED = 'shopping-roster-updated'


def user_channel(user_id) -> str:
    return f'user-{user_id}'


def room_channel(khata_id) -> str:
    return f'room-{khata_id}'


def manager_channel(user_id) -> str:
    return f'manager-{user_id}'


@lru_cache(maxsize=1)
def get_client():
    """Pusher client, or None when the app is not configured."""
    if not (settings.PUSHER_APP_ID and settings.PUSHER_KEY and settings.PUSHER_SECRET):
        return None
    return pusher.Pusher(
        app_id=settings.PUSHER_APP_ID,
        key=settings.PUSHER_KEY,
        secret=settings.PUSHER_SECRET,
        cluster=settings.PUSHER_CLUSTER,
        ssl=True,
    )


def _trigger(channel: str, event: str, data: dict) -> bool:
    client = get_client()
    if client is None:
        logger.debug("Pusher not configured; skipped %s on %s", event, channel)
        return False
    try:
        client.trigger(channel, event, data)
    except (PusherError, requests.RequestException, ValueError) as e:
        logger.warning("Pusher trigger %s on %s failed: %s", event, channel, e)
        return False
    return True


def _clean(data: dict) -> dict:
    return {key: (str(value) if value is not None and not isinstance(value, (int, float, bool, str, list, dict)) else value)
            for key, value in data.items()}


def push_to_user(user_id, event: str, data: dict) -> bool:
    return _trigger(user_channel(user_id), event, _clean(data))


def push_to_room(khata_id, event: str, data: dict) -> bool:
    return _trigger(room_channel(khata_id), event, _clean(data))


def push_to_manager(user_id, event: str, data: dict) -> bool:
    return _trigger(manager_channel(user_id), event, _clean(data))
