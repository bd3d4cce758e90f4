"""
Manager-triggered reminders.

Each reminder type has a fixed title, message and link, and a rule for
who receives it. The manager may override the recipients and the text.
"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from apps.accounts.models import User
from apps.accounts.permissions import manages_room
from apps.bills.models import Bill, BillShare, ShareStatus
from apps.core.dates import weekday_name
from apps.meals.models import ShoppingDuty
from apps.rooms.models import Room
from .dispatch import notify_users
from .exceptions import InsufficientPermissionsError, InvalidReminderError

logger = logging.getLogger(__name__)

REMINDER_MESSAGES = {
    'add_meal': {
        'title': 'Meal Reminder',
        'message': "Don't forget to add your meal entries for today!",
        'link': '/meals',
    },
    'pay_bill': {
        'title': 'Bill Payment Reminder',
        'message': 'You have pending bills to pay. Please review and pay them.',
        'link': '/payment-dashboard',
    },
    'approve_deposit': {
        'title': 'Deposit Approval Needed',
        'message': 'You have deposits waiting for your approval.',
        'link': '/pending-approvals',
    },
    'approve_expense': {
        'title': 'Expense Approval Needed',
        'message': 'You have expenses waiting for your approval.',
        'link': '/pending-approvals',
    },
    'shopping': {
        'title': 'Shopping Reminder',
        'message': "You're on shopping duty today! Don't forget to shop for the room.",
        'link': '/shopping',
    },
}

UNPAID_STATUSES = (ShareStatus.UNPAID, ShareStatus.OVERDUE)


def _recipients(reminder_type: str, room: Room, sender: User, bill_id: Optional[UUID]) -> List:
    if reminder_type == 'add_meal':
        return list(room.approved_members().exclude(id=sender.id).values_list('id', flat=True))

    if reminder_type == 'pay_bill':
        shares = BillShare.objects.filter(bill__room=room, status__in=UNPAID_STATUSES)
        if bill_id:
            if not Bill.objects.filter(id=bill_id, room=room).exists():
                return []
            shares = shares.filter(bill_id=bill_id)
        return list(shares.values_list('user_id', flat=True).distinct())

    if reminder_type in ('approve_deposit', 'approve_expense'):
        return [sender.id]

    # shopping: today's shopper on the latest roster
    duty = ShoppingDuty.objects.filter(room=room).order_by('-week_start').first()
    if duty is None:
        return []
    assignment = duty.assignments.filter(day=weekday_name(), user__isnull=False).first()
    return [assignment.user_id] if assignment else []


def send_reminder(
    *,
    sender: User,
    khata_id: str,
    reminder_type: str,
    target_user_ids: Optional[List[UUID]] = None,
    bill_id: Optional[UUID] = None,
    message: str = '',
) -> Dict:
    """
    Send a reminder to the members it concerns.

    Args:
        sender: Manager of the room
        khata_id: Room the reminder is about
        reminder_type: One of REMINDER_MESSAGES
        target_user_ids: Explicit recipients, replacing the default rule
        bill_id: Limits pay_bill to one bill
        message: Replaces the default text

    Returns:
        Dict with ``sent`` (number of recipients) and ``type``

    Raises:
        InvalidReminderError: Unknown reminder type
        InsufficientPermissionsError: Sender does not manage this room
    """
    config = REMINDER_MESSAGES.get(reminder_type)
    if config is None:
        raise InvalidReminderError("Invalid reminder type")

    room = sender.room
    if room is None or room.khata_id != khata_id or not manages_room(sender, room):
        raise InsufficientPermissionsError("You can only send reminders to your own room")

    recipients = _recipients(reminder_type, room, sender, bill_id)
    if target_user_ids:
        recipients = list(
            room.approved_members().filter(id__in=target_user_ids).values_list('id', flat=True)
        )

    if not recipients:
        return {'sent': 0, 'type': reminder_type}

    notify_users(
        user_ids=recipients,
        room_id=room.id,
        title=config['title'],
        message=message or config['message'],
        event='reminder',
        link=config['link'],
    )
    logger.info("Reminder %s sent to %d user(s) in room %s", reminder_type, len(recipients), khata_id)
    return {'sent': len(recipients), 'type': reminder_type}
