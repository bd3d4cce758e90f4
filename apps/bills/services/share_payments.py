"""
Bill share payment workflow.

A member reports a payment by moving their share to Pending Approval;
the manager confirms it by marking the share Paid. Managers may set any
status directly.
"""

import logging
from decimal import Decimal
from typing import Dict
from uuid import UUID

from django.db import transaction
from django.db.models import Sum

from apps.accounts.models import User
from apps.accounts.permissions import manages_room
from apps.bills.models import Bill, BillShare, ShareStatus
from apps.notifications.services import notify_user, realtime, after_commit
from apps.rooms.models import Room

from .exceptions import (
    BillNotFoundError,
    InsufficientPermissionsError,
    InvalidShareStatusError,
    ShareNotFoundError,
)

logger = logging.getLogger(__name__)

UNPAID_STATUSES = (ShareStatus.UNPAID, ShareStatus.OVERDUE)


@transaction.atomic
def update_share_status(*, bill_id: UUID, user_id: UUID, new_status: str, actor: User) -> Bill:
    """
    Change the status of one member's share.

    Args:
        bill_id: Bill the share belongs to
        user_id: Owner of the share
        new_status: One of ShareStatus
        actor: Caller; a non-manager may only send their own share to
            Pending Approval

    Returns:
        The bill, with shares reloaded

    Raises:
        InvalidShareStatusError: Unknown status
        BillNotFoundError: Unknown bill
        InsufficientPermissionsError: Caller outside the room, or a member
            changing another share or choosing a status other than Pending Approval
        ShareNotFoundError: The bill has no share for this user
    """
    if new_status not in ShareStatus.values:
        raise InvalidShareStatusError("Invalid status")

    try:
        bill = Bill.objects.select_related('room').get(id=bill_id)
    except Bill.DoesNotExist:
        raise BillNotFoundError("Bill not found")

    room = bill.room
    if not actor.belongs_to(room.khata_id):
        raise InsufficientPermissionsError("Not authorized")

    try:
        share = BillShare.objects.select_for_update().get(bill=bill, user_id=user_id)
    except BillShare.DoesNotExist:
        raise ShareNotFoundError("Share not found")

    is_manager = manages_room(actor, room)
    if not is_manager:
        if str(user_id) != str(actor.id):
            raise InsufficientPermissionsError("You can only update your own share")
        if new_status != ShareStatus.PENDING_APPROVAL:
            raise InsufficientPermissionsError("Members can only mark their share as Pending Approval")

    previous = share.status
    share.status = new_status
    share.save(update_fields=['status', 'updated_at'])

    _announce_share_change(bill, room, share, actor, is_manager, previous)

    logger.info("Share of %s on bill %s set to %s by %s", user_id, bill.id, new_status, actor.id)
    bill.refresh_from_db()
    return bill


def _announce_share_change(
    bill: Bill, room: Room, share: BillShare, actor: User, actor_is_manager: bool, previous: str
) -> None:
    if share.status == ShareStatus.PENDING_APPROVAL:
        notify_user(
            user_id=room.manager_id,
            room_id=room.id,
            title='Bill Payment Pending',
            message=f'{actor.name} reported paying ৳{share.amount} for "{bill.title}".',
            event='bill-payment',
            link='/pending-approvals',
            related_id=bill.id,
            action_text='Review Payment',
        )
        after_commit(realtime.push_to_manager, room.manager_id, realtime.NEW_BILL_PAYMENT, {
            'bill_id': bill.id,
            'user_id': share.user_id,
            'user_name': share.user_name,
            'amount': str(share.amount),
        })
        return

    if share.status == ShareStatus.UNPAID and previous == ShareStatus.PENDING_APPROVAL:
        if actor_is_manager and share.user_id != actor.id:
            notify_user(
                user_id=share.user_id,
                room_id=room.id,
                title='Bill Payment Rejected',
                message=f'Your payment of ৳{share.amount} for "{bill.title}" was not confirmed.',
                event='bill-rejected',
                link='/bills',
                related_id=bill.id,
            )
            after_commit(realtime.push_to_user, share.user_id, realtime.BILL_REJECTED, {
                'bill_id': bill.id,
                'title': bill.title,
                'amount': str(share.amount),
            })
        return

    if share.status != ShareStatus.PAID:
        return

    if actor.id != bill.created_by_id:
        notify_user(
            user_id=room.manager_id,
            room_id=room.id,
            title='Payment Received',
            message=f'{actor.name} has paid their share (৳{share.amount}) for "{bill.title}".',
            event='payment',
            link='/bills',
            related_id=bill.id,
            action_text='View Bill',
        )

    if actor_is_manager and share.user_id != actor.id:
        notify_user(
            user_id=share.user_id,
            room_id=room.id,
            title='Bill Payment Approved',
            message=f'Your payment of ৳{share.amount} for "{bill.title}" has been approved.',
            event='bill-approved',
            link='/bills',
            related_id=bill.id,
        )
        after_commit(realtime.push_to_user, share.user_id, realtime.BILL_APPROVED, {
            'bill_id': bill.id,
            'title': bill.title,
            'amount': str(share.amount),
        })


@transaction.atomic
def remind_unpaid(*, bill_id: UUID, actor: User) -> int:
    """
    Notify every member whose share is still Unpaid or Overdue.

    Returns:
        Number of members reminded

    Raises:
        BillNotFoundError: Unknown bill
        InsufficientPermissionsError: Caller does not manage the bill's room
    """
    try:
        bill = Bill.objects.select_related('room').get(id=bill_id)
    except Bill.DoesNotExist:
        raise BillNotFoundError("Bill not found")

    if not manages_room(actor, bill.room):
        raise InsufficientPermissionsError("Not authorized to send reminders for this bill")

    unpaid = list(bill.shares.filter(status__in=UNPAID_STATUSES))
    for share in unpaid:
        notify_user(
            user_id=share.user_id,
            room_id=bill.room_id,
            title='Payment Reminder',
            message=(
                f'Reminder: You have an unpaid {bill.category} bill "{bill.title}" of '
                f'৳{share.amount:.2f}. Due date: {bill.due_date:%d %b %Y}'
            ),
            event='bill-reminder',
            link='/bills',
            related_id=bill.id,
        )
    return len(unpaid)


def get_bill_stats(*, room: Room, user: User) -> Dict:
    """Totals of the caller's shares by status, plus pending approvals."""
    own = BillShare.objects.filter(bill__room=room, user=user)

    def total(status):
        return own.filter(status=status).aggregate(total=Sum('amount'))['total'] or Decimal('0')

    pending = BillShare.objects.filter(bill__room=room, status=ShareStatus.PENDING_APPROVAL)
    if not manages_room(user, room):
        pending = pending.filter(user=user)

    return {
        'total_unpaid': total(ShareStatus.UNPAID),
        'total_paid': total(ShareStatus.PAID),
        'total_overdue': total(ShareStatus.OVERDUE),
        'pending_approvals': pending.count(),
    }
