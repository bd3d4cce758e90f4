"""
Bill management service.

Creating, editing, deleting and listing the shared bills of a room.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.permissions import manages_room
from apps.bills.models import Bill, BillShare, BillCategory, ShareStatus
from apps.core.approvals import ApprovalStatus
from apps.ledger.models import Expense, ExpenseCategory
from apps.notifications.services import notify_users, realtime, after_commit
from apps.periods.services import get_active_period
from apps.rooms.models import Room

from .exceptions import (
    BillNotFoundError,
    InsufficientPermissionsError,
    InvalidShareError,
    NoRoomError,
)

logger = logging.getLogger(__name__)

BILL_FIELDS = ('title', 'category', 'total_amount', 'due_date', 'description', 'image_url')


def get_bill(*, bill_id: UUID) -> Bill:
    """
    Raises:
        BillNotFoundError: If the bill doesn't exist
    """
    try:
        return (
            Bill.objects
            .select_related('room', 'created_by')
            .prefetch_related('shares')
            .get(id=bill_id)
        )
    except Bill.DoesNotExist:
        raise BillNotFoundError("Bill not found")


def _resolve_share_users(room: Room, shares: List[Dict]) -> Dict[str, User]:
    user_ids = [str(share['user_id']) for share in shares]
    if len(set(user_ids)) != len(user_ids):
        raise InvalidShareError("Each member may appear only once in a bill")

    members = {
        str(member.id): member
        for member in room.approved_members().filter(id__in=user_ids)
    }
    missing = [user_id for user_id in user_ids if user_id not in members]
    if missing:
        raise InvalidShareError("Bill shares must belong to approved members of the room")
    return members


def _create_shares(bill: Bill, shares: List[Dict], members: Dict[str, User], paid_from_fund: bool) -> List[BillShare]:
    rows = []
    for share in shares:
        member = members[str(share['user_id'])]
        rows.append(BillShare(
            bill=bill,
            user=member,
            user_name=share.get('user_name') or member.name,
            amount=share['amount'],
            status=ShareStatus.PAID if paid_from_fund else (share.get('status') or ShareStatus.UNPAID),
            paid_from_meal_fund=paid_from_fund,
        ))
    return BillShare.objects.bulk_create(rows)


@transaction.atomic
def create_bill(
    *,
    user: User,
    title: str,
    category: str,
    total_amount: Decimal,
    due_date,
    shares: List[Dict],
    description: str = '',
    image_url: str = '',
    auto_deduct_from_meal_fund: bool = False,
) -> Bill:
    """
    Create a bill with its shares in the caller's room.

    When ``auto_deduct_from_meal_fund`` is set on an Others bill, every
    share is settled from the meal fund: shares are created Paid and an
    approved BillPayment expense is recorded per member.

    Args:
        user: Manager of the room
        shares: ``[{user_id, amount, status?, user_name?}]``

    Returns:
        Created Bill with shares

    Raises:
        NoRoomError: Caller has no room
        InsufficientPermissionsError: Caller is not the room manager
        InvalidShareError: A share names a user outside the room
    """
    room = user.room
    if room is None or not user.belongs_to(room.khata_id):
        raise NoRoomError("You must be in a room to create bills")
    if room.manager_id != user.id:
        raise InsufficientPermissionsError("Only the room manager can create bills")

    members = _resolve_share_users(room, shares)
    paid_from_fund = bool(auto_deduct_from_meal_fund) and category == BillCategory.OTHERS

    bill = Bill.objects.create(
        room=room,
        title=title,
        category=category,
        total_amount=total_amount,
        due_date=due_date,
        description=description or '',
        image_url=image_url or '',
        created_by=user,
    )
    created_shares = _create_shares(bill, shares, members, paid_from_fund)

    if paid_from_fund:
        period = get_active_period(room)
        now = timezone.now()
        Expense.objects.bulk_create([
            Expense(
                room=room,
                user_id=share.user_id,
                user_name=share.user_name,
                amount=share.amount,
                items=f'Bill Payment: {title}',
                notes=f'Auto-deducted from meal fund for {category} bill',
                category=ExpenseCategory.BILL_PAYMENT,
                status=ApprovalStatus.APPROVED,
                approved_by=user,
                approved_at=now,
                calculation_period=period,
            )
            for share in created_shares
        ])

    recipients = [share.user_id for share in created_shares if share.user_id != user.id]
    notify_users(
        user_ids=recipients,
        room_id=room.id,
        title='New Bill Added',
        message=f'A new bill "{title}" of ৳{total_amount} has been added.',
        event='new-bill',
        link=f'/bills/{bill.id}',
        related_id=bill.id,
    )
    after_commit(realtime.push_to_room, room.khata_id, realtime.NEW_BILL, {
        'bill_id': bill.id,
        'title': title,
        'total_amount': str(total_amount),
    })

    logger.info(
        "Bill %s created in room %s with %d share(s)%s",
        bill.id, room.khata_id, len(created_shares),
        ' (paid from meal fund)' if paid_from_fund else '',
    )
    return bill


def _lock_managed_bill(bill_id: UUID, user: User) -> Bill:
    try:
        bill = Bill.objects.select_for_update().select_related('room').get(id=bill_id)
    except Bill.DoesNotExist:
        raise BillNotFoundError("Bill not found")

    if not user.is_manager or not manages_room(user, bill.room):
        raise InsufficientPermissionsError("Not authorized to change this bill")
    return bill


@transaction.atomic
def update_bill(*, bill_id: UUID, user: User, shares: Optional[List[Dict]] = None, **changes) -> Bill:
    """
    Update a bill's fields and optionally replace its shares.

    Raises:
        BillNotFoundError: Unknown bill
        InsufficientPermissionsError: Caller does not manage the bill's room
        InvalidShareError: A new share names a user outside the room
    """
    bill = _lock_managed_bill(bill_id, user)

    updated = [field for field in BILL_FIELDS if field in changes]
    for field in updated:
        setattr(bill, field, changes[field] if changes[field] is not None else '')
    if updated:
        bill.save(update_fields=updated + ['updated_at'])

    if shares is not None:
        members = _resolve_share_users(bill.room, shares)
        bill.shares.all().delete()
        _create_shares(bill, shares, members, paid_from_fund=False)

    logger.info("Bill %s updated by %s", bill.id, user.id)
    return get_bill(bill_id=bill.id)


@transaction.atomic
def delete_bill(*, bill_id: UUID, user: User) -> None:
    """
    Raises:
        BillNotFoundError: Unknown bill
        InsufficientPermissionsError: Caller does not manage the bill's room
    """
    bill = _lock_managed_bill(bill_id, user)
    bill.delete()
    logger.info("Bill %s deleted by %s", bill_id, user.id)


def list_room_bills(*, room: Room):
    """Bills of a room, latest due date first; paginated by the caller."""
    return (
        Bill.objects
        .filter(room=room)
        .select_related('created_by')
        .prefetch_related('shares')
        .order_by('-due_date', '-created_at')
    )
