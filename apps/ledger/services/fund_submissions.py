"""
Deposit and expense submissions.

Members submit deposits and expenses as Pending. The room manager
approves or rejects them through the shared approval state machine.
"""

import logging
from decimal import Decimal
from typing import List
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.accounts.permissions import manages_room
from apps.ledger.models import Deposit, Expense, ExpenseCategory
from apps.notifications.services import notify_user, realtime, after_commit
from apps.periods.services import get_active_period
from apps.rooms.models import Room

from .exceptions import (
    DepositNotFoundError,
    ExpenseNotFoundError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


def list_deposits(*, room: Room) -> List[Deposit]:
    return list(
        Deposit.objects
        .filter(room=room)
        .select_related('user', 'approved_by')
        .order_by('-created_at')
    )


def list_expenses(*, room: Room) -> List[Expense]:
    return list(
        Expense.objects
        .filter(room=room)
        .select_related('user', 'approved_by')
        .order_by('-created_at')
    )


@transaction.atomic
def create_deposit(
    *,
    user: User,
    room: Room,
    amount: Decimal,
    payment_method: str,
    transaction_id: str = '',
    screenshot_url: str = '',
    notes: str = '',
) -> Deposit:
    """
    Submit a deposit for the manager's approval.

    Returns:
        Pending Deposit attached to the active period, if any
    """
    deposit = Deposit.objects.create(
        room=room,
        user=user,
        user_name=user.name,
        amount=amount,
        payment_method=payment_method,
        transaction_id=transaction_id or '',
        screenshot_url=screenshot_url or '',
        notes=notes or '',
        calculation_period=get_active_period(room),
    )

    notify_user(
        user_id=room.manager_id,
        room_id=room.id,
        title='New Deposit Pending',
        message=f'{user.name} submitted a deposit of ৳{amount} for approval.',
        event='new-deposit',
        link='/shopping',
        related_id=deposit.id,
        action_text='Review Deposit',
    )
    after_commit(realtime.push_to_manager, room.manager_id, realtime.NEW_DEPOSIT, {
        'deposit_id': deposit.id,
        'user_name': user.name,
        'amount': str(amount),
    })

    logger.info("Deposit %s of %s submitted by %s in room %s", deposit.id, amount, user.id, room.khata_id)
    return deposit


@transaction.atomic
def create_expense(
    *,
    user: User,
    room: Room,
    amount: Decimal,
    items: str,
    notes: str = '',
    receipt_url: str = '',
    category: str = ExpenseCategory.SHOPPING,
) -> Expense:
    """
    Submit an expense for the manager's approval.

    Returns:
        Pending Expense attached to the active period, if any
    """
    expense = Expense.objects.create(
        room=room,
        user=user,
        user_name=user.name,
        amount=amount,
        items=items,
        notes=notes or '',
        receipt_url=receipt_url or '',
        category=category or ExpenseCategory.SHOPPING,
        calculation_period=get_active_period(room),
    )

    notify_user(
        user_id=room.manager_id,
        room_id=room.id,
        title='New Expense Pending',
        message=f'{user.name} submitted an expense of ৳{amount} for approval.',
        event='new-expense',
        link='/shopping',
        related_id=expense.id,
        action_text='Review Expense',
    )
    after_commit(realtime.push_to_manager, room.manager_id, realtime.NEW_EXPENSE, {
        'expense_id': expense.id,
        'user_name': user.name,
        'amount': str(amount),
    })

    logger.info("Expense %s of %s submitted by %s in room %s", expense.id, amount, user.id, room.khata_id)
    return expense


def _lock(model, not_found, record_id: UUID, room: Room, actor: User):
    if not manages_room(actor, room):
        raise InsufficientPermissionsError("Manager access required")
    try:
        return model.objects.select_for_update().get(id=record_id, room=room)
    except model.DoesNotExist:
        raise not_found(f"{model.approval_label} not found")


def _announce_review(record, room: Room, approved: bool, reason: str = '') -> None:
    kind = record.approval_label.lower()
    verdict = 'approved' if approved else 'rejected'
    message = f'Your {kind} of ৳{record.amount} was {verdict}.'
    if not approved and reason:
        message += f' Reason: {reason}'

    notify_user(
        user_id=record.user_id,
        room_id=room.id,
        title=f'{record.approval_label} {verdict.capitalize()}',
        message=message,
        event=f'{kind}-{verdict}',
        link='/shopping',
        related_id=record.id,
        action_text=f'View {record.approval_label}s',
    )
    event = getattr(realtime, f'{kind.upper()}_{verdict.upper()}')
    after_commit(realtime.push_to_user, record.user_id, event, {
        f'{kind}_id': record.id,
        'amount': str(record.amount),
        'status': record.status,
        'reason': reason or '',
    })


@transaction.atomic
def approve_deposit(*, deposit_id: UUID, room: Room, actor: User) -> Deposit:
    """
    Raises:
        InsufficientPermissionsError: Caller does not manage the room
        DepositNotFoundError: No such deposit in the room
        InvalidTransitionError: Deposit is no longer pending
    """
    deposit = _lock(Deposit, DepositNotFoundError, deposit_id, room, actor)
    deposit.approve(actor)
    _announce_review(deposit, room, approved=True)
    logger.info("Deposit %s approved by %s", deposit.id, actor.id)
    return deposit


@transaction.atomic
def reject_deposit(*, deposit_id: UUID, room: Room, actor: User, reason: str = '') -> Deposit:
    """
    Raises:
        InsufficientPermissionsError: Caller does not manage the room
        DepositNotFoundError: No such deposit in the room
        InvalidTransitionError: Deposit is no longer pending
    """
    deposit = _lock(Deposit, DepositNotFoundError, deposit_id, room, actor)
    deposit.reject(actor, reason)
    _announce_review(deposit, room, approved=False, reason=reason)
    logger.info("Deposit %s rejected by %s", deposit.id, actor.id)
    return deposit


@transaction.atomic
def approve_expense(*, expense_id: UUID, room: Room, actor: User) -> Expense:
    """
    Raises:
        InsufficientPermissionsError: Caller does not manage the room
        ExpenseNotFoundError: No such expense in the room
        InvalidTransitionError: Expense is no longer pending
    """
    expense = _lock(Expense, ExpenseNotFoundError, expense_id, room, actor)
    expense.approve(actor)
    _announce_review(expense, room, approved=True)
    logger.info("Expense %s approved by %s", expense.id, actor.id)
    return expense


@transaction.atomic
def reject_expense(*, expense_id: UUID, room: Room, actor: User, reason: str = '') -> Expense:
    """
    Raises:
        InsufficientPermissionsError: Caller does not manage the room
        ExpenseNotFoundError: No such expense in the room
        InvalidTransitionError: Expense is no longer pending
    """
    expense = _lock(Expense, ExpenseNotFoundError, expense_id, room, actor)
    expense.reject(actor, reason)
    _announce_review(expense, room, approved=False, reason=reason)
    logger.info("Expense %s rejected by %s", expense.id, actor.id)
    return expense
