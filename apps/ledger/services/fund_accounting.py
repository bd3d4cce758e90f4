"""
Meal fund accounting.

The meal rate is the cost of one meal: approved shopping divided by the
number of meals eaten in the room. A member's balance is what they paid
in, minus their meals at that rate, minus bills settled from the fund.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List
from uuid import UUID

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.permissions import manages_room
from apps.core.approvals import ApprovalStatus
from apps.ledger.models import Deposit, Expense, ExpenseCategory, PaymentMethod
from apps.meals.models import Meal
from apps.notifications.services import notify_user, realtime, after_commit
from apps.rooms.models import Room

from .exceptions import (
    InsufficientPermissionsError,
    InvalidAdjustmentError,
    MemberNotFoundError,
)

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
CENT = Decimal('0.01')

ADJUST_ADD = 'ADD'
ADJUST_DEDUCT = 'DEDUCT'


def money(value) -> Decimal:
    return Decimal(value or 0).quantize(CENT, rounding=ROUND_HALF_UP)


def _total(queryset, field='amount'):
    return queryset.aggregate(total=Sum(field))['total'] or ZERO


def _per_user(queryset, field='amount') -> Dict[UUID, Decimal]:
    return {
        row['user_id']: row['total'] or ZERO
        for row in queryset.values('user_id').annotate(total=Sum(field))
    }


def meal_rate(total_cost: Decimal, total_meals) -> Decimal:
    """Cost per meal; 0 when no meals were eaten."""
    if not total_meals:
        return ZERO
    return Decimal(total_cost) / Decimal(total_meals)


def get_balances(*, room: Room) -> Dict:
    """
    Per-member meal fund balances.

    Returns:
        Dict with ``rate``, ``total_shopping``, ``total_meals`` and a
        ``balances`` list with deposits, meals, meal cost, bill payments
        and balance for each approved member
    """
    approved_expenses = Expense.objects.filter(room=room, status=ApprovalStatus.APPROVED)
    meals = Meal.objects.filter(room=room)

    total_shopping = _total(approved_expenses.filter(category=ExpenseCategory.SHOPPING))
    total_meals = _total(meals, 'total_meals')
    rate = meal_rate(total_shopping, total_meals)

    deposits = _per_user(Deposit.objects.filter(room=room, status=ApprovalStatus.APPROVED))
    member_meals = _per_user(meals, 'total_meals')
    bill_payments = _per_user(approved_expenses.filter(category=ExpenseCategory.BILL_PAYMENT))

    balances = []
    for member in room.approved_members().order_by('name'):
        total_deposits = deposits.get(member.id, ZERO)
        meal_count = member_meals.get(member.id, 0)
        meal_cost = rate * meal_count
        paid_bills = bill_payments.get(member.id, ZERO)
        balances.append({
            'user_id': member.id,
            'name': member.name,
            'email': member.email,
            'avatar_url': member.avatar_url,
            'total_deposits': money(total_deposits),
            'total_meals': meal_count,
            'meal_cost': money(meal_cost),
            'total_bill_payments': money(paid_bills),
            'balance': money(total_deposits - meal_cost - paid_bills),
        })

    return {
        'rate': money(rate),
        'total_shopping': money(total_shopping),
        'total_meals': total_meals,
        'balances': balances,
    }


def get_fund_summary(*, room: Room, user: User) -> Dict:
    """
    Room fund status plus the caller's own summary.

    Here every approved expense counts as spending, bill payments and
    adjustments included.
    """
    total_deposits = _total(Deposit.objects.filter(room=room, status=ApprovalStatus.APPROVED))
    total_shopping = _total(Expense.objects.filter(room=room, status=ApprovalStatus.APPROVED))
    meals = Meal.objects.filter(room=room)
    rate = meal_rate(total_shopping, _total(meals, 'total_meals'))

    member_deposits = _total(Deposit.objects.filter(room=room, user=user, status=ApprovalStatus.APPROVED))
    member_cost = rate * _total(meals.filter(user=user), 'total_meals')

    return {
        'fund_status': {
            'total_deposits': money(total_deposits),
            'total_shopping': money(total_shopping),
            'balance': money(total_deposits - total_shopping),
            'rate': money(rate),
        },
        'member_summary': {
            'total_deposits': money(member_deposits),
            'meal_cost': money(member_cost),
            'refundable': money(member_deposits - member_cost),
        },
    }


def get_meal_balance(*, user_id: UUID, requested_by: User) -> Dict:
    """
    A user's approved deposits minus approved expenses.

    Raises:
        InsufficientPermissionsError: Caller is neither the user nor a
            manager of the user's room
    """
    if str(user_id) != str(requested_by.id):
        allowed = (
            manages_room(requested_by, requested_by.room)
            and User.objects.filter(id=user_id, room_id=requested_by.room_id).exists()
        )
        if not allowed:
            raise InsufficientPermissionsError("Not authorized")

    total_deposits = _total(Deposit.objects.filter(user_id=user_id, status=ApprovalStatus.APPROVED))
    total_expenses = _total(Expense.objects.filter(user_id=user_id, status=ApprovalStatus.APPROVED))
    return {
        'balance': money(total_deposits - total_expenses),
        'total_deposits': money(total_deposits),
        'total_expenses': money(total_expenses),
    }


@transaction.atomic
def adjust_fund(
    *,
    room: Room,
    actor: User,
    user_id: UUID,
    adjustment_type: str,
    amount: Decimal,
    reason: str = '',
):
    """
    Add to or deduct from a member's fund without a review step.

    ADD records an approved Manager Adjustment deposit; DEDUCT records an
    approved Adjustment expense.

    Returns:
        The created Deposit or Expense

    Raises:
        InvalidAdjustmentError: Missing fields or unknown type
        MemberNotFoundError: Target is not an approved member of the room
    """
    if not user_id or not adjustment_type or not amount:
        raise InvalidAdjustmentError("Missing required fields")
    if adjustment_type not in (ADJUST_ADD, ADJUST_DEDUCT):
        raise InvalidAdjustmentError("Invalid type")

    try:
        member = room.approved_members().get(id=user_id)
    except (User.DoesNotExist, ValueError):
        raise MemberNotFoundError("Member not found in this room")

    common = {
        'room': room,
        'user': member,
        'user_name': member.name,
        'amount': amount,
        'status': ApprovalStatus.APPROVED,
        'approved_by': actor,
        'approved_at': timezone.now(),
    }
    if adjustment_type == ADJUST_ADD:
        record = Deposit(
            payment_method=PaymentMethod.MANAGER_ADJUSTMENT,
            transaction_id='MANUAL',
            notes=reason or 'Fund added by manager',
            **common,
        )
        message = f'Manager added ৳{amount} to your fund. Reason: {reason or "Adjustment"}'
    else:
        record = Expense(
            items=reason or 'Fund Deduction',
            category=ExpenseCategory.ADJUSTMENT,
            notes='Fund deducted by manager',
            **common,
        )
        message = f'Manager deducted ৳{amount} from your fund. Reason: {reason or "Adjustment"}'

    record.save()

    notify_user(
        user_id=member.id,
        room_id=room.id,
        title='Fund Adjustment',
        message=message,
        event='deposit-adjusted' if adjustment_type == ADJUST_ADD else 'expense-adjusted',
        link='/shopping',
        related_id=record.id,
    )
    after_commit(realtime.push_to_room, room.khata_id, realtime.FUND_UPDATE, {'type': 'update'})

    logger.info("Fund %s of %s for %s in room %s by %s", adjustment_type, amount, member.id, room.khata_id, actor.id)
    return record


def list_shopping_members(*, room: Room) -> List[Dict]:
    return [
        {'id': member.id, 'name': member.name}
        for member in room.approved_members().order_by('name')
    ]
