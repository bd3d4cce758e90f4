import pytest
from datetime import date
from decimal import Decimal
from django.utils import timezone

from apps.core.approvals import ApprovalStatus
from apps.ledger.models import Deposit, Expense
from apps.meals.models import Meal


def approved(model, *, room, user, approver, **fields):
    """Create an already approved deposit or expense."""
    return model.objects.create(
        room=room,
        user=user,
        user_name=user.name,
        status=ApprovalStatus.APPROVED,
        approved_by=approver,
        approved_at=timezone.now(),
        **fields,
    )


@pytest.fixture
def pending_deposit(room, member):
    return Deposit.objects.create(
        room=room, user=member, user_name=member.name,
        amount=Decimal('750.00'), payment_method='bKash', transaction_id='TX123',
    )


@pytest.fixture
def pending_expense(room, member):
    return Expense.objects.create(
        room=room, user=member, user_name=member.name,
        amount=Decimal('320.00'), items='Rice, lentils',
    )


@pytest.fixture
def funded_room(room, manager, member):
    """
    Member deposited 1000, manager shopped for 600, six meals were eaten
    (member 4, manager 2), so one meal costs 100.
    """
    approved(Deposit, room=room, user=member, approver=manager,
             amount=Decimal('1000.00'), payment_method='Cash')
    approved(Expense, room=room, user=manager, approver=manager,
             amount=Decimal('600.00'), items='Weekly bazar')
    Meal.objects.create(room=room, user=member, user_name=member.name,
                        date=date(2025, 3, 1), breakfast=1, lunch=1, dinner=2)
    Meal.objects.create(room=room, user=manager, user_name=manager.name,
                        date=date(2025, 3, 1), lunch=1, dinner=1)
    return room
