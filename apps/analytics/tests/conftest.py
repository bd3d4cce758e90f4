import pytest
from decimal import Decimal
from django.utils import timezone

from apps.bills.services import create_bill
from apps.core.approvals import ApprovalStatus
from apps.core.dates import today
from apps.ledger.models import Deposit, Expense
from apps.meals.models import Meal


# =============================================================================
# Room activity this month
# =============================================================================

@pytest.fixture
def analytics_bill(room, manager, member):
    """Electricity bill due today, split between manager and member."""
    return create_bill(
        user=manager,
        title='Electricity',
        category='Electricity',
        total_amount=Decimal('1200.00'),
        due_date=today(),
        shares=[
            {'user_id': manager.id, 'amount': Decimal('600.00')},
            {'user_id': member.id, 'amount': Decimal('600.00')},
        ],
    )


@pytest.fixture
def analytics_fund(room, manager, member):
    """Approved member deposit of 1000 and approved shopping of 600."""
    now = timezone.now()
    deposit = Deposit.objects.create(
        room=room, user=member, user_name=member.name, amount=Decimal('1000.00'),
        payment_method='Cash', status=ApprovalStatus.APPROVED, approved_by=manager, approved_at=now,
    )
    expense = Expense.objects.create(
        room=room, user=manager, user_name=manager.name, amount=Decimal('600.00'),
        items='Monthly bazar', status=ApprovalStatus.APPROVED, approved_by=manager, approved_at=now,
    )
    return deposit, expense


@pytest.fixture
def analytics_meals(room, manager, member):
    """Six meals today: four for the member, two for the manager."""
    return [
        Meal.objects.create(room=room, user=member, user_name=member.name,
                            date=today(), breakfast=1, lunch=1, dinner=2),
        Meal.objects.create(room=room, user=manager, user_name=manager.name,
                            date=today(), lunch=1, dinner=1),
    ]


@pytest.fixture
def analytics_all_data(analytics_bill, analytics_fund, analytics_meals):
    """Fixture that ensures all analytics test data is created."""
    return {
        'bill': analytics_bill,
        'fund': analytics_fund,
        'meals': analytics_meals,
    }
