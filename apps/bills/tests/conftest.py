import pytest
from datetime import date
from decimal import Decimal

from apps.bills.services import create_bill


@pytest.fixture
def bill(room, manager, member):
    """Create an electricity bill split between manager and member."""
    return create_bill(
        user=manager,
        title='Electricity March',
        category='Electricity',
        total_amount=Decimal('1200.00'),
        due_date=date(2025, 3, 10),
        shares=[
            {'user_id': manager.id, 'amount': Decimal('600.00')},
            {'user_id': member.id, 'amount': Decimal('600.00')},
        ],
    )


@pytest.fixture
def bill_payload(manager, member):
    """Valid request body for POST /api/bills/."""
    return {
        'title': 'Internet April',
        'category': 'Wi-Fi',
        'total_amount': '1000.00',
        'due_date': '2025-04-05',
        'shares': [
            {'user_id': str(manager.id), 'amount': '500.00'},
            {'user_id': str(member.id), 'amount': '500.00'},
        ],
    }
