import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.core.approvals import ApprovalStatus
from apps.ledger.models import Deposit, Expense


@pytest.mark.django_db
class TestDeposits:
    """Tests for /api/deposits/<khata_id>/"""

    def test_member_submits_deposit(self, member_client, room, member):
        url = reverse('ledger:deposits', kwargs={'khata_id': room.khata_id})
        response = member_client.post(url, {'amount': '500.00', 'payment_method': 'bKash', 'transaction_id': 'TX9'})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'Pending'
        assert response.data['user_id'] == str(member.id)

    def test_members_cannot_self_adjust(self, member_client, room):
        url = reverse('ledger:deposits', kwargs={'khata_id': room.khata_id})
        response = member_client.post(url, {'amount': '500.00', 'payment_method': 'Manager Adjustment'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_amount_must_be_positive(self, member_client, room):
        url = reverse('ledger:deposits', kwargs={'khata_id': room.khata_id})
        response = member_client.post(url, {'amount': '0', 'payment_method': 'Cash'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'amount' in response.data

    def test_list_deposits(self, member_client, room, pending_deposit):
        response = member_client.get(reverse('ledger:deposits', kwargs={'khata_id': room.khata_id}))

        assert response.status_code == status.HTTP_200_OK
        assert [item['id'] for item in response.data] == [str(pending_deposit.id)]

    def test_outsider_forbidden(self, client_for, outsider, room):
        response = client_for(outsider).get(reverse('ledger:deposits', kwargs={'khata_id': room.khata_id}))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_approves(self, manager_client, room, manager, pending_deposit):
        url = reverse('ledger:deposit-approve', kwargs={'khata_id': room.khata_id, 'deposit_id': pending_deposit.id})
        response = manager_client.put(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'Approved'
        assert response.data['approved_by']['id'] == str(manager.id)

    def test_approve_twice(self, manager_client, room, pending_deposit):
        url = reverse('ledger:deposit-approve', kwargs={'khata_id': room.khata_id, 'deposit_id': pending_deposit.id})
        manager_client.put(url)
        response = manager_client.put(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_member_cannot_approve(self, member_client, room, pending_deposit):
        url = reverse('ledger:deposit-approve', kwargs={'khata_id': room.khata_id, 'deposit_id': pending_deposit.id})
        response = member_client.put(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        pending_deposit.refresh_from_db()
        assert pending_deposit.status == ApprovalStatus.PENDING

    def test_reject_with_reason(self, manager_client, room, pending_deposit):
        url = reverse('ledger:deposit-reject', kwargs={'khata_id': room.khata_id, 'deposit_id': pending_deposit.id})
        response = manager_client.put(url, {'reason': 'Duplicate'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['rejection_reason'] == 'Duplicate'

    def test_unknown_deposit(self, manager_client, room):
        url = reverse('ledger:deposit-approve', kwargs={
            'khata_id': room.khata_id, 'deposit_id': '00000000-0000-0000-0000-000000000000',
        })

        assert manager_client.put(url).status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestExpenses:
    """Tests for /api/expenses/<khata_id>/"""

    def test_member_submits_expense(self, member_client, room):
        url = reverse('ledger:expenses', kwargs={'khata_id': room.khata_id})
        response = member_client.post(url, {'amount': '320.50', 'items': 'Fish, onions'})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['category'] == 'Shopping'
        assert response.data['amount'] == '320.50'

    def test_adjustment_category_not_allowed(self, member_client, room):
        url = reverse('ledger:expenses', kwargs={'khata_id': room.khata_id})
        response = member_client.post(url, {'amount': '10', 'items': 'x', 'category': 'Adjustment'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_manager_approves_expense(self, manager_client, room, pending_expense):
        url = reverse('ledger:expense-approve', kwargs={'khata_id': room.khata_id, 'expense_id': pending_expense.id})
        response = manager_client.put(url)

        assert response.status_code == status.HTTP_200_OK
        assert Expense.objects.get(id=pending_expense.id).status == ApprovalStatus.APPROVED

    def test_manager_rejects_expense(self, manager_client, room, pending_expense):
        url = reverse('ledger:expense-reject', kwargs={'khata_id': room.khata_id, 'expense_id': pending_expense.id})
        response = manager_client.put(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'Rejected'


@pytest.mark.django_db
class TestFundEndpoints:
    """Balances, summary, adjustments and meal balance."""

    def test_balances(self, member_client, funded_room, member):
        response = member_client.get(reverse('ledger:balances', kwargs={'khata_id': funded_room.khata_id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['rate'] == '100.00'
        row = next(item for item in response.data['balances'] if item['user_id'] == str(member.id))
        assert row['balance'] == '600.00'
        assert row['total_meals'] == 4

    def test_summary(self, member_client, funded_room):
        response = member_client.get(reverse('ledger:summary', kwargs={'khata_id': funded_room.khata_id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['fund_status']['balance'] == '400.00'
        assert response.data['member_summary']['meal_cost'] == '400.00'

    def test_adjust(self, manager_client, room, member):
        url = reverse('ledger:adjust', kwargs={'khata_id': room.khata_id})
        response = manager_client.post(url, {
            'user_id': str(member.id), 'type': 'ADD', 'amount': '250.00', 'reason': 'Cash handed over',
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['result']['payment_method'] == 'Manager Adjustment'
        assert Deposit.objects.get(user=member).amount == Decimal('250.00')

    def test_adjust_missing_fields(self, manager_client, room, member):
        url = reverse('ledger:adjust', kwargs={'khata_id': room.khata_id})
        response = manager_client.post(url, {'user_id': str(member.id), 'type': 'ADD'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Missing required fields'

    def test_adjust_unknown_member(self, manager_client, room, outsider):
        url = reverse('ledger:adjust', kwargs={'khata_id': room.khata_id})
        response = manager_client.post(url, {'user_id': str(outsider.id), 'type': 'DEDUCT', 'amount': '5'})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_member_cannot_adjust(self, member_client, room, member):
        url = reverse('ledger:adjust', kwargs={'khata_id': room.khata_id})
        response = member_client.post(url, {'user_id': str(member.id), 'type': 'ADD', 'amount': '5'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_shopping_members(self, member_client, room, manager, member):
        response = member_client.get(reverse('ledger:shopping-members', kwargs={'khata_id': room.khata_id}))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2

    def test_meal_balance(self, member_client, funded_room, member):
        response = member_client.get(reverse('ledger:meal-balance', kwargs={'user_id': member.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['balance'] == '1000.00'

    def test_meal_balance_other_member_forbidden(self, member_client, funded_room, manager):
        response = member_client.get(reverse('ledger:meal-balance', kwargs={'user_id': manager.id}))

        assert response.status_code == status.HTTP_403_FORBIDDEN
