import pytest
from django.urls import reverse
from rest_framework import status

from apps.bills.models import Bill, ShareStatus


@pytest.mark.django_db
class TestCreateBill:
    """Tests for POST /api/bills/"""

    def test_manager_creates_bill(self, manager_client, bill_payload):
        response = manager_client.post(reverse('bills:bill-create'), bill_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['bill']['khata_id'] == 'FLAT42'
        assert response.data['bill']['total_amount'] == '1000.00'
        assert len(response.data['bill']['shares']) == 2

    def test_member_forbidden(self, member_client, bill_payload):
        response = member_client.post(reverse('bills:bill-create'), bill_payload, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Bill.objects.exists()

    def test_unverified_manager_forbidden(self, client_for, manager, room, bill_payload):
        manager.is_verified = False
        manager.save(update_fields=['is_verified'])

        response = client_for(manager).post(reverse('bills:bill-create'), bill_payload, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_category(self, manager_client, bill_payload):
        bill_payload['category'] = 'Netflix'
        response = manager_client.post(reverse('bills:bill-create'), bill_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'category' in response.data

    def test_empty_shares(self, manager_client, bill_payload):
        bill_payload['shares'] = []
        response = manager_client.post(reverse('bills:bill-create'), bill_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_share_for_outsider(self, manager_client, bill_payload, outsider):
        bill_payload['shares'][1]['user_id'] = str(outsider.id)
        response = manager_client.post(reverse('bills:bill-create'), bill_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestBillDetail:
    """Tests for /api/bills/<bill_id>/"""

    def test_member_reads_bill(self, member_client, bill):
        response = member_client.get(reverse('bills:bill-detail', kwargs={'bill_id': bill.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['title'] == 'Electricity March'

    def test_member_of_other_room_forbidden(self, client_for, bill, other_room):
        response = client_for(other_room.manager).get(reverse('bills:bill-detail', kwargs={'bill_id': bill.id}))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_bill(self, member_client, room):
        url = reverse('bills:bill-detail', kwargs={'bill_id': '00000000-0000-0000-0000-000000000000'})

        assert member_client.get(url).status_code == status.HTTP_404_NOT_FOUND

    def test_manager_updates_bill(self, manager_client, bill):
        url = reverse('bills:bill-detail', kwargs={'bill_id': bill.id})
        response = manager_client.patch(url, {'title': 'Electricity (revised)'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['bill']['title'] == 'Electricity (revised)'

    def test_member_cannot_update(self, member_client, bill):
        url = reverse('bills:bill-detail', kwargs={'bill_id': bill.id})
        response = member_client.patch(url, {'title': 'Hacked'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_other_room_manager_cannot_delete(self, client_for, bill, other_room):
        url = reverse('bills:bill-detail', kwargs={'bill_id': bill.id})
        response = client_for(other_room.manager).delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Bill.objects.filter(id=bill.id).exists()

    def test_manager_deletes_bill(self, manager_client, bill):
        response = manager_client.delete(reverse('bills:bill-detail', kwargs={'bill_id': bill.id}))

        assert response.status_code == status.HTTP_200_OK
        assert not Bill.objects.filter(id=bill.id).exists()


@pytest.mark.django_db
class TestShareStatus:
    """Tests for PUT /api/bills/<bill_id>/share/<user_id>/"""

    def test_member_reports_own_payment(self, member_client, bill, member):
        url = reverse('bills:share-status', kwargs={'bill_id': bill.id, 'user_id': member.id})
        response = member_client.put(url, {'status': 'Pending Approval'})

        assert response.status_code == status.HTTP_200_OK
        share = next(item for item in response.data['bill']['shares'] if item['user_id'] == str(member.id))
        assert share['status'] == 'Pending Approval'

    def test_member_cannot_mark_paid(self, member_client, bill, member):
        url = reverse('bills:share-status', kwargs={'bill_id': bill.id, 'user_id': member.id})
        response = member_client.put(url, {'status': 'Paid'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_marks_paid(self, manager_client, bill, member):
        url = reverse('bills:share-status', kwargs={'bill_id': bill.id, 'user_id': member.id})
        response = manager_client.put(url, {'status': 'Paid'})

        assert response.status_code == status.HTTP_200_OK
        assert bill.shares.get(user=member).status == ShareStatus.PAID

    def test_invalid_status(self, manager_client, bill, member):
        url = reverse('bills:share-status', kwargs={'bill_id': bill.id, 'user_id': member.id})
        response = manager_client.put(url, {'status': 'Whatever'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid status'

    def test_missing_share(self, manager_client, bill, second_member):
        url = reverse('bills:share-status', kwargs={'bill_id': bill.id, 'user_id': second_member.id})
        response = manager_client.put(url, {'status': 'Paid'})

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestRoomBills:
    """Room listing, stats and reminders."""

    def test_list_paginated(self, member_client, bill, room):
        url = reverse('bills:room-bills', kwargs={'khata_id': room.khata_id})
        response = member_client.get(url, {'limit': 1})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['id'] == str(bill.id)

    def test_outsider_cannot_list(self, client_for, outsider, room):
        url = reverse('bills:room-bills', kwargs={'khata_id': room.khata_id})

        assert client_for(outsider).get(url).status_code == status.HTTP_403_FORBIDDEN

    def test_stats(self, member_client, bill, room):
        response = member_client.get(reverse('bills:room-bill-stats', kwargs={'khata_id': room.khata_id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_unpaid'] == '600.00'
        assert response.data['pending_approvals'] == 0

    def test_remind(self, manager_client, bill):
        response = manager_client.post(reverse('bills:bill-remind', kwargs={'bill_id': bill.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['reminded'] == 2

    def test_member_cannot_remind(self, member_client, bill):
        response = member_client.post(reverse('bills:bill-remind', kwargs={'bill_id': bill.id}))

        assert response.status_code == status.HTTP_403_FORBIDDEN
