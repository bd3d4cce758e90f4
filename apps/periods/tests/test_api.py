import pytest
from datetime import date
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.ledger.models import Deposit
from apps.meals.models import Meal
from apps.periods.models import CalculationPeriod, PeriodStatus
from apps.periods.services import (
    get_active_period,
    start_period,
    end_period,
    ActivePeriodExistsError,
    InsufficientPermissionsError,
    NoRoomError,
    PeriodAlreadyEndedError,
)


@pytest.mark.django_db
class TestPeriodServices:
    """Tests for period_management.py service functions."""

    def test_start_period_sweeps_unassigned_records(self, room, manager, member):
        deposit = Deposit.objects.create(
            room=room, user=member, user_name=member.name,
            amount=Decimal('500.00'), payment_method='Cash',
        )
        meal = Meal.objects.create(room=room, user=member, user_name=member.name, date=date(2025, 1, 5), lunch=1)

        period = start_period(user=manager, name='January 2025')

        deposit.refresh_from_db()
        meal.refresh_from_db()
        assert period.status == PeriodStatus.ACTIVE
        assert deposit.calculation_period == period
        assert meal.calculation_period == period
        assert get_active_period(room) == period

    def test_only_one_active_period(self, room, manager):
        start_period(user=manager, name='January')

        with pytest.raises(ActivePeriodExistsError):
            start_period(user=manager, name='February')

    def test_member_cannot_start(self, room, member):
        with pytest.raises(InsufficientPermissionsError):
            start_period(user=member, name='Mine')

    def test_user_without_room(self, outsider):
        with pytest.raises(NoRoomError):
            start_period(user=outsider, name='Nowhere')

    def test_blank_name(self, room, manager):
        with pytest.raises(ValueError):
            start_period(user=manager, name='   ')

    def test_end_period_then_start_again(self, room, manager):
        first = start_period(user=manager, name='January')

        ended = end_period(user=manager, period_id=first.id)
        assert ended.status == PeriodStatus.ENDED
        assert ended.end_date is not None
        assert ended.ended_by == manager

        second = start_period(user=manager, name='February')
        assert get_active_period(room) == second

    def test_end_twice(self, room, manager):
        period = start_period(user=manager, name='January')
        end_period(user=manager, period_id=period.id)

        with pytest.raises(PeriodAlreadyEndedError):
            end_period(user=manager, period_id=period.id)

    def test_manager_of_other_room_cannot_end(self, room, manager, other_room):
        period = start_period(user=manager, name='January')

        with pytest.raises(InsufficientPermissionsError):
            end_period(user=other_room.manager, period_id=period.id)

    def test_pending_manager_cannot_start_or_end(self, room, manager, pending_manager):
        with pytest.raises(InsufficientPermissionsError):
            start_period(user=pending_manager, name='Hijack')

        period = start_period(user=manager, name='January')
        with pytest.raises(InsufficientPermissionsError):
            end_period(user=pending_manager, period_id=period.id)

        period.refresh_from_db()
        assert period.status == PeriodStatus.ACTIVE


@pytest.mark.django_db
class TestPeriodApi:
    """Tests for /api/calculation-periods/"""

    def test_start_and_list(self, manager_client):
        response = manager_client.post(reverse('periods:period-list'), {'name': 'March 2025'})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'Active'
        assert response.data['khata_id'] == 'FLAT42'

        listing = manager_client.get(reverse('periods:period-list'))
        assert [item['name'] for item in listing.data] == ['March 2025']

    def test_start_while_active(self, manager_client):
        manager_client.post(reverse('periods:period-list'), {'name': 'March'})
        response = manager_client.post(reverse('periods:period-list'), {'name': 'April'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'already exists' in response.data['error']

    def test_member_cannot_start(self, member_client):
        response = member_client.post(reverse('periods:period-list'), {'name': 'March'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_without_room(self, client_for, outsider):
        response = client_for(outsider).get(reverse('periods:period-list'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_pending_manager_refused(self, client_for, room, manager, pending_manager):
        start_period(user=manager, name='May')
        client = client_for(pending_manager)

        response = client.post(reverse('periods:period-list'), {'name': 'Hijack'})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert CalculationPeriod.objects.filter(room=room).count() == 1
        assert client.get(reverse('periods:period-list')).status_code == status.HTTP_403_FORBIDDEN
        assert client.get(reverse('periods:period-active')).data == {'active_period': None}

    def test_active_period(self, member_client, room, manager):
        assert member_client.get(reverse('periods:period-active')).data == {'active_period': None}

        period = start_period(user=manager, name='May')
        response = member_client.get(reverse('periods:period-active'))

        assert response.data['active_period']['id'] == str(period.id)

    def test_end_period(self, manager_client, room, manager):
        period = start_period(user=manager, name='June')

        response = manager_client.post(reverse('periods:period-end', kwargs={'period_id': period.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'Ended'
        assert response.data['ended_by']['id'] == str(manager.id)

    def test_end_unknown_period(self, manager_client):
        url = reverse('periods:period-end', kwargs={'period_id': '00000000-0000-0000-0000-000000000000'})
        response = manager_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_end_already_ended(self, manager_client, room, manager):
        period = CalculationPeriod.objects.create(
            room=room, name='Old', start_date='2025-01-01T00:00:00Z', status=PeriodStatus.ENDED,
        )

        response = manager_client.post(reverse('periods:period-end', kwargs={'period_id': period.id}))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
