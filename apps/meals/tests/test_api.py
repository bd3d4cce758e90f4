import pytest
from datetime import date
from django.urls import reverse
from rest_framework import status

from apps.meals.models import Meal, MealFinalization
from apps.meals.services import finalize_day, upsert_meal

DAY = '2025-03-03'
ON_DAY = date(2025, 3, 3)


def meals_url(room, name='meals:meals', **kwargs):
    return reverse(name, kwargs={'khata_id': room.khata_id, **kwargs})


@pytest.mark.django_db
class TestRecordMeals:
    """Tests for /api/meals/<khata_id>/"""

    def test_member_records_own_meals(self, member_client, room, member):
        response = member_client.post(meals_url(room), {'date': DAY, 'breakfast': 1, 'lunch': 2})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user_id'] == str(member.id)
        assert response.data['total_meals'] == 3

    def test_portion_out_of_range(self, member_client, room):
        response = member_client.post(meals_url(room), {'date': DAY, 'lunch': 3})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'lunch' in response.data

    def test_member_cannot_record_for_others(self, member_client, room, second_member):
        response = member_client.post(meals_url(room), {
            'date': DAY, 'user_id': str(second_member.id), 'lunch': 1,
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Meal.objects.exists()

    def test_finalized_date(self, member_client, room, manager):
        finalize_day(room=room, actor=manager, day=ON_DAY)

        response = member_client.post(meals_url(room), {'date': DAY, 'lunch': 1})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['is_finalized'] is True

    def test_manager_records_for_member(self, manager_client, room, member):
        response = manager_client.post(meals_url(room), {
            'date': DAY, 'user_id': str(member.id), 'dinner': 2,
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user_name'] == member.name

    def test_manager_unknown_target(self, manager_client, room, outsider):
        response = manager_client.post(meals_url(room), {
            'date': DAY, 'user_id': str(outsider.id), 'dinner': 1,
        })

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_meals(self, member_client, room, member):
        upsert_meal(room=room, actor=member, day=ON_DAY, lunch=1)

        response = member_client.get(meals_url(room), {'start_date': '2025-03-01', 'end_date': '2025-03-31'})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['date'] == DAY

    def test_inverted_range(self, member_client, room):
        response = member_client.get(meals_url(room), {'start_date': '2025-03-31', 'end_date': '2025-03-01'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_other_room_forbidden(self, client_for, other_room, room):
        response = client_for(other_room.manager).get(meals_url(room))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_user_meals(self, member_client, room, member, second_member):
        upsert_meal(room=room, actor=member, day=ON_DAY, lunch=1)
        upsert_meal(room=room, actor=second_member, day=ON_DAY, lunch=1)

        response = member_client.get(meals_url(room, 'meals:user-meals', user_id=second_member.id))

        assert response.status_code == status.HTTP_200_OK
        assert [item['user_id'] for item in response.data] == [str(second_member.id)]


@pytest.mark.django_db
class TestFinalization:
    """Tests for meal finalization endpoints."""

    def test_manager_finalizes(self, manager_client, room):
        url = meals_url(room, 'meals:finalize')

        first = manager_client.post(url, {'date': DAY})
        second = manager_client.post(url, {'date': DAY})

        assert first.status_code == status.HTTP_201_CREATED
        assert first.data['message'] == 'Date finalized'
        assert second.status_code == status.HTTP_200_OK
        assert second.data['message'] == 'Already finalized'
        assert MealFinalization.objects.count() == 1

    def test_member_cannot_finalize(self, member_client, room):
        response = member_client.post(meals_url(room, 'meals:finalize'), {'date': DAY})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_check_finalization(self, member_client, room, manager):
        url = meals_url(room, 'meals:finalization', day=DAY)
        assert member_client.get(url).data == {'is_finalized': False, 'finalization': None}

        finalize_day(room=room, actor=manager, day=ON_DAY)
        response = member_client.get(url)

        assert response.data['is_finalized'] is True
        assert response.data['finalization']['finalized_by_name'] == manager.name

    def test_invalid_date(self, member_client, room):
        response = member_client.get(meals_url(room, 'meals:finalization', day='not-a-date'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid date'


@pytest.mark.django_db
class TestSummaryAndHistory:
    """Tests for meal summary and history endpoints."""

    def test_summary(self, member_client, room, manager, member):
        upsert_meal(room=room, actor=member, day=ON_DAY, breakfast=1, lunch=1)
        upsert_meal(room=room, actor=manager, day=ON_DAY, dinner=2)

        response = member_client.get(meals_url(room, 'meals:summary'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_meals'] == 4
        assert response.data['current_user_meals'] == 2
        assert len(response.data['user_meals']) == 2

    def test_member_history_is_own(self, member_client, room, member, second_member):
        upsert_meal(room=room, actor=member, day=ON_DAY, lunch=1)
        upsert_meal(room=room, actor=second_member, day=ON_DAY, lunch=1)

        response = member_client.get(meals_url(room, 'meals:history'))

        assert response.status_code == status.HTTP_200_OK
        assert [item['target_user_id'] for item in response.data] == [str(member.id)]

    def test_manager_history_filter(self, manager_client, room, member, second_member):
        upsert_meal(room=room, actor=member, day=ON_DAY, lunch=1)
        upsert_meal(room=room, actor=second_member, day=ON_DAY, lunch=1)

        response = manager_client.get(meals_url(room, 'meals:history'), {'user_id': str(second_member.id)})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['changed_by_name'] == second_member.name


@pytest.mark.django_db
class TestMenu:
    """Tests for /api/menu/<khata_id>/"""

    def test_manager_saves_menu(self, manager_client, member_client, room):
        payload = {'items': [
            {'day': 'Monday', 'breakfast': 'Paratha', 'lunch': 'Rice', 'dinner': 'Dal'},
            {'day': 'Tuesday', 'lunch': 'Khichuri'},
        ]}
        response = manager_client.post(meals_url(room, 'meals:menu'), payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert [item['day'] for item in response.data] == ['Monday', 'Tuesday']

        menu = member_client.get(meals_url(room, 'meals:menu'))
        assert menu.data[1]['lunch'] == 'Khichuri'

    def test_member_cannot_save_menu(self, member_client, room):
        payload = {'items': [{'day': 'Monday', 'lunch': 'Rice'}]}
        response = member_client.post(meals_url(room, 'meals:menu'), payload, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error'] == 'Manager access required'

    def test_duplicate_days(self, manager_client, room):
        payload = {'items': [{'day': 'Monday', 'lunch': 'Rice'}, {'day': 'Monday', 'lunch': 'Fish'}]}
        response = manager_client.post(meals_url(room, 'meals:menu'), payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_menu_day(self, manager_client, room):
        url = meals_url(room, 'meals:menu-day', day='Friday')
        response = manager_client.put(url, {'dinner': 'Beef tehari'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 7
        friday = next(item for item in response.data if item['day'] == 'Friday')
        assert friday['dinner'] == 'Beef tehari'

    def test_update_invalid_day(self, manager_client, room):
        url = meals_url(room, 'meals:menu-day', day='Someday')
        response = manager_client.put(url, {'dinner': 'x'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid day'


@pytest.mark.django_db
class TestShoppingRoster:
    """Tests for /api/shopping/<khata_id>/roster/"""

    def test_save_and_read_roster(self, manager_client, member_client, room, member):
        payload = {'items': [
            {'day': 'Saturday', 'user_id': str(member.id), 'status': 'Assigned', 'amount': '800.00'},
        ]}
        response = manager_client.post(meals_url(room, 'meals:roster'), payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['user_name'] == member.name

        roster = member_client.get(meals_url(room, 'meals:roster'))
        assert roster.data[0]['amount'] == '800.00'
        assert roster.data[0]['status'] == 'Assigned'

    def test_roster_rejects_outsider(self, manager_client, room, outsider):
        payload = {'items': [{'day': 'Monday', 'user_id': str(outsider.id)}]}
        response = manager_client.post(meals_url(room, 'meals:roster'), payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_member_cannot_save_roster(self, member_client, room, member):
        payload = {'items': [{'day': 'Monday', 'user_id': str(member.id)}]}
        response = member_client.post(meals_url(room, 'meals:roster'), payload, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
