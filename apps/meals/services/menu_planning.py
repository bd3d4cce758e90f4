"""
Weekly menu and shopping roster.

A week's menu overrides the room's permanent menu. Rosters are kept per
week; the reminder service reads today's shopper from the latest one.
"""

import logging
from typing import Dict, List, Optional

from django.db import transaction

from apps.core.dates import WEEKDAYS, week_start
from apps.meals.models import DutyAssignment, Menu, MenuDay, ShoppingDuty
from apps.notifications.services import realtime, web_push, after_commit
from apps.rooms.models import Room

from .exceptions import InvalidDayError, MemberNotFoundError

logger = logging.getLogger(__name__)

MENU_FIELDS = ('breakfast', 'lunch', 'dinner')


def _sorted_days(days) -> List[MenuDay]:
    return sorted(days, key=lambda item: WEEKDAYS.index(item.day))


def get_current_menu(*, room: Room) -> Optional[Menu]:
    """This week's menu, else the permanent one, else None."""
    menu = (
        Menu.objects.filter(room=room, week_start=week_start(), is_permanent=False).first()
        or Menu.objects.filter(room=room, is_permanent=True).first()
    )
    return menu


def get_menu_days(*, room: Room) -> List[MenuDay]:
    menu = get_current_menu(room=room)
    return _sorted_days(menu.days.all()) if menu else []


@transaction.atomic
def save_menu(*, room: Room, items: List[Dict], is_permanent: bool = False) -> List[MenuDay]:
    """
    Replace the week's (or the permanent) menu.

    Args:
        items: ``[{day, breakfast, lunch, dinner}]``; days not listed are dropped
    """
    if is_permanent:
        menu = Menu.objects.filter(room=room, is_permanent=True).first()
        if menu is None:
            menu = Menu.objects.create(room=room, is_permanent=True, week_start=week_start())
    else:
        menu, _ = Menu.objects.get_or_create(room=room, week_start=week_start(), is_permanent=False)

    menu.days.all().delete()
    days = MenuDay.objects.bulk_create([
        MenuDay(menu=menu, day=item['day'], **{field: item.get(field) or '' for field in MENU_FIELDS})
        for item in items
    ])
    menu.save(update_fields=['updated_at'])

    after_commit(realtime.push_to_room, room.khata_id, realtime.MENU_UPDATED, {
        'is_permanent': is_permanent,
    })
    after_commit(
        web_push.send_to_room,
        room,
        web_push.build_payload('Menu Updated', 'The meal menu has been updated.', '/menu'),
        exclude_user_id=room.manager_id,
    )
    logger.info("%s menu saved for room %s", 'Permanent' if is_permanent else 'Weekly', room.khata_id)
    return _sorted_days(days)


@transaction.atomic
def update_menu_day(*, room: Room, day: str, **changes) -> List[MenuDay]:
    """
    Change one day of this week's menu, creating the week's menu if needed.

    Raises:
        InvalidDayError: ``day`` is not a weekday name
    """
    if day not in WEEKDAYS:
        raise InvalidDayError("Invalid day")

    menu, created = Menu.objects.get_or_create(room=room, week_start=week_start(), is_permanent=False)
    if created:
        MenuDay.objects.bulk_create([MenuDay(menu=menu, day=name) for name in WEEKDAYS])

    entry, _ = MenuDay.objects.get_or_create(menu=menu, day=day)
    updated = [field for field in MENU_FIELDS if changes.get(field) is not None]
    for field in updated:
        setattr(entry, field, changes[field])
    if updated:
        entry.save(update_fields=updated)

    after_commit(realtime.push_to_room, room.khata_id, realtime.MENU_UPDATED, {'day': day})
    return _sorted_days(menu.days.all())


def todays_menu(*, room: Room, day_name: str) -> Dict[str, str]:
    """Breakfast, lunch and dinner for one weekday, 'Not set' where empty."""
    menu = get_current_menu(room=room)
    entry = menu.days.filter(day=day_name).first() if menu else None
    return {
        field: (getattr(entry, field) if entry and getattr(entry, field) else 'Not set')
        for field in MENU_FIELDS
    }


def get_roster(*, room: Room) -> List[DutyAssignment]:
    duty = ShoppingDuty.objects.filter(room=room, week_start=week_start()).first()
    if duty is None:
        return []
    return sorted(duty.assignments.all(), key=lambda item: WEEKDAYS.index(item.day))


@transaction.atomic
def save_roster(*, room: Room, items: List[Dict]) -> List[DutyAssignment]:
    """
    Replace this week's shopping roster.

    Args:
        items: ``[{day, user_id?, user_name?, status?, amount?}]``

    Raises:
        MemberNotFoundError: An assignment names someone outside the room
    """
    user_ids = {str(item['user_id']) for item in items if item.get('user_id')}
    members = {str(member.id): member for member in room.approved_members().filter(id__in=user_ids)}
    if len(members) != len(user_ids):
        raise MemberNotFoundError("Roster assignments must name approved members of the room")

    duty, _ = ShoppingDuty.objects.get_or_create(room=room, week_start=week_start())
    duty.assignments.all().delete()

    assignments = []
    for item in items:
        member = members.get(str(item['user_id'])) if item.get('user_id') else None
        fields = {
            'duty': duty,
            'day': item['day'],
            'user': member,
            'user_name': item.get('user_name') or (member.name if member else ''),
            'amount': item.get('amount') or 0,
        }
        if item.get('status'):
            fields['status'] = item['status']
        assignments.append(DutyAssignment(**fields))
    DutyAssignment.objects.bulk_create(assignments)
    duty.save(update_fields=['updated_at'])

    after_commit(realtime.push_to_room, room.khata_id, realtime.SHOPPING_ROSTER_UPDATED, {
        'week_start': duty.week_start.isoformat(),
    })
    logger.info("Shopping roster saved for room %s (%d entries)", room.khata_id, len(assignments))
    return sorted(assignments, key=lambda item: WEEKDAYS.index(item.day))
