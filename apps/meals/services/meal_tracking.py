"""
Meal tracking service.

Members record their own meals per day; the manager can record anyone's
and can finalize a day, after which members can no longer change it.
Every write leaves a MealHistory row.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import Case, IntegerField, Q, Sum, When

from apps.accounts.models import User
from apps.accounts.permissions import manages_room
from apps.meals.models import Meal, MealFinalization, MealHistory
from apps.notifications.services import realtime, after_commit
from apps.periods.services import get_active_period
from apps.rooms.models import Room

from .exceptions import (
    DateFinalizedError,
    InsufficientPermissionsError,
    MemberNotFoundError,
)

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50
PORTIONS = ('breakfast', 'lunch', 'dinner')


def list_meals(*, room: Room, start_date: Optional[date] = None, end_date: Optional[date] = None) -> List[Meal]:
    meals = Meal.objects.filter(room=room)
    if start_date:
        meals = meals.filter(date__gte=start_date)
    if end_date:
        meals = meals.filter(date__lte=end_date)
    return list(meals.order_by('-date', 'user_name'))


def list_user_meals(*, room: Room, user_id: UUID) -> List[Meal]:
    return list(Meal.objects.filter(room=room, user_id=user_id).order_by('-date'))


def get_finalization(*, room: Room, day: date) -> Optional[MealFinalization]:
    return MealFinalization.objects.filter(room=room, date=day).first()


@transaction.atomic
def upsert_meal(
    *,
    room: Room,
    actor: User,
    day: date,
    user_id: Optional[UUID] = None,
    **portions,
) -> Meal:
    """
    Create or update one member's meals for a day.

    Args:
        room: Room the meal belongs to
        actor: Caller
        day: Calendar day
        user_id: Member whose meals are recorded; defaults to the caller
        **portions: Any of breakfast, lunch, dinner (0-2); omitted
            portions keep their stored value

    Returns:
        The saved Meal

    Raises:
        InsufficientPermissionsError: A member records someone else's meals
        DateFinalizedError: A member edits a finalized day
        MemberNotFoundError: Target is not an approved member of the room
    """
    is_manager = manages_room(actor, room)
    target_id = user_id or actor.id

    if str(target_id) != str(actor.id):
        if not is_manager:
            raise InsufficientPermissionsError("Only managers can update other members' meals")
        try:
            target = room.approved_members().get(id=target_id)
        except User.DoesNotExist:
            raise MemberNotFoundError("Member not found in this room")
    else:
        target = actor
        if not is_manager and get_finalization(room=room, day=day) is not None:
            raise DateFinalizedError(
                "This date has been finalized by the manager. You cannot update your meals."
            )

    values = {name: portions[name] for name in PORTIONS if portions.get(name) is not None}

    meal = Meal.objects.select_for_update().filter(room=room, user=target, date=day).first()
    if meal is None:
        meal = Meal(
            room=room,
            user=target,
            user_name=target.name,
            date=day,
            calculation_period=get_active_period(room),
        )
    for name, value in values.items():
        setattr(meal, name, value)
    meal.save()

    MealHistory.objects.create(
        room=room,
        target_user=target,
        changed_by=actor,
        date=day,
        breakfast=meal.breakfast,
        lunch=meal.lunch,
        dinner=meal.dinner,
    )
    after_commit(realtime.push_to_room, room.khata_id, realtime.MEAL_UPDATED, {
        'user_id': target.id,
        'date': day.isoformat(),
        'total_meals': meal.total_meals,
    })

    logger.info("Meals of %s on %s set to %d by %s", target.id, day, meal.total_meals, actor.id)
    return meal


def finalize_day(*, room: Room, actor: User, day: date) -> Tuple[MealFinalization, bool]:
    """
    Close a day for member edits.

    Returns:
        (finalization, created); created is False when the day was
        already finalized

    Raises:
        InsufficientPermissionsError: Caller does not manage the room
    """
    if not manages_room(actor, room):
        raise InsufficientPermissionsError("Manager access required")

    existing = get_finalization(room=room, day=day)
    if existing is not None:
        return existing, False

    try:
        with transaction.atomic():
            finalization = MealFinalization.objects.create(
                room=room,
                date=day,
                finalized_by=actor,
                finalized_by_name=actor.name,
            )
    except IntegrityError:
        return get_finalization(room=room, day=day), False

    logger.info("Meals of %s finalized in room %s by %s", day, room.khata_id, actor.id)
    return finalization, True


def get_meal_summary(*, room: Room, user: User) -> Dict:
    """
    Meal totals for the room, the caller, and each member.

    Per-member breakfast, lunch and dinner figures count the days on which
    that meal was taken, not the portions.
    """
    meals = Meal.objects.filter(room=room)

    def days_with(portion):
        return Sum(Case(When(Q(**{f'{portion}__gt': 0}), then=1), default=0, output_field=IntegerField()))

    per_user = (
        meals.values('user_id', 'user_name')
        .annotate(
            total_meals=Sum('total_meals'),
            breakfast=days_with('breakfast'),
            lunch=days_with('lunch'),
            dinner=days_with('dinner'),
        )
        .order_by('user_name')
    )

    return {
        'total_meals': meals.aggregate(total=Sum('total_meals'))['total'] or 0,
        'current_user_meals': meals.filter(user=user).aggregate(total=Sum('total_meals'))['total'] or 0,
        'user_meals': list(per_user),
    }


def get_meal_history(
    *,
    room: Room,
    user: User,
    target_user_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[MealHistory]:
    """
    Latest meal changes, newest first.

    Members only ever see changes to their own meals; a manager sees the
    whole room or one member via ``target_user_id``.
    """
    history = MealHistory.objects.filter(room=room).select_related('changed_by', 'target_user')

    if not manages_room(user, room):
        history = history.filter(target_user=user)
    elif target_user_id:
        history = history.filter(target_user_id=target_user_id)

    if start_date:
        history = history.filter(date__gte=start_date)
    if end_date:
        history = history.filter(date__lte=end_date)
    return list(history.order_by('-created_at')[:HISTORY_LIMIT])
