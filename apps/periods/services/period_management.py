"""
Calculation period service.

A room has at most one Active period. Starting a period sweeps every
deposit, expense and meal that has no period yet into the new one.
"""

import logging
from typing import List, Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.permissions import manages_room
from apps.periods.models import CalculationPeriod, PeriodStatus

from .exceptions import (
    ActivePeriodExistsError,
    InsufficientPermissionsError,
    NoRoomError,
    PeriodAlreadyEndedError,
    PeriodNotFoundError,
)

logger = logging.getLogger(__name__)


def get_active_period(room) -> Optional[CalculationPeriod]:
    """The room's Active period, or None."""
    if room is None:
        return None
    return CalculationPeriod.objects.filter(room=room, status=PeriodStatus.ACTIVE).first()


def _require_room(user: User):
    if user.room_id is None:
        raise NoRoomError("User not in a room")
    if not user.belongs_to(user.khata_id):
        raise InsufficientPermissionsError("Access denied to this room")
    return user.room


def list_periods(*, user: User) -> List[CalculationPeriod]:
    """
    Raises:
        NoRoomError: Caller has no room
        InsufficientPermissionsError: Caller's membership is not approved
    """
    room = _require_room(user)
    return list(
        CalculationPeriod.objects
        .filter(room=room)
        .select_related('started_by', 'ended_by')
        .order_by('-start_date')
    )


@transaction.atomic
def start_period(*, user: User, name: str) -> CalculationPeriod:
    """
    Start a new calculation period in the caller's room.

    Args:
        user: Manager of the room
        name: Label such as "January 2025"

    Returns:
        The new Active period

    Raises:
        NoRoomError: Caller has no room
        InsufficientPermissionsError: Caller does not manage the room
        ValueError: Empty name
        ActivePeriodExistsError: The room already has an Active period
    """
    from apps.ledger.models import Deposit, Expense
    from apps.meals.models import Meal

    room = _require_room(user)
    if not manages_room(user, room):
        raise InsufficientPermissionsError("Only managers can start calculation periods")

    name = (name or '').strip()
    if not name:
        raise ValueError("Period name is required")

    if CalculationPeriod.objects.filter(room=room, status=PeriodStatus.ACTIVE).exists():
        raise ActivePeriodExistsError(
            "An active calculation period already exists. Please end it before starting a new one."
        )

    try:
        with transaction.atomic():
            period = CalculationPeriod.objects.create(
                room=room,
                name=name,
                start_date=timezone.now(),
                status=PeriodStatus.ACTIVE,
                started_by=user,
            )
    except IntegrityError:
        raise ActivePeriodExistsError("An active calculation period already exists for this room")

    swept = 0
    for model in (Deposit, Expense, Meal):
        swept += model.objects.filter(room=room, calculation_period__isnull=True).update(
            calculation_period=period
        )

    logger.info("Period '%s' started in room %s (%d records assigned)", name, room.khata_id, swept)
    return period


@transaction.atomic
def end_period(*, user: User, period_id: UUID) -> CalculationPeriod:
    """
    End an Active period.

    Raises:
        NoRoomError: Caller has no room
        InsufficientPermissionsError: Caller is not a manager of the period's room
        PeriodNotFoundError: Unknown period
        PeriodAlreadyEndedError: Period already ended
    """
    room = _require_room(user)
    if not manages_room(user, room):
        raise InsufficientPermissionsError("Only managers can end calculation periods")

    try:
        period = CalculationPeriod.objects.select_for_update().get(id=period_id)
    except CalculationPeriod.DoesNotExist:
        raise PeriodNotFoundError("Calculation period not found")

    if period.room_id != room.id:
        raise InsufficientPermissionsError("Unauthorized to modify this period")
    if period.status == PeriodStatus.ENDED:
        raise PeriodAlreadyEndedError("This period has already ended")

    period.status = PeriodStatus.ENDED
    period.end_date = timezone.now()
    period.ended_by = user
    period.save(update_fields=['status', 'end_date', 'ended_by', 'updated_at'])

    logger.info("Period '%s' ended in room %s", period.name, room.khata_id)
    return period
