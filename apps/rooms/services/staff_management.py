"""Household staff listed for a room."""

import logging
from typing import List
from uuid import UUID

from django.db import transaction

from apps.rooms.models import Room, Staff

from .exceptions import StaffNotFoundError

logger = logging.getLogger(__name__)

STAFF_FIELDS = ('name', 'designation', 'phone', 'avatar_url')


def list_staff(*, room: Room) -> List[Staff]:
    return list(room.staff.all())


def add_staff(*, room: Room, name: str, designation: str, phone: str, avatar_url: str = '') -> Staff:
    staff = Staff.objects.create(
        room=room,
        name=name,
        designation=designation,
        phone=phone,
        avatar_url=avatar_url or '',
    )
    logger.info("Staff %s added to room %s", staff.id, room.khata_id)
    return staff


def _get_staff(room: Room, staff_id: UUID, for_update: bool = False) -> Staff:
    queryset = Staff.objects.select_for_update() if for_update else Staff.objects
    try:
        return queryset.get(id=staff_id, room=room)
    except Staff.DoesNotExist:
        raise StaffNotFoundError("Staff member not found")


@transaction.atomic
def update_staff(*, room: Room, staff_id: UUID, **changes) -> Staff:
    """
    Update a staff entry of the room.

    Raises:
        StaffNotFoundError: No such staff in this room
    """
    staff = _get_staff(room, staff_id, for_update=True)
    updated = [field for field in STAFF_FIELDS if field in changes]
    for field in updated:
        setattr(staff, field, changes[field])
    if updated:
        staff.save(update_fields=updated + ['updated_at'])
    return staff


@transaction.atomic
def remove_staff(*, room: Room, staff_id: UUID) -> None:
    staff = _get_staff(room, staff_id, for_update=True)
    staff.delete()
    logger.info("Staff %s removed from room %s", staff_id, room.khata_id)
