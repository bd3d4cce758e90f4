"""Calendar helpers for weekly rosters, menus and monthly reports."""

import calendar
from datetime import date, datetime, timedelta

from django.utils import timezone

WEEKDAYS = [
    'Monday',
    'Tuesday',
    'Wednesday',
    'Thursday',
    'Friday',
    'Saturday',
    'Sunday',
]


def today() -> date:
    return timezone.localdate()


def week_start(day: date = None) -> date:
    """Monday of the week containing ``day`` (defaults to today)."""
    day = day or today()
    return day - timedelta(days=day.weekday())


def weekday_name(day: date = None) -> str:
    day = day or today()
    return WEEKDAYS[day.weekday()]


def to_date(value) -> date:
    """Normalize a date, datetime or ISO string to a calendar day."""
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def month_bounds(day: date = None):
    """First and last day of the month containing ``day``."""
    day = day or today()
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def shift_months(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day`` (negative goes back)."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)
