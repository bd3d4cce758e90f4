"""Services for calculation periods."""

from .exceptions import (
    PeriodsServiceError,
    PeriodNotFoundError,
    ActivePeriodExistsError,
    PeriodAlreadyEndedError,
    NoRoomError,
    InsufficientPermissionsError,
)
from .period_management import (
    get_active_period,
    list_periods,
    start_period,
    end_period,
)

__all__ = [
    'PeriodsServiceError',
    'PeriodNotFoundError',
    'ActivePeriodExistsError',
    'PeriodAlreadyEndedError',
    'NoRoomError',
    'InsufficientPermissionsError',
    'get_active_period',
    'list_periods',
    'start_period',
    'end_period',
]
