"""
Meals app services layer.

Daily meal counts with manager finalization and an audit trail, plus the
weekly menu and shopping roster.
"""

from .exceptions import (
    MealsServiceError,
    DateFinalizedError,
    MemberNotFoundError,
    InvalidDayError,
    InsufficientPermissionsError,
)

from .meal_tracking import (
    HISTORY_LIMIT,
    list_meals,
    list_user_meals,
    get_finalization,
    upsert_meal,
    finalize_day,
    get_meal_summary,
    get_meal_history,
)

from .menu_planning import (
    get_current_menu,
    get_menu_days,
    save_menu,
    update_menu_day,
    todays_menu,
    get_roster,
    save_roster,
)


__all__ = [
    # Exceptions
    'MealsServiceError',
    'DateFinalizedError',
    'MemberNotFoundError',
    'InvalidDayError',
    'InsufficientPermissionsError',
    # Meals
    'HISTORY_LIMIT',
    'list_meals',
    'list_user_meals',
    'get_finalization',
    'upsert_meal',
    'finalize_day',
    'get_meal_summary',
    'get_meal_history',
    # Menu and roster
    'get_current_menu',
    'get_menu_days',
    'save_menu',
    'update_menu_day',
    'todays_menu',
    'get_roster',
    'save_roster',
]
