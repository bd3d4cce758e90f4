"""
Ledger app services layer.

Deposits and expenses move through the shared approval state machine;
fund figures are computed from approved records only.
"""

from .exceptions import (
    LedgerServiceError,
    DepositNotFoundError,
    ExpenseNotFoundError,
    MemberNotFoundError,
    InvalidAdjustmentError,
    InsufficientPermissionsError,
    InvalidTransitionError,
)

from .fund_submissions import (
    list_deposits,
    list_expenses,
    create_deposit,
    create_expense,
    approve_deposit,
    reject_deposit,
    approve_expense,
    reject_expense,
)

from .fund_accounting import (
    ADJUST_ADD,
    ADJUST_DEDUCT,
    meal_rate,
    get_balances,
    get_fund_summary,
    get_meal_balance,
    adjust_fund,
    list_shopping_members,
)


__all__ = [
    # Exceptions
    'LedgerServiceError',
    'DepositNotFoundError',
    'ExpenseNotFoundError',
    'MemberNotFoundError',
    'InvalidAdjustmentError',
    'InsufficientPermissionsError',
    'InvalidTransitionError',
    # Submissions
    'list_deposits',
    'list_expenses',
    'create_deposit',
    'create_expense',
    'approve_deposit',
    'reject_deposit',
    'approve_expense',
    'reject_expense',
    # Accounting
    'ADJUST_ADD',
    'ADJUST_DEDUCT',
    'meal_rate',
    'get_balances',
    'get_fund_summary',
    'get_meal_balance',
    'adjust_fund',
    'list_shopping_members',
]
