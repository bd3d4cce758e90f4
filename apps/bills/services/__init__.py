"""
Bills app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    BillsServiceError,
    BillNotFoundError,
    ShareNotFoundError,
    InvalidShareError,
    InvalidShareStatusError,
    NoRoomError,
    InsufficientPermissionsError,
)

from .bill_management import (
    get_bill,
    create_bill,
    update_bill,
    delete_bill,
    list_room_bills,
)

from .share_payments import (
    update_share_status,
    remind_unpaid,
    get_bill_stats,
)


__all__ = [
    # Exceptions
    'BillsServiceError',
    'BillNotFoundError',
    'ShareNotFoundError',
    'InvalidShareError',
    'InvalidShareStatusError',
    'NoRoomError',
    'InsufficientPermissionsError',
    # Bill management
    'get_bill',
    'create_bill',
    'update_bill',
    'delete_bill',
    'list_room_bills',
    # Share payments
    'update_share_status',
    'remind_unpaid',
    'get_bill_stats',
]
