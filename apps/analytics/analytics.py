"""
Analytics Module
=================

Read-only aggregations behind the dashboard cards and the room reports
screen. Figures come from bills, deposits, expenses and meals of a room.

Classes:
    AnalyticsQueries: Static methods for the dashboard and room analytics.

Key Features:
    - Manager dashboard: bills this month, pending approvals, fund balance
    - Member dashboard: own dues, meal count and refundable amount
    - Room analytics for "This Month" or "Last 30 Days"
    - Six-month deposits vs. spending trend for charts

Example:
    Getting the dashboard for the current user::

        from apps.analytics.analytics import AnalyticsQueries

        stats = AnalyticsQueries.dashboard_stats(request.user)
        print(stats['todays_menu']['lunch'])

Note:
    This module doesn't modify any data. All methods are static and
    return plain dictionaries ready for JSON responses.
"""

from datetime import timedelta
from decimal import Decimal

from django.db.models import Sum, Count
from django.db.models.functions import Coalesce

from apps.accounts.permissions import manages_room
from apps.bills.models import Bill, BillShare, ShareStatus
from apps.core.approvals import ApprovalStatus
from apps.core.dates import today, weekday_name, month_bounds, shift_months
from apps.ledger.models import Deposit, Expense, ExpenseCategory
from apps.ledger.serializers import DepositSerializer, ExpenseSerializer
from apps.ledger.services.fund_accounting import money
from apps.meals.models import Meal
from apps.meals.services import todays_menu
from apps.periods.services import get_active_period

ZERO = Decimal('0')

RANGE_THIS_MONTH = 'This Month'
RANGE_LAST_30_DAYS = 'Last 30 Days'
RANGES = (RANGE_THIS_MONTH, RANGE_LAST_30_DAYS)

CATEGORY_COLORS = ['#3b82f6', '#8b5cf6', '#10b981', '#f59e0b', '#ef4444', '#ec4899', '#6366f1', '#14b8a6']
DEPOSIT_COLOR = '#10b981'
EXPENSE_COLOR = '#ef4444'
TREND_MONTHS = 6

UNPAID_STATUSES = (ShareStatus.UNPAID, ShareStatus.OVERDUE)

EMPTY_MENU = {'breakfast': 'Not set', 'lunch': 'Not set', 'dinner': 'Not set'}


def _sum(queryset, field='amount'):
    return queryset.aggregate(total=Coalesce(Sum(field), ZERO))['total']


class AnalyticsQueries:
    """
    Aggregations for the dashboard and the room analytics screen.

    Methods:
        dashboard_stats: Dashboard cards for the caller, by role.
        manager_stats: Manager variant of the dashboard.
        member_stats: Member variant of the dashboard.
        room_analytics: Room totals, category split and trend for a range.
        trend: Monthly deposits against expenses plus bills.

    Note:
        Deposits and expenses on the dashboard are scoped to the active
        calculation period when there is one, otherwise to the whole
        room. Bills on the dashboard are always the current month's.
    """

    @staticmethod
    def empty_dashboard():
        """Zeroed dashboard for a user who is not in a room yet."""
        return {
            'total_bills_amount': ZERO,
            'pending_approvals': 0,
            'fund_balance': ZERO,
            'active_members': 0,
            'total_bills_count': 0,
            'todays_menu': dict(EMPTY_MENU),
            'pending_join_requests_count': 0,
            'priority_actions': {'expenses': [], 'deposits': [], 'bill_payments': []},
            'bills_due_amount': ZERO,
            'bills_due_count': 0,
            'next_bill_due': None,
            'total_meal_count': 0,
            'refund_amount': ZERO,
        }

    @staticmethod
    def dashboard_stats(user):
        """
        Dashboard cards for the caller.

        Args:
            user (User): Authenticated caller.

        Returns:
            dict: ``empty_dashboard()`` without an approved room, else the
            manager or member variant, both carrying ``todays_menu``.
        """
        room = user.room
        if room is None or not user.belongs_to(room.khata_id):
            return AnalyticsQueries.empty_dashboard()

        if manages_room(user, room):
            return AnalyticsQueries.manager_stats(room)
        return AnalyticsQueries.member_stats(room, user)

    @staticmethod
    def _scope(room):
        """Deposit and expense querysets limited to the active period, if any."""
        deposits = Deposit.objects.filter(room=room)
        expenses = Expense.objects.filter(room=room)
        period = get_active_period(room)
        if period is not None:
            deposits = deposits.filter(calculation_period=period)
            expenses = expenses.filter(calculation_period=period)
        return deposits, expenses, period

    @staticmethod
    def _month_bills(room):
        first, last = month_bounds()
        return Bill.objects.filter(room=room, due_date__range=(first, last))

    @staticmethod
    def manager_stats(room):
        """
        Manager variant of the dashboard.

        Args:
            room (Room): Room managed by the caller.

        Returns:
            dict: A dictionary containing:
                - total_bills_amount, total_bills_count: bills due this month.
                - pending_approvals (int): pending deposits, expenses and
                  bill payments together.
                - fund_balance (Decimal): approved deposits minus approved
                  expenses in scope.
                - active_members (int): approved members besides the manager.
                - pending_join_requests_count (int)
                - priority_actions (dict): the pending items themselves.
                - todays_menu (dict)
        """
        deposits, expenses, _ = AnalyticsQueries._scope(room)
        bills = AnalyticsQueries._month_bills(room)

        pending_deposits = list(deposits.filter(status=ApprovalStatus.PENDING).order_by('-created_at'))
        pending_expenses = list(expenses.filter(status=ApprovalStatus.PENDING).order_by('-created_at'))
        pending_shares = (
            BillShare.objects
            .filter(bill__in=bills, status=ShareStatus.PENDING_APPROVAL)
            .select_related('bill')
            .order_by('bill__due_date')
        )
        bill_payments = [
            {
                'bill_id': share.bill_id,
                'bill_title': share.bill.title,
                'user_id': share.user_id,
                'user_name': share.user_name,
                'amount': money(share.amount),
            }
            for share in pending_shares
        ]

        totals = bills.aggregate(total=Coalesce(Sum('total_amount'), ZERO), count=Count('id'))
        fund_in = _sum(deposits.filter(status=ApprovalStatus.APPROVED))
        fund_out = _sum(expenses.filter(status=ApprovalStatus.APPROVED))

        return {
            'total_bills_amount': money(totals['total']),
            'total_bills_count': totals['count'],
            'pending_approvals': len(pending_deposits) + len(pending_expenses) + len(bill_payments),
            'fund_balance': money(fund_in - fund_out),
            'active_members': room.approved_members().exclude(id=room.manager_id).count(),
            'todays_menu': todays_menu(room=room, day_name=weekday_name()),
            'pending_join_requests_count': room.pending_members().count(),
            'priority_actions': {
                'expenses': ExpenseSerializer(pending_expenses, many=True).data,
                'deposits': DepositSerializer(pending_deposits, many=True).data,
                'bill_payments': bill_payments,
            },
        }

    @staticmethod
    def member_stats(room, user):
        """
        Member variant of the dashboard.

        Args:
            room (Room): The caller's room.
            user (User): The caller.

        Returns:
            dict: A dictionary containing:
                - bills_due_amount, bills_due_count: the caller's Unpaid or
                  Overdue shares of this month's bills.
                - next_bill_due (dict | None): ``{title, due_date}`` of the
                  earliest of those bills.
                - total_meal_count (int): in the active period, otherwise
                  in the current month.
                - refund_amount (Decimal): approved deposits minus approved
                  expenses of the caller in scope.
                - todays_menu (dict)
        """
        deposits, expenses, period = AnalyticsQueries._scope(room)

        due_shares = list(
            BillShare.objects
            .filter(
                bill__in=AnalyticsQueries._month_bills(room),
                user=user,
                status__in=UNPAID_STATUSES,
            )
            .select_related('bill')
            .order_by('bill__due_date')
        )
        next_bill = due_shares[0].bill if due_shares else None

        meals = Meal.objects.filter(room=room, user=user)
        if period is not None:
            meals = meals.filter(calculation_period=period)
        else:
            meals = meals.filter(date__range=month_bounds())

        paid_in = _sum(deposits.filter(user=user, status=ApprovalStatus.APPROVED))
        spent = _sum(expenses.filter(user=user, status=ApprovalStatus.APPROVED))

        return {
            'todays_menu': todays_menu(room=room, day_name=weekday_name()),
            'bills_due_amount': money(sum((share.amount for share in due_shares), ZERO)),
            'bills_due_count': len(due_shares),
            'next_bill_due': (
                {'title': next_bill.title, 'due_date': next_bill.due_date} if next_bill else None
            ),
            'total_meal_count': meals.aggregate(total=Sum('total_meals'))['total'] or 0,
            'refund_amount': money(paid_in - spent),
        }

    @staticmethod
    def range_start(range_name=RANGE_THIS_MONTH):
        """First day covered by a report range; unknown ranges mean this month."""
        if range_name == RANGE_LAST_30_DAYS:
            return today() - timedelta(days=30)
        return month_bounds()[0]

    @staticmethod
    def room_analytics(room, range_name=RANGE_THIS_MONTH):
        """
        Totals, spending split and trend of a room.

        Args:
            room (Room): Room to report on.
            range_name (str, optional): "This Month" or "Last 30 Days".
                Anything else is treated as "This Month".

        Returns:
            dict: A dictionary containing:
                - total_shopping_expenses (Decimal): approved expenses.
                - total_bill_amount (Decimal): bills due in range.
                - total_deposits (Decimal): approved deposits.
                - total_meals_count (int)
                - avg_meal_cost (Decimal): shopping per meal.
                - fund_health (Decimal): deposits minus bills and shopping.
                - bill_category_data (list[dict]): ``{label, value, color}``
                  per bill category, plus Shopping when non-zero.
                - trend_data (list[dict]): see ``trend``.
                - stats (dict): active_members and total_bills.

        Note:
            Expenses and deposits are placed in the range by their
            creation time, bills by due date and meals by meal date.
        """
        start = AnalyticsQueries.range_start(range_name)

        total_shopping = _sum(Expense.objects.filter(
            room=room, status=ApprovalStatus.APPROVED, created_at__date__gte=start
        ))
        bills = Bill.objects.filter(room=room, due_date__gte=start)
        total_bills = _sum(bills, 'total_amount')
        total_deposits = _sum(Deposit.objects.filter(
            room=room, status=ApprovalStatus.APPROVED, created_at__date__gte=start
        ))
        total_meals = Meal.objects.filter(room=room, date__gte=start).aggregate(
            total=Sum('total_meals')
        )['total'] or 0

        categories = [
            {'label': row['category'], 'value': money(row['value'])}
            for row in bills.values('category').annotate(value=Sum('total_amount')).order_by('category')
        ]
        if total_shopping > 0:
            categories.append({'label': ExpenseCategory.SHOPPING.label, 'value': money(total_shopping)})
        for index, item in enumerate(categories):
            item['color'] = CATEGORY_COLORS[index % len(CATEGORY_COLORS)]

        avg_meal_cost = total_shopping / total_meals if total_meals else ZERO

        return {
            'total_shopping_expenses': money(total_shopping),
            'total_bill_amount': money(total_bills),
            'total_deposits': money(total_deposits),
            'total_meals_count': total_meals,
            'avg_meal_cost': money(avg_meal_cost),
            'fund_health': money(total_deposits - (total_bills + total_shopping)),
            'bill_category_data': categories,
            'trend_data': AnalyticsQueries.trend(room),
            'stats': {
                'active_members': room.approved_members().count(),
                'total_bills': Bill.objects.filter(room=room).count(),
            },
        }

    @staticmethod
    def trend(room, months=TREND_MONTHS):
        """
        Monthly deposits against spending, oldest month first.

        Args:
            room (Room): Room to report on.
            months (int, optional): Number of months ending with the
                current one. Defaults to 6.

        Returns:
            list[dict]: ``{label, values}`` per month, where ``label`` is
            the short month name and ``values`` holds a Deposits and an
            Expenses entry (approved expenses plus bills due that month).
        """
        current = today()
        points = []
        for offset in range(months - 1, -1, -1):
            first, last = month_bounds(shift_months(current, -offset))

            deposits = _sum(Deposit.objects.filter(
                room=room, status=ApprovalStatus.APPROVED, created_at__date__range=(first, last)
            ))
            expenses = _sum(Expense.objects.filter(
                room=room, status=ApprovalStatus.APPROVED, created_at__date__range=(first, last)
            ))
            bills = _sum(Bill.objects.filter(room=room, due_date__range=(first, last)), 'total_amount')

            points.append({
                'label': first.strftime('%b'),
                'values': [
                    {'name': 'Deposits', 'value': money(deposits), 'color': DEPOSIT_COLOR},
                    {'name': 'Expenses', 'value': money(expenses + bills), 'color': EXPENSE_COLOR},
                ],
            })
        return points
