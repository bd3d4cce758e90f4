"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation only; views return the
   dictionaries built by AnalyticsQueries

Input Serializers:
    RangeQuerySerializer - Validates the report range

Response Serializers:
    ManagerDashboardSerializer - Manager dashboard cards
    MemberDashboardSerializer - Member dashboard cards
    RoomAnalyticsSerializer - Room report with categories and trend
"""

from rest_framework import serializers

from .analytics import RANGE_THIS_MONTH


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class RangeQuerySerializer(serializers.Serializer):
    """
    Validate the report range query parameter.

    Used by: room_analytics

    Query Parameters:
        range (str): "This Month" or "Last 30 Days"

    Note:
        Unknown values are accepted and reported as "This Month".
    """

    range = serializers.CharField(required=False, allow_blank=True, default=RANGE_THIS_MONTH)


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class MenuSerializer(serializers.Serializer):
    breakfast = serializers.CharField()
    lunch = serializers.CharField()
    dinner = serializers.CharField()


class PendingBillPaymentSerializer(serializers.Serializer):
    bill_id = serializers.UUIDField()
    bill_title = serializers.CharField()
    user_id = serializers.UUIDField()
    user_name = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class PriorityActionsSerializer(serializers.Serializer):
    expenses = serializers.ListField(child=serializers.DictField())
    deposits = serializers.ListField(child=serializers.DictField())
    bill_payments = PendingBillPaymentSerializer(many=True)


class ManagerDashboardSerializer(serializers.Serializer):
    total_bills_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_bills_count = serializers.IntegerField()
    pending_approvals = serializers.IntegerField()
    fund_balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    active_members = serializers.IntegerField()
    todays_menu = MenuSerializer()
    pending_join_requests_count = serializers.IntegerField()
    priority_actions = PriorityActionsSerializer()


class NextBillSerializer(serializers.Serializer):
    title = serializers.CharField()
    due_date = serializers.DateField()


class MemberDashboardSerializer(serializers.Serializer):
    todays_menu = MenuSerializer()
    bills_due_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    bills_due_count = serializers.IntegerField()
    next_bill_due = NextBillSerializer(allow_null=True)
    total_meal_count = serializers.IntegerField()
    refund_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class CategorySliceSerializer(serializers.Serializer):
    label = serializers.CharField()
    value = serializers.DecimalField(max_digits=12, decimal_places=2)
    color = serializers.CharField()


class TrendValueSerializer(serializers.Serializer):
    name = serializers.CharField()
    value = serializers.DecimalField(max_digits=12, decimal_places=2)
    color = serializers.CharField()


class TrendPointSerializer(serializers.Serializer):
    label = serializers.CharField()
    values = TrendValueSerializer(many=True)


class RoomStatsSerializer(serializers.Serializer):
    active_members = serializers.IntegerField()
    total_bills = serializers.IntegerField()


class RoomAnalyticsSerializer(serializers.Serializer):
    total_shopping_expenses = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_bill_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_deposits = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_meals_count = serializers.IntegerField()
    avg_meal_cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    fund_health = serializers.DecimalField(max_digits=12, decimal_places=2)
    bill_category_data = CategorySliceSerializer(many=True)
    trend_data = TrendPointSerializer(many=True)
    stats = RoomStatsSerializer()
