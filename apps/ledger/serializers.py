from decimal import Decimal

from rest_framework import serializers
from .models import Deposit, Expense, PaymentMethod, ExpenseCategory


class ApproverSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()


class DepositSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)
    approved_by = ApproverSerializer(read_only=True)
    calculation_period = serializers.UUIDField(source='calculation_period_id', read_only=True)

    class Meta:
        model = Deposit
        fields = [
            'id',
            'user_id',
            'user_name',
            'amount',
            'payment_method',
            'transaction_id',
            'screenshot_url',
            'notes',
            'status',
            'approved_by',
            'approved_at',
            'rejection_reason',
            'calculation_period',
            'created_at',
        ]
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)
    approved_by = ApproverSerializer(read_only=True)
    calculation_period = serializers.UUIDField(source='calculation_period_id', read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id',
            'user_id',
            'user_name',
            'amount',
            'items',
            'notes',
            'receipt_url',
            'category',
            'status',
            'approved_by',
            'approved_at',
            'rejection_reason',
            'calculation_period',
            'created_at',
        ]
        read_only_fields = fields


class DepositCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    # Adjustments are recorded by the manager through the adjust endpoint
    payment_method = serializers.ChoiceField(
        choices=[c for c in PaymentMethod.choices if c[0] != PaymentMethod.MANAGER_ADJUSTMENT]
    )
    transaction_id = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    screenshot_url = serializers.URLField(required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class ExpenseCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    items = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    receipt_url = serializers.URLField(required=False, allow_blank=True, default='')
    category = serializers.ChoiceField(
        choices=[ExpenseCategory.SHOPPING, ExpenseCategory.BILL_PAYMENT],
        required=False,
        default=ExpenseCategory.SHOPPING,
    )


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class AdjustFundSerializer(serializers.Serializer):
    # Presence and type are checked by the service
    user_id = serializers.UUIDField(required=False, allow_null=True)
    type = serializers.CharField(required=False, allow_blank=True, default='')
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True
    )
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class MemberBalanceSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.EmailField()
    avatar_url = serializers.CharField()
    total_deposits = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_meals = serializers.IntegerField()
    meal_cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_bill_payments = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)


class BalancesSerializer(serializers.Serializer):
    rate = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_shopping = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_meals = serializers.IntegerField()
    balances = MemberBalanceSerializer(many=True)


class FundStatusSerializer(serializers.Serializer):
    total_deposits = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_shopping = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    rate = serializers.DecimalField(max_digits=12, decimal_places=2)


class MemberSummarySerializer(serializers.Serializer):
    total_deposits = serializers.DecimalField(max_digits=12, decimal_places=2)
    meal_cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    refundable = serializers.DecimalField(max_digits=12, decimal_places=2)


class FundSummarySerializer(serializers.Serializer):
    fund_status = FundStatusSerializer()
    member_summary = MemberSummarySerializer()


class MealBalanceSerializer(serializers.Serializer):
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_deposits = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_expenses = serializers.DecimalField(max_digits=12, decimal_places=2)
