from decimal import Decimal

from rest_framework import serializers
from .models import Bill, BillShare, BillCategory, ShareStatus


class BillShareSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = BillShare
        fields = ['user_id', 'user_name', 'amount', 'status', 'paid_from_meal_fund']
        read_only_fields = fields


class BillSerializer(serializers.ModelSerializer):
    """Bill with its shares."""

    khata_id = serializers.CharField(source='room.khata_id', read_only=True)
    created_by = serializers.UUIDField(source='created_by_id', read_only=True)
    shares = BillShareSerializer(many=True, read_only=True)

    class Meta:
        model = Bill
        fields = [
            'id',
            'khata_id',
            'title',
            'category',
            'total_amount',
            'due_date',
            'description',
            'image_url',
            'created_by',
            'shares',
            'created_at',
        ]
        read_only_fields = fields


class ShareInputSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    user_name = serializers.CharField(max_length=50, required=False, allow_blank=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    status = serializers.ChoiceField(choices=ShareStatus.choices, required=False)


class BillCreateSerializer(serializers.Serializer):
    """Serializer for creating a bill."""

    title = serializers.CharField(max_length=100)
    category = serializers.ChoiceField(choices=BillCategory.choices)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    due_date = serializers.DateField()
    description = serializers.CharField(required=False, allow_blank=True, default='')
    image_url = serializers.URLField(required=False, allow_blank=True, default='')
    shares = ShareInputSerializer(many=True, allow_empty=False)
    auto_deduct_from_meal_fund = serializers.BooleanField(required=False, default=False)


class BillUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=100, required=False)
    category = serializers.ChoiceField(choices=BillCategory.choices, required=False)
    total_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0.01'), required=False
    )
    due_date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    image_url = serializers.URLField(required=False, allow_blank=True)
    shares = ShareInputSerializer(many=True, required=False)


class ShareStatusSerializer(serializers.Serializer):
    # Validated in the service so that unknown values produce the domain error
    status = serializers.CharField()


class BillStatsSerializer(serializers.Serializer):
    total_unpaid = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_paid = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_overdue = serializers.DecimalField(max_digits=12, decimal_places=2)
    pending_approvals = serializers.IntegerField()
