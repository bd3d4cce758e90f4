from decimal import Decimal

from rest_framework import serializers
from .models import Meal, MealFinalization, MealHistory, MenuDay, DutyAssignment, Weekday, DutyStatus

PORTION = {'min_value': 0, 'max_value': 2, 'required': False, 'allow_null': True}


class MealSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)
    calculation_period = serializers.UUIDField(source='calculation_period_id', read_only=True)

    class Meta:
        model = Meal
        fields = [
            'id',
            'user_id',
            'user_name',
            'date',
            'breakfast',
            'lunch',
            'dinner',
            'total_meals',
            'calculation_period',
            'updated_at',
        ]
        read_only_fields = fields


class MealUpsertSerializer(serializers.Serializer):
    date = serializers.DateField()
    user_id = serializers.UUIDField(required=False, allow_null=True)
    breakfast = serializers.IntegerField(**PORTION)
    lunch = serializers.IntegerField(**PORTION)
    dinner = serializers.IntegerField(**PORTION)


class MealRangeSerializer(serializers.Serializer):
    """Query parameters of meal and history listings."""
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    user_id = serializers.UUIDField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError("start_date must not be after end_date")
        return attrs


class FinalizeSerializer(serializers.Serializer):
    date = serializers.DateField()


class MealFinalizationSerializer(serializers.ModelSerializer):
    finalized_by = serializers.UUIDField(source='finalized_by_id', read_only=True)

    class Meta:
        model = MealFinalization
        fields = ['id', 'date', 'finalized_by', 'finalized_by_name', 'created_at']
        read_only_fields = fields


class MealHistorySerializer(serializers.ModelSerializer):
    target_user_id = serializers.UUIDField(read_only=True)
    target_user_name = serializers.CharField(source='target_user.name', read_only=True)
    changed_by_id = serializers.UUIDField(read_only=True)
    changed_by_name = serializers.CharField(source='changed_by.name', read_only=True, default='')

    class Meta:
        model = MealHistory
        fields = [
            'id',
            'target_user_id',
            'target_user_name',
            'changed_by_id',
            'changed_by_name',
            'date',
            'breakfast',
            'lunch',
            'dinner',
            'created_at',
        ]
        read_only_fields = fields


class UserMealsSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    user_name = serializers.CharField()
    total_meals = serializers.IntegerField()
    breakfast = serializers.IntegerField()
    lunch = serializers.IntegerField()
    dinner = serializers.IntegerField()


class MealSummarySerializer(serializers.Serializer):
    total_meals = serializers.IntegerField()
    current_user_meals = serializers.IntegerField()
    user_meals = UserMealsSerializer(many=True)


class MenuDaySerializer(serializers.ModelSerializer):
    class Meta:
        model = MenuDay
        fields = ['day', 'breakfast', 'lunch', 'dinner']


class MenuSaveSerializer(serializers.Serializer):
    items = MenuDaySerializer(many=True)
    is_permanent = serializers.BooleanField(required=False, default=False)

    def validate_items(self, items):
        days = [item['day'] for item in items]
        if len(days) != len(set(days)):
            raise serializers.ValidationError("Each day may appear only once")
        return items


class MenuDayUpdateSerializer(serializers.Serializer):
    breakfast = serializers.CharField(max_length=200, required=False, allow_blank=True)
    lunch = serializers.CharField(max_length=200, required=False, allow_blank=True)
    dinner = serializers.CharField(max_length=200, required=False, allow_blank=True)


class DutyAssignmentSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = DutyAssignment
        fields = ['id', 'day', 'user_id', 'user_name', 'status', 'amount']
        read_only_fields = fields


class DutyAssignmentInputSerializer(serializers.Serializer):
    day = serializers.ChoiceField(choices=Weekday.choices)
    user_id = serializers.UUIDField(required=False, allow_null=True)
    user_name = serializers.CharField(max_length=50, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=DutyStatus.choices, required=False)
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True
    )


class RosterSaveSerializer(serializers.Serializer):
    items = DutyAssignmentInputSerializer(many=True)
