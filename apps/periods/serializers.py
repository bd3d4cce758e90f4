from rest_framework import serializers
from .models import CalculationPeriod


class PeriodUserSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()


class CalculationPeriodSerializer(serializers.ModelSerializer):
    started_by = PeriodUserSerializer(read_only=True)
    ended_by = PeriodUserSerializer(read_only=True)
    khata_id = serializers.CharField(source='room.khata_id', read_only=True)

    class Meta:
        model = CalculationPeriod
        fields = [
            'id',
            'khata_id',
            'name',
            'start_date',
            'end_date',
            'status',
            'started_by',
            'ended_by',
            'created_at',
        ]
        read_only_fields = fields


class StartPeriodSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50, allow_blank=True, required=False, default='')
