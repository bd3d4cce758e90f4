from rest_framework import serializers
from .models import Notification, NotificationType
from .services import REMINDER_MESSAGES


class NotificationSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)
    room_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Notification
        fields = [
            'id',
            'user_id',
            'room_id',
            'type',
            'title',
            'message',
            'action_text',
            'link',
            'read',
            'related_id',
            'created_at',
        ]
        read_only_fields = fields


class NotificationCreateSerializer(serializers.Serializer):
    user_id = serializers.UUIDField(required=False, allow_null=True)
    type = serializers.ChoiceField(choices=NotificationType.choices, required=False, default=NotificationType.BILL)
    title = serializers.CharField(max_length=200)
    message = serializers.CharField()
    action_text = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    link = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')
    related_id = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')


class NotificationReadSerializer(serializers.Serializer):
    read = serializers.BooleanField(required=False, default=True)


class PushKeysSerializer(serializers.Serializer):
    p256dh = serializers.CharField(max_length=255)
    auth = serializers.CharField(max_length=255)


class PushSubscribeSerializer(serializers.Serializer):
    endpoint = serializers.URLField(max_length=500)
    keys = PushKeysSerializer()


class PushUnsubscribeSerializer(serializers.Serializer):
    endpoint = serializers.CharField(max_length=500)


class ReminderSerializer(serializers.Serializer):
    khata_id = serializers.CharField(max_length=50)
    # Unknown types are reported by the service as "Invalid reminder type"
    type = serializers.CharField(max_length=30, help_text=', '.join(REMINDER_MESSAGES))
    target_user_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    bill_id = serializers.UUIDField(required=False, allow_null=True)
    message = serializers.CharField(required=False, allow_blank=True, default='')
