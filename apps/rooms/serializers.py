from rest_framework import serializers
from apps.accounts.serializers import UserPublicSerializer
from .models import Room, RoomMembership, Staff, khata_id_validator


class RoomSerializer(serializers.ModelSerializer):
    """Room with its manager."""

    manager = UserPublicSerializer(read_only=True)

    class Meta:
        model = Room
        fields = ['id', 'khata_id', 'name', 'manager', 'created_at']
        read_only_fields = fields


class RoomDetailSerializer(serializers.Serializer):
    room = RoomSerializer()
    member_count = serializers.IntegerField()


class RoomCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100)
    khata_id = serializers.CharField(min_length=3, max_length=50, validators=[khata_id_validator])


class JoinRoomSerializer(serializers.Serializer):
    khata_id = serializers.CharField(max_length=50)


class PendingMemberSerializer(serializers.ModelSerializer):
    """Join request with the requesting user."""

    user = UserPublicSerializer(read_only=True)

    class Meta:
        model = RoomMembership
        fields = ['id', 'user', 'status', 'joined_at']
        read_only_fields = fields


class PendingCountsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    breakdown = serializers.DictField(child=serializers.IntegerField())


class MemberCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    password = serializers.CharField(required=False, allow_blank=True, allow_null=True, write_only=True)
    avatar_url = serializers.URLField(required=False, allow_blank=True, default='')


class GeneratedCredentialsSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()


class MemberCreatedSerializer(serializers.Serializer):
    member = UserPublicSerializer()
    generated_credentials = GeneratedCredentialsSerializer(allow_null=True)


class StaffSerializer(serializers.ModelSerializer):
    class Meta:
        model = Staff
        fields = ['id', 'name', 'designation', 'phone', 'avatar_url', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
