from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, Role


class FoodPreferencesSerializer(serializers.Serializer):
    """Likes, dislikes and foods to avoid, at most 20 entries each."""

    likes = serializers.ListField(
        child=serializers.CharField(max_length=50), max_length=20, required=False
    )
    dislikes = serializers.ListField(
        child=serializers.CharField(max_length=50), max_length=20, required=False
    )
    avoidance = serializers.ListField(
        child=serializers.CharField(max_length=50), max_length=20, required=False
    )
    notes = serializers.CharField(max_length=500, allow_blank=True, required=False)


class UserSerializer(serializers.ModelSerializer):
    """User profile as seen by the user themself."""

    khata_id = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'role',
            'room_status',
            'khata_id',
            'avatar_url',
            'phone',
            'whatsapp',
            'facebook',
            'food_preferences',
            'is_verified',
            'is_dummy_account',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class UserPublicSerializer(serializers.ModelSerializer):
    """Public user info (room member lists, approvals)."""

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role', 'avatar_url', 'phone', 'whatsapp', 'facebook']
        read_only_fields = fields


class SignupSerializer(serializers.Serializer):
    """Serializer for user registration."""

    name = serializers.CharField(min_length=2, max_length=50)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(
        choices=[Role.MANAGER, Role.MEMBER],
        default=Role.MEMBER,
    )

    def validate_email(self, value):
        return value.strip().lower()


class LoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)


class EmailSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)


class VerifyEmailSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    otp = serializers.RegexField(r'^\d{6}$', required=True)


class ResetPasswordSerializer(serializers.Serializer):
    """Serializer for password reset confirmation."""

    email = serializers.EmailField(required=True)
    otp = serializers.RegexField(r'^\d{6}$', required=True)
    new_password = serializers.CharField(
        required=True,
        style={'input_type': 'password'}
    )


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=50, required=False)
    avatar_url = serializers.URLField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    whatsapp = serializers.CharField(max_length=30, required=False, allow_blank=True)
    facebook = serializers.CharField(max_length=200, required=False, allow_blank=True)
    food_preferences = FoodPreferencesSerializer(required=False)


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(required=True, style={'input_type': 'password'})
    new_password = serializers.CharField(required=True, style={'input_type': 'password'})


class AdminMemberUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=50, required=False)
    email = serializers.EmailField(required=False)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    whatsapp = serializers.CharField(max_length=30, required=False, allow_blank=True)
    facebook = serializers.CharField(max_length=200, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    avatar_url = serializers.URLField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, style={'input_type': 'password'})
