from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for roommates and managers."""

    list_display = [
        'email',
        'name',
        'role',
        'room',
        'room_status',
        'verified_badge',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'role',
        'room_status',
        'is_verified',
        'is_dummy_account',
        'is_active',
        'is_staff',
    ]

    search_fields = ['email', 'name', 'room__khata_id']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'name', 'password', 'role')
        }),
        ('Room', {
            'fields': ('room', 'room_status'),
        }),
        ('Profile', {
            'fields': ('avatar_url', 'phone', 'whatsapp', 'facebook', 'food_preferences'),
            'classes': ('collapse',),
        }),
        ('Verification', {
            'fields': ('is_verified', 'is_dummy_account', 'otp_expires_at'),
            'classes': ('collapse',),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login', 'otp_expires_at']
    raw_id_fields = ['room']
    filter_horizontal = ['groups', 'user_permissions']

    def verified_badge(self, obj):
        """Display email verification status as colored badge."""
        if obj.is_verified:
            return format_html(
                '<span style="background: #10b981; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Verified</span>'
            )
        return format_html(
            '<span style="background: #f59e0b; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Pending</span>'
        )
    verified_badge.short_description = 'Email'
    verified_badge.admin_order_field = 'is_verified'

    actions = ['verify_emails', 'deactivate_users']

    @admin.action(description='Mark emails as verified')
    def verify_emails(self, request, queryset):
        count = queryset.update(is_verified=True, otp=None, otp_expires_at=None)
        self.message_user(request, f'Verified {count} email(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users; superusers are skipped."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        self.message_user(request, f'Deactivated {count} user(s).')

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('room')
