from django.contrib import admin
from .models import Notification, PushSubscription


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['title', 'user', 'room', 'type', 'read', 'created_at']
    list_filter = ['type', 'read']
    search_fields = ['title', 'message', 'user__email']
    raw_id_fields = ['user', 'room']
    readonly_fields = ['created_at']
    date_hierarchy = 'created_at'


@admin.register(PushSubscription)
class PushSubscriptionAdmin(admin.ModelAdmin):
    list_display = ['user', 'endpoint', 'created_at']
    search_fields = ['user__email', 'endpoint']
    raw_id_fields = ['user']
