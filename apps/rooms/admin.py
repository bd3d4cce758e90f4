from django.contrib import admin
from .models import Room, RoomMembership, Staff


class RoomMembershipInline(admin.TabularInline):
    model = RoomMembership
    extra = 0
    raw_id_fields = ['user']
    readonly_fields = ['joined_at']


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ['khata_id', 'name', 'manager', 'created_at']
    search_fields = ['khata_id', 'name', 'manager__email']
    raw_id_fields = ['manager']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [RoomMembershipInline]


@admin.register(RoomMembership)
class RoomMembershipAdmin(admin.ModelAdmin):
    list_display = ['user', 'room', 'status', 'joined_at']
    list_filter = ['status']
    search_fields = ['user__email', 'room__khata_id']
    raw_id_fields = ['room', 'user']


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ['name', 'designation', 'phone', 'room']
    search_fields = ['name', 'room__khata_id']
    raw_id_fields = ['room']
