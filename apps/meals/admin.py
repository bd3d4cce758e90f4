from django.contrib import admin
from .models import Meal, MealFinalization, MealHistory, Menu, MenuDay, ShoppingDuty, DutyAssignment


@admin.register(Meal)
class MealAdmin(admin.ModelAdmin):
    list_display = ['user_name', 'room', 'date', 'breakfast', 'lunch', 'dinner', 'total_meals']
    list_filter = ['date']
    search_fields = ['user_name', 'room__khata_id']
    raw_id_fields = ['room', 'user', 'calculation_period']
    readonly_fields = ['total_meals', 'created_at', 'updated_at']
    date_hierarchy = 'date'


@admin.register(MealFinalization)
class MealFinalizationAdmin(admin.ModelAdmin):
    list_display = ['room', 'date', 'finalized_by_name', 'created_at']
    raw_id_fields = ['room', 'finalized_by']


@admin.register(MealHistory)
class MealHistoryAdmin(admin.ModelAdmin):
    list_display = ['target_user', 'changed_by', 'room', 'date', 'breakfast', 'lunch', 'dinner', 'created_at']
    raw_id_fields = ['room', 'target_user', 'changed_by']
    readonly_fields = ['created_at']


class MenuDayInline(admin.TabularInline):
    model = MenuDay
    extra = 0


@admin.register(Menu)
class MenuAdmin(admin.ModelAdmin):
    list_display = ['room', 'week_start', 'is_permanent', 'updated_at']
    list_filter = ['is_permanent']
    raw_id_fields = ['room']
    inlines = [MenuDayInline]


class DutyAssignmentInline(admin.TabularInline):
    model = DutyAssignment
    extra = 0
    raw_id_fields = ['user']


@admin.register(ShoppingDuty)
class ShoppingDutyAdmin(admin.ModelAdmin):
    list_display = ['room', 'week_start', 'updated_at']
    raw_id_fields = ['room']
    inlines = [DutyAssignmentInline]
