from django.contrib import admin
from .models import Deposit, Expense


class ApprovableAdmin(admin.ModelAdmin):
    list_filter = ['status']
    search_fields = ['user_name', 'user__email', 'room__khata_id']
    raw_id_fields = ['room', 'user', 'approved_by', 'calculation_period']
    readonly_fields = ['approved_at', 'created_at']
    date_hierarchy = 'created_at'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('room', 'user')


@admin.register(Deposit)
class DepositAdmin(ApprovableAdmin):
    list_display = ['user_name', 'room', 'amount', 'payment_method', 'status', 'created_at']
    list_filter = ['status', 'payment_method']


@admin.register(Expense)
class ExpenseAdmin(ApprovableAdmin):
    list_display = ['user_name', 'room', 'amount', 'category', 'status', 'created_at']
    list_filter = ['status', 'category']
