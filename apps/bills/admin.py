from django.contrib import admin
from .models import Bill, BillShare


class BillShareInline(admin.TabularInline):
    model = BillShare
    extra = 0
    raw_id_fields = ['user']
    fields = ['user', 'user_name', 'amount', 'status', 'paid_from_meal_fund']


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ['title', 'room', 'category', 'total_amount', 'due_date', 'created_by']
    list_filter = ['category', 'due_date']
    search_fields = ['title', 'room__khata_id']
    raw_id_fields = ['room', 'created_by']
    date_hierarchy = 'due_date'
    inlines = [BillShareInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('room', 'created_by')
