from django.contrib import admin
from .models import CalculationPeriod


@admin.register(CalculationPeriod)
class CalculationPeriodAdmin(admin.ModelAdmin):
    list_display = ['name', 'room', 'status', 'start_date', 'end_date', 'started_by']
    list_filter = ['status']
    search_fields = ['name', 'room__khata_id']
    raw_id_fields = ['room', 'started_by', 'ended_by']
    date_hierarchy = 'start_date'
