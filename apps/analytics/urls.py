from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Dashboard
    path('dashboard/stats/', views.dashboard_stats, name='dashboard-stats'),

    # Room reports
    path('analytics/<str:khata_id>/', views.room_analytics, name='room-analytics'),
]
