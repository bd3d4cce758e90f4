from django.urls import path
from . import views

app_name = 'periods'

urlpatterns = [
    path('calculation-periods/', views.periods, name='period-list'),
    path('calculation-periods/active/', views.active_period, name='period-active'),
    path('calculation-periods/<uuid:period_id>/end/', views.end_period_view, name='period-end'),
]
