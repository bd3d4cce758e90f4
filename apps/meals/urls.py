from django.urls import path
from . import views

app_name = 'meals'

urlpatterns = [
    # Meals
    path('meals/<str:khata_id>/', views.meals, name='meals'),
    path('meals/<str:khata_id>/finalize/', views.finalize, name='finalize'),
    path('meals/<str:khata_id>/finalization/<str:day>/', views.finalization, name='finalization'),
    path('meals/<str:khata_id>/summary/', views.summary, name='summary'),
    path('meals/<str:khata_id>/history/', views.history, name='history'),
    path('meals/<str:khata_id>/user/<uuid:user_id>/', views.user_meals, name='user-meals'),

    # Menu
    path('menu/<str:khata_id>/', views.menu, name='menu'),
    path('menu/<str:khata_id>/day/<str:day>/', views.menu_day, name='menu-day'),

    # Shopping roster
    path('shopping/<str:khata_id>/roster/', views.roster, name='roster'),
]
