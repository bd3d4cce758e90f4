from django.urls import path
from . import views

app_name = 'bills'

urlpatterns = [
    path('bills/', views.bill_create, name='bill-create'),
    path('bills/<uuid:bill_id>/', views.bill_detail, name='bill-detail'),
    path('bills/<uuid:bill_id>/share/<uuid:user_id>/', views.share_status, name='share-status'),
    path('bills/<uuid:bill_id>/remind/', views.bill_remind, name='bill-remind'),
    path('bills/room/<str:khata_id>/', views.room_bills, name='room-bills'),
    path('bills/room/<str:khata_id>/stats/', views.room_bill_stats, name='room-bill-stats'),
]
