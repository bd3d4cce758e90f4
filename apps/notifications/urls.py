from django.urls import path
from . import views

app_name = 'notifications'

urlpatterns = [
    # Inbox
    path('notifications/', views.notifications, name='notification-list'),
    path('notifications/mark-all-read/', views.mark_all_read_view, name='mark-all-read'),
    path('notifications/unread-count/', views.unread_count_view, name='unread-count'),
    path('notifications/<uuid:notification_id>/', views.notification_detail, name='notification-detail'),
    path('notifications/<uuid:notification_id>/read/', views.notification_read, name='notification-read'),

    # Web Push
    path('push/subscribe/', views.push_subscription, name='push-subscribe'),
    path('push/test/', views.push_test, name='push-test'),

    # Reminders
    path('reminders/send/', views.reminders, name='send-reminder'),
]
