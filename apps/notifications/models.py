from django.db import models
import uuid


class NotificationType(models.TextChoices):
    BILL = 'bill', 'Bill'
    PAYMENT = 'payment', 'Payment'
    MEAL = 'meal', 'Meal'
    ROOM = 'room', 'Room'
    DEPOSIT = 'deposit', 'Deposit'
    EXPENSE = 'expense', 'Expense'


class Notification(models.Model):
    """In-app notification stored for one user in one room."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='notifications')
    room = models.ForeignKey('rooms.Room', on_delete=models.CASCADE, related_name='notifications')
    type = models.CharField(max_length=20, choices=NotificationType.choices, default=NotificationType.BILL)
    title = models.CharField(max_length=200)
    message = models.TextField()
    action_text = models.CharField(max_length=100, blank=True)
    link = models.CharField(max_length=300, blank=True)
    read = models.BooleanField(default=False)
    related_id = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        indexes = [
            models.Index(fields=['user', 'read', '-created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} -> {self.user_id}"


class PushSubscription(models.Model):
    """Browser Web Push endpoint registered by a user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='push_subscriptions')
    endpoint = models.URLField(max_length=500, unique=True)
    p256dh = models.CharField(max_length=255)
    auth = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'push_subscriptions'
        indexes = [
            models.Index(fields=['user']),
        ]

    def __str__(self):
        return f"{self.user_id} @ {self.endpoint[:40]}"

    def as_subscription_info(self):
        return {
            'endpoint': self.endpoint,
            'keys': {'p256dh': self.p256dh, 'auth': self.auth},
        }
