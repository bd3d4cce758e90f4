from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
import uuid


class BillCategory(models.TextChoices):
    RENT = 'Rent', 'Rent'
    ELECTRICITY = 'Electricity', 'Electricity'
    WATER = 'Water', 'Water'
    GAS = 'Gas', 'Gas'
    WIFI = 'Wi-Fi', 'Wi-Fi'
    MAID = 'Maid', 'Maid'
    OTHERS = 'Others', 'Others'


class ShareStatus(models.TextChoices):
    UNPAID = 'Unpaid', 'Unpaid'
    PENDING_APPROVAL = 'Pending Approval', 'Pending Approval'
    PAID = 'Paid', 'Paid'
    OVERDUE = 'Overdue', 'Overdue'


class Bill(models.Model):
    """A shared household bill split into per-member shares."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey('rooms.Room', on_delete=models.CASCADE, related_name='bills')
    title = models.CharField(max_length=100)
    category = models.CharField(max_length=20, choices=BillCategory.choices)
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    due_date = models.DateField()
    description = models.TextField(blank=True)
    image_url = models.URLField(blank=True)
    created_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, related_name='created_bills'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bills'
        indexes = [
            models.Index(fields=['room', '-due_date']),
            models.Index(fields=['room', 'category']),
        ]
        ordering = ['-due_date']

    def __str__(self):
        return f"{self.title} ({self.category})"


class BillShare(models.Model):
    """One member's part of a bill."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name='shares')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='bill_shares')
    user_name = models.CharField(max_length=50)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    status = models.CharField(max_length=20, choices=ShareStatus.choices, default=ShareStatus.UNPAID)
    paid_from_meal_fund = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bill_shares'
        unique_together = [['bill', 'user']]
        indexes = [
            models.Index(fields=['user', 'status']),
        ]
        ordering = ['user_name']

    def __str__(self):
        return f"{self.user_name}: {self.amount} ({self.status})"
