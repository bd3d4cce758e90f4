from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
import uuid

from apps.core.approvals import ApprovableModel


class PaymentMethod(models.TextChoices):
    BKASH = 'bKash', 'bKash'
    NAGAD = 'Nagad', 'Nagad'
    ROCKET = 'Rocket', 'Rocket'
    CASH = 'Cash', 'Cash'
    BANK_TRANSFER = 'Bank Transfer', 'Bank Transfer'
    MANAGER_ADJUSTMENT = 'Manager Adjustment', 'Manager Adjustment'


class ExpenseCategory(models.TextChoices):
    SHOPPING = 'Shopping', 'Shopping'
    BILL_PAYMENT = 'BillPayment', 'Bill Payment'
    ADJUSTMENT = 'Adjustment', 'Adjustment'


class Deposit(ApprovableModel):
    """Money a member paid into the room's meal fund."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey('rooms.Room', on_delete=models.CASCADE, related_name='deposits')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='deposits')
    user_name = models.CharField(max_length=50)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    payment_method = models.CharField(max_length=30, choices=PaymentMethod.choices)
    transaction_id = models.CharField(max_length=100, blank=True)
    screenshot_url = models.URLField(blank=True)
    notes = models.TextField(blank=True)
    calculation_period = models.ForeignKey(
        'periods.CalculationPeriod',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='deposits',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    approval_label = 'Deposit'

    class Meta:
        db_table = 'deposits'
        indexes = [
            models.Index(fields=['room', 'status']),
            models.Index(fields=['user', 'status']),
            models.Index(fields=['room', '-created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Deposit {self.amount} by {self.user_name} ({self.status})"


class Expense(ApprovableModel):
    """Money spent from the meal fund: shopping, bill payments, adjustments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey('rooms.Room', on_delete=models.CASCADE, related_name='expenses')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='expenses')
    user_name = models.CharField(max_length=50)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
    )
    items = models.TextField()
    notes = models.TextField(blank=True)
    receipt_url = models.URLField(blank=True)
    category = models.CharField(
        max_length=20,
        choices=ExpenseCategory.choices,
        default=ExpenseCategory.SHOPPING,
    )
    calculation_period = models.ForeignKey(
        'periods.CalculationPeriod',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    approval_label = 'Expense'

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['room', 'status', 'category']),
            models.Index(fields=['user', 'status']),
            models.Index(fields=['room', '-created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Expense {self.amount} by {self.user_name} ({self.category}, {self.status})"
