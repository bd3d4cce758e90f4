from django.db import models
from django.db.models import Q
import uuid


class PeriodStatus(models.TextChoices):
    ACTIVE = 'Active', 'Active'
    ENDED = 'Ended', 'Ended'


class CalculationPeriod(models.Model):
    """Accounting window that deposits, expenses and meals are grouped under."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey('rooms.Room', on_delete=models.CASCADE, related_name='calculation_periods')
    name = models.CharField(max_length=50)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=PeriodStatus.choices, default=PeriodStatus.ACTIVE)
    started_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, related_name='started_periods'
    )
    ended_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='ended_periods'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'calculation_periods'
        constraints = [
            models.UniqueConstraint(
                fields=['room'],
                condition=Q(status='Active'),
                name='one_active_period_per_room',
            ),
        ]
        indexes = [
            models.Index(fields=['room', 'status']),
        ]
        ordering = ['-start_date']

    def __str__(self):
        return f"{self.name} ({self.status})"

    @property
    def is_active(self):
        return self.status == PeriodStatus.ACTIVE
