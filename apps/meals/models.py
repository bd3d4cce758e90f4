from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
import uuid

MEAL_PORTION_VALIDATORS = [MinValueValidator(0), MaxValueValidator(2)]


class Weekday(models.TextChoices):
    MONDAY = 'Monday', 'Monday'
    TUESDAY = 'Tuesday', 'Tuesday'
    WEDNESDAY = 'Wednesday', 'Wednesday'
    THURSDAY = 'Thursday', 'Thursday'
    FRIDAY = 'Friday', 'Friday'
    SATURDAY = 'Saturday', 'Saturday'
    SUNDAY = 'Sunday', 'Sunday'


class DutyStatus(models.TextChoices):
    UPCOMING = 'Upcoming', 'Upcoming'
    ASSIGNED = 'Assigned', 'Assigned'
    COMPLETED = 'Completed', 'Completed'


class Meal(models.Model):
    """How many breakfasts, lunches and dinners a member ate on a day."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey('rooms.Room', on_delete=models.CASCADE, related_name='meals')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='meals')
    user_name = models.CharField(max_length=50)
    date = models.DateField()
    breakfast = models.PositiveSmallIntegerField(default=0, validators=MEAL_PORTION_VALIDATORS)
    lunch = models.PositiveSmallIntegerField(default=0, validators=MEAL_PORTION_VALIDATORS)
    dinner = models.PositiveSmallIntegerField(default=0, validators=MEAL_PORTION_VALIDATORS)
    total_meals = models.PositiveSmallIntegerField(default=0, editable=False)
    calculation_period = models.ForeignKey(
        'periods.CalculationPeriod',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='meals',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'meals'
        unique_together = [['room', 'user', 'date']]
        indexes = [
            models.Index(fields=['room', 'date']),
        ]
        ordering = ['-date']

    def __str__(self):
        return f"{self.user_name} {self.date}: {self.total_meals}"

    def save(self, *args, **kwargs):
        self.total_meals = (self.breakfast or 0) + (self.lunch or 0) + (self.dinner or 0)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'total_meals' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['total_meals']
        super().save(*args, **kwargs)


class MealFinalization(models.Model):
    """Marks a day as closed; members can no longer change their meals for it."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey('rooms.Room', on_delete=models.CASCADE, related_name='meal_finalizations')
    date = models.DateField()
    finalized_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, related_name='+'
    )
    finalized_by_name = models.CharField(max_length=50)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'meal_finalizations'
        unique_together = [['room', 'date']]
        ordering = ['-date']

    def __str__(self):
        return f"{self.room_id} {self.date} finalized by {self.finalized_by_name}"


class MealHistory(models.Model):
    """Audit row written on every meal change."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey('rooms.Room', on_delete=models.CASCADE, related_name='meal_history')
    target_user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='meal_history')
    changed_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, related_name='meal_changes'
    )
    date = models.DateField()
    breakfast = models.PositiveSmallIntegerField(default=0)
    lunch = models.PositiveSmallIntegerField(default=0)
    dinner = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'meal_history'
        verbose_name_plural = 'meal history'
        indexes = [
            models.Index(fields=['room', 'target_user', '-created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.target_user_id} {self.date} by {self.changed_by_id}"


class Menu(models.Model):
    """A room's menu for one week, or its permanent fallback menu."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey('rooms.Room', on_delete=models.CASCADE, related_name='menus')
    week_start = models.DateField()
    is_permanent = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'menus'
        indexes = [
            models.Index(fields=['room', 'week_start', 'is_permanent']),
        ]
        ordering = ['-week_start']

    def __str__(self):
        label = 'permanent' if self.is_permanent else f'week of {self.week_start}'
        return f"Menu {self.room_id} ({label})"


class MenuDay(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    menu = models.ForeignKey(Menu, on_delete=models.CASCADE, related_name='days')
    day = models.CharField(max_length=10, choices=Weekday.choices)
    breakfast = models.CharField(max_length=200, blank=True)
    lunch = models.CharField(max_length=200, blank=True)
    dinner = models.CharField(max_length=200, blank=True)

    class Meta:
        db_table = 'menu_days'
        unique_together = [['menu', 'day']]

    def __str__(self):
        return f"{self.day}: {self.breakfast} / {self.lunch} / {self.dinner}"


class ShoppingDuty(models.Model):
    """Weekly shopping roster of a room."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey('rooms.Room', on_delete=models.CASCADE, related_name='shopping_duties')
    week_start = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shopping_duties'
        verbose_name_plural = 'shopping duties'
        unique_together = [['room', 'week_start']]
        ordering = ['-week_start']

    def __str__(self):
        return f"Roster {self.room_id} week of {self.week_start}"


class DutyAssignment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    duty = models.ForeignKey(ShoppingDuty, on_delete=models.CASCADE, related_name='assignments')
    day = models.CharField(max_length=10, choices=Weekday.choices)
    user = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='shopping_duties'
    )
    user_name = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=20, choices=DutyStatus.choices, default=DutyStatus.UPCOMING)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))

    class Meta:
        db_table = 'duty_assignments'

    def __str__(self):
        return f"{self.day}: {self.user_name or 'unassigned'} ({self.status})"
