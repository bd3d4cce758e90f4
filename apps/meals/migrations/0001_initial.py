# Generated manually for the BillKhata models

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import migrations, models
import django.db.models.deletion

WEEKDAYS = [
    ('Monday', 'Monday'), ('Tuesday', 'Tuesday'), ('Wednesday', 'Wednesday'), ('Thursday', 'Thursday'),
    ('Friday', 'Friday'), ('Saturday', 'Saturday'), ('Sunday', 'Sunday'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('periods', '0001_initial'),
        ('rooms', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Meal',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_name', models.CharField(max_length=50)),
                ('date', models.DateField()),
                ('breakfast', models.PositiveSmallIntegerField(default=0, validators=[MinValueValidator(0), MaxValueValidator(2)])),
                ('lunch', models.PositiveSmallIntegerField(default=0, validators=[MinValueValidator(0), MaxValueValidator(2)])),
                ('dinner', models.PositiveSmallIntegerField(default=0, validators=[MinValueValidator(0), MaxValueValidator(2)])),
                ('total_meals', models.PositiveSmallIntegerField(default=0, editable=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('calculation_period', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='meals', to='periods.calculationperiod')),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meals', to='rooms.room')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meals', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'meals',
                'ordering': ['-date'],
                'indexes': [models.Index(fields=['room', 'date'], name='meals_room_id_70eca9_idx')],
                'unique_together': {('room', 'user', 'date')},
            },
        ),
        migrations.CreateModel(
            name='MealFinalization',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField()),
                ('finalized_by_name', models.CharField(max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('finalized_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meal_finalizations', to='rooms.room')),
            ],
            options={
                'db_table': 'meal_finalizations',
                'ordering': ['-date'],
                'unique_together': {('room', 'date')},
            },
        ),
        migrations.CreateModel(
            name='MealHistory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField()),
                ('breakfast', models.PositiveSmallIntegerField(default=0)),
                ('lunch', models.PositiveSmallIntegerField(default=0)),
                ('dinner', models.PositiveSmallIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('changed_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='meal_changes', to=settings.AUTH_USER_MODEL)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meal_history', to='rooms.room')),
                ('target_user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meal_history', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'meal history',
                'db_table': 'meal_history',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['room', 'target_user', '-created_at'], name='meal_histor_room_id_e5b5ad_idx')],
            },
        ),
        migrations.CreateModel(
            name='Menu',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('week_start', models.DateField()),
                ('is_permanent', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='menus', to='rooms.room')),
            ],
            options={
                'db_table': 'menus',
                'ordering': ['-week_start'],
                'indexes': [models.Index(fields=['room', 'week_start', 'is_permanent'], name='menus_room_id_7af1c1_idx')],
            },
        ),
        migrations.CreateModel(
            name='MenuDay',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('day', models.CharField(choices=WEEKDAYS, max_length=10)),
                ('breakfast', models.CharField(blank=True, max_length=200)),
                ('lunch', models.CharField(blank=True, max_length=200)),
                ('dinner', models.CharField(blank=True, max_length=200)),
                ('menu', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='days', to='meals.menu')),
            ],
            options={
                'db_table': 'menu_days',
                'unique_together': {('menu', 'day')},
            },
        ),
        migrations.CreateModel(
            name='ShoppingDuty',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('week_start', models.DateField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shopping_duties', to='rooms.room')),
            ],
            options={
                'verbose_name_plural': 'shopping duties',
                'db_table': 'shopping_duties',
                'ordering': ['-week_start'],
                'unique_together': {('room', 'week_start')},
            },
        ),
        migrations.CreateModel(
            name='DutyAssignment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('day', models.CharField(choices=WEEKDAYS, max_length=10)),
                ('user_name', models.CharField(blank=True, max_length=50)),
                ('status', models.CharField(choices=[('Upcoming', 'Upcoming'), ('Assigned', 'Assigned'), ('Completed', 'Completed')], default='Upcoming', max_length=20)),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('duty', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='meals.shoppingduty')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='shopping_duties', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'duty_assignments',
            },
        ),
    ]
