# Generated manually for the BillKhata models

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('periods', '0001_initial'),
        ('rooms', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Deposit',
            fields=[
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Approved', 'Approved'), ('Rejected', 'Rejected')], db_index=True, default='Pending', max_length=20)),
                ('approved_at', models.DateTimeField(blank=True, null=True)),
                ('rejection_reason', models.TextField(blank=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_name', models.CharField(max_length=50)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.01'))])),
                ('payment_method', models.CharField(choices=[('bKash', 'bKash'), ('Nagad', 'Nagad'), ('Rocket', 'Rocket'), ('Cash', 'Cash'), ('Bank Transfer', 'Bank Transfer'), ('Manager Adjustment', 'Manager Adjustment')], max_length=30)),
                ('transaction_id', models.CharField(blank=True, max_length=100)),
                ('screenshot_url', models.URLField(blank=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('calculation_period', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='deposits', to='periods.calculationperiod')),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='deposits', to='rooms.room')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='deposits', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'deposits',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['room', 'status'], name='deposits_room_id_b77abf_idx'),
                    models.Index(fields=['user', 'status'], name='deposits_user_id_a42880_idx'),
                    models.Index(fields=['room', '-created_at'], name='deposits_room_id_7ba72a_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Expense',
            fields=[
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Approved', 'Approved'), ('Rejected', 'Rejected')], db_index=True, default='Pending', max_length=20)),
                ('approved_at', models.DateTimeField(blank=True, null=True)),
                ('rejection_reason', models.TextField(blank=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_name', models.CharField(max_length=50)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0'))])),
                ('items', models.TextField()),
                ('notes', models.TextField(blank=True)),
                ('receipt_url', models.URLField(blank=True)),
                ('category', models.CharField(choices=[('Shopping', 'Shopping'), ('BillPayment', 'Bill Payment'), ('Adjustment', 'Adjustment')], default='Shopping', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('calculation_period', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='expenses', to='periods.calculationperiod')),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expenses', to='rooms.room')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expenses', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'expenses',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['room', 'status', 'category'], name='expenses_room_id_19ffcf_idx'),
                    models.Index(fields=['user', 'status'], name='expenses_user_id_389a02_idx'),
                    models.Index(fields=['room', '-created_at'], name='expenses_room_id_fd7e11_idx'),
                ],
            },
        ),
    ]
