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
        ('rooms', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Bill',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=100)),
                ('category', models.CharField(choices=[('Rent', 'Rent'), ('Electricity', 'Electricity'), ('Water', 'Water'), ('Gas', 'Gas'), ('Wi-Fi', 'Wi-Fi'), ('Maid', 'Maid'), ('Others', 'Others')], max_length=20)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.01'))])),
                ('due_date', models.DateField()),
                ('description', models.TextField(blank=True)),
                ('image_url', models.URLField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_bills', to=settings.AUTH_USER_MODEL)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bills', to='rooms.room')),
            ],
            options={
                'db_table': 'bills',
                'ordering': ['-due_date'],
                'indexes': [
                    models.Index(fields=['room', '-due_date'], name='bills_room_id_87ed9e_idx'),
                    models.Index(fields=['room', 'category'], name='bills_room_id_826340_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='BillShare',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_name', models.CharField(max_length=50)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.01'))])),
                ('status', models.CharField(choices=[('Unpaid', 'Unpaid'), ('Pending Approval', 'Pending Approval'), ('Paid', 'Paid'), ('Overdue', 'Overdue')], default='Unpaid', max_length=20)),
                ('paid_from_meal_fund', models.BooleanField(default=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('bill', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shares', to='bills.bill')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bill_shares', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'bill_shares',
                'ordering': ['user_name'],
                'indexes': [models.Index(fields=['user', 'status'], name='bill_shares_user_id_27b932_idx')],
                'unique_together': {('bill', 'user')},
            },
        ),
    ]
