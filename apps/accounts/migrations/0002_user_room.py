# Generated manually for the BillKhata models

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        ('rooms', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='user',
            name='room',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='residents', to='rooms.room'),
        ),
        migrations.AddIndex(
            model_name='user',
            index=models.Index(fields=['room', 'room_status'], name='users_room_id_e3cbd4_idx'),
        ),
    ]
