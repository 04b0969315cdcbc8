import apps.reservations.models
import django.core.validators
import django.db.models.deletion
import uuid
from django.db import migrations, models

STATUS_CHOICES = [
    ('CONFIRMED', 'Confirmed'),
    ('IN_PROGRESS', 'In progress'),
    ('COMPLETED', 'Completed'),
    ('CANCELLED', 'Cancelled'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('clients', '0001_initial'),
        ('vehicles', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Reservation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('start_date', models.DateField(db_index=True)),
                ('end_date', models.DateField()),
                ('gps', models.BooleanField(default=False)),
                ('full_insurance', models.BooleanField(default=False)),
                ('child_seat', models.BooleanField(default=False)),
                ('extra_driver', models.BooleanField(default=False)),
                ('total_price', models.DecimalField(decimal_places=2, default=0, help_text='Price snapshot at booking time', max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='CONFIRMED', max_length=20)),
                ('reference', models.CharField(default=apps.reservations.models.generate_reference, editable=False, help_text='Code shown as a QR code at vehicle pick-up', max_length=16, unique=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='reservations', to='clients.client')),
                ('vehicle', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='reservations', to='vehicles.vehicle')),
            ],
            options={
                'verbose_name': 'Reservation',
                'verbose_name_plural': 'Reservations',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ReservationStatusLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('from_status', models.CharField(blank=True, choices=STATUS_CHOICES, max_length=20)),
                ('to_status', models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ('changed_by', models.CharField(help_text='system / client / staff username', max_length=80)),
                ('reason', models.TextField(blank=True)),
                ('changed_at', models.DateTimeField(auto_now_add=True)),
                ('reservation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_logs', to='reservations.reservation')),
            ],
            options={
                'verbose_name': 'Reservation Status Log',
                'verbose_name_plural': 'Reservation Status Logs',
                'ordering': ['changed_at'],
            },
        ),
    ]
