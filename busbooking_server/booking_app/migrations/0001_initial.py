# Generated migration for the initial booking schema

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Company',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('email', models.EmailField(max_length=254)),
                ('phone', models.CharField(max_length=20)),
                ('address', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('logo', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('payment_service', models.CharField(blank=True, max_length=50)),
                ('transaction_id', models.CharField(blank=True, max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='owned_companies',
                    to=settings.AUTH_USER_MODEL
                )),
            ],
            options={
                'verbose_name_plural': 'companies',
            },
        ),
        migrations.CreateModel(
            name='Bus',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('bus_number', models.CharField(max_length=20, unique=True)),
                ('bus_type', models.CharField(
                    choices=[
                        ('AC', 'AC'),
                        ('Non-AC', 'Non-AC'),
                        ('Sleeper', 'Sleeper'),
                        ('Semi-Sleeper', 'Semi-Sleeper')
                    ],
                    default='AC',
                    max_length=20
                )),
                ('total_seats', models.PositiveIntegerField()),
                ('amenities', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='buses',
                    to='booking_app.company'
                )),
            ],
            options={
                'verbose_name_plural': 'buses',
            },
        ),
        migrations.CreateModel(
            name='Route',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('origin', models.CharField(db_index=True, max_length=100)),
                ('destination', models.CharField(db_index=True, max_length=100)),
                ('distance', models.FloatField(default=0.0)),
                ('duration', models.PositiveIntegerField(default=0)),
                ('stops', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='routes',
                    to='booking_app.company'
                )),
            ],
        ),
        migrations.CreateModel(
            name='Schedule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(db_index=True)),
                ('departure_time', models.DateTimeField()),
                ('arrival_time', models.DateTimeField()),
                ('price', models.PositiveIntegerField()),
                ('available_seats', models.PositiveIntegerField(default=0)),
                ('booked_seats', models.JSONField(blank=True, default=list)),
                ('version', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('bus', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='schedules',
                    to='booking_app.bus'
                )),
                ('company', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='schedules',
                    to='booking_app.company'
                )),
                ('route', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='schedules',
                    to='booking_app.route'
                )),
            ],
            options={
                'indexes': [models.Index(fields=['date', 'is_active'], name='booking_app_date_9a4f1e_idx')],
            },
        ),
        migrations.CreateModel(
            name='SeatHold',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('seat_number', models.CharField(max_length=5)),
                ('hold_token', models.CharField(db_index=True, max_length=32)),
                ('expires_at', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('holder', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='seat_holds',
                    to=settings.AUTH_USER_MODEL
                )),
                ('schedule', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='holds',
                    to='booking_app.schedule'
                )),
            ],
            options={
                'unique_together': {('schedule', 'seat_number')},
            },
        ),
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('passenger_details', models.JSONField(default=list)),
                ('seat_numbers', models.JSONField(default=list)),
                ('total_amount', models.PositiveIntegerField(default=0)),
                ('booking_status', models.CharField(
                    choices=[
                        ('confirmed', 'Confirmed'),
                        ('pending', 'Pending'),
                        ('cancelled', 'Cancelled')
                    ],
                    default='pending',
                    max_length=20
                )),
                ('payment_status', models.CharField(
                    choices=[
                        ('paid', 'Paid'),
                        ('pending', 'Pending'),
                        ('failed', 'Failed')
                    ],
                    default='pending',
                    max_length=20
                )),
                ('booking_flow', models.CharField(
                    choices=[
                        ('pay_immediately', 'Pay Immediately'),
                        ('reserve_then_pay', 'Reserve Then Pay')
                    ],
                    default='pay_immediately',
                    max_length=20
                )),
                ('payment_id', models.CharField(blank=True, max_length=50)),
                ('payment_service', models.CharField(blank=True, max_length=50)),
                ('transaction_id', models.CharField(blank=True, max_length=50)),
                ('idempotency_key', models.CharField(blank=True, max_length=64, null=True)),
                ('booking_date', models.DateTimeField(auto_now_add=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='bookings',
                    to='booking_app.company'
                )),
                ('schedule', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='bookings',
                    to='booking_app.schedule'
                )),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='bookings',
                    to=settings.AUTH_USER_MODEL
                )),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['schedule', 'booking_status'], name='booking_app_schedul_5c2d7b_idx'),
                    models.Index(fields=['user', '-created_at'], name='booking_app_user_id_e81b3a_idx'),
                ],
                'unique_together': {('user', 'idempotency_key')},
            },
        ),
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('firebase_uid', models.CharField(blank=True, max_length=128, null=True, unique=True)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('role', models.CharField(
                    choices=[
                        ('customer', 'Customer'),
                        ('company_admin', 'Company Admin')
                    ],
                    default='customer',
                    max_length=20
                )),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='admins',
                    to='booking_app.company'
                )),
                ('user', models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    to=settings.AUTH_USER_MODEL
                )),
            ],
        ),
    ]
