"""Schedule and seat hold models"""
from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone

from ..utils.seating import seat_labels


class Schedule(models.Model):
    company = models.ForeignKey('Company', on_delete=models.CASCADE, related_name='schedules')
    bus = models.ForeignKey('Bus', on_delete=models.PROTECT, related_name='schedules')
    route = models.ForeignKey('Route', on_delete=models.PROTECT, related_name='schedules')
    date = models.DateField(db_index=True)
    departure_time = models.DateTimeField()
    arrival_time = models.DateTimeField()
    price = models.PositiveIntegerField()
    available_seats = models.PositiveIntegerField(default=0)
    booked_seats = models.JSONField(default=list, blank=True)
    version = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['date', 'is_active'], name='booking_app_date_9a4f1e_idx'),
        ]

    def __str__(self):
        return f"{self.route} ({self.date} {self.departure_time:%H:%M})"

    def seat_space(self):
        return seat_labels(self.bus.total_seats)

    def initialize_inventory(self):
        self.booked_seats = []
        self.available_seats = self.bus.total_seats

    def inventory_is_consistent(self):
        return self.available_seats + len(self.booked_seats) == self.bus.total_seats


class SeatHoldQuerySet(models.QuerySet):
    def active(self):
        return self.filter(expires_at__gt=timezone.now())

    def expired(self):
        return self.filter(expires_at__lte=timezone.now())


class SeatHold(models.Model):
    schedule = models.ForeignKey(Schedule, on_delete=models.CASCADE, related_name='holds')
    seat_number = models.CharField(max_length=5)
    holder = models.ForeignKey(User, on_delete=models.CASCADE, related_name='seat_holds')
    hold_token = models.CharField(max_length=32, db_index=True)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    objects = SeatHoldQuerySet.as_manager()

    class Meta:
        unique_together = ['schedule', 'seat_number']

    def __str__(self):
        return f"{self.schedule_id} - Seat {self.seat_number} held by {self.holder_id}"

    @property
    def is_expired(self):
        return self.expires_at <= timezone.now()
