"""Booking model"""
from django.db import models
from django.contrib.auth.models import User

from ..utils.constants import BookingStatus, PaymentStatus, BookingFlow


class Booking(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='bookings')
    schedule = models.ForeignKey('Schedule', on_delete=models.PROTECT, related_name='bookings')
    company = models.ForeignKey('Company', on_delete=models.PROTECT, related_name='bookings')
    passenger_details = models.JSONField(default=list)
    seat_numbers = models.JSONField(default=list)
    total_amount = models.PositiveIntegerField(default=0)
    booking_status = models.CharField(max_length=20, choices=BookingStatus.CHOICES, default=BookingStatus.PENDING)
    payment_status = models.CharField(max_length=20, choices=PaymentStatus.CHOICES, default=PaymentStatus.PENDING)
    booking_flow = models.CharField(max_length=20, choices=BookingFlow.CHOICES, default=BookingFlow.PAY_IMMEDIATELY)
    payment_id = models.CharField(max_length=50, blank=True)
    payment_service = models.CharField(max_length=50, blank=True)
    transaction_id = models.CharField(max_length=50, blank=True)
    idempotency_key = models.CharField(max_length=64, null=True, blank=True)
    booking_date = models.DateTimeField(auto_now_add=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['schedule', 'booking_status'], name='booking_app_schedul_5c2d7b_idx'),
            models.Index(fields=['user', '-created_at'], name='booking_app_user_id_e81b3a_idx'),
        ]
        unique_together = ['user', 'idempotency_key']

    def __str__(self):
        return f"Booking {self.id} by {self.user.username} - seats {', '.join(self.seat_numbers)}"

    @property
    def passenger_count(self):
        return len(self.seat_numbers)

    @property
    def is_cancelled(self):
        return self.booking_status == BookingStatus.CANCELLED

    @property
    def seat_status(self):
        if self.booking_status == BookingStatus.CONFIRMED and self.payment_status == PaymentStatus.PAID:
            return 'Assigned'
        return 'Pending'

    def seats_match_passengers(self):
        if len(self.seat_numbers) != len(self.passenger_details):
            return False
        passenger_seats = [p.get('seat_number') for p in self.passenger_details]
        return all(passenger_seats.count(seat) == 1 for seat in self.seat_numbers)
