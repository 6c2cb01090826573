"""Fleet models (Bus, Route)"""
from django.db import models

from ..utils.constants import BusType


class Bus(models.Model):
    company = models.ForeignKey('Company', on_delete=models.CASCADE, related_name='buses')
    bus_number = models.CharField(max_length=20, unique=True)
    bus_type = models.CharField(max_length=20, choices=BusType.CHOICES, default=BusType.AC)
    total_seats = models.PositiveIntegerField()
    amenities = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'buses'

    def __str__(self):
        return f"{self.bus_number} - {self.bus_type}"


class Route(models.Model):
    company = models.ForeignKey('Company', on_delete=models.CASCADE, related_name='routes')
    origin = models.CharField(max_length=100, db_index=True)
    destination = models.CharField(max_length=100, db_index=True)
    distance = models.FloatField(default=0.0)
    duration = models.PositiveIntegerField(default=0)
    stops = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.origin} → {self.destination}"
