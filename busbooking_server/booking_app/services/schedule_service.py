"""Schedule service - search and filtering of departures"""

import logging
from datetime import datetime

from django.db import transaction
from django.utils import timezone

from ..models import Schedule, Booking
from ..utils.seating import seat_labels

logger = logging.getLogger(__name__)


class InvalidSearchError(Exception):
    """Raised when search criteria are incomplete or out of range"""
    pass


class ScheduleService:
    """Service for schedule operations"""

    def search(self, origin, destination, date, passengers=1):
        """
        Search active schedules on a route and date with enough free seats

        Args:
            origin: Origin city name
            destination: Destination city name
            date: datetime.date or ISO date string
            passengers: Number of seats needed

        Returns:
            List of Schedule objects with company, bus and route loaded

        Raises:
            InvalidSearchError: If criteria are missing or passengers < 1
        """
        if not origin or not destination or not date:
            raise InvalidSearchError("Origin, destination and date are required")
        try:
            passengers = int(passengers)
        except (TypeError, ValueError):
            raise InvalidSearchError("Passengers must be a number")
        if passengers < 1:
            raise InvalidSearchError("At least one passenger is required")
        if isinstance(date, str):
            try:
                date = datetime.strptime(date, '%Y-%m-%d').date()
            except ValueError:
                raise InvalidSearchError("Date must be in YYYY-MM-DD format")

        schedules = Schedule.objects.filter(
            is_active=True,
            date=date,
            available_seats__gte=passengers,
            route__origin__iexact=origin.strip(),
            route__destination__iexact=destination.strip(),
        ).select_related('company', 'bus', 'route').order_by('departure_time')

        results = []
        for schedule in schedules:
            if not (schedule.company.is_active and schedule.bus.is_active and schedule.route.is_active):
                logger.warning(f'[SEARCH] Skipping schedule {schedule.id}: inactive company, bus or route')
                continue
            results.append(schedule)
        return results

    def apply_filters(self, schedules, filters):
        """
        In-memory filters over search results

        Supported keys: bus_type, company, amenities, min_price, max_price,
        departure_start, departure_end (HH:MM).
        """
        bus_type = filters.get('bus_type')
        company = filters.get('company')
        amenities = filters.get('amenities') or []
        min_price = filters.get('min_price')
        max_price = filters.get('max_price')
        departure_start = self._parse_time(filters.get('departure_start'))
        departure_end = self._parse_time(filters.get('departure_end'))

        results = []
        for schedule in schedules:
            if bus_type and schedule.bus.bus_type != bus_type:
                continue
            if company and schedule.company.name != company:
                continue
            if amenities and not all(a in schedule.bus.amenities for a in amenities):
                continue
            if min_price is not None and schedule.price < min_price:
                continue
            if max_price is not None and schedule.price > max_price:
                continue
            departure = timezone.localtime(schedule.departure_time).time()
            if departure_start and departure < departure_start:
                continue
            if departure_end and departure > departure_end:
                continue
            results.append(schedule)
        return results

    def _parse_time(self, value):
        if not value:
            return None
        try:
            return datetime.strptime(value, '%H:%M').time()
        except ValueError:
            raise InvalidSearchError(f"Invalid time '{value}', expected HH:MM")

    @transaction.atomic
    def change_bus(self, schedule, bus):
        """
        Move a schedule to another bus, keeping booked seats

        Raises:
            ValueError: If a booked seat does not exist on the new bus
        """
        schedule = Schedule.objects.select_for_update().select_related('bus').get(id=schedule.id)
        booked = len(schedule.booked_seats)
        missing = set(schedule.booked_seats) - set(seat_labels(bus.total_seats))
        if missing:
            raise ValueError(f"Bus {bus.bus_number} has only {bus.total_seats} seats, {booked} already booked")

        schedule.bus = bus
        schedule.available_seats = bus.total_seats - booked
        schedule.version += 1
        schedule.save(update_fields=['bus', 'available_seats', 'version', 'updated_at'])
        return schedule

    def has_bookings(self, schedule):
        return Booking.objects.filter(schedule=schedule).exists()
