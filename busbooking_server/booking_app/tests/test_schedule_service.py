"""Tests for schedule search, filters and bus changes"""

from datetime import datetime, timedelta

from django.test import TestCase
from django.utils import timezone

from ..models import Bus
from ..services.booking_service import BookingService
from ..services.schedule_service import ScheduleService, InvalidSearchError
from ..utils.constants import BusType
from .helpers import create_company, create_schedule, create_user, passengers_for


class ScheduleSearchTest(TestCase):
    def setUp(self):
        self.service = ScheduleService()
        self.company = create_company()
        departure = timezone.make_aware(datetime.combine(timezone.localdate() + timedelta(days=3), datetime.min.time()))
        self.morning = create_schedule(
            self.company, total_seats=8, price=5000,
            departure=departure + timedelta(hours=7), amenities=['WiFi', 'AC'],
        )
        self.evening = create_schedule(
            self.company, total_seats=2, price=9000,
            departure=departure + timedelta(hours=18), bus_type=BusType.SLEEPER,
        )
        self.date = self.morning.date

    def test_search_matches_route_and_date(self):
        results = self.service.search('lilongwe', 'BLANTYRE', self.date)
        self.assertEqual([s.id for s in results], [self.morning.id, self.evening.id])

    def test_search_accepts_date_string(self):
        results = self.service.search('Lilongwe', 'Blantyre', self.date.isoformat())
        self.assertEqual(len(results), 2)

    def test_search_requires_enough_seats(self):
        results = self.service.search('Lilongwe', 'Blantyre', self.date, passengers=3)
        self.assertEqual([s.id for s in results], [self.morning.id])

    def test_search_skips_inactive_bus(self):
        Bus.objects.filter(id=self.evening.bus_id).update(is_active=False)
        with self.assertLogs('booking_app.services.schedule_service', level='WARNING'):
            results = self.service.search('Lilongwe', 'Blantyre', self.date)
        self.assertEqual([s.id for s in results], [self.morning.id])

    def test_search_other_date(self):
        self.assertEqual(self.service.search('Lilongwe', 'Blantyre', self.date + timedelta(days=1)), [])

    def test_invalid_criteria(self):
        with self.assertRaises(InvalidSearchError):
            self.service.search('', 'Blantyre', self.date)
        with self.assertRaises(InvalidSearchError):
            self.service.search('Lilongwe', 'Blantyre', self.date, passengers=0)
        with self.assertRaises(InvalidSearchError):
            self.service.search('Lilongwe', 'Blantyre', '03/10/2026')

    def test_filters(self):
        schedules = [self.morning, self.evening]

        self.assertEqual(self.service.apply_filters(schedules, {'bus_type': BusType.SLEEPER}), [self.evening])
        self.assertEqual(self.service.apply_filters(schedules, {'amenities': ['WiFi']}), [self.morning])
        self.assertEqual(self.service.apply_filters(schedules, {'amenities': ['WiFi', 'USB']}), [])
        self.assertEqual(self.service.apply_filters(schedules, {'max_price': 6000}), [self.morning])
        self.assertEqual(self.service.apply_filters(schedules, {'min_price': 6000}), [self.evening])
        self.assertEqual(self.service.apply_filters(schedules, {'departure_start': '12:00'}), [self.evening])
        self.assertEqual(self.service.apply_filters(schedules, {'departure_end': '12:00'}), [self.morning])
        self.assertEqual(self.service.apply_filters(schedules, {'company': 'Sunrise Coaches'}), schedules)
        self.assertEqual(self.service.apply_filters(schedules, {}), schedules)

    def test_filter_invalid_time(self):
        with self.assertRaises(InvalidSearchError):
            self.service.apply_filters([self.morning], {'departure_start': '7am'})


class ChangeBusTest(TestCase):
    def setUp(self):
        self.service = ScheduleService()
        self.company = create_company()
        self.schedule = create_schedule(self.company, total_seats=8)
        BookingService().create_booking(
            self.schedule.id, create_user('customer'), ['1A', '2B'], passengers_for(['1A', '2B'])
        )

    def test_change_to_larger_bus(self):
        bus = Bus.objects.create(company=self.company, bus_number='MW-BIG', total_seats=12)
        schedule = self.service.change_bus(self.schedule, bus)

        self.assertEqual(schedule.bus, bus)
        self.assertEqual(schedule.available_seats, 10)
        self.assertEqual(schedule.booked_seats, ['1A', '2B'])
        self.assertEqual(schedule.version, 2)
        self.assertTrue(schedule.inventory_is_consistent())

    def test_booked_seat_missing_on_new_bus(self):
        bus = Bus.objects.create(company=self.company, bus_number='MW-SMALL', total_seats=4)
        with self.assertRaises(ValueError):
            self.service.change_bus(self.schedule, bus)

    def test_has_bookings(self):
        self.assertTrue(self.service.has_bookings(self.schedule))
        self.assertFalse(self.service.has_bookings(create_schedule(self.company)))
