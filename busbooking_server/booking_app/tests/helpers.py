"""Shared fixtures for booking_app tests"""
from datetime import timedelta

from django.contrib.auth.models import User
from django.utils import timezone

from ..models import Profile, Company, Bus, Route, Schedule
from ..utils.constants import UserRole, BusType


def create_user(username, role=UserRole.CUSTOMER, company=None):
    user = User.objects.create_user(username, email=f'{username}@example.com')
    Profile.objects.create(user=user, role=role, company=company, phone='+265991234567')
    return user


def create_company(owner=None, name='Sunrise Coaches'):
    return Company.objects.create(
        name=name,
        email='info@sunrise.mw',
        phone='+265991234567',
        address='Area 3, Lilongwe',
        owner=owner,
    )


def create_schedule(company, total_seats=4, price=5000, origin='Lilongwe', destination='Blantyre',
                    departure=None, bus_type=BusType.AC, amenities=None):
    bus = Bus.objects.create(
        company=company,
        bus_number=f'MW-{Bus.objects.count() + 1:04d}',
        bus_type=bus_type,
        total_seats=total_seats,
        amenities=amenities or [],
    )
    route = Route.objects.create(
        company=company, origin=origin, destination=destination,
        distance=310, duration=240, stops=['Dedza', 'Ntcheu'],
    )
    departure = departure or (timezone.now() + timedelta(days=2)).replace(microsecond=0)
    schedule = Schedule(
        company=company,
        bus=bus,
        route=route,
        date=timezone.localdate(departure),
        departure_time=departure,
        arrival_time=departure + timedelta(hours=4),
        price=price,
    )
    schedule.initialize_inventory()
    schedule.save()
    return schedule


def passengers_for(seats):
    return [
        {'name': f'Passenger {seat}', 'age': 30, 'gender': 'male', 'seat_number': seat}
        for seat in seats
    ]
