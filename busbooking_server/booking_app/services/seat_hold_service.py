"""Seat hold service - short-lived exclusive claims on seats"""

import logging
from datetime import timedelta

from django.db import transaction
from django.utils import timezone
from django.utils.crypto import get_random_string

from ..models import Schedule, SeatHold
from ..utils.constants import BusinessRules, SeatState
from ..utils.seating import validate_selection

logger = logging.getLogger(__name__)


class SeatsUnavailableError(Exception):
    """Raised when seats are booked or held by another session"""
    pass


class SeatHoldService:
    """Service for seat hold operations"""

    @transaction.atomic
    def hold_seats(self, schedule_id, user, seats, passengers):
        """
        Hold seats for a user until they finish entering passenger details

        Args:
            schedule_id: Schedule ID
            user: User object
            seats: List of seat labels
            passengers: Number of passengers the seats are for

        Returns:
            dict with hold_token, seats and expires_at

        Raises:
            InvalidSeatSelectionError: If the selection does not fit the schedule
            SeatsUnavailableError: If a seat is held by someone else
        """
        schedule = Schedule.objects.select_for_update().select_related('bus').get(id=schedule_id)
        if not schedule.is_active:
            raise SeatsUnavailableError("Schedule is not open for booking")

        validate_selection(schedule.bus.total_seats, schedule.booked_seats, seats, passengers)

        SeatHold.objects.filter(schedule=schedule).expired().delete()

        conflicts = list(
            SeatHold.objects.filter(schedule=schedule, seat_number__in=seats)
            .exclude(holder=user)
            .values_list('seat_number', flat=True)
        )
        if conflicts:
            logger.info(f'[HOLD] Schedule {schedule.id}: seats {conflicts} already held for user {user.id}')
            raise SeatsUnavailableError(f"Seats already held: {', '.join(sorted(conflicts))}")

        SeatHold.objects.filter(schedule=schedule, holder=user).delete()

        hold_token = get_random_string(32)
        expires_at = timezone.now() + timedelta(minutes=BusinessRules.SEAT_HOLD_MINUTES)
        SeatHold.objects.bulk_create([
            SeatHold(schedule=schedule, seat_number=seat, holder=user, hold_token=hold_token, expires_at=expires_at)
            for seat in seats
        ])

        logger.info(f'[HOLD] Schedule {schedule.id}: user {user.id} holds {seats} until {expires_at.isoformat()}')
        return {'hold_token': hold_token, 'seats': list(seats), 'expires_at': expires_at}

    def release_holds(self, schedule_id, user):
        """Release every hold the user has on a schedule"""
        deleted, _ = SeatHold.objects.filter(schedule_id=schedule_id, holder=user).delete()
        return deleted

    def release_expired(self):
        """Delete all expired holds"""
        deleted, _ = SeatHold.objects.expired().delete()
        return deleted

    def held_by_others(self, schedule, user, seats):
        """Seats from `seats` that someone other than `user` holds right now"""
        return list(
            SeatHold.objects.active()
            .filter(schedule=schedule, seat_number__in=seats)
            .exclude(holder=user)
            .values_list('seat_number', flat=True)
        )

    def seat_map(self, schedule, user=None):
        """Every seat label of the schedule with its current state"""
        booked = set(schedule.booked_seats)
        holds = {
            hold.seat_number: hold.holder_id
            for hold in SeatHold.objects.active().filter(schedule=schedule)
        }

        seats = []
        for label in schedule.seat_space():
            if label in booked:
                state = SeatState.BOOKED
            elif label in holds:
                state = SeatState.HELD_BY_YOU if user is not None and holds[label] == user.id else SeatState.HELD
            else:
                state = SeatState.AVAILABLE
            seats.append({'seat_number': label, 'state': state})
        return seats
