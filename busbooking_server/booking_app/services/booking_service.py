"""Booking service - business logic for booking operations"""

import logging
from datetime import timedelta

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from ..models import Booking, Schedule, SeatHold
from ..utils.constants import BookingStatus, BookingFlow, PaymentStatus, Gender, BusinessRules
from ..utils.seating import validate_selection
from .seat_hold_service import SeatHoldService, SeatsUnavailableError
from .payment_service import PaymentService

logger = logging.getLogger(__name__)


class InsufficientSeatsError(Exception):
    """Raised when not enough seats available"""
    pass


class BookingAlreadyCancelledError(Exception):
    """Raised when trying to cancel already cancelled booking"""
    pass


class BookingPermissionError(Exception):
    """Raised when the caller may not act on a booking"""
    pass


class InvalidBookingError(Exception):
    """Raised when seats and passenger details do not form a valid booking"""
    pass


class InventoryConflictError(Exception):
    """Raised when the schedule inventory changed under a booking write"""
    pass


class _StaleInventory(Exception):
    """Conditional inventory update matched no row"""
    pass


class BookingService:
    """Service for booking operations"""

    def create_booking(self, schedule_id, user, seat_numbers, passenger_details,
                       flow=BookingFlow.PAY_IMMEDIATELY, hold_token=None,
                       idempotency_key=None, expected_version=None):
        """
        Create booking and claim its seats in one transaction

        Args:
            schedule_id: Schedule ID
            user: User object
            seat_numbers: List of seat labels
            passenger_details: List of passenger dicts (name, age, gender, seat_number)
            flow: BookingFlow.PAY_IMMEDIATELY or BookingFlow.RESERVE_THEN_PAY
            hold_token: Token from SeatHoldService.hold_seats, optional
            idempotency_key: Client key, a repeated key returns the first booking
            expected_version: Schedule version the client based its selection on

        Returns:
            Booking object

        Raises:
            InvalidBookingError: If seats and passengers do not match
            InvalidSeatSelectionError: If seats are outside the seat space
            SeatsUnavailableError: If seats are booked or held by someone else
            InsufficientSeatsError: If not enough seats available
            InventoryConflictError: If the inventory kept changing under the write
        """
        if idempotency_key:
            existing = Booking.objects.filter(user=user, idempotency_key=idempotency_key).first()
            if existing:
                logger.info(f'[BOOKING] Idempotent replay of booking {existing.id} for user {user.id}')
                return existing

        if flow not in dict(BookingFlow.CHOICES):
            raise InvalidBookingError(f"Unknown booking flow '{flow}'")

        seat_numbers = list(seat_numbers or [])
        passengers = self._normalize_passengers(seat_numbers, passenger_details or [])

        for attempt in range(1, BusinessRules.BOOKING_WRITE_RETRIES + 1):
            try:
                return self._write_booking(
                    schedule_id, user, seat_numbers, passengers, flow,
                    hold_token, idempotency_key, expected_version
                )
            except _StaleInventory:
                logger.warning(f'[BOOKING] Schedule {schedule_id} changed during write (attempt {attempt})')
                if expected_version is not None:
                    break
            except IntegrityError:
                if idempotency_key:
                    existing = Booking.objects.filter(user=user, idempotency_key=idempotency_key).first()
                    if existing:
                        return existing
                logger.warning(f'[BOOKING] Integrity error writing booking on schedule {schedule_id}')
                raise InventoryConflictError("Seats no longer available, please try again")

        raise InventoryConflictError("Seats no longer available, please try again")

    @transaction.atomic
    def _write_booking(self, schedule_id, user, seat_numbers, passengers, flow,
                       hold_token, idempotency_key, expected_version):
        schedule = Schedule.objects.select_for_update().select_related('bus', 'company').get(id=schedule_id)

        if not schedule.is_active:
            raise SeatsUnavailableError("Schedule is not open for booking")
        if expected_version is not None and schedule.version != expected_version:
            raise InventoryConflictError("Schedule changed since seats were selected")

        taken = [s for s in seat_numbers if s in schedule.booked_seats]
        if taken:
            raise SeatsUnavailableError(f"Seats no longer available: {', '.join(taken)}")

        count = len(seat_numbers)
        validate_selection(schedule.bus.total_seats, schedule.booked_seats, seat_numbers, count)

        if schedule.available_seats < count:
            raise InsufficientSeatsError(f"Only {schedule.available_seats} seats available")

        hold_service = SeatHoldService()
        held = hold_service.held_by_others(schedule, user, seat_numbers)
        if held:
            raise SeatsUnavailableError(f"Seats held by another customer: {', '.join(sorted(held))}")

        if hold_token:
            valid_holds = SeatHold.objects.active().filter(
                schedule=schedule, holder=user, hold_token=hold_token, seat_number__in=seat_numbers
            ).count()
            if valid_holds != count:
                raise SeatsUnavailableError("Seat hold expired or does not cover the selected seats")

        self._apply_inventory_delta(schedule, booked=seat_numbers)

        pay_now = flow == BookingFlow.PAY_IMMEDIATELY
        booking = Booking.objects.create(
            user=user,
            schedule=schedule,
            company=schedule.company,
            passenger_details=passengers,
            seat_numbers=seat_numbers,
            total_amount=schedule.price * count,
            booking_status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.PENDING,
            booking_flow=flow,
            idempotency_key=idempotency_key,
            payment_id=f"payment_{int(timezone.now().timestamp() * 1000)}" if pay_now else '',
        )

        if pay_now:
            booking = PaymentService().confirm_payment(booking)

        SeatHold.objects.filter(schedule=schedule, holder=user, seat_number__in=seat_numbers).delete()

        logger.info(
            f'[BOOKING] Booking {booking.id} created on schedule {schedule.id}: '
            f'seats={seat_numbers} flow={flow} total={booking.total_amount}'
        )
        return booking

    def cancel_booking(self, booking_id, user=None):
        """
        Cancel booking and restore seats atomically

        Raises:
            BookingPermissionError: If user is neither the owner nor the company admin
            BookingAlreadyCancelledError: If the booking is already cancelled
        """
        for attempt in range(1, BusinessRules.BOOKING_WRITE_RETRIES + 1):
            try:
                return self._write_cancellation(booking_id, user)
            except _StaleInventory:
                logger.warning(f'[CANCEL] Schedule changed while cancelling booking {booking_id} (attempt {attempt})')

        raise InventoryConflictError("Could not release seats, please try again")

    @transaction.atomic
    def _write_cancellation(self, booking_id, user):
        booking = Booking.objects.select_for_update().get(id=booking_id)

        if user is not None and not self.can_manage(booking, user):
            raise BookingPermissionError("You do not have permission to cancel this booking")
        if booking.booking_status == BookingStatus.CANCELLED:
            raise BookingAlreadyCancelledError("Booking already cancelled")

        schedule = Schedule.objects.select_for_update().get(id=booking.schedule_id)
        self._apply_inventory_delta(schedule, released=booking.seat_numbers)

        booking.booking_status = BookingStatus.CANCELLED
        booking.cancelled_at = timezone.now()
        booking.save(update_fields=['booking_status', 'cancelled_at', 'updated_at'])

        logger.info(f'[CANCEL] Booking {booking.id} cancelled, seats {booking.seat_numbers} released')
        return booking

    def expire_unpaid_bookings(self, older_than_minutes=None):
        """Cancel reserve-then-pay bookings that stayed unpaid too long"""
        minutes = older_than_minutes if older_than_minutes is not None else BusinessRules.UNPAID_BOOKING_EXPIRY_MINUTES
        cutoff = timezone.now() - timedelta(minutes=minutes)

        stale_ids = list(
            Booking.objects.filter(
                booking_flow=BookingFlow.RESERVE_THEN_PAY,
                payment_status=PaymentStatus.PENDING,
                created_at__lt=cutoff,
            ).exclude(booking_status=BookingStatus.CANCELLED).values_list('id', flat=True)
        )

        expired = 0
        for booking_id in stale_ids:
            try:
                self.cancel_booking(booking_id)
                expired += 1
            except BookingAlreadyCancelledError:
                continue
        return expired

    def can_manage(self, booking, user):
        """Owner or the admin of the booking's company"""
        if booking.user_id == user.id:
            return True
        profile = getattr(user, 'profile', None)
        return bool(profile and profile.is_company_admin and profile.company_id == booking.company_id)

    def bookings_for_user(self, user):
        """User's bookings with reference data, skipping inconsistent records"""
        bookings = Booking.objects.filter(user=user).select_related(
            'schedule', 'schedule__bus', 'schedule__route', 'company'
        ).order_by('-created_at')

        results = []
        for booking in bookings:
            if not booking.seats_match_passengers():
                logger.warning(f'Seat mismatch in booking {booking.id}')
                continue
            results.append(booking)
        return results

    def _apply_inventory_delta(self, schedule, booked=(), released=()):
        """
        Conditional write of the schedule inventory.

        Only matches when nobody bumped the version since `schedule` was read
        and, for bookings, when enough seats are still available.
        """
        booked = list(booked)
        released = set(released)
        new_booked_seats = [s for s in schedule.booked_seats if s not in released] + booked
        delta = len(released) - len(booked)

        queryset = Schedule.objects.filter(id=schedule.id, version=schedule.version)
        if booked:
            queryset = queryset.filter(available_seats__gte=len(booked))

        updated = queryset.update(
            available_seats=F('available_seats') + delta,
            booked_seats=new_booked_seats,
            version=F('version') + 1,
            updated_at=timezone.now(),
        )
        if not updated:
            raise _StaleInventory()

        schedule.refresh_from_db(fields=['available_seats', 'booked_seats', 'version'])

    def _normalize_passengers(self, seat_numbers, passenger_details):
        if not seat_numbers:
            raise InvalidBookingError("At least one seat is required")
        if len(passenger_details) != len(seat_numbers):
            raise InvalidBookingError("Each selected seat needs exactly one passenger")

        valid_genders = dict(Gender.CHOICES)
        passengers = []
        for passenger in passenger_details:
            name = (passenger.get('name') or '').strip()
            seat = passenger.get('seat_number')
            gender = passenger.get('gender') or Gender.MALE
            try:
                age = int(passenger.get('age'))
            except (TypeError, ValueError):
                age = 0

            if not name or not seat or age < 1:
                raise InvalidBookingError("Please fill in all passenger details")
            if gender not in valid_genders:
                raise InvalidBookingError(f"Invalid gender '{gender}'")

            passengers.append({'name': name, 'age': age, 'gender': gender, 'seat_number': seat})

        if sorted(p['seat_number'] for p in passengers) != sorted(seat_numbers):
            raise InvalidBookingError("Passenger seats must match the selected seats")

        return passengers
