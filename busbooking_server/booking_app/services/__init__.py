"""Services package - business logic layer"""

from .booking_service import (
    BookingService,
    InsufficientSeatsError,
    BookingAlreadyCancelledError,
    BookingPermissionError,
    InvalidBookingError,
    InventoryConflictError,
)
from .seat_hold_service import SeatHoldService, SeatsUnavailableError
from .payment_service import PaymentService, PaymentNotAllowedError, PaymentGatewayError
from .schedule_service import ScheduleService, InvalidSearchError
from .auth_service import AuthService, resolve_landing_route
from .company_service import CompanyService
from .ticket_service import InvalidTicketError
from ..utils.firebase_auth import IdentityProviderError
from ..utils.seating import InvalidSeatSelectionError

__all__ = [
    'BookingService',
    'InsufficientSeatsError',
    'BookingAlreadyCancelledError',
    'BookingPermissionError',
    'InvalidBookingError',
    'InventoryConflictError',
    'SeatHoldService',
    'SeatsUnavailableError',
    'PaymentService',
    'PaymentNotAllowedError',
    'PaymentGatewayError',
    'ScheduleService',
    'InvalidSearchError',
    'AuthService',
    'resolve_landing_route',
    'CompanyService',
    'InvalidTicketError',
    'IdentityProviderError',
    'InvalidSeatSelectionError',
]
