"""Centralized constants and business rules"""

class UserRole:
    CUSTOMER = 'customer'
    COMPANY_ADMIN = 'company_admin'

    CHOICES = [
        (CUSTOMER, 'Customer'),
        (COMPANY_ADMIN, 'Company Admin'),
    ]

class BusType:
    AC = 'AC'
    NON_AC = 'Non-AC'
    SLEEPER = 'Sleeper'
    SEMI_SLEEPER = 'Semi-Sleeper'

    CHOICES = [
        (AC, 'AC'),
        (NON_AC, 'Non-AC'),
        (SLEEPER, 'Sleeper'),
        (SEMI_SLEEPER, 'Semi-Sleeper'),
    ]

class BookingStatus:
    CONFIRMED = 'confirmed'
    PENDING = 'pending'
    CANCELLED = 'cancelled'

    CHOICES = [
        (CONFIRMED, 'Confirmed'),
        (PENDING, 'Pending'),
        (CANCELLED, 'Cancelled'),
    ]

class PaymentStatus:
    PAID = 'paid'
    PENDING = 'pending'
    FAILED = 'failed'

    CHOICES = [
        (PAID, 'Paid'),
        (PENDING, 'Pending'),
        (FAILED, 'Failed'),
    ]

class BookingFlow:
    PAY_IMMEDIATELY = 'pay_immediately'
    RESERVE_THEN_PAY = 'reserve_then_pay'

    CHOICES = [
        (PAY_IMMEDIATELY, 'Pay Immediately'),
        (RESERVE_THEN_PAY, 'Reserve Then Pay'),
    ]

class PaymentMethod:
    PAYCHANGU = 'PayChangu'
    STRIPE = 'stripe'

    CHOICES = [
        (PAYCHANGU, 'PayChangu (mock)'),
        (STRIPE, 'Stripe'),
    ]

class Gender:
    MALE = 'male'
    FEMALE = 'female'
    OTHER = 'other'

    CHOICES = [
        (MALE, 'male'),
        (FEMALE, 'female'),
        (OTHER, 'other'),
    ]

class SeatState:
    AVAILABLE = 'available'
    BOOKED = 'booked'
    HELD = 'held'
    HELD_BY_YOU = 'held_by_you'

class LandingRoute:
    HOME = '/'
    ADMIN = '/admin'
    CREATE_COMPANY = '/create-company'
    REGISTER = '/register'

class DashboardIcon:
    """Closed mapping from dashboard stat tags to icon identifiers"""
    TOTAL_REVENUE = 'total_revenue'
    TOTAL_BOOKINGS = 'total_bookings'
    ACTIVE_SCHEDULES = 'active_schedules'
    FLEET_SIZE = 'fleet_size'

    ICONS = {
        TOTAL_REVENUE: 'DollarSign',
        TOTAL_BOOKINGS: 'Users',
        ACTIVE_SCHEDULES: 'Calendar',
        FLEET_SIZE: 'Truck',
    }

    @classmethod
    def for_tag(cls, tag):
        return cls.ICONS[tag]

class BusinessRules:
    """Business rules and limits"""
    SEATS_PER_ROW = 4
    SEAT_HOLD_MINUTES = 10
    UNPAID_BOOKING_EXPIRY_MINUTES = 60
    BOOKING_WRITE_RETRIES = 3
    QR_EXPIRY_HOURS_AFTER_ARRIVAL = 4
    MIN_PASSWORD_LENGTH = 6
    MIN_COMPANY_NAME_LENGTH = 2
    MIN_ADDRESS_LENGTH = 5
    MAX_LOGO_BYTES = 1 * 1024 * 1024
    ALLOWED_LOGO_TYPES = ('image/jpeg', 'image/png')
    PHONE_PREFIX = '+265'
