"""Serializers package - imports from domain-specific modules"""

# User serializers
from .user_serializers import (
    UserSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    SignUpSerializer,
    SignInSerializer,
    FirebaseSignInSerializer,
)

# Company and fleet serializers
from .company_serializers import (
    CompanySerializer,
    BusSerializer,
    RouteSerializer,
)

# Schedule serializers
from .schedule_serializers import (
    ScheduleSerializer,
    ScheduleWriteSerializer,
    ScheduleFilterSerializer,
    ScheduleSearchSerializer,
    SeatHoldSerializer,
)

# Booking serializers
from .booking_serializers import (
    PassengerDetailSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    PaymentRequestSerializer,
)
