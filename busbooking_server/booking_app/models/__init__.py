"""Models package - domain-based organization"""

# User models
from .user import Profile

# Company models
from .company import Company

# Fleet models
from .fleet import Bus, Route

# Schedule models
from .schedule import Schedule, SeatHold

# Booking models
from .booking import Booking

__all__ = [
    'Profile', 'Company', 'Bus', 'Route', 'Schedule', 'SeatHold', 'Booking',
]
