"""Utils package - helper functions and utilities"""

from .company_utils import get_company_for_user
from .constants import *
from .seating import seat_labels, validate_selection, SeatSelector, InvalidSeatSelectionError

__all__ = [
    'get_company_for_user',
    'seat_labels',
    'validate_selection',
    'SeatSelector',
    'InvalidSeatSelectionError',
]
