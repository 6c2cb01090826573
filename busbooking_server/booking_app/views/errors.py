"""Maps domain exceptions raised by services to HTTP error responses"""
import logging

from django.core.exceptions import ObjectDoesNotExist
from rest_framework import status
from rest_framework.response import Response

from ..services import (
    InvalidBookingError,
    InvalidSeatSelectionError,
    InvalidSearchError,
    InvalidTicketError,
    BookingAlreadyCancelledError,
    PaymentNotAllowedError,
    BookingPermissionError,
    SeatsUnavailableError,
    InsufficientSeatsError,
    InventoryConflictError,
    PaymentGatewayError,
    IdentityProviderError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = (
    ((InvalidBookingError, InvalidSeatSelectionError, InvalidSearchError, InvalidTicketError,
      BookingAlreadyCancelledError, PaymentNotAllowedError, ValueError), status.HTTP_400_BAD_REQUEST),
    ((BookingPermissionError,), status.HTTP_403_FORBIDDEN),
    ((ObjectDoesNotExist,), status.HTTP_404_NOT_FOUND),
    ((SeatsUnavailableError, InsufficientSeatsError, InventoryConflictError), status.HTTP_409_CONFLICT),
    ((PaymentGatewayError,), status.HTTP_502_BAD_GATEWAY),
)

DOMAIN_ERRORS = tuple(exc for group, _ in ERROR_STATUS for exc in group) + (IdentityProviderError,)


def error_response(exc):
    if isinstance(exc, IdentityProviderError):
        code = status.HTTP_401_UNAUTHORIZED if exc.unauthorized else status.HTTP_400_BAD_REQUEST
        return Response({'error': str(exc)}, status=code)

    for exceptions, code in ERROR_STATUS:
        if isinstance(exc, exceptions):
            if code == status.HTTP_404_NOT_FOUND:
                return Response({'error': 'Not found'}, status=code)
            if code >= 500:
                logger.error(f'[API] {exc.__class__.__name__}: {exc}')
            return Response({'error': str(exc)}, status=code)
    raise exc
