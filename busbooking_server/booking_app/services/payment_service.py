"""Payment service - orchestrates payment gateways"""

import logging

from django.db import transaction

from ..models import Booking
from ..payment_gateways import MockPaymentGateway, StripePaymentGateway, PaymentGatewayError
from ..utils.constants import PaymentMethod, PaymentStatus, BookingStatus

logger = logging.getLogger(__name__)


class PaymentNotAllowedError(Exception):
    """Raised when a booking cannot take a payment in its current state"""
    pass


GATEWAYS = {
    PaymentMethod.PAYCHANGU: MockPaymentGateway,
    PaymentMethod.STRIPE: StripePaymentGateway,
}


class PaymentService:
    """Service for payment operations"""

    def get_gateway(self, payment_method):
        try:
            return GATEWAYS[payment_method]()
        except KeyError:
            raise ValueError(f'Unsupported payment method: {payment_method}')

    def process_payment(self, booking, payment_method=PaymentMethod.PAYCHANGU):
        """
        Pay for a booking with the given method

        The mock gateway settles at once. Stripe returns a checkout URL and
        the booking is settled later by the webhook.
        """
        booking.refresh_from_db(fields=['booking_status', 'payment_status'])
        if booking.booking_status == BookingStatus.CANCELLED:
            raise PaymentNotAllowedError("Cannot pay for a cancelled booking")

        gateway = self.get_gateway(payment_method)

        if gateway.requires_redirect:
            result = gateway.initiate_payment(booking)
            booking.payment_id = result['session_id']
            booking.payment_service = gateway.service_name
            booking.save(update_fields=['payment_id', 'payment_service', 'updated_at'])
            logger.info(f'[PAYMENT] Checkout started for booking {booking.id} via {gateway.service_name}')
            return {'success': True, 'payment_url': result['payment_url'], 'requires_redirect': True}

        paid = self.confirm_payment(booking, gateway=gateway)
        return {'success': True, 'transaction_id': paid.transaction_id, 'requires_redirect': False}

    @transaction.atomic
    def confirm_payment(self, booking, gateway=None, transaction_id=None):
        """
        Mark booking paid and record the transaction on booking and company

        The booking row is re-read under lock, so a cancellation that landed
        after the caller loaded `booking` is seen. Confirming twice records a
        fresh transaction id each time.

        Returns:
            The locked, updated Booking

        Raises:
            PaymentNotAllowedError: If the booking was cancelled
        """
        booking = Booking.objects.select_for_update().select_related('company').get(id=booking.id)
        if booking.booking_status == BookingStatus.CANCELLED:
            raise PaymentNotAllowedError("Cannot pay for a cancelled booking")

        gateway = gateway or MockPaymentGateway()
        if transaction_id is None:
            transaction_id = gateway.confirm_payment(booking)

        booking.payment_status = PaymentStatus.PAID
        booking.payment_service = gateway.service_name
        booking.transaction_id = transaction_id
        booking.save(update_fields=['payment_status', 'payment_service', 'transaction_id', 'updated_at'])

        company = booking.company
        company.payment_service = gateway.service_name
        company.transaction_id = transaction_id
        company.save(update_fields=['payment_service', 'transaction_id', 'updated_at'])

        logger.info(f'[PAYMENT] Booking {booking.id} paid via {gateway.service_name}: {transaction_id}')
        return booking

    @transaction.atomic
    def mark_failed(self, booking):
        """Record a failed payment. A paid booking stays paid."""
        booking = Booking.objects.select_for_update().get(id=booking.id)
        if booking.payment_status == PaymentStatus.PAID:
            return booking
        booking.payment_status = PaymentStatus.FAILED
        booking.save(update_fields=['payment_status', 'updated_at'])
        logger.warning(f'[PAYMENT] Payment failed for booking {booking.id}')
        return booking

    def handle_webhook(self, payment_method, request):
        """
        Apply a provider callback to its booking

        A payment reported for a cancelled booking is logged for refund and
        ignored.

        Returns:
            Booking object, or None when the event was ignored

        Raises:
            PaymentGatewayError: If the callback cannot be verified
            Booking.DoesNotExist: If the callback names an unknown booking
        """
        gateway = self.get_gateway(payment_method)
        result = gateway.handle_webhook(request)
        if result is None:
            return None

        booking = Booking.objects.get(id=result['booking_id'])
        if result['status'] != PaymentStatus.PAID:
            return self.mark_failed(booking)

        try:
            return self.confirm_payment(booking, gateway=gateway, transaction_id=result['transaction_id'])
        except PaymentNotAllowedError:
            logger.error(
                f'[PAYMENT] {gateway.service_name} reported payment {result["transaction_id"]} '
                f'for cancelled booking {booking.id}, refund required'
            )
            return None


__all__ = ['PaymentService', 'PaymentNotAllowedError', 'PaymentGatewayError']
