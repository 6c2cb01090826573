import json
import uuid

from django.conf import settings
from django.utils.crypto import constant_time_compare

from .payment_gateway import PaymentGateway, PaymentGatewayError
from ..utils.constants import PaymentMethod, PaymentStatus


class MockPaymentGateway(PaymentGateway):
    """Stands in for PayChangu: every payment succeeds synchronously"""

    service_name = PaymentMethod.PAYCHANGU

    def initiate_payment(self, booking):
        return {
            'reference': f"booking-{booking.id}",
            'requires_redirect': False,
        }

    def confirm_payment(self, booking, reference=None):
        return f"TXN-{str(uuid.uuid4())[:8]}"

    def handle_webhook(self, request):
        secret = settings.PAYMENT_WEBHOOK_SECRET
        if secret and not constant_time_compare(request.headers.get('X-Webhook-Secret', ''), secret):
            raise PaymentGatewayError("Invalid webhook secret")

        try:
            payload = json.loads(request.body or b'{}')
        except ValueError as e:
            raise PaymentGatewayError(f"Invalid payload: {e}")

        booking_id = payload.get('booking_id')
        status = payload.get('status')
        if not booking_id or status not in (PaymentStatus.PAID, PaymentStatus.FAILED):
            raise PaymentGatewayError("booking_id and a status of 'paid' or 'failed' are required")

        return {
            'booking_id': booking_id,
            'status': status,
            'transaction_id': payload.get('transaction_id'),
        }
