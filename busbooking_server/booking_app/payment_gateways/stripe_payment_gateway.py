import logging

import stripe
from django.conf import settings

from .payment_gateway import PaymentGateway, PaymentGatewayError
from ..utils.constants import PaymentMethod, PaymentStatus

logger = logging.getLogger(__name__)


class StripePaymentGateway(PaymentGateway):

    service_name = PaymentMethod.STRIPE
    requires_redirect = True

    def initiate_payment(self, booking):
        stripe.api_key = settings.STRIPE_SECRET_KEY

        try:
            session = stripe.checkout.Session.create(
                payment_method_types=['card'],
                line_items=[
                    {
                        'price_data': {
                            'currency': settings.CURRENCY.lower(),
                            'unit_amount': int(booking.total_amount * 100),
                            'product_data': {
                                'name': f'Booking {booking.id} ({booking.passenger_count} seat(s))',
                            },
                        },
                        'quantity': 1,
                    }
                ],
                mode='payment',
                metadata={'booking_id': booking.id},
                success_url=settings.PAYMENT_SUCCESS_URL + '?session_id={CHECKOUT_SESSION_ID}',
                cancel_url=settings.PAYMENT_CANCEL_URL,
                customer_email=booking.user.email or None,
            )
        except stripe.StripeError as e:
            logger.error(f'[STRIPE] Checkout session for booking {booking.id} failed: {e}')
            raise PaymentGatewayError(str(e))

        return {
            'payment_url': session.url,
            'session_id': session.id,
            'requires_redirect': True,
        }

    def confirm_payment(self, booking, reference=None):
        """Look up the checkout session and return its payment intent once paid"""
        stripe.api_key = settings.STRIPE_SECRET_KEY
        session_id = reference or booking.payment_id
        if not session_id:
            raise PaymentGatewayError("No checkout session recorded for this booking")

        try:
            session = stripe.checkout.Session.retrieve(session_id)
        except stripe.StripeError as e:
            raise PaymentGatewayError(str(e))

        if session.payment_status != 'paid':
            raise PaymentGatewayError(f"Checkout session {session_id} is not paid")
        return getattr(session, 'payment_intent', None) or session.id

    def handle_webhook(self, request):
        payload = request.body
        sig_header = request.META.get('HTTP_STRIPE_SIGNATURE', '')
        endpoint_secret = settings.STRIPE_WEBHOOK_SECRET

        try:
            event = stripe.Webhook.construct_event(payload, sig_header, endpoint_secret)
        except ValueError as e:
            raise PaymentGatewayError(f"Invalid payload: {e}")
        except stripe.SignatureVerificationError as e:
            raise PaymentGatewayError(f"Invalid signature: {e}")

        if event.type == 'checkout.session.completed':
            status = PaymentStatus.PAID
        elif event.type == 'checkout.session.expired':
            status = PaymentStatus.FAILED
        else:
            return None

        session = event.data.object
        return {
            'booking_id': int(session.metadata['booking_id']),
            'status': status,
            'transaction_id': getattr(session, 'payment_intent', None) or session.id,
        }
