"""Tests for payment service and gateways"""

import json
from datetime import timedelta
from types import SimpleNamespace
from unittest import mock

import stripe
from django.test import TestCase, RequestFactory, override_settings
from django.utils import timezone

from ..models import Booking, Schedule
from ..payment_gateways import MockPaymentGateway, StripePaymentGateway, PaymentGatewayError
from ..services.booking_service import BookingService
from ..services.payment_service import PaymentService, PaymentNotAllowedError
from ..utils.constants import BookingFlow, BookingStatus, PaymentMethod, PaymentStatus
from .helpers import create_user, create_company, create_schedule, passengers_for


def stripe_event(event_type, booking_id, payment_intent='pi_123'):
    session = SimpleNamespace(id='cs_test_1', metadata={'booking_id': str(booking_id)}, payment_intent=payment_intent)
    return SimpleNamespace(type=event_type, data=SimpleNamespace(object=session))


class PaymentServiceTest(TestCase):
    def setUp(self):
        self.service = PaymentService()
        self.factory = RequestFactory()
        self.company = create_company()
        self.user = create_user('customer')
        self.schedule = create_schedule(self.company, total_seats=4, price=5000)
        self.booking = BookingService().create_booking(
            self.schedule.id, self.user, ['1A'], passengers_for(['1A']), flow=BookingFlow.RESERVE_THEN_PAY
        )

    def test_process_payment_with_mock_gateway(self):
        result = self.service.process_payment(self.booking, PaymentMethod.PAYCHANGU)

        self.assertTrue(result['success'])
        self.assertFalse(result['requires_redirect'])
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_status, PaymentStatus.PAID)
        self.assertEqual(self.booking.transaction_id, result['transaction_id'])
        self.company.refresh_from_db()
        self.assertEqual(self.company.transaction_id, result['transaction_id'])

    def test_confirm_twice_overwrites_transaction(self):
        self.service.confirm_payment(self.booking, transaction_id='TXN-first')
        self.service.confirm_payment(self.booking, transaction_id='TXN-second')
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.transaction_id, 'TXN-second')

    def test_cannot_pay_cancelled_booking(self):
        BookingService().cancel_booking(self.booking.id, self.user)
        self.booking.refresh_from_db()

        with self.assertRaises(PaymentNotAllowedError):
            self.service.process_payment(self.booking)
        with self.assertRaises(PaymentNotAllowedError):
            self.service.confirm_payment(self.booking)

    def test_unsupported_method(self):
        with self.assertRaises(ValueError):
            self.service.get_gateway('wallet')

    def test_mark_failed_keeps_paid_booking(self):
        self.service.confirm_payment(self.booking)
        self.service.mark_failed(self.booking)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_status, PaymentStatus.PAID)

    def assert_cancelled_and_released(self):
        booking = Booking.objects.get(id=self.booking.id)
        self.assertEqual(booking.booking_status, BookingStatus.CANCELLED)
        self.assertEqual(booking.payment_status, PaymentStatus.PENDING)
        self.assertEqual(booking.transaction_id, '')
        schedule = Schedule.objects.get(id=self.schedule.id)
        self.assertEqual(schedule.booked_seats, [])
        self.assertEqual(schedule.available_seats, 4)
        self.assertTrue(schedule.inventory_is_consistent())

    def test_stale_booking_cancelled_before_payment(self):
        stale = Booking.objects.get(id=self.booking.id)
        BookingService().cancel_booking(self.booking.id, self.user)

        with self.assertRaises(PaymentNotAllowedError):
            self.service.process_payment(stale)
        self.assert_cancelled_and_released()

    def test_stale_confirm_after_expiry(self):
        stale = Booking.objects.get(id=self.booking.id)
        Booking.objects.filter(id=self.booking.id).update(created_at=timezone.now() - timedelta(hours=1))
        self.assertEqual(BookingService().expire_unpaid_bookings(), 1)

        # stale still reads confirmed in memory
        self.assertEqual(stale.booking_status, BookingStatus.CONFIRMED)
        with self.assertRaises(PaymentNotAllowedError):
            self.service.confirm_payment(stale, transaction_id='TXN-late')
        self.assert_cancelled_and_released()

    def test_stale_mark_failed_after_payment(self):
        stale = Booking.objects.get(id=self.booking.id)
        self.service.confirm_payment(self.booking, transaction_id='TXN-paid')

        booking = self.service.mark_failed(stale)

        self.assertEqual(booking.payment_status, PaymentStatus.PAID)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_status, PaymentStatus.PAID)
        self.assertEqual(self.booking.transaction_id, 'TXN-paid')

    def test_paid_webhook_for_cancelled_booking_is_ignored(self):
        BookingService().cancel_booking(self.booking.id, self.user)
        request = self.factory.post(
            '/api/webhook/payments/',
            data=json.dumps({'booking_id': self.booking.id, 'status': 'paid', 'transaction_id': 'TXN-late'}),
            content_type='application/json',
        )

        with self.assertLogs('booking_app.services.payment_service', level='ERROR') as logs:
            self.assertIsNone(self.service.handle_webhook(PaymentMethod.PAYCHANGU, request))

        self.assertIn('refund required', logs.output[0])
        self.assert_cancelled_and_released()

    @mock.patch('stripe.checkout.Session.create')
    def test_process_payment_with_stripe_redirects(self, create):
        create.return_value = SimpleNamespace(url='https://checkout.stripe.com/c/cs_test_1', id='cs_test_1')

        result = self.service.process_payment(self.booking, PaymentMethod.STRIPE)

        self.assertTrue(result['requires_redirect'])
        self.assertEqual(result['payment_url'], 'https://checkout.stripe.com/c/cs_test_1')
        self.assertEqual(create.call_args.kwargs['line_items'][0]['price_data']['unit_amount'], 500000)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_id, 'cs_test_1')
        self.assertEqual(self.booking.payment_status, PaymentStatus.PENDING)

    @mock.patch('stripe.checkout.Session.create')
    def test_stripe_error_is_wrapped(self, create):
        create.side_effect = stripe.StripeError('card declined')
        with self.assertRaises(PaymentGatewayError):
            self.service.process_payment(self.booking, PaymentMethod.STRIPE)

    @mock.patch('stripe.checkout.Session.retrieve')
    def test_stripe_confirm_requires_paid_session(self, retrieve):
        self.booking.payment_id = 'cs_test_1'
        retrieve.return_value = SimpleNamespace(id='cs_test_1', payment_status='unpaid', payment_intent=None)
        with self.assertRaises(PaymentGatewayError):
            StripePaymentGateway().confirm_payment(self.booking)

        retrieve.return_value = SimpleNamespace(id='cs_test_1', payment_status='paid', payment_intent='pi_9')
        self.assertEqual(StripePaymentGateway().confirm_payment(self.booking), 'pi_9')

    def test_mock_webhook_marks_paid(self):
        request = self.factory.post(
            '/api/webhook/payments/',
            data=json.dumps({'booking_id': self.booking.id, 'status': 'paid', 'transaction_id': 'TXN-hook'}),
            content_type='application/json',
        )
        booking = self.service.handle_webhook(PaymentMethod.PAYCHANGU, request)

        self.assertEqual(booking.payment_status, PaymentStatus.PAID)
        self.assertEqual(booking.transaction_id, 'TXN-hook')

    def test_mock_webhook_marks_failed(self):
        request = self.factory.post(
            '/api/webhook/payments/',
            data=json.dumps({'booking_id': self.booking.id, 'status': 'failed'}),
            content_type='application/json',
        )
        booking = self.service.handle_webhook(PaymentMethod.PAYCHANGU, request)
        self.assertEqual(booking.payment_status, PaymentStatus.FAILED)
        self.assertEqual(booking.booking_status, BookingStatus.CONFIRMED)

    def test_mock_webhook_rejects_bad_payload(self):
        request = self.factory.post('/api/webhook/payments/', data='not json', content_type='application/json')
        with self.assertRaises(PaymentGatewayError):
            MockPaymentGateway().handle_webhook(request)

        request = self.factory.post(
            '/api/webhook/payments/', data=json.dumps({'booking_id': 1, 'status': 'refunded'}),
            content_type='application/json',
        )
        with self.assertRaises(PaymentGatewayError):
            MockPaymentGateway().handle_webhook(request)

    @override_settings(PAYMENT_WEBHOOK_SECRET='s3cret')
    def test_mock_webhook_secret(self):
        body = json.dumps({'booking_id': self.booking.id, 'status': 'paid'})

        request = self.factory.post('/api/webhook/payments/', data=body, content_type='application/json')
        with self.assertRaises(PaymentGatewayError):
            MockPaymentGateway().handle_webhook(request)

        request = self.factory.post(
            '/api/webhook/payments/', data=body, content_type='application/json',
            HTTP_X_WEBHOOK_SECRET='s3cret',
        )
        self.assertEqual(MockPaymentGateway().handle_webhook(request)['status'], PaymentStatus.PAID)

    @mock.patch('stripe.Webhook.construct_event')
    def test_stripe_webhook_completed(self, construct_event):
        construct_event.return_value = stripe_event('checkout.session.completed', self.booking.id)
        request = self.factory.post('/api/webhook/stripe/', data='{}', content_type='application/json',
                                    HTTP_STRIPE_SIGNATURE='t=1,v1=abc')

        booking = self.service.handle_webhook(PaymentMethod.STRIPE, request)

        self.assertEqual(booking.payment_status, PaymentStatus.PAID)
        self.assertEqual(booking.transaction_id, 'pi_123')
        self.assertEqual(booking.payment_service, PaymentMethod.STRIPE)
        self.assertEqual(construct_event.call_args.args[1], 't=1,v1=abc')

    @mock.patch('stripe.Webhook.construct_event')
    def test_stripe_webhook_expired(self, construct_event):
        construct_event.return_value = stripe_event('checkout.session.expired', self.booking.id)
        request = self.factory.post('/api/webhook/stripe/', data='{}', content_type='application/json')

        booking = self.service.handle_webhook(PaymentMethod.STRIPE, request)
        self.assertEqual(booking.payment_status, PaymentStatus.FAILED)

    @mock.patch('stripe.Webhook.construct_event')
    def test_stripe_webhook_ignores_other_events(self, construct_event):
        construct_event.return_value = stripe_event('payment_intent.created', self.booking.id)
        request = self.factory.post('/api/webhook/stripe/', data='{}', content_type='application/json')
        self.assertIsNone(self.service.handle_webhook(PaymentMethod.STRIPE, request))

    @mock.patch('stripe.Webhook.construct_event')
    def test_stripe_webhook_bad_signature(self, construct_event):
        construct_event.side_effect = stripe.SignatureVerificationError('bad signature', 'sig')
        request = self.factory.post('/api/webhook/stripe/', data='{}', content_type='application/json')
        with self.assertRaises(PaymentGatewayError):
            self.service.handle_webhook(PaymentMethod.STRIPE, request)
