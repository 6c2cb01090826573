"""Tests for tickets and QR verification"""

from datetime import timedelta

from django.http import QueryDict
from django.test import TestCase, override_settings

from ..services import ticket_service
from ..services.booking_service import BookingService
from ..services.ticket_service import InvalidTicketError
from .helpers import create_user, create_company, create_schedule, passengers_for


@override_settings(TICKET_VERIFY_URL='https://tickets.example.com/verify')
class TicketServiceTest(TestCase):
    def setUp(self):
        self.company = create_company()
        self.user = create_user('customer')
        self.schedule = create_schedule(self.company, total_seats=4)
        self.booking = BookingService().create_booking(
            self.schedule.id, self.user, ['1A', '1B'], passengers_for(['1A', '1B'])
        )

    def test_verification_url_round_trip(self):
        url = ticket_service.build_verification_url(self.booking)
        self.assertTrue(url.startswith('https://tickets.example.com/verify?bookingId='))

        params = ticket_service.parse_verification_url(url)
        self.assertEqual(params['booking_id'], self.booking.id)
        self.assertEqual(params['seats'], ['1A', '1B'])
        self.assertEqual(params['expires'], self.schedule.arrival_time + timedelta(hours=4))

    def test_expiry_format(self):
        formatted = ticket_service.format_expiry(ticket_service.qr_expiry(self.schedule))
        self.assertTrue(formatted.endswith('.000Z'))

    def test_parse_query_dict(self):
        params = QueryDict(mutable=True)
        params.update({'bookingId': str(self.booking.id), 'seats': '1A,1B', 'expires': '2030-01-01T10:00:00.000Z'})
        parsed = ticket_service.parse_verification_params(params)
        self.assertEqual(parsed['seats'], ['1A', '1B'])

    def test_parse_rejects_malformed(self):
        with self.assertRaises(InvalidTicketError):
            ticket_service.parse_verification_url('https://tickets.example.com/verify?seats=1A')
        with self.assertRaises(InvalidTicketError):
            ticket_service.parse_verification_url(
                'https://tickets.example.com/verify?bookingId=x&seats=1A&expires=2030-01-01T10:00:00Z'
            )
        with self.assertRaises(InvalidTicketError):
            ticket_service.parse_verification_url(
                'https://tickets.example.com/verify?bookingId=1&seats=1A&expires=tomorrow'
            )

    def verify(self, **overrides):
        params = ticket_service.parse_verification_url(ticket_service.build_verification_url(self.booking))
        params.update(overrides)
        now = params.pop('now', None)
        return ticket_service.verify_ticket(params['booking_id'], params['seats'], params['expires'], now=now)

    def test_verify_valid(self):
        self.assertEqual(self.verify(), {'valid': True, 'reason': 'valid', 'booking_id': self.booking.id})

    def test_verify_unknown_booking(self):
        self.assertEqual(self.verify(booking_id=self.booking.id + 100)['reason'], 'not_found')

    def test_verify_cancelled_booking(self):
        BookingService().cancel_booking(self.booking.id, self.user)
        self.assertEqual(self.verify()['reason'], 'not_confirmed')

    def test_verify_seat_mismatch(self):
        self.assertEqual(self.verify(seats=['1A'])['reason'], 'seat_mismatch')

    def test_verify_tampered_expiry(self):
        expires = ticket_service.qr_expiry(self.schedule) + timedelta(days=1)
        self.assertEqual(self.verify(expires=expires)['reason'], 'tampered')

    def test_verify_expired(self):
        now = ticket_service.qr_expiry(self.schedule) + timedelta(minutes=1)
        result = self.verify(now=now)
        self.assertFalse(result['valid'])
        self.assertEqual(result['reason'], 'expired')

    def test_qr_png(self):
        png = ticket_service.make_qr_png('https://tickets.example.com/verify?bookingId=1')
        self.assertEqual(png.read(8), b'\x89PNG\r\n\x1a\n')

    def test_render_ticket_pdf(self):
        self.booking.refresh_from_db()
        pdf = ticket_service.render_ticket_pdf(self.booking)
        self.assertTrue(pdf.startswith(b'%PDF'))

        with_qr = ticket_service.render_ticket_pdf(self.booking, include_qr=True)
        self.assertTrue(with_qr.startswith(b'%PDF'))
        self.assertGreater(len(with_qr), len(pdf))
