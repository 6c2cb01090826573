"""Management command to cancel reservations that were never paid"""
from django.core.management.base import BaseCommand

from booking_app.services import BookingService
from booking_app.utils.constants import BusinessRules


class Command(BaseCommand):
    help = 'Cancel reserve-then-pay bookings still unpaid after the expiry window and release their seats'

    def add_arguments(self, parser):
        parser.add_argument(
            '--minutes',
            type=int,
            default=BusinessRules.UNPAID_BOOKING_EXPIRY_MINUTES,
            help=f'Expire bookings unpaid for more than X minutes (default: {BusinessRules.UNPAID_BOOKING_EXPIRY_MINUTES})'
        )

    def handle(self, *args, **options):
        expired = BookingService().expire_unpaid_bookings(options['minutes'])
        if expired == 0:
            self.stdout.write('No unpaid bookings to expire')
            return
        self.stdout.write(self.style.SUCCESS(f'Expired {expired} unpaid booking(s)'))
