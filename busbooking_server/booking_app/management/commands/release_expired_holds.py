"""Management command to delete seat holds past their expiry"""
from django.core.management.base import BaseCommand

from booking_app.services import SeatHoldService


class Command(BaseCommand):
    help = 'Delete expired seat holds so their seats can be selected again'

    def handle(self, *args, **options):
        released = SeatHoldService().release_expired()
        if released == 0:
            self.stdout.write('No expired seat holds')
            return
        self.stdout.write(self.style.SUCCESS(f'Released {released} expired seat hold(s)'))
