"""Company service - company onboarding, bookings and dashboard"""

import logging

from django.db import transaction
from django.db.models import Sum

from ..models import Booking, Company, Profile
from ..utils.constants import DashboardIcon

logger = logging.getLogger(__name__)


class CompanyService:
    """Service for company administration"""

    @transaction.atomic
    def create_company(self, user, **fields):
        """Create a company and link the admin's profile to it"""
        profile = Profile.objects.select_for_update().get(user=user)
        if profile.company_id is not None:
            raise ValueError("You already manage a company")

        company = Company.objects.create(owner=user, **fields)
        profile.company = company
        profile.save(update_fields=['company', 'updated_at'])

        logger.info(f'[COMPANY] {user.username} created company {company.id} ({company.name})')
        return company

    def company_bookings(self, company, search=None):
        """
        Bookings of a company, newest first

        A search term matches passenger names, the booking id or a seat label.
        """
        bookings = Booking.objects.filter(company=company).select_related(
            'user', 'schedule', 'schedule__route', 'schedule__bus'
        ).order_by('-created_at')

        term = (search or '').strip().lower()
        if not term:
            return list(bookings)

        results = []
        for booking in bookings:
            names = [p.get('name', '').lower() for p in booking.passenger_details]
            seats = [s.lower() for s in booking.seat_numbers]
            if any(term in name for name in names) or term == str(booking.id) or term in seats:
                results.append(booking)
        return results

    def dashboard_stats(self, company):
        revenue = Booking.objects.filter(company=company).aggregate(total=Sum('total_amount'))['total'] or 0
        values = {
            DashboardIcon.TOTAL_REVENUE: revenue,
            DashboardIcon.TOTAL_BOOKINGS: Booking.objects.filter(company=company).count(),
            DashboardIcon.ACTIVE_SCHEDULES: company.schedules.filter(is_active=True).count(),
            DashboardIcon.FLEET_SIZE: company.buses.count(),
        }
        titles = {
            DashboardIcon.TOTAL_REVENUE: 'Total Revenue',
            DashboardIcon.TOTAL_BOOKINGS: 'Total Bookings',
            DashboardIcon.ACTIVE_SCHEDULES: 'Active Schedules',
            DashboardIcon.FLEET_SIZE: 'Fleet Size',
        }
        return [
            {'tag': tag, 'title': titles[tag], 'value': value, 'icon': DashboardIcon.for_tag(tag)}
            for tag, value in values.items()
        ]
