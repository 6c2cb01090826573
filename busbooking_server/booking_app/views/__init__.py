"""Views package - HTTP request handlers"""

# Import from domain-specific view files
from .auth_views import AuthViewSet, ProfileView
from .schedule_views import ScheduleViewSet
from .booking_views import BookingViewSet, TicketVerifyView, payment_webhook, stripe_webhook
from .company_views import CompanyView, CompanyBusViewSet, CompanyRouteViewSet, CompanyScheduleViewSet

__all__ = [
    'AuthViewSet', 'ProfileView',
    'ScheduleViewSet',
    'BookingViewSet', 'TicketVerifyView', 'payment_webhook', 'stripe_webhook',
    'CompanyView', 'CompanyBusViewSet', 'CompanyRouteViewSet', 'CompanyScheduleViewSet',
]
