from django.urls import path, include
from rest_framework import routers

from .views import (
    AuthViewSet, ProfileView,
    ScheduleViewSet,
    BookingViewSet, TicketVerifyView, payment_webhook, stripe_webhook,
    CompanyView, CompanyBusViewSet, CompanyRouteViewSet, CompanyScheduleViewSet,
)

router = routers.DefaultRouter()
router.register(r"auth", AuthViewSet, basename="auth")
router.register(r"schedules", ScheduleViewSet, basename="schedules")
router.register(r"bookings", BookingViewSet, basename="bookings")

# Company admin endpoints
router.register(r"company/buses", CompanyBusViewSet, basename="company-buses")
router.register(r"company/routes", CompanyRouteViewSet, basename="company-routes")
router.register(r"company/schedules", CompanyScheduleViewSet, basename="company-schedules")

profile = ProfileView.as_view({'get': 'retrieve', 'patch': 'partial_update'})
landing = ProfileView.as_view({'get': 'landing'})
company = CompanyView.as_view({'post': 'create'})
company_profile = CompanyView.as_view({'get': 'retrieve', 'patch': 'partial_update'})
company_bookings = CompanyView.as_view({'get': 'bookings'})
company_dashboard = CompanyView.as_view({'get': 'dashboard'})

urlpatterns = [
    path('profile/', profile, name='profile'),
    path('profile/landing/', landing, name='profile-landing'),
    path('company/', company, name='company'),
    path('company/profile/', company_profile, name='company-profile'),
    path('company/bookings/', company_bookings, name='company-bookings'),
    path('company/dashboard/', company_dashboard, name='company-dashboard'),
    path('tickets/verify/', TicketVerifyView.as_view(), name='ticket-verify'),
    path('webhook/payments/', payment_webhook, name='payment-webhook'),
    path('webhook/stripe/', stripe_webhook, name='stripe-webhook'),
    path('', include(router.urls)),
]
