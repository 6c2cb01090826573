"""Booking-related views using BookingService"""
import logging

from django.db.models import Q
from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.authentication import JWTAuthentication

from ..models import Booking
from ..serializers import (
    BookingSerializer,
    BookingCreateSerializer,
    PaymentRequestSerializer,
    ScheduleFilterSerializer,
)
from ..services import BookingService, PaymentService, ScheduleService, PaymentGatewayError
from ..services import ticket_service
from ..utils.constants import PaymentMethod
from .errors import DOMAIN_ERRORS, error_response

logger = logging.getLogger(__name__)


class BookingViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated]
    serializer_class = BookingSerializer

    def get_queryset(self):
        user = self.request.user
        profile = getattr(user, 'profile', None)
        visible = Q(user=user)
        if profile and profile.is_company_admin and profile.company_id:
            visible |= Q(company_id=profile.company_id)
        return Booking.objects.filter(visible).select_related(
            'user', 'company', 'schedule', 'schedule__bus', 'schedule__route'
        )

    def list(self, request, *args, **kwargs):
        filters = ScheduleFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        bookings = BookingService().bookings_for_user(request.user)
        if filters.validated_data:
            try:
                matching = ScheduleService().apply_filters([b.schedule for b in bookings], filters.validated_data)
            except DOMAIN_ERRORS as e:
                return error_response(e)
            matching_ids = {s.id for s in matching}
            bookings = [b for b in bookings if b.schedule_id in matching_ids]

        return Response(BookingSerializer(bookings, many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            booking = BookingService().create_booking(
                schedule_id=data['schedule'],
                user=request.user,
                seat_numbers=data['seat_numbers'],
                passenger_details=data['passenger_details'],
                flow=data['booking_flow'],
                hold_token=data.get('hold_token') or None,
                idempotency_key=data.get('idempotency_key') or None,
                expected_version=data.get('expected_version'),
            )
        except DOMAIN_ERRORS as e:
            return error_response(e)

        booking = self.get_queryset().get(id=booking.id)
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='cancel')
    def cancel_booking(self, request, pk=None):
        booking = self.get_object()
        try:
            BookingService().cancel_booking(booking.id, request.user)
        except DOMAIN_ERRORS as e:
            return error_response(e)

        return Response(
            {'message': 'Booking cancelled successfully', 'booking': BookingSerializer(self.get_object()).data},
            status=status.HTTP_200_OK
        )

    @action(detail=True, methods=['post'], url_path='pay')
    def pay(self, request, pk=None):
        booking = self.get_object()
        if booking.user_id != request.user.id:
            return Response({'error': 'Only the customer who booked can pay'}, status=status.HTTP_403_FORBIDDEN)

        serializer = PaymentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = PaymentService().process_payment(booking, serializer.validated_data['payment_method'])
        except DOMAIN_ERRORS as e:
            return error_response(e)

        result['booking'] = BookingSerializer(self.get_object()).data
        code = status.HTTP_202_ACCEPTED if result['requires_redirect'] else status.HTTP_200_OK
        return Response(result, status=code)

    @action(detail=True, methods=['get'], url_path='ticket')
    def ticket(self, request, pk=None):
        booking = self.get_object()
        include_qr = request.query_params.get('qr') in ('1', 'true', 'yes')

        pdf = ticket_service.render_ticket_pdf(booking, include_qr=include_qr)
        response = HttpResponse(pdf, content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="ticket-{booking.id}.pdf"'
        return response


class TicketVerifyView(APIView):
    """Checks the payload of a scanned ticket QR code"""
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            params = ticket_service.parse_verification_params(request.query_params)
        except DOMAIN_ERRORS as e:
            return error_response(e)

        result = ticket_service.verify_ticket(params['booking_id'], params['seats'], params['expires'])
        return Response(result, status=status.HTTP_200_OK)


def _webhook(request, payment_method):
    try:
        booking = PaymentService().handle_webhook(payment_method, request)
    except PaymentGatewayError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Booking.DoesNotExist:
        return JsonResponse({'error': 'Booking not found'}, status=404)
    except DOMAIN_ERRORS as e:
        return JsonResponse({'error': str(e)}, status=400)

    if booking is None:
        return JsonResponse({'status': 'ignored'}, status=200)
    return JsonResponse({'status': 'success', 'booking_id': booking.id, 'payment_status': booking.payment_status}, status=200)


@csrf_exempt
@require_POST
def payment_webhook(request):
    return _webhook(request, PaymentMethod.PAYCHANGU)


@csrf_exempt
@require_POST
def stripe_webhook(request):
    return _webhook(request, PaymentMethod.STRIPE)


__all__ = [
    'BookingViewSet',
    'TicketVerifyView',
    'payment_webhook',
    'stripe_webhook',
]
