"""Customer-facing schedule views: search, seat map and seat holds"""
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from ..models import Schedule
from ..serializers import ScheduleSerializer, ScheduleSearchSerializer, SeatHoldSerializer
from ..services import ScheduleService, SeatHoldService
from .errors import DOMAIN_ERRORS, error_response

FILTER_KEYS = ('bus_type', 'company', 'amenities', 'min_price', 'max_price', 'departure_start', 'departure_end')


class ScheduleViewSet(viewsets.ReadOnlyModelViewSet):
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated]
    serializer_class = ScheduleSerializer

    def get_queryset(self):
        return Schedule.objects.filter(is_active=True).select_related('company', 'bus', 'route')

    def list(self, request, *args, **kwargs):
        return self.search(request)

    @action(detail=False, methods=['get'], url_path='search')
    def search(self, request):
        serializer = ScheduleSearchSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        criteria = serializer.validated_data

        service = ScheduleService()
        try:
            schedules = service.search(
                criteria['origin'], criteria['destination'], criteria['date'], criteria['passengers']
            )
            schedules = service.apply_filters(schedules, {k: criteria[k] for k in FILTER_KEYS if k in criteria})
        except DOMAIN_ERRORS as e:
            return error_response(e)

        return Response(ScheduleSerializer(schedules, many=True).data)

    @action(detail=True, methods=['get'], url_path='seats')
    def seats(self, request, pk=None):
        schedule = self.get_object()
        return Response({
            'schedule': schedule.id,
            'version': schedule.version,
            'available_seats': schedule.available_seats,
            'seats': SeatHoldService().seat_map(schedule, request.user),
        })

    @action(detail=True, methods=['post', 'delete'], url_path='hold')
    def hold(self, request, pk=None):
        schedule = self.get_object()
        service = SeatHoldService()

        if request.method == 'DELETE':
            released = service.release_holds(schedule.id, request.user)
            return Response({'released': released}, status=status.HTTP_200_OK)

        serializer = SeatHoldSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            hold = service.hold_seats(
                schedule.id, request.user,
                serializer.validated_data['seats'], serializer.validated_data['passengers']
            )
        except DOMAIN_ERRORS as e:
            return error_response(e)

        return Response(hold, status=status.HTTP_201_CREATED)
