"""Company administration views: company profile, fleet, routes, schedules, bookings, dashboard"""
import logging

from django.db.models import ProtectedError
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from ..models import Bus, Route, Schedule
from ..permissions import HasCompany, HasNoCompany
from ..serializers import (
    CompanySerializer,
    BusSerializer,
    RouteSerializer,
    ScheduleSerializer,
    ScheduleWriteSerializer,
    BookingSerializer,
)
from ..services import CompanyService, ScheduleService
from ..utils.company_utils import get_company_for_user

logger = logging.getLogger(__name__)


class CompanyView(viewsets.ViewSet):
    authentication_classes = [JWTAuthentication]

    def get_permissions(self):
        if self.action == 'create':
            return [IsAuthenticated(), HasNoCompany()]
        return [IsAuthenticated(), HasCompany()]

    def create(self, request):
        serializer = CompanySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            company = CompanyService().create_company(request.user, **serializer.validated_data)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CompanySerializer(company).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request):
        return Response(CompanySerializer(get_company_for_user(request.user)).data)

    def partial_update(self, request):
        company = get_company_for_user(request.user)
        serializer = CompanySerializer(company, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def bookings(self, request):
        company = get_company_for_user(request.user)
        bookings = CompanyService().company_bookings(company, request.query_params.get('search'))
        return Response(BookingSerializer(bookings, many=True).data)

    def dashboard(self, request):
        company = get_company_for_user(request.user)
        return Response({'company': company.name, 'stats': CompanyService().dashboard_stats(company)})


class CompanyOwnedViewSet(viewsets.ModelViewSet):
    """CRUD scoped to the requesting admin's company"""
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated, HasCompany]
    model = None
    in_use_message = None

    def get_company(self):
        return get_company_for_user(self.request.user)

    def get_queryset(self):
        return self.model.objects.filter(company=self.get_company()).order_by('-created_at')

    def perform_create(self, serializer):
        serializer.save(company=self.get_company())

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        try:
            instance.delete()
        except ProtectedError:
            return Response({'error': self.in_use_message}, status=status.HTTP_400_BAD_REQUEST)
        logger.info(f'[COMPANY] {request.user.username} deleted {self.model.__name__} {kwargs.get("pk")}')
        return Response(status=status.HTTP_204_NO_CONTENT)


class CompanyBusViewSet(CompanyOwnedViewSet):
    serializer_class = BusSerializer
    model = Bus
    in_use_message = 'Bus is used by existing schedules'


class CompanyRouteViewSet(CompanyOwnedViewSet):
    serializer_class = RouteSerializer
    model = Route
    in_use_message = 'Route is used by existing schedules'


class CompanyScheduleViewSet(CompanyOwnedViewSet):
    model = Schedule
    in_use_message = 'Schedule has bookings'

    def get_queryset(self):
        return Schedule.objects.filter(company=self.get_company()).select_related(
            'company', 'bus', 'route'
        ).order_by('date', 'departure_time')

    def get_serializer_class(self):
        if self.action in ('list', 'retrieve'):
            return ScheduleSerializer
        return ScheduleWriteSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['company'] = self.get_company()
        return context

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        schedule = serializer.save()
        return Response(ScheduleSerializer(schedule).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        schedule = serializer.save()
        return Response(ScheduleSerializer(self.get_queryset().get(id=schedule.id)).data)

    def destroy(self, request, *args, **kwargs):
        if ScheduleService().has_bookings(self.get_object()):
            return Response({'error': self.in_use_message}, status=status.HTTP_400_BAD_REQUEST)
        return super().destroy(request, *args, **kwargs)

    @action(detail=True, methods=['get'], url_path='bookings')
    def bookings(self, request, pk=None):
        schedule = self.get_object()
        bookings = CompanyService().company_bookings(schedule.company, request.query_params.get('search'))
        return Response(BookingSerializer([b for b in bookings if b.schedule_id == schedule.id], many=True).data)
