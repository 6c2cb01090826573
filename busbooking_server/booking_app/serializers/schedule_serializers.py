"""Schedule serializers"""
from django.utils import timezone
from rest_framework import serializers

from ..models import Schedule, Bus, Route
from ..services.schedule_service import ScheduleService
from ..utils.constants import BusType
from .company_serializers import BusSerializer, RouteSerializer


class ScheduleSerializer(serializers.ModelSerializer):
    """Read representation with the joined reference data"""
    company_name = serializers.CharField(source='company.name', read_only=True)
    bus = BusSerializer(read_only=True)
    route = RouteSerializer(read_only=True)

    class Meta:
        model = Schedule
        fields = [
            'id', 'company', 'company_name', 'bus', 'route', 'date', 'departure_time',
            'arrival_time', 'price', 'available_seats', 'booked_seats', 'version', 'is_active',
        ]
        read_only_fields = fields


class ScheduleWriteSerializer(serializers.ModelSerializer):
    """Company-side create/update. Inventory is derived from the bus."""
    bus = serializers.PrimaryKeyRelatedField(queryset=Bus.objects.all())
    route = serializers.PrimaryKeyRelatedField(queryset=Route.objects.all())
    date = serializers.DateField(required=False)

    class Meta:
        model = Schedule
        fields = [
            'id', 'bus', 'route', 'date', 'departure_time', 'arrival_time', 'price',
            'available_seats', 'booked_seats', 'version', 'is_active',
        ]
        read_only_fields = ['available_seats', 'booked_seats', 'version']

    def _company(self):
        return self.context['company']

    def validate_bus(self, value):
        if value.company_id != self._company().id:
            raise serializers.ValidationError("Bus does not belong to your company")
        return value

    def validate_route(self, value):
        if value.company_id != self._company().id:
            raise serializers.ValidationError("Route does not belong to your company")
        return value

    def validate_price(self, value):
        if value < 1:
            raise serializers.ValidationError("Price must be greater than 0")
        return value

    def validate(self, data):
        departure = data.get('departure_time', getattr(self.instance, 'departure_time', None))
        arrival = data.get('arrival_time', getattr(self.instance, 'arrival_time', None))
        if departure and arrival and arrival <= departure:
            raise serializers.ValidationError({'arrival_time': "Arrival must be after departure"})
        if 'date' not in data and departure and 'departure_time' in data:
            data['date'] = timezone.localdate(departure)
        elif 'date' in data and departure and data['date'] != timezone.localdate(departure):
            raise serializers.ValidationError({'date': "Date must match the departure date"})
        return data

    def create(self, validated_data):
        schedule = Schedule(company=self._company(), **validated_data)
        schedule.initialize_inventory()
        schedule.save()
        return schedule

    def update(self, instance, validated_data):
        bus = validated_data.pop('bus', None)
        if bus is not None and bus.id != instance.bus_id:
            try:
                instance = ScheduleService().change_bus(instance, bus)
            except ValueError as e:
                raise serializers.ValidationError({'bus': str(e)})

        # Never write inventory columns from this (possibly stale) instance
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if validated_data:
            instance.save(update_fields=list(validated_data) + ['updated_at'])
        return instance


class ScheduleFilterSerializer(serializers.Serializer):
    bus_type = serializers.ChoiceField(choices=BusType.CHOICES, required=False)
    company = serializers.CharField(required=False)
    amenities = serializers.ListField(child=serializers.CharField(), required=False)
    min_price = serializers.IntegerField(min_value=0, required=False)
    max_price = serializers.IntegerField(min_value=0, required=False)
    departure_start = serializers.RegexField(r'^\d{2}:\d{2}$', required=False)
    departure_end = serializers.RegexField(r'^\d{2}:\d{2}$', required=False)

    def validate(self, data):
        if 'min_price' in data and 'max_price' in data and data['min_price'] > data['max_price']:
            raise serializers.ValidationError("min_price cannot exceed max_price")
        return data


class ScheduleSearchSerializer(ScheduleFilterSerializer):
    origin = serializers.CharField()
    destination = serializers.CharField()
    date = serializers.DateField()
    passengers = serializers.IntegerField(min_value=1, default=1)


class SeatHoldSerializer(serializers.Serializer):
    seats = serializers.ListField(child=serializers.CharField(max_length=5), allow_empty=False)
    passengers = serializers.IntegerField(min_value=1)
