"""Booking-related serializers"""
from rest_framework import serializers

from ..models import Booking
from ..utils.constants import Gender, BookingFlow, PaymentMethod
from .user_serializers import UserSerializer


class PassengerDetailSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    age = serializers.IntegerField(min_value=1, max_value=120)
    gender = serializers.ChoiceField(choices=Gender.CHOICES, default=Gender.MALE)
    seat_number = serializers.CharField(max_length=5)


class BookingCreateSerializer(serializers.Serializer):
    schedule = serializers.IntegerField()
    seat_numbers = serializers.ListField(child=serializers.CharField(max_length=5), allow_empty=False)
    passenger_details = PassengerDetailSerializer(many=True)
    booking_flow = serializers.ChoiceField(choices=BookingFlow.CHOICES, default=BookingFlow.PAY_IMMEDIATELY)
    hold_token = serializers.CharField(max_length=32, required=False, allow_blank=True)
    idempotency_key = serializers.CharField(max_length=64, required=False, allow_blank=True)
    expected_version = serializers.IntegerField(min_value=0, required=False)

    def validate(self, data):
        seats = data['seat_numbers']
        passengers = data['passenger_details']
        if len(set(seats)) != len(seats):
            raise serializers.ValidationError({'seat_numbers': "Duplicate seats in selection"})
        if len(passengers) != len(seats):
            raise serializers.ValidationError("Each selected seat needs exactly one passenger")
        if sorted(p['seat_number'] for p in passengers) != sorted(seats):
            raise serializers.ValidationError("Passenger seats must match the selected seats")
        return data


class ScheduleSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    origin = serializers.CharField(source='route.origin')
    destination = serializers.CharField(source='route.destination')
    stops = serializers.ListField(source='route.stops')
    date = serializers.DateField()
    departure_time = serializers.DateTimeField()
    arrival_time = serializers.DateTimeField()
    price = serializers.IntegerField()
    bus_number = serializers.CharField(source='bus.bus_number')
    bus_type = serializers.CharField(source='bus.bus_type')
    amenities = serializers.ListField(source='bus.amenities')


class BookingSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)
    schedule = ScheduleSummarySerializer(read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True)
    seat_status = serializers.CharField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'user', 'schedule', 'company', 'company_name', 'passenger_details',
            'seat_numbers', 'total_amount', 'booking_status', 'payment_status', 'seat_status',
            'booking_flow', 'payment_id', 'payment_service', 'transaction_id',
            'booking_date', 'cancelled_at',
        ]
        read_only_fields = fields


class PaymentRequestSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=PaymentMethod.CHOICES, default=PaymentMethod.PAYCHANGU)
