"""Company, fleet and route serializers"""
from rest_framework import serializers

from ..models import Company, Bus, Route
from ..utils.constants import BusinessRules
from ..utils.validators import validate_phone, validate_email_address, validate_logo


class CompanySerializer(serializers.ModelSerializer):
    class Meta:
        model = Company
        fields = [
            'id', 'name', 'email', 'phone', 'address', 'description', 'logo',
            'is_active', 'payment_service', 'transaction_id', 'created_at', 'updated_at',
        ]
        read_only_fields = ['is_active', 'payment_service', 'transaction_id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if len(value) < BusinessRules.MIN_COMPANY_NAME_LENGTH:
            raise serializers.ValidationError("Company name must be at least 2 characters")
        return value

    def validate_email(self, value):
        return validate_email_address(value)

    def validate_phone(self, value):
        return validate_phone(value)

    def validate_address(self, value):
        value = value.strip()
        if len(value) < BusinessRules.MIN_ADDRESS_LENGTH:
            raise serializers.ValidationError("Please enter a complete address")
        return value

    def validate_logo(self, value):
        return validate_logo(value)


class BusSerializer(serializers.ModelSerializer):
    class Meta:
        model = Bus
        fields = ['id', 'bus_number', 'bus_type', 'total_seats', 'amenities', 'is_active', 'created_at']
        read_only_fields = ['created_at']

    def validate_bus_number(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Bus number is required")
        return value

    def validate_total_seats(self, value):
        if value < 1:
            raise serializers.ValidationError("Total seats must be greater than 0")
        return value

    def validate_amenities(self, value):
        if not isinstance(value, list) or not all(isinstance(a, str) for a in value):
            raise serializers.ValidationError("Amenities must be a list of strings")
        return value

    def validate(self, data):
        # Shrinking a bus must not strand seats already sold on its schedules
        if self.instance and 'total_seats' in data and data['total_seats'] != self.instance.total_seats:
            if self.instance.schedules.exists():
                raise serializers.ValidationError(
                    {'total_seats': "Cannot change capacity of a bus that has schedules"}
                )
        return data


class RouteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Route
        fields = ['id', 'origin', 'destination', 'distance', 'duration', 'stops', 'is_active', 'created_at']
        read_only_fields = ['created_at']

    def validate_origin(self, value):
        if not value.strip():
            raise serializers.ValidationError("Origin is required")
        return value.strip()

    def validate_destination(self, value):
        if not value.strip():
            raise serializers.ValidationError("Destination is required")
        return value.strip()

    def validate_distance(self, value):
        if value < 0:
            raise serializers.ValidationError("Distance cannot be negative")
        return value

    def validate_stops(self, value):
        if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
            raise serializers.ValidationError("Stops must be a list of names")
        return value

    def validate(self, data):
        origin = data.get('origin', getattr(self.instance, 'origin', None))
        destination = data.get('destination', getattr(self.instance, 'destination', None))
        if origin and destination and origin.lower() == destination.lower():
            raise serializers.ValidationError("Origin and destination must differ")
        return data
