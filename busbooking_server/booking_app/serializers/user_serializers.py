"""User-related serializers"""
from rest_framework import serializers
from django.contrib.auth.models import User

from ..models import Profile
from ..services.auth_service import resolve_landing_route
from ..utils.constants import UserRole, BusinessRules
from ..utils.validators import validate_phone, validate_email_address


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "username", "email", "first_name", "last_name"]


class ProfileSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True, default=None)
    landing_route = serializers.SerializerMethodField()

    class Meta:
        model = Profile
        fields = ['id', 'user', 'phone', 'role', 'company', 'company_name', 'landing_route']
        read_only_fields = ['role', 'company']

    def get_landing_route(self, obj):
        return resolve_landing_route(obj)


class ProfileUpdateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=150, required=False)
    last_name = serializers.CharField(max_length=150, required=False)
    phone = serializers.CharField(max_length=20, required=False)

    def validate_phone(self, value):
        return validate_phone(value)

    def update(self, instance, validated_data):
        user = instance.user
        for field in ('first_name', 'last_name'):
            if field in validated_data:
                setattr(user, field, validated_data[field])
        user.save()

        if 'phone' in validated_data:
            instance.phone = validated_data['phone']
            instance.save(update_fields=['phone', 'updated_at'])
        return instance


class SignUpSerializer(serializers.Serializer):
    """Password creates a new Firebase account, id_token completes an existing one"""
    email = serializers.CharField(max_length=254)
    password = serializers.CharField(write_only=True, required=False, allow_blank=True)
    id_token = serializers.CharField(write_only=True, required=False, allow_blank=True)
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    phone = serializers.CharField(max_length=20)
    role = serializers.ChoiceField(choices=UserRole.CHOICES, default=UserRole.CUSTOMER)

    def validate_email(self, value):
        return validate_email_address(value.strip())

    def validate_phone(self, value):
        return validate_phone(value)

    def validate(self, data):
        if data.get('id_token'):
            return data
        password = data.get('password') or ''
        if len(password) < BusinessRules.MIN_PASSWORD_LENGTH:
            raise serializers.ValidationError(
                {'password': f"Password must be at least {BusinessRules.MIN_PASSWORD_LENGTH} characters"}
            )
        return data


class SignInSerializer(serializers.Serializer):
    email = serializers.CharField(max_length=254)
    password = serializers.CharField(write_only=True)

    def validate_email(self, value):
        return validate_email_address(value.strip())


class FirebaseSignInSerializer(serializers.Serializer):
    id_token = serializers.CharField()
