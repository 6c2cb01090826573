"""Field validators shared by serializers"""
import base64
import binascii
import re

from rest_framework import serializers

from .constants import BusinessRules

PHONE_RE = re.compile(r'^\+265[0-9]{9}$')
EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
DATA_URL_RE = re.compile(r'^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.*)$', re.DOTALL)


def normalize_phone(value):
    return re.sub(r'[\s-]', '', value or '')


def validate_phone(value):
    """Malawi numbers: +265 followed by 9 digits, spaces and dashes ignored"""
    phone = normalize_phone(value)
    if not PHONE_RE.match(phone):
        raise serializers.ValidationError(
            f"Phone number must start with {BusinessRules.PHONE_PREFIX} followed by 9 digits"
        )
    return phone


def validate_email_address(value):
    if not EMAIL_RE.match(value or ''):
        raise serializers.ValidationError("Enter a valid email address")
    return value


def validate_logo(value):
    """Logo is a base64 data URL of a JPEG or PNG no larger than 1 MB"""
    if not value:
        return value

    match = DATA_URL_RE.match(value)
    if not match:
        raise serializers.ValidationError("Logo must be a base64 data URL")
    if match.group('mime') not in BusinessRules.ALLOWED_LOGO_TYPES:
        raise serializers.ValidationError("Please upload a valid image file (JPEG or PNG)")

    try:
        raw = base64.b64decode(match.group('data'), validate=True)
    except (binascii.Error, ValueError):
        raise serializers.ValidationError("Logo data is not valid base64")
    if len(raw) > BusinessRules.MAX_LOGO_BYTES:
        raise serializers.ValidationError("File size should be less than 1MB")
    return value
