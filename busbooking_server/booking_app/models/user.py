"""User-related models"""
from django.db import models
from django.contrib.auth.models import User

from ..utils.constants import UserRole


class Profile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE)
    firebase_uid = models.CharField(max_length=128, unique=True, null=True, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    role = models.CharField(max_length=20, choices=UserRole.CHOICES, default=UserRole.CUSTOMER)
    company = models.ForeignKey('Company', on_delete=models.SET_NULL, null=True, blank=True, related_name='admins')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user.username} ({self.role})"

    @property
    def is_company_admin(self):
        return self.role == UserRole.COMPANY_ADMIN
