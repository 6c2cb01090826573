from rest_framework.permissions import BasePermission

from .utils.constants import UserRole


def _profile(request):
    user = request.user
    if not user or not user.is_authenticated:
        return None
    return getattr(user, 'profile', None)


class IsCustomer(BasePermission):
    def has_permission(self, request, view):
        profile = _profile(request)
        return profile is not None and profile.role == UserRole.CUSTOMER


class IsCompanyAdmin(BasePermission):
    def has_permission(self, request, view):
        profile = _profile(request)
        return profile is not None and profile.role == UserRole.COMPANY_ADMIN


class HasCompany(BasePermission):
    """Company admin who already owns a company"""
    message = 'Create your company first'

    def has_permission(self, request, view):
        profile = _profile(request)
        return profile is not None and profile.is_company_admin and profile.company_id is not None


class HasNoCompany(BasePermission):
    """Company admin who has not created a company yet"""
    message = 'You already manage a company'

    def has_permission(self, request, view):
        profile = _profile(request)
        return profile is not None and profile.is_company_admin and profile.company_id is None
