"""Authentication service - Firebase identity, local users and JWT tokens"""

import logging

from django.contrib.auth.models import User
from django.db import transaction
from firebase_admin import auth as firebase_auth
from firebase_admin.exceptions import FirebaseError
from rest_framework_simplejwt.tokens import RefreshToken

from ..models import Profile
from ..utils.constants import UserRole, LandingRoute
from ..utils.firebase_auth import (
    IdentityProviderError,
    create_firebase_user,
    sign_in_with_password,
    verify_firebase_token,
)

logger = logging.getLogger(__name__)


def resolve_landing_route(profile):
    """Where a signed-in user lands, decided from their profile alone"""
    if profile is None:
        return LandingRoute.REGISTER
    if profile.role == UserRole.COMPANY_ADMIN:
        return LandingRoute.ADMIN if profile.company_id else LandingRoute.CREATE_COMPANY
    return LandingRoute.HOME


def get_profile(user):
    return getattr(user, 'profile', None)


class AuthService:
    """Service for authentication operations"""

    def sign_up(self, email, first_name, last_name, phone, role, password=None, id_token=None):
        """
        Register a user with Firebase and create the local User and Profile

        Either `password` creates a new Firebase account, or `id_token`
        completes registration for an account that already exists there.

        Raises:
            IdentityProviderError: If Firebase refuses the account
        """
        email = email.strip().lower()
        created_in_firebase = False

        if id_token:
            identity = verify_firebase_token(id_token)
            uid = identity['uid']
            email = (identity['email'] or email).lower()
        else:
            uid = create_firebase_user(email, password, f"{first_name} {last_name}".strip())
            created_in_firebase = True

        if Profile.objects.filter(firebase_uid=uid).exists():
            raise IdentityProviderError('An account with this email already exists')

        try:
            with transaction.atomic():
                user, _ = User.objects.get_or_create(username=email, defaults={'email': email})
                if Profile.objects.filter(user=user).exists():
                    raise IdentityProviderError('An account with this email already exists')
                user.first_name = first_name
                user.last_name = last_name
                user.set_unusable_password()
                user.save()

                profile = Profile.objects.create(user=user, firebase_uid=uid, phone=phone, role=role)
        except Exception:
            if created_in_firebase:
                self._delete_firebase_user(uid)
            raise

        logger.info(f'[AUTH] Registered {email} as {role}')
        return user, profile

    def sign_in(self, email, password):
        """Email/password sign in through Firebase"""
        identity = sign_in_with_password(email.strip().lower(), password)
        return self._local_user(identity)

    def sign_in_with_token(self, id_token):
        """Sign in with a Firebase ID token obtained by the client"""
        identity = verify_firebase_token(id_token)
        return self._local_user(identity)

    def issue_tokens(self, user):
        refresh = RefreshToken.for_user(user)
        return {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }

    def session_payload(self, user):
        """Tokens plus the landing route for a signed-in user"""
        profile = get_profile(user)
        payload = self.issue_tokens(user)
        payload['landing_route'] = resolve_landing_route(profile)
        payload['role'] = profile.role if profile else None
        return payload

    def _local_user(self, identity):
        profile = Profile.objects.select_related('user').filter(firebase_uid=identity['uid']).first()
        if profile:
            return profile.user

        # Known to Firebase but never registered here
        email = (identity.get('email') or identity['uid']).lower()
        user, created = User.objects.get_or_create(username=email, defaults={'email': identity.get('email', '')})
        if created:
            user.set_unusable_password()
            user.save(update_fields=['password'])
            logger.info(f'[AUTH] Created unregistered user {email}')
        return user

    def _delete_firebase_user(self, uid):
        try:
            firebase_auth.delete_user(uid)
        except FirebaseError as e:
            logger.error(f'[AUTH] Could not roll back Firebase user {uid}: {e}')
