from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from ..serializers import (
    ProfileSerializer,
    ProfileUpdateSerializer,
    SignUpSerializer,
    SignInSerializer,
    FirebaseSignInSerializer,
)
from ..services import AuthService, IdentityProviderError, resolve_landing_route
from ..services.auth_service import get_profile
from .errors import error_response


class AuthViewSet(viewsets.ViewSet):

    permission_classes = [AllowAny]

    # sign-in endpoints issue the JWT, they never consume one
    authentication_classes = []

    @action(detail=False, methods=['post'], url_path='signup')
    def signup(self, request):
        serializer = SignUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        service = AuthService()
        try:
            user, profile = service.sign_up(
                email=data['email'],
                first_name=data['first_name'],
                last_name=data['last_name'],
                phone=data['phone'],
                role=data['role'],
                password=data.get('password'),
                id_token=data.get('id_token'),
            )
        except IdentityProviderError as e:
            return error_response(e)

        payload = service.session_payload(user)
        payload['profile'] = ProfileSerializer(profile).data
        return Response(payload, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path='signin')
    def signin(self, request):
        serializer = SignInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = AuthService()
        try:
            user = service.sign_in(serializer.validated_data['email'], serializer.validated_data['password'])
        except IdentityProviderError as e:
            return error_response(e)

        return Response(service.session_payload(user), status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'], url_path='firebase')
    def firebase(self, request):
        serializer = FirebaseSignInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = AuthService()
        try:
            user = service.sign_in_with_token(serializer.validated_data['id_token'])
        except IdentityProviderError as e:
            return error_response(e)

        return Response(service.session_payload(user), status=status.HTTP_200_OK)


class ProfileView(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def retrieve(self, request):
        profile = get_profile(request.user)
        if profile is None:
            return Response(
                {'error': 'Profile not found', 'landing_route': resolve_landing_route(None)},
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(ProfileSerializer(profile).data)

    def partial_update(self, request):
        profile = get_profile(request.user)
        if profile is None:
            return Response({'error': 'Profile not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = ProfileUpdateSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(ProfileSerializer(profile).data)

    def landing(self, request):
        return Response({'landing_route': resolve_landing_route(get_profile(request.user))})
