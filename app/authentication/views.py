"""
Authentication views.

Sign-in itself happens on the client against Firebase. These endpoints
keep the local User record in step with the Firebase identity:

    POST  /api/v1/auth/sync-user/  - create or refresh the caller's User
    GET   /api/v1/auth/profile/    - current user
    PATCH /api/v1/auth/profile/    - update name, avatar URL, push token
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.serializers import ProfileUpdateSerializer, UserSerializer
from authentication.services import PrincipalService


class SyncUserView(APIView):
    """
    Upsert the User behind the caller's Firebase token.

    Called by the client right after sign-up or sign-in.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Sync the signed-in Firebase user",
        tags=["Auth"],
        request=None,
        responses={200: UserSerializer, 201: UserSerializer},
    )
    def post(self, request):
        user, created = PrincipalService.sync_user(request.user)
        return Response(
            UserSerializer(user).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class ProfileView(APIView):
    """Read or update the current user's profile."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get current user's profile",
        tags=["Auth"],
        responses={200: UserSerializer},
    )
    def get(self, request):
        user = PrincipalService.resolve_user(request.user)
        return Response(UserSerializer(user).data)

    @extend_schema(
        summary="Update profile",
        tags=["Auth"],
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
    )
    def patch(self, request):
        user = PrincipalService.resolve_user(request.user)
        serializer = ProfileUpdateSerializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(user).data)
