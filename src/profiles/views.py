"""Profile endpoints: own profile read/update and public lookup."""

from typing import Any

from rest_framework.exceptions import AuthenticationFailed

from core.response import BaseAPIView, api_response
from .serializers import ProfileSerializer, ProfileUpdateSerializer
from .services import ProfileService


class MyProfileView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Return the caller's own profile."""
        if not request.user.is_authenticated:
            raise AuthenticationFailed("Authentication required")
        return api_response(ProfileSerializer(ProfileService.get_own(request.user)).data)

    # noinspection PyMethodMayBeStatic
    def patch(self, request):
        """Update the caller's profile; accepts multipart for the avatar."""
        if not request.user.is_authenticated:
            raise AuthenticationFailed("Authentication required")
        profile = ProfileService.get_own(request.user)
        serializer = ProfileUpdateSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = ProfileService.update_profile(request.user, serializer.validated_data)
        return api_response(ProfileSerializer(result.profile).data, errors=result.warnings)


class ProfileDetailView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request, username: str):
        """Public profile lookup by username."""
        return api_response(ProfileSerializer(ProfileService.get_by_username(username)).data)
