"""
Authentication views.

This module provides API views for:
- Token issuance (SimpleJWT obtain/refresh, email + password)
- The current user's public profile
- User existence checks by id

URLs (mounted under /api/v1/):
    POST auth/token/           - Obtain access/refresh pair
    POST auth/token/refresh/   - Refresh access token
    GET  users/me/             - Current user
    GET  users/<id>/           - 200 if the user exists, 404 otherwise

Related files:
    - serializers.py: Request/response serialization
    - services.py: IdentityService lookups
    - urls.py: URL routing
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from authentication.serializers import UserLookupSerializer, UserSerializer
from authentication.services import IdentityService
from core.viewset_mixins import EnvelopeResponseMixin


class CurrentUserView(EnvelopeResponseMixin, APIView):
    """
    Return the authenticated user's public profile.

    URL: /api/v1/users/me/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_current_user",
        summary="Get current user",
        tags=["Auth - User"],
        responses={200: UserSerializer},
    )
    def get(self, request):
        serializer = UserSerializer(request.user, context={"request": request})
        return self.envelope({"user": serializer.data})


class UserExistsView(EnvelopeResponseMixin, APIView):
    """
    Check whether a user id is registered.

    URL: /api/v1/users/<id>/

    A malformed id is a validation error (422); an unknown id is 404.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="check_user_exists",
        summary="Check user exists",
        tags=["Auth - User"],
        responses={
            200: OpenApiResponse(description="User exists"),
            404: OpenApiResponse(description="User not found"),
            422: OpenApiResponse(description="Malformed user id"),
        },
    )
    def get(self, request, user_id):
        lookup = UserLookupSerializer(data={"id": user_id})
        lookup.is_valid(raise_exception=True)

        result = IdentityService.get_user(lookup.validated_data["id"], field="id")
        if not result.success:
            raise result.to_exception()

        return self.envelope(message="User exists")
