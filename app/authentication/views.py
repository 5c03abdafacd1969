"""
Authentication views.

This module provides API views for:
- Customer registration (returns a JWT pair)
- Current user profile (read/update)

Token issue and refresh are served by djangorestframework-simplejwt views
wired in urls.py.

Related files:
    - serializers.py: Request/response serialization
    - urls.py: URL routing
"""

import logging

from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.serializers import (
    AuthTokensSerializer,
    RegisterSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


class RegisterView(APIView):
    """
    Register a new customer account.

    POST: Create account and return tokens

    URL: /api/v1/auth/register/

    Request body:
        {
            "email": "user@example.com",
            "password": "SecurePass123!",
            "first_name": "Ada",
            "last_name": "Lovelace"
        }
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        operation_id="auth_register",
        summary="Register customer",
        description="Create a customer account and return a JWT access/refresh pair.",
        request=RegisterSerializer,
        responses={
            201: AuthTokensSerializer,
            400: OpenApiResponse(description="Validation error"),
        },
        tags=["Auth"],
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        refresh = RefreshToken.for_user(user)
        logger.info("Registered customer", extra={"user_id": user.pk})

        response = AuthTokensSerializer(
            {
                "user": user,
                "access": str(refresh.access_token),
                "refresh": str(refresh),
            }
        )
        return Response(response.data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Auth"])
class MeView(generics.RetrieveUpdateAPIView):
    """
    Read or update the authenticated user's profile.

    GET: Return current user
    PATCH/PUT: Update first/last name

    URL: /api/v1/auth/me/
    """

    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    def get_object(self):
        return self.request.user
