"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in the success envelope.  **No business logic** resides here.

View Map
--------
- ``RegisterView``        — POST /auth/register/
- ``LoginView``           — POST /auth/login/
- ``TokenRefreshView``    — POST /auth/token/refresh/
- ``LogoutView``          — POST /auth/logout/
- ``ChangePasswordView``  — POST /auth/change-password/
- ``MeView``              — GET /me/
"""

from __future__ import annotations

from django.conf import settings
from django.middleware.csrf import get_token
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.responses import api_response

from .serializers import (
    ChangePasswordSerializer,
    LoginRequestSerializer,
    RegisterRequestSerializer,
    TokenRefreshRequestSerializer,
    TokenResponseSerializer,
    UserDetailSerializer,
)
from .services import (
    AuthenticationService,
    CurrentUserService,
    SessionService,
    UserRegistrationService,
)


# ── Cookie helpers ───────────────────────────────────────────────────

def _cookie_options() -> dict:
    return {
        "httponly": settings.AUTH_COOKIES["HTTPONLY"],
        "secure": settings.AUTH_COOKIES["SECURE"],
        "samesite": settings.AUTH_COOKIES["SAMESITE"],
    }


def _set_access_cookie(response: Response, access: str) -> None:
    response.set_cookie(
        settings.AUTH_COOKIES["ACCESS"],
        access,
        max_age=int(settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"].total_seconds()),
        **_cookie_options(),
    )


def _set_refresh_cookie(response: Response, refresh: str) -> None:
    response.set_cookie(
        settings.AUTH_COOKIES["REFRESH"],
        refresh,
        max_age=int(settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"].total_seconds()),
        **_cookie_options(),
    )


def _clear_auth_cookies(response: Response) -> None:
    for name in (settings.AUTH_COOKIES["ACCESS"], settings.AUTH_COOKIES["REFRESH"]):
        response.delete_cookie(name, samesite=settings.AUTH_COOKIES["SAMESITE"])


# ═══════════════════════════════════════════════════════════════════
#  Authentication Views
# ═══════════════════════════════════════════════════════════════════


class RegisterView(APIView):
    """
    POST /api/accounts/auth/register/

    Public endpoint.  Creates a new user with the requested role.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Register a new user",
        request=RegisterRequestSerializer,
        responses={
            201: OpenApiResponse(response=UserDetailSerializer, description="User created."),
            400: OpenApiResponse(description="Validation error."),
            409: OpenApiResponse(description="Email already registered."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserRegistrationService.register_user(serializer.validated_data)
        return api_response(
            UserDetailSerializer(user).data,
            message="User created successfully",
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """
    POST /api/accounts/auth/login/

    Public endpoint.  On success the access and refresh tokens are set as
    ``httpOnly`` cookies and also returned in the body for non-browser
    clients.  A ``csrftoken`` cookie is issued alongside; browsers send its
    value back in ``X-CSRFToken`` on unsafe requests.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Log in",
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(response=TokenResponseSerializer, description="Login successful."),
            401: OpenApiResponse(description="Invalid password."),
            404: OpenApiResponse(description="User not found."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = AuthenticationService.authenticate(
            serializer.validated_data["email"],
            serializer.validated_data["password"],
        )
        tokens = SessionService.issue_session(user)

        response = api_response(
            {
                "accessToken": tokens["access"],
                "refreshToken": tokens["refresh"],
                "user": UserDetailSerializer(user).data,
            },
            message="Login successful",
        )
        _set_access_cookie(response, tokens["access"])
        _set_refresh_cookie(response, tokens["refresh"])
        # Issues the csrftoken cookie that cookie-authenticated writes must echo.
        get_token(request)
        return response


class TokenRefreshView(APIView):
    """
    POST /api/accounts/auth/token/refresh/

    Public endpoint.  Reads the refresh token from the ``refreshToken``
    cookie or the request body and issues a fresh access token.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Refresh the access token",
        request=TokenRefreshRequestSerializer,
        responses={
            200: OpenApiResponse(description="Access token refreshed."),
            401: OpenApiResponse(description="Missing, invalid or revoked refresh token."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = TokenRefreshRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        raw_token = (
            request.COOKIES.get(settings.AUTH_COOKIES["REFRESH"])
            or serializer.validated_data.get("refresh_token")
        )
        access = SessionService.refresh_access_token(raw_token)

        response = api_response(
            {"accessToken": access},
            message="Access token refreshed successfully",
        )
        _set_access_cookie(response, access)
        return response


class LogoutView(APIView):
    """
    POST /api/accounts/auth/logout/

    Revokes the stored refresh token and clears both cookies.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Log out",
        request=None,
        responses={200: OpenApiResponse(description="Logout successful.")},
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        SessionService.revoke(request.user)
        response = api_response(None, message="Logout successful")
        _clear_auth_cookies(response)
        return response


class ChangePasswordView(APIView):
    """
    POST /api/accounts/auth/change-password/

    Changing the password also revokes the current refresh token.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Change password",
        request=ChangePasswordSerializer,
        responses={
            200: OpenApiResponse(description="Password changed."),
            401: OpenApiResponse(description="Old password is incorrect."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        CurrentUserService.change_password(
            request.user,
            serializer.validated_data["old_password"],
            serializer.validated_data["new_password"],
        )
        return api_response(None, message="Password changed successfully")


# ═══════════════════════════════════════════════════════════════════
#  Current User ("Me") View
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """GET /api/accounts/me/ — the authenticated user's profile."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user profile",
        responses={200: OpenApiResponse(response=UserDetailSerializer, description="Profile.")},
        tags=["Auth"],
    )
    def get(self, request: Request) -> Response:
        user = CurrentUserService.get_profile(request.user)
        return api_response(UserDetailSerializer(user).data)
