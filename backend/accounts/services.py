"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service function / method, and
return the result wrapped in the success envelope.

Architecture
------------
- ``UserRegistrationService``  — new-user creation flow.
- ``AuthenticationService``    — email/password login.
- ``SessionService``           — JWT issuance, refresh and revocation.
- ``CurrentUserService``       — "Me" endpoint and password change.

Session model
-------------
Exactly one refresh token is honoured per user: the one stored in
``User.refresh_token`` by the last login.  Logging out or changing the
password clears it, which invalidates every outstanding refresh token
for that user; a presented refresh token that differs from the stored
one is rejected.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import RefreshToken

from core.domain.exceptions import AuthenticationFailed, Conflict, DomainError, NotFound

from .models import Role

User = get_user_model()
logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Registration Service
# ═══════════════════════════════════════════════════════════════════


class UserRegistrationService:
    """Encapsulates the user registration flow."""

    @staticmethod
    def register_user(validated_data: dict[str, Any]) -> User:
        """
        Create a new user with the requested role.

        Parameters
        ----------
        validated_data : dict
            Cleaned data from ``RegisterRequestSerializer`` containing
            ``name``, ``email``, ``password``, ``role`` and, for workers,
            ``category``.

        Returns
        -------
        User
            The newly created (and saved) ``User`` instance.

        Raises
        ------
        core.domain.exceptions.DomainError
            If a worker is registered without a category.
        core.domain.exceptions.Conflict
            If the email address is already taken.
        """
        data = dict(validated_data)
        password = data.pop("password")
        role = data.get("role")
        category = (data.get("category") or "").strip()

        if role == Role.WORKER and not category:
            raise DomainError("Category is required for WORKER role.")
        data["category"] = category if role == Role.WORKER else None

        email = User.objects.normalize_email(data["email"])
        data["email"] = email
        if User.objects.filter(email__iexact=email).exists():
            raise Conflict("User with this email already exists.")

        try:
            with transaction.atomic():
                user = User.objects.create_user(password=password, **data)
        except IntegrityError:
            raise Conflict("User with this email already exists.")

        logger.info("User #%d registered with role %s", user.pk, user.role)
        return user


# ═══════════════════════════════════════════════════════════════════
#  Authentication Service
# ═══════════════════════════════════════════════════════════════════


class AuthenticationService:
    """Email + password login."""

    @staticmethod
    def authenticate(email: str, password: str) -> User:
        """
        Validate credentials and return the user.

        Raises
        ------
        NotFound
            If no user has this email.
        AuthenticationFailed
            If the password is wrong or the account is disabled.
        """
        email = User.objects.normalize_email(email)
        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            raise NotFound("User not found.")

        if not user.check_password(password):
            logger.warning("Failed login attempt for user #%d", user.pk)
            raise AuthenticationFailed("Invalid password.")

        if not user.is_active:
            raise AuthenticationFailed("User account is disabled.")

        return user


# ═══════════════════════════════════════════════════════════════════
#  Session Service
# ═══════════════════════════════════════════════════════════════════


class SessionService:
    """Issues, refreshes and revokes JWT sessions."""

    @staticmethod
    def issue_session(user: User) -> dict[str, str]:
        """
        Issue a JWT access/refresh token pair and persist the refresh token.

        The access token carries ``email`` and ``role`` claims so clients
        can render role-specific UI without an extra request.

        Returns
        -------
        dict
            ``{"access": "<token>", "refresh": "<token>"}``.
        """
        refresh = RefreshToken.for_user(user)
        refresh["email"] = user.email
        refresh["role"] = user.role

        tokens = {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }
        user.refresh_token = tokens["refresh"]
        user.save(update_fields=["refresh_token"])

        logger.info("Session issued for user #%d", user.pk)
        return tokens

    @staticmethod
    def refresh_access_token(raw_refresh_token: str | None) -> str:
        """
        Exchange a valid, current refresh token for a new access token.

        Raises
        ------
        AuthenticationFailed
            If the token is missing, malformed, expired, belongs to an
            unknown user, or is not the one stored for the user.
        """
        if not raw_refresh_token:
            raise AuthenticationFailed("Unauthorized access.")

        try:
            refresh = RefreshToken(raw_refresh_token)
        except TokenError:
            raise AuthenticationFailed("Invalid refresh token.")

        user_id = refresh.get(jwt_settings.USER_ID_CLAIM)
        user = User.objects.filter(pk=user_id).first()
        if user is None or not user.is_active:
            raise AuthenticationFailed("Invalid refresh token.")

        if not user.refresh_token or user.refresh_token != raw_refresh_token:
            logger.warning("Stale refresh token presented for user #%d", user.pk)
            raise AuthenticationFailed("Invalid refresh token.")

        return str(refresh.access_token)

    @staticmethod
    def revoke(user: User) -> None:
        """Forget the stored refresh token (logout)."""
        updated = User.objects.filter(
            pk=user.pk, refresh_token__isnull=False,
        ).update(refresh_token=None)
        user.refresh_token = None
        if updated:
            logger.info("Session revoked for user #%d", user.pk)


# ═══════════════════════════════════════════════════════════════════
#  Current User (Me) Service
# ═══════════════════════════════════════════════════════════════════


class CurrentUserService:
    """Helpers for the authenticated user's own account."""

    @staticmethod
    def get_profile(user: User) -> User:
        return User.objects.get(pk=user.pk)

    @staticmethod
    def change_password(user: User, old_password: str, new_password: str) -> None:
        """
        Replace the user's password and revoke the current session.

        Raises
        ------
        AuthenticationFailed
            If ``old_password`` does not match.
        """
        if not user.check_password(old_password):
            raise AuthenticationFailed("Old password is incorrect.")

        user.set_password(new_password)
        user.refresh_token = None
        user.save(update_fields=["password", "refresh_token"])
        logger.info("Password changed for user #%d", user.pk)
