"""
Accounts app serializers.

Contains all Request and Response serializers for the accounts API.
Serializers handle field definitions and input validation only; all
domain rules (uniqueness, session handling) live in ``services.py``.
API payloads use camelCase keys.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model, password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import Role

User = get_user_model()


def _run_password_validators(value: str) -> str:
    """Apply ``AUTH_PASSWORD_VALIDATORS`` and re-raise as a DRF error."""
    try:
        password_validation.validate_password(value)
    except DjangoValidationError as exc:
        raise serializers.ValidationError(list(exc.messages))
    return value


# ═══════════════════════════════════════════════════════════════════
#  Request Serializers
# ═══════════════════════════════════════════════════════════════════


class RegisterRequestSerializer(serializers.Serializer):
    """
    Validates new-user registration data.

    Required fields: name, email, password, role.  ``category`` is
    required when ``role`` is ``WORKER`` and ignored otherwise.
    """

    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Minimum 8 characters.",
    )
    role = serializers.ChoiceField(
        choices=Role.choices,
        error_messages={"invalid_choice": "Invalid role."},
    )
    category = serializers.CharField(
        max_length=100,
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="Service category; required for WORKER.",
    )

    def validate_password(self, value: str) -> str:
        return _run_password_validators(value)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if attrs["role"] == Role.WORKER and not (attrs.get("category") or "").strip():
            raise serializers.ValidationError(
                {"category": "Category is required for WORKER role."}
            )
        return attrs


class LoginRequestSerializer(serializers.Serializer):
    """Email + password credentials."""

    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )


class TokenRefreshRequestSerializer(serializers.Serializer):
    """
    Optional body carrier for the refresh token.

    Browsers send it as the ``refreshToken`` cookie instead.
    """

    refreshToken = serializers.CharField(
        source="refresh_token",
        required=False,
        allow_blank=True,
    )


class ChangePasswordSerializer(serializers.Serializer):
    oldPassword = serializers.CharField(
        source="old_password",
        write_only=True,
        style={"input_type": "password"},
    )
    newPassword = serializers.CharField(
        source="new_password",
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
    )

    def validate_newPassword(self, value: str) -> str:
        return _run_password_validators(value)


# ═══════════════════════════════════════════════════════════════════
#  Response Serializers
# ═══════════════════════════════════════════════════════════════════


class UserDetailSerializer(serializers.ModelSerializer):
    """Public representation of a user (never exposes secrets)."""

    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = ["id", "name", "email", "role", "category", "createdAt"]
        read_only_fields = fields


class TokenResponseSerializer(serializers.Serializer):
    """Shape of the login response body (documentation only)."""

    accessToken = serializers.CharField()
    refreshToken = serializers.CharField()
    user = UserDetailSerializer()
