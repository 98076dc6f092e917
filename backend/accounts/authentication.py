"""
JWT authentication that accepts the access token from a cookie.

Browsers send the ``accessToken`` cookie set at login; API clients may send
``Authorization: Bearer <token>`` instead.  The cookie wins when both are
present.

A cookie is attached by the browser to cross-site requests too, so a token
read from the cookie is only honoured on requests that pass Django's CSRF
check, the same one DRF's ``SessionAuthentication`` runs.  Header tokens
are exempt.

This class is registered in ``settings.REST_FRAMEWORK`` as the default
authentication class.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import exceptions
from rest_framework.authentication import CSRFCheck
from rest_framework_simplejwt.authentication import JWTAuthentication


class CookieJWTAuthentication(JWTAuthentication):
    """SimpleJWT authentication reading the token from cookie or header."""

    def authenticate(self, request):
        raw_token = request.COOKIES.get(settings.AUTH_COOKIES["ACCESS"])

        if raw_token:
            validated_token = self.get_validated_token(raw_token)
            user = self.get_user(validated_token)
            self.enforce_csrf(request)
            return user, validated_token

        header = self.get_header(request)
        if header is None:
            return None
        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token

    def enforce_csrf(self, request):
        """Reject unsafe cookie-authenticated requests without a CSRF token."""
        def dummy_get_response(request):  # pragma: no cover
            return None

        check = CSRFCheck(dummy_get_response)
        # populates request.META['CSRF_COOKIE'], which is used in process_view()
        check.process_request(request)
        reason = check.process_view(request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f"CSRF Failed: {reason}")
