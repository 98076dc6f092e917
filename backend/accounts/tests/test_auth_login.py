"""
Integration tests — login, token refresh and logout.

Endpoints under test:
  POST /api/accounts/auth/login/           (accounts:login)
  POST /api/accounts/auth/token/refresh/   (accounts:token-refresh)
  POST /api/accounts/auth/logout/          (accounts:logout)

Session model: one refresh token is honoured per user (the one stored by
the last login).  Tokens are returned in the body and set as httpOnly
``accessToken`` / ``refreshToken`` cookies.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import Role

User = get_user_model()

_PASSWORD = "Str0ng!Pass99"
_EMAIL = "login_test_user@example.com"


class TestAuthLogin(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            email=_EMAIL,
            password=_PASSWORD,
            name="Login Tester",
            role=Role.STUDENT,
        )

    def setUp(self):
        # Fresh client for every test; cookies must not leak between tests.
        self.client = APIClient()
        self.login_url = reverse("accounts:login")
        self.refresh_url = reverse("accounts:token-refresh")
        self.logout_url = reverse("accounts:logout")

    def _login(self, email: str = _EMAIL, password: str = _PASSWORD):
        return self.client.post(
            self.login_url,
            {"email": email, "password": password},
            format="json",
        )

    # ── Login ────────────────────────────────────────────────────────────────

    def test_login_returns_tokens_and_user(self):
        resp = self._login()

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["message"], "Login successful")
        data = resp.data["data"]
        self.assertIn("accessToken", data)
        self.assertIn("refreshToken", data)
        self.assertEqual(data["user"]["email"], _EMAIL)
        self.assertEqual(data["user"]["role"], Role.STUDENT)

    def test_login_sets_httponly_cookies(self):
        resp = self._login()

        access_cookie = resp.cookies["accessToken"]
        refresh_cookie = resp.cookies["refreshToken"]
        self.assertEqual(access_cookie.value, resp.data["data"]["accessToken"])
        self.assertEqual(refresh_cookie.value, resp.data["data"]["refreshToken"])
        self.assertTrue(access_cookie["httponly"])
        self.assertTrue(refresh_cookie["httponly"])
        self.assertEqual(access_cookie["samesite"], "Lax")

    def test_login_persists_refresh_token(self):
        resp = self._login()

        self.user.refresh_from_db()
        self.assertEqual(self.user.refresh_token, resp.data["data"]["refreshToken"])

    def test_login_wrong_password_returns_401(self):
        resp = self._login(password="WrongPass1!")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.data["message"], "Invalid password.")
        self.assertNotIn("accessToken", resp.cookies)

    def test_login_unknown_email_returns_404(self):
        resp = self._login(email="nobody@example.com")

        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["message"], "User not found.")

    def test_login_missing_password_returns_400(self):
        resp = self.client.post(self.login_url, {"email": _EMAIL}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["errors"][0]["field"], "password")

    def test_inactive_user_cannot_login(self):
        User.objects.create_user(
            email="inactive@example.com",
            password=_PASSWORD,
            name="Inactive",
            is_active=False,
        )

        resp = self._login(email="inactive@example.com")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    # ── Refresh ──────────────────────────────────────────────────────────────

    def test_refresh_from_cookie(self):
        self._login()

        resp = self.client.post(self.refresh_url, {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertIn("accessToken", resp.data["data"])
        self.assertEqual(resp.cookies["accessToken"].value, resp.data["data"]["accessToken"])

    def test_refresh_from_body(self):
        refresh = self._login().data["data"]["refreshToken"]
        body_client = APIClient()

        resp = body_client.post(self.refresh_url, {"refreshToken": refresh}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)

    def test_refresh_without_token_returns_401(self):
        resp = self.client.post(self.refresh_url, {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_with_garbage_token_returns_401(self):
        resp = self.client.post(self.refresh_url, {"refreshToken": "garbage"}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.data["message"], "Invalid refresh token.")

    def test_superseded_refresh_token_rejected(self):
        first = self._login().data["data"]["refreshToken"]
        second = APIClient().post(
            self.login_url,
            {"email": _EMAIL, "password": _PASSWORD},
            format="json",
        ).data["data"]["refreshToken"]
        self.assertNotEqual(first, second)

        resp = APIClient().post(self.refresh_url, {"refreshToken": first}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    # ── Logout ───────────────────────────────────────────────────────────────

    def test_logout_clears_cookies_and_revokes_refresh_token(self):
        refresh = self._login().data["data"]["refreshToken"]

        resp = self.client.post(self.logout_url, format="json")

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["message"], "Logout successful")
        self.assertIsNone(resp.data["data"])
        self.assertEqual(resp.cookies["accessToken"].value, "")
        self.assertEqual(resp.cookies["refreshToken"].value, "")

        self.user.refresh_from_db()
        self.assertIsNone(self.user.refresh_token)

        retry = APIClient().post(self.refresh_url, {"refreshToken": refresh}, format="json")
        self.assertEqual(retry.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_requires_authentication(self):
        resp = self.client.post(self.logout_url, format="json")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
