"""
Integration tests — user registration.

Endpoint under test:  POST /api/accounts/auth/register/
                      (named URL: accounts:register)
Request payload:      {"name", "email", "password", "role", "category"?}
Success response:     HTTP 201, ``data`` = {id, name, email, role,
                      category, createdAt}
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import Role

User = get_user_model()

_PASSWORD = "Str0ng!Pass55"


def _payload(**overrides) -> dict:
    data = {
        "name": "Reg Tester",
        "email": "reg_tester@example.com",
        "password": _PASSWORD,
        "role": Role.STUDENT,
    }
    data.update(overrides)
    return data


class TestAuthRegistrationFlow(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.register_url = reverse("accounts:register")

    def test_register_student_returns_201(self):
        resp = self.client.post(self.register_url, _payload(), format="json")

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        self.assertTrue(resp.data["success"])
        self.assertEqual(resp.data["statusCode"], 201)
        self.assertEqual(resp.data["message"], "User created successfully")
        data = resp.data["data"]
        self.assertEqual(data["email"], "reg_tester@example.com")
        self.assertEqual(data["role"], Role.STUDENT)
        self.assertIsNone(data["category"])
        self.assertNotIn("password", data)

    def test_register_password_is_hashed(self):
        self.client.post(self.register_url, _payload(), format="json")

        user = User.objects.get(email="reg_tester@example.com")
        self.assertNotEqual(user.password, _PASSWORD)
        self.assertTrue(user.check_password(_PASSWORD))

    def test_register_worker_with_category(self):
        resp = self.client.post(
            self.register_url,
            _payload(email="plumber@example.com", role=Role.WORKER, category="Plumbing"),
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        self.assertEqual(resp.data["data"]["category"], "Plumbing")

    def test_register_worker_without_category_rejected(self):
        resp = self.client.post(
            self.register_url,
            _payload(role=Role.WORKER),
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(User.objects.filter(email="reg_tester@example.com").exists())

    def test_register_category_dropped_for_non_worker(self):
        resp = self.client.post(
            self.register_url,
            _payload(role=Role.WARDEN, category="Plumbing"),
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        self.assertIsNone(User.objects.get(email="reg_tester@example.com").category)

    def test_register_invalid_role_rejected(self):
        resp = self.client.post(self.register_url, _payload(role="ADMIN"), format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["message"], "Invalid role.")
        self.assertEqual(resp.data["errors"][0]["field"], "role")

    def test_register_missing_fields_rejected(self):
        resp = self.client.post(self.register_url, {"email": "x@example.com"}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data["success"])
        fields = {err["field"] for err in resp.data["errors"]}
        self.assertTrue({"name", "password", "role"} <= fields)

    def test_register_common_password_rejected(self):
        resp = self.client.post(self.register_url, _payload(password="12345678"), format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["errors"][0]["field"], "password")
        self.assertEqual(resp.data["message"], "This password is too common.")
        self.assertFalse(User.objects.filter(email="reg_tester@example.com").exists())

    def test_register_duplicate_email_returns_409(self):
        first = self.client.post(self.register_url, _payload(), format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)

        resp = self.client.post(
            self.register_url,
            _payload(email="REG_TESTER@example.com"),
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["message"], "User with this email already exists.")
        self.assertEqual(User.objects.count(), 1)
