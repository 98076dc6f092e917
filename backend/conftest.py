"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_user`` factory fixture for creating test users.
  - ``auth_header`` fixture for authenticated requests (JWT).
  - ``mock_media_storage`` fixture replacing the remote media host.
"""

from __future__ import annotations

from unittest import mock

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user):
            student = create_user()
            worker = create_user(role=Role.WORKER, category="Plumbing")
    """
    from accounts.models import Role, User

    _counter = 0

    def _factory(
        *,
        email: str | None = None,
        name: str | None = None,
        password: str = "TestPass123!",
        role=Role.STUDENT,
        category: str | None = None,
        is_active: bool = True,
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if email is None:
            email = f"user{_counter}@test.local"
        if name is None:
            name = f"Test User {_counter}"
        if role == Role.WORKER and category is None:
            category = "General"

        return User.objects.create_user(
            email=email,
            password=password,
            name=name,
            role=role,
            category=category,
            is_active=is_active,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def auth_header(create_user):
    """
    Returns a helper function that creates a user and returns an
    ``Authorization`` header dict with a valid JWT access token.

    Usage::

        def test_protected(auth_header, api_client):
            header = auth_header(role=Role.WARDEN)
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
            resp = api_client.get("/api/complaints/stats/")
            assert resp.status_code == 200

    The returned dict looks like::

        {"Authorization": "Bearer eyJ..."}
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(**user_kwargs) -> dict[str, str]:
        user = create_user(**user_kwargs)
        token = AccessToken.for_user(user)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def mock_media_storage():
    """
    Patch the media host used by the complaint services.

    ``upload_fileobj`` returns a fixed ``StoredMedia``; ``delete`` returns
    ``True``.  Tests can override either via the yielded mock.
    """
    from core.storage import StoredMedia

    storage = mock.Mock()
    storage.upload_fileobj.return_value = StoredMedia(
        url="https://media.test.local/complaints/abc123.png",
        public_id="complaints/abc123.png",
    )
    storage.delete.return_value = True
    with mock.patch("complaints.services.get_media_storage", return_value=storage):
        yield storage
