"""
Accounts app URL configuration.

All routes are namespaced under ``accounts`` and included in the
project-level ``urls.py`` as::

    path('api/accounts/', include('accounts.urls')),

Endpoint Map
------------
Authentication
    POST   /auth/register/              → RegisterView
    POST   /auth/login/                 → LoginView
    POST   /auth/token/refresh/         → TokenRefreshView
    POST   /auth/logout/                → LogoutView
    POST   /auth/change-password/       → ChangePasswordView

Current User Profile ("Me")
    GET    /me/                         → MeView
"""

from django.urls import path

from .views import (
    ChangePasswordView,
    LoginView,
    LogoutView,
    MeView,
    RegisterView,
    TokenRefreshView,
)

app_name = "accounts"

urlpatterns = [
    # ── Authentication ───────────────────────────────────────────────
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/change-password/", ChangePasswordView.as_view(), name="change-password"),

    # ── Current User (Me) ───────────────────────────────────────────
    path("me/", MeView.as_view(), name="me"),
]
