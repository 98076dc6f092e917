"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF exception handler rendering the uniform error envelope.
transactions       Helpers for ``transaction.atomic`` + ``select_for_update``
                   and first-writer-wins conditional updates.
access             Role-scoped queryset selectors and role guards.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidTransition
    from core.domain.transactions import atomic_transition
    from core.domain.access import apply_role_scope, require_role
"""
