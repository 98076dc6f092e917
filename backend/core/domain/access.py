"""
core.domain.access — Role-scoped queryset selectors and role guards.

Each app's service layer owns its own scope rules; this module only
provides the shared mechanics:

    1) ``apply_role_scope`` — dispatch a queryset filter by the caller's role.
    2) ``require_role``     — guard that raises ``PermissionDenied``.
    3) ``get_user_role``    — informational role helper.

Usage in an app's service layer::

    from core.domain.access import apply_role_scope

    _COMPLAINT_SCOPE_CONFIG = {
        Role.STUDENT: lambda qs, u: qs.filter(student=u),
        Role.WORKER:  lambda qs, u: qs.filter(assigned_to=u),
        Role.WARDEN:  lambda qs, u: qs,
        Role.STAFF:   lambda qs, u: qs,
    }

    qs = apply_role_scope(Complaint.objects.all(), user,
                          scope_config=_COMPLAINT_SCOPE_CONFIG)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from django.db.models import QuerySet

from core.domain.exceptions import PermissionDenied

if TYPE_CHECKING:
    from accounts.models import User

# Type alias for a scope filter function.
# Takes (queryset, user) and returns a filtered queryset.
ScopeFilter = Callable[[QuerySet, "User"], QuerySet]

# Role value → filter.  Roles missing from the config are denied.
ScopeConfig = dict[str, ScopeFilter]


def get_user_role(user: User) -> str | None:
    """Return the user's role value, or ``None`` if it has none."""
    return getattr(user, "role", None) or None


def apply_role_scope(
    queryset: QuerySet,
    user: User,
    *,
    scope_config: ScopeConfig,
) -> QuerySet:
    """
    Apply the scope filter registered for the caller's role.

    Args:
        queryset:     Base (unfiltered) queryset.
        user:         The authenticated user.
        scope_config: Mapping of role value to filter function.

    Returns:
        The filtered queryset.

    Raises:
        PermissionDenied: If the caller's role has no entry in
            ``scope_config``.
    """
    role = get_user_role(user)
    filter_fn = scope_config.get(role) if role else None
    if filter_fn is None:
        raise PermissionDenied(
            f"Role '{role}' is not permitted to list these resources."
        )
    return filter_fn(queryset, user)


def require_role(user: User, *allowed_roles: str, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` if the user's role is not
    among ``allowed_roles``.

    Example::

        require_role(user, Role.WARDEN, Role.STAFF)
    """
    role = get_user_role(user)
    if role not in allowed_roles:
        raise PermissionDenied(
            message
            or f"Role '{role}' is not permitted for this operation. "
            f"Required: {', '.join(str(r) for r in allowed_roles)}."
        )
