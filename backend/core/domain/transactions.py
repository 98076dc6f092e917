"""
core.domain.transactions — Helpers for safe state transitions.

Provides utilities that wrap ``transaction.atomic``, ``select_for_update``
and conditional ``UPDATE`` statements into reusable patterns so that every
service layer follows the same concurrency-safe approach.

Usage::

    from core.domain.transactions import atomic_transition

    complaint = atomic_transition(
        instance=complaint,
        target_status=ComplaintStatus.REOPENED,
        allowed_sources={ComplaintStatus.RESOLVED},
    )

    # First caller wins; everybody else gets ``False``:
    from core.domain.transactions import update_if_unset

    won = update_if_unset(Complaint, pk, field="assigned_to",
                          values={"assigned_to": worker, "status": ...})
"""

from __future__ import annotations

from typing import Any, Iterable, TypeVar

from django.db import models, transaction
from django.utils import timezone

from core.domain.exceptions import InvalidTransition, NotFound

M = TypeVar("M", bound=models.Model)


def atomic_transition(
    *,
    instance: M,
    status_field: str = "status",
    target_status: str,
    allowed_sources: Iterable[str] | None = None,
    message: str | None = None,
) -> M:
    """
    Atomically transition a model instance from one status to another.

    Steps performed inside ``transaction.atomic()``:
        1. Re-fetch the instance with ``select_for_update()`` to acquire
           a row-level lock.
        2. Read the current value of ``status_field``.
        3. If ``allowed_sources`` is provided, verify the current value
           is among them; raise ``InvalidTransition`` otherwise.
        4. Set ``status_field`` to ``target_status`` and save.
        5. Return the refreshed instance.

    Args:
        instance:        The model instance to transition.
        status_field:    Name of the status field on the model.
        target_status:   The desired new value.
        allowed_sources: Optional set/list of status values from which
                         the transition is permitted.  ``None`` means
                         any current value is accepted.
        message:         Optional error message for a rejected transition.

    Raises:
        NotFound:          If the instance no longer exists in the DB.
        InvalidTransition: If the current status is not in ``allowed_sources``.
    """
    model_class = type(instance)

    with transaction.atomic():
        locked = lock_for_update(model_class, instance.pk)
        current = getattr(locked, status_field)

        if allowed_sources is not None:
            allowed = set(allowed_sources)
            if current not in allowed:
                raise InvalidTransition(
                    message,
                    current=str(current),
                    target=str(target_status),
                    reason=(
                        "allowed source states: "
                        + (", ".join(sorted(str(s) for s in allowed)) or "none")
                    ),
                )

        setattr(locked, status_field, target_status)
        locked.save(update_fields=[status_field, "updated_at"])

    # Refresh caller's reference
    instance.refresh_from_db()
    return instance


def update_if_unset(
    model_class: type[M],
    pk: Any,
    *,
    field: str,
    values: dict[str, Any],
) -> bool:
    """
    Apply ``values`` to the row only while ``field`` is still ``NULL``.

    Issued as a single ``UPDATE ... WHERE pk = %s AND field IS NULL`` so
    the database's row atomicity decides the winner between concurrent
    callers.

    Returns:
        ``True`` if this call updated the row, ``False`` otherwise (the row
        is missing or ``field`` was already set).
    """
    updates = dict(values)
    if any(f.name == "updated_at" for f in model_class._meta.get_fields()):
        updates.setdefault("updated_at", timezone.now())
    updated = (
        model_class.objects
        .filter(pk=pk, **{f"{field}__isnull": True})
        .update(**updates)
    )
    return updated == 1


def lock_for_update(model_class: type[M], pk: Any) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Convenience wrapper around ``select_for_update().get(pk=pk)``
    that must be called inside an ``atomic()`` block.

    Raises:
        NotFound: If no row with that PK exists.
    """
    try:
        return model_class.objects.select_for_update().get(pk=pk)
    except model_class.DoesNotExist:
        raise NotFound(f"{model_class.__name__} with id {pk} not found.")
