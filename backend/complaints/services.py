"""
Complaints app Service Layer.

This module is the **single source of truth** for all business logic
in the ``complaints`` app.  Views must remain thin: validate input via
serializers, call a service method, and return the result wrapped in
the success envelope.

Architecture
------------
- ``ComplaintQueryService``     — Role-scoped listing, pagination, detail.
- ``ComplaintCreationService``  — Filing a complaint (with optional image).
- ``ComplaintWorkflowService``  — Accept / status update / reopen / delete.
- ``ComplaintStatsService``     — Per-status counters for supervisors.

Workflow State-Machine Overview
-------------------------------
::

  PENDING ──accept (worker)──▶ IN_PROGRESS ──▶ RESOLVED
                                    ▲              │
                                    │        reopen (owner)
                                    │              ▼
                                    └────────── REOPENED ──▶ RESOLVED

* ``PENDING`` is left only through ``accept``; ``RESOLVED`` only through
  ``reopen``.  Everything else goes through ``ALLOWED_TRANSITIONS``.
* A complaint is assigned exactly once and never reassigned.

Visibility
----------
- **Student**        — own complaints.
- **Worker**         — complaints assigned to them.
- **Warden / Staff** — every complaint.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from django.db import transaction
from django.db.models import Count, Q, QuerySet

from accounts.models import Role
from core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from core.domain.access import ScopeConfig, apply_role_scope, require_role
from core.domain.exceptions import (
    Conflict,
    DomainError,
    NotFound,
    PermissionDenied,
    UploadFailed,
)
from core.domain.transactions import atomic_transition, lock_for_update, update_if_unset
from core.storage import MediaStorageError, get_media_storage
from feedback.models import Feedback
from feedback.services import FeedbackService
from feedback.validators import validate_comment, validate_rating

from .models import Complaint, ComplaintStatus

logger = logging.getLogger(__name__)


# ── Transition table for update-status ──────────────────────────────
#: Maps current status → statuses the assigned worker may set.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    ComplaintStatus.PENDING: frozenset(),
    ComplaintStatus.IN_PROGRESS: frozenset({ComplaintStatus.RESOLVED}),
    ComplaintStatus.RESOLVED: frozenset(),
    ComplaintStatus.REOPENED: frozenset({
        ComplaintStatus.IN_PROGRESS,
        ComplaintStatus.RESOLVED,
    }),
}

_COMPLAINT_SCOPE_CONFIG: ScopeConfig = {
    Role.STUDENT: lambda qs, u: qs.filter(student=u),
    Role.WORKER: lambda qs, u: qs.filter(assigned_to=u),
    Role.WARDEN: lambda qs, u: qs,
    Role.STAFF: lambda qs, u: qs,
}

SUPERVISOR_ROLES = (Role.WARDEN, Role.STAFF)


def _get_complaint(complaint_id: Any) -> Complaint:
    try:
        return Complaint.objects.select_related("student", "assigned_to").get(pk=complaint_id)
    except (Complaint.DoesNotExist, ValueError, TypeError):
        raise NotFound("Complaint not found")


def _delete_media_quietly(public_id: str | None) -> None:
    if not public_id:
        return
    try:
        deleted = get_media_storage().delete(public_id)
    except Exception:
        logger.warning(
            "Could not delete media object %s; leaving it orphaned", public_id,
            exc_info=True,
        )
        return
    if not deleted:
        logger.warning("Could not delete media object %s; leaving it orphaned", public_id)


# ═══════════════════════════════════════════════════════════════════
#  Complaint Query Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintQueryService:
    """Role-scoped read access to complaints."""

    @staticmethod
    def get_scoped_queryset(requesting_user: Any) -> QuerySet:
        """
        Complaints visible to ``requesting_user``, newest first.

        Raises
        ------
        PermissionDenied
            If the caller's role has no visibility rule.
        """
        queryset = Complaint.objects.select_related("student", "assigned_to")
        return apply_role_scope(
            queryset, requesting_user, scope_config=_COMPLAINT_SCOPE_CONFIG,
        ).order_by("-created_at", "-id")

    @staticmethod
    def list_complaints(
        requesting_user: Any,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[Complaint], dict[str, int]]:
        """
        One page of the caller's visible complaints.

        Parameters
        ----------
        requesting_user : User
            From ``request.user``.
        page : int
            1-based page number (already validated by the filter serializer).
        limit : int
            Page size, 1 to 100.

        Returns
        -------
        tuple
            ``(complaints, pagination)`` where ``pagination`` holds
            ``total``, ``page``, ``limit`` and ``totalPages``.
        """
        queryset = ComplaintQueryService.get_scoped_queryset(requesting_user)
        total = queryset.count()
        skip = (page - 1) * limit
        complaints = list(queryset[skip:skip + limit])
        pagination = {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit),
        }
        return complaints, pagination

    @staticmethod
    def get_complaint_detail(requesting_user: Any, complaint_id: Any) -> Complaint:
        """
        A single complaint, if the caller may see it.

        Raises
        ------
        NotFound
            No complaint with that id.
        PermissionDenied
            The complaint exists but is outside the caller's visibility.
        """
        complaint = _get_complaint(complaint_id)
        visible = apply_role_scope(
            Complaint.objects.filter(pk=complaint.pk),
            requesting_user,
            scope_config=_COMPLAINT_SCOPE_CONFIG,
        ).exists()
        if not visible:
            raise PermissionDenied("You do not have access to this complaint")
        return complaint


# ═══════════════════════════════════════════════════════════════════
#  Complaint Creation Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintCreationService:
    """Filing new complaints."""

    @staticmethod
    def create_complaint(
        requesting_user: Any,
        validated_data: dict[str, Any],
        image: Any = None,
    ) -> Complaint:
        """
        File a complaint owned by ``requesting_user``.

        The image, when present, is uploaded before anything is written
        so that a failed upload leaves no complaint behind.  If the insert
        fails after a successful upload the object is removed again.

        Parameters
        ----------
        requesting_user : User
            Becomes the complaint's owner.
        validated_data : dict
            ``title``, ``description``, ``location`` and ``category`` from
            ``ComplaintCreateSerializer``.
        image : UploadedFile | None
            Optional attachment.

        Returns
        -------
        Complaint
            The new complaint, ``PENDING`` and unassigned.

        Raises
        ------
        UploadFailed
            The media host rejected the image.
        """
        stored = None
        if image is not None:
            try:
                stored = get_media_storage().upload_fileobj(
                    image,
                    getattr(image, "name", "") or "",
                    getattr(image, "content_type", None),
                )
            except MediaStorageError:
                raise UploadFailed("Error uploading image")

        try:
            complaint = Complaint.objects.create(
                title=validated_data["title"],
                description=validated_data["description"],
                location=validated_data["location"],
                category=validated_data["category"],
                image_url=stored.url if stored else None,
                image_public_id=stored.public_id if stored else None,
                status=ComplaintStatus.PENDING,
                student=requesting_user,
            )
        except Exception:
            if stored:
                _delete_media_quietly(stored.public_id)
            raise

        logger.info("Complaint #%d created by user %s", complaint.pk, requesting_user.pk)
        return complaint


# ═══════════════════════════════════════════════════════════════════
#  Complaint Workflow Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintWorkflowService:
    """
    All state-changing operations on an existing complaint.

    Each method enforces *who* may act before *what* the transition is,
    and performs its check-and-set atomically.
    """

    @staticmethod
    def accept(requesting_user: Any, complaint_id: Any) -> Complaint:
        """
        Claim an unassigned complaint for the calling worker.

        Implemented as one conditional ``UPDATE ... WHERE assigned_to IS
        NULL`` so that of several concurrent workers exactly one wins.

        Raises
        ------
        NotFound
            No complaint with that id.
        PermissionDenied
            Caller is not a worker.
        Conflict
            Complaint is already assigned.
        """
        complaint = _get_complaint(complaint_id)
        require_role(
            requesting_user, Role.WORKER,
            message="Only workers can accept complaints",
        )

        won = update_if_unset(
            Complaint,
            complaint.pk,
            field="assigned_to",
            values={
                "assigned_to": requesting_user,
                "status": ComplaintStatus.IN_PROGRESS,
            },
        )
        if not won:
            if not Complaint.objects.filter(pk=complaint.pk).exists():
                raise NotFound("Complaint not found")
            raise Conflict("Complaint already assigned to another worker")

        complaint.refresh_from_db()
        logger.info("Complaint #%d accepted by user %s", complaint.pk, requesting_user.pk)
        return complaint

    @staticmethod
    def update_status(
        requesting_user: Any,
        complaint_id: Any,
        new_status: str,
    ) -> Complaint:
        """
        Move a complaint along ``ALLOWED_TRANSITIONS``.

        Only the assigned worker may do this.

        Raises
        ------
        NotFound
            No complaint with that id.
        PermissionDenied
            Caller is not the assigned worker.
        DomainError
            ``new_status`` is not a known status.
        InvalidTransition
            The (current, new) pair is not in the transition table.
        """
        complaint = _get_complaint(complaint_id)
        if not complaint.is_assigned or complaint.assigned_to_id != requesting_user.pk:
            raise PermissionDenied("You are not assigned to this complaint")

        if new_status not in ComplaintStatus.values:
            raise DomainError(f"Invalid status '{new_status}'.")

        allowed_sources = {
            source for source, targets in ALLOWED_TRANSITIONS.items()
            if new_status in targets
        }
        old_status = complaint.status
        complaint = atomic_transition(
            instance=complaint,
            target_status=new_status,
            allowed_sources=allowed_sources,
        )
        logger.info(
            "Complaint #%d status %s -> %s by user %s",
            complaint.pk, old_status, new_status, requesting_user.pk,
        )
        return complaint

    @staticmethod
    def reopen(
        requesting_user: Any,
        complaint_id: Any,
        rating: Any,
        comment: str | None = None,
    ) -> Complaint:
        """
        Reopen a resolved complaint and record the student's new rating.

        The status change and the feedback upsert commit together.

        Raises
        ------
        DomainError
            Rating missing / out of range, or comment too long.
        NotFound
            No complaint with that id.
        PermissionDenied
            Caller is not the owning student.
        InvalidTransition
            Complaint is not ``RESOLVED``.
        """
        rating = validate_rating(rating)
        comment = validate_comment(comment)

        complaint = _get_complaint(complaint_id)
        if not requesting_user.is_student or complaint.student_id != requesting_user.pk:
            raise PermissionDenied("You can only reopen your own complaint")

        with transaction.atomic():
            complaint = atomic_transition(
                instance=complaint,
                target_status=ComplaintStatus.REOPENED,
                allowed_sources={ComplaintStatus.RESOLVED},
                message="Only resolved complaints can be reopened",
            )
            FeedbackService.upsert_for_reopen(complaint, requesting_user, rating, comment)

        logger.info("Complaint #%d reopened by user %s", complaint.pk, requesting_user.pk)
        return complaint

    @staticmethod
    def delete(requesting_user: Any, complaint_id: Any) -> None:
        """
        Remove a complaint, its feedback and its image.

        Image removal on the media host is best-effort; the database rows
        are deleted in a single transaction.

        Raises
        ------
        PermissionDenied
            Caller is not a warden or staff member.
        NotFound
            No complaint with that id (including an already deleted one).
        """
        require_role(
            requesting_user, *SUPERVISOR_ROLES,
            message="Only wardens and staff can delete complaints",
        )
        complaint = _get_complaint(complaint_id)

        _delete_media_quietly(complaint.image_public_id)

        with transaction.atomic():
            locked = lock_for_update(Complaint, complaint.pk)
            Feedback.objects.filter(complaint=locked).delete()
            locked.delete()

        logger.info("Complaint #%d deleted by user %s", complaint.pk, requesting_user.pk)


# ═══════════════════════════════════════════════════════════════════
#  Complaint Stats Service
# ═══════════════════════════════════════════════════════════════════


def _bucket_key(status_value: str) -> str:
    """``IN_PROGRESS`` → ``inProgressComplaints``."""
    head, *rest = status_value.lower().split("_")
    return head + "".join(part.capitalize() for part in rest) + "Complaints"


class ComplaintStatsService:
    """Aggregate counters for the supervisor dashboard."""

    @staticmethod
    def get_stats(requesting_user: Any) -> dict[str, int]:
        """
        Total complaints plus one counter per status.

        Buckets are generated from ``ComplaintStatus`` so a new status
        automatically gets its own counter.

        Raises
        ------
        PermissionDenied
            Caller is not a warden or staff member.
        """
        require_role(
            requesting_user, *SUPERVISOR_ROLES,
            message="Only wardens and staff can view complaint statistics",
        )
        aggregates = {"totalComplaints": Count("id")}
        for status_value in ComplaintStatus.values:
            aggregates[_bucket_key(status_value)] = Count(
                "id", filter=Q(status=status_value),
            )
        return Complaint.objects.aggregate(**aggregates)
