"""
Feedback app Service Layer.

Architecture
------------
- ``FeedbackService.give_feedback``     — first rating on a resolved complaint.
- ``FeedbackService.upsert_for_reopen`` — overwrite (or create) the rating
  when the student reopens; called from inside the complaint reopen
  transaction.

Feedback rules
--------------
1. Only the STUDENT who owns the complaint may rate it.
2. The complaint must be ``RESOLVED``.
3. At most one feedback per complaint (``OneToOneField`` on ``complaint``).
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import IntegrityError, transaction

from complaints.models import Complaint, ComplaintStatus
from core.domain.exceptions import Conflict, NotFound, PermissionDenied

from .models import Feedback
from .validators import validate_comment, validate_rating

logger = logging.getLogger(__name__)


class FeedbackService:
    """Creation and reopen-time overwrite of complaint feedback."""

    @staticmethod
    def give_feedback(
        requesting_user: Any,
        complaint_id: int,
        rating: Any,
        comment: str | None = None,
    ) -> Feedback:
        """
        Attach the owner's rating to a resolved complaint.

        Parameters
        ----------
        requesting_user : User
            Must be the complaint's owning student.
        complaint_id : int
            PK of the complaint being rated.
        rating : int
            1 to 5 inclusive.
        comment : str | None
            Optional, at most 500 characters.

        Returns
        -------
        Feedback
            The newly created row.

        Raises
        ------
        DomainError
            Rating missing / out of range, or comment too long.
        NotFound
            No complaint with that id.
        PermissionDenied
            Caller is not the owning student.
        Conflict
            Complaint is not resolved, or feedback already exists.
        """
        rating = validate_rating(rating)
        comment = validate_comment(comment)

        try:
            complaint = Complaint.objects.get(pk=complaint_id)
        except Complaint.DoesNotExist:
            raise NotFound("Complaint not found")

        if not requesting_user.is_student or complaint.student_id != requesting_user.pk:
            raise PermissionDenied("You can only give feedback on your own complaint")

        if complaint.status != ComplaintStatus.RESOLVED:
            raise Conflict("Feedback allowed only after complaint is resolved")

        if Feedback.objects.filter(complaint=complaint).exists():
            raise Conflict("Feedback already submitted for this complaint")

        try:
            with transaction.atomic():
                feedback = Feedback.objects.create(
                    complaint=complaint,
                    student=requesting_user,
                    rating=rating,
                    comment=comment,
                )
        except IntegrityError:
            # Lost the race against a concurrent submission.
            raise Conflict("Feedback already submitted for this complaint")

        logger.info(
            "Feedback #%d (rating %d) submitted on complaint #%d by user %s",
            feedback.pk, rating, complaint.pk, requesting_user.pk,
        )
        return feedback

    @staticmethod
    def upsert_for_reopen(
        complaint: Complaint,
        student: Any,
        rating: int,
        comment: str | None,
    ) -> Feedback:
        """
        Create or overwrite the complaint's feedback.

        Must be called inside the caller's ``transaction.atomic()`` block;
        ``rating`` and ``comment`` are expected to be validated already.
        """
        feedback, created = Feedback.objects.update_or_create(
            complaint=complaint,
            defaults={
                "student": student,
                "rating": rating,
                "comment": comment,
            },
        )
        logger.info(
            "Feedback on complaint #%d %s with rating %d",
            complaint.pk, "created" if created else "overwritten", rating,
        )
        return feedback
