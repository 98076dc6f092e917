"""
Feedback app models.

A feedback record is the student's rating of how their complaint was
handled.  There is at most one per complaint: it is created once the
complaint is resolved and overwritten when the complaint is reopened.
"""

from django.conf import settings
from django.core.validators import MaxLengthValidator, MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from core.constants import MAX_FEEDBACK_COMMENT_LENGTH, MAX_RATING, MIN_RATING
from core.models import TimeStampedModel


class Feedback(TimeStampedModel):
    """Rating (1–5) and optional comment attached 1:1 to a complaint."""

    complaint = models.OneToOneField(
        "complaints.Complaint",
        on_delete=models.CASCADE,
        related_name="feedback",
        verbose_name="Complaint",
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="feedback_given",
        verbose_name="Student",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_RATING), MaxValueValidator(MAX_RATING)],
        verbose_name="Rating",
    )
    comment = models.TextField(
        blank=True,
        null=True,
        validators=[MaxLengthValidator(MAX_FEEDBACK_COMMENT_LENGTH)],
        verbose_name="Comment",
    )

    class Meta:
        verbose_name = "Feedback"
        verbose_name_plural = "Feedback"
        constraints = [
            models.CheckConstraint(
                condition=Q(rating__gte=MIN_RATING) & Q(rating__lte=MAX_RATING),
                name="feedback_rating_in_range",
            ),
        ]

    def __str__(self):
        return f"Feedback on Complaint #{self.complaint_id}: {self.rating}/5"
