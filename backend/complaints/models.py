"""
Complaints app models.

A complaint is filed by a student, claimed by exactly one worker, moved
along its lifecycle by that worker and, once resolved, either closed out
with feedback or reopened by the student.
"""

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class ComplaintStatus(models.TextChoices):
    """Lifecycle states of a complaint."""

    PENDING = "PENDING", "Pending"
    IN_PROGRESS = "IN_PROGRESS", "In Progress"
    RESOLVED = "RESOLVED", "Resolved"
    REOPENED = "REOPENED", "Reopened"


class Complaint(TimeStampedModel):
    """
    Central entity of the system.

    * ``student`` is the owner and never changes after creation.
    * ``assigned_to`` is set once, when a worker accepts the complaint,
      and stays set through RESOLVED / REOPENED.
    * ``image_url`` / ``image_public_id`` point at the optional attachment
      on the remote media host.
    """

    title = models.CharField(
        max_length=255,
        verbose_name="Title",
    )
    description = models.TextField(
        verbose_name="Description",
    )
    location = models.CharField(
        max_length=255,
        verbose_name="Location",
    )
    category = models.CharField(
        max_length=100,
        verbose_name="Category",
        db_index=True,
    )
    image_url = models.URLField(
        max_length=1024,
        null=True,
        blank=True,
        verbose_name="Image URL",
    )
    image_public_id = models.CharField(
        max_length=512,
        null=True,
        blank=True,
        verbose_name="Image Public ID",
        help_text="Object key on the media host; used to delete the image.",
    )
    status = models.CharField(
        max_length=20,
        choices=ComplaintStatus.choices,
        default=ComplaintStatus.PENDING,
        verbose_name="Status",
        db_index=True,
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="complaints",
        verbose_name="Student",
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_complaints",
        verbose_name="Assigned Worker",
    )

    class Meta:
        verbose_name = "Complaint"
        verbose_name_plural = "Complaints"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["student", "-created_at"], name="complaints__student_4f2a1c_idx"),
            models.Index(fields=["assigned_to", "-created_at"], name="complaints__assigne_9b7d3e_idx"),
        ]

    def __str__(self):
        return f"Complaint #{self.pk}: {self.title}"

    @property
    def is_assigned(self) -> bool:
        return self.assigned_to_id is not None
