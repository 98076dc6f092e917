"""
Complaints app serializers.

Request serializers validate shape only; lifecycle rules, visibility and
ownership checks live in ``services.py``.  API payloads use camelCase
keys; ``source=`` maps them onto snake_case model fields and
``validated_data`` keys.
"""

from __future__ import annotations

from rest_framework import serializers

from core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

from .models import Complaint, ComplaintStatus

_ALL_FIELDS_REQUIRED = {
    "required": "All fields are required",
    "blank": "All fields are required",
    "null": "All fields are required",
}


# ═══════════════════════════════════════════════════════════════════
#  Request Serializers
# ═══════════════════════════════════════════════════════════════════


class ComplaintCreateSerializer(serializers.Serializer):
    """
    Multipart body for filing a complaint.

    ``image`` is optional; when present it is forwarded to the media host
    by the service before the complaint row is written.
    """

    title = serializers.CharField(max_length=255, error_messages=_ALL_FIELDS_REQUIRED)
    description = serializers.CharField(error_messages=_ALL_FIELDS_REQUIRED)
    location = serializers.CharField(max_length=255, error_messages=_ALL_FIELDS_REQUIRED)
    category = serializers.CharField(max_length=100, error_messages=_ALL_FIELDS_REQUIRED)
    image = serializers.FileField(required=False, allow_null=True)


class ComplaintFilterSerializer(serializers.Serializer):
    """Query parameters for the list endpoint."""

    page = serializers.IntegerField(min_value=1, default=DEFAULT_PAGE)
    limit = serializers.IntegerField(
        min_value=1,
        max_value=MAX_PAGE_SIZE,
        default=DEFAULT_PAGE_SIZE,
    )


class AcceptComplaintSerializer(serializers.Serializer):
    complaintId = serializers.IntegerField(
        source="complaint_id",
        error_messages={"required": "Complaint ID is required"},
    )


class UpdateStatusSerializer(serializers.Serializer):
    complaintId = serializers.IntegerField(
        source="complaint_id",
        error_messages={"required": "Complaint ID and status are required"},
    )
    status = serializers.ChoiceField(
        choices=ComplaintStatus.choices,
        error_messages={
            "required": "Complaint ID and status are required",
            "invalid_choice": "Invalid status.",
        },
    )


class ReopenComplaintSerializer(serializers.Serializer):
    """
    Rating and comment sent with a reopen request.

    Range and length are checked by ``feedback.validators`` in the
    service, the same rules that apply to ordinary feedback.
    """

    rating = serializers.IntegerField(required=False, allow_null=True)
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# ═══════════════════════════════════════════════════════════════════
#  Response Serializers
# ═══════════════════════════════════════════════════════════════════


class ComplaintSerializer(serializers.ModelSerializer):
    """Full representation of a complaint."""

    imageUrl = serializers.URLField(source="image_url", read_only=True)
    imagePublicId = serializers.CharField(source="image_public_id", read_only=True)
    studentId = serializers.IntegerField(source="student_id", read_only=True)
    assignedToId = serializers.IntegerField(source="assigned_to_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Complaint
        fields = [
            "id",
            "title",
            "description",
            "location",
            "category",
            "imageUrl",
            "imagePublicId",
            "status",
            "studentId",
            "assignedToId",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class PaginationSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    totalPages = serializers.IntegerField()


class ComplaintListResponseSerializer(serializers.Serializer):
    """Shape of the list response ``data`` (documentation only)."""

    complaints = ComplaintSerializer(many=True)
    pagination = PaginationSerializer()


class ComplaintStatsSerializer(serializers.Serializer):
    """Shape of the stats response ``data`` (documentation only)."""

    totalComplaints = serializers.IntegerField()
    pendingComplaints = serializers.IntegerField()
    inProgressComplaints = serializers.IntegerField()
    resolvedComplaints = serializers.IntegerField()
    reopenedComplaints = serializers.IntegerField()
