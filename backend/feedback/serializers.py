"""
Feedback app serializers.

Rating range and comment length are enforced by ``feedback.validators``
inside the service so that reopen and direct feedback share one rule set.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import Feedback


class GiveFeedbackSerializer(serializers.Serializer):
    complaintId = serializers.IntegerField(
        source="complaint_id",
        error_messages={"required": "Complaint ID and rating are required"},
    )
    rating = serializers.IntegerField(
        error_messages={"required": "Complaint ID and rating are required"},
    )
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class FeedbackSerializer(serializers.ModelSerializer):
    complaintId = serializers.IntegerField(source="complaint_id", read_only=True)
    studentId = serializers.IntegerField(source="student_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Feedback
        fields = ["id", "complaintId", "studentId", "rating", "comment", "createdAt", "updatedAt"]
        read_only_fields = fields
