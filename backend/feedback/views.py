"""
Feedback app views.

- ``FeedbackView`` — POST /api/feedback/
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.responses import api_response

from .serializers import FeedbackSerializer, GiveFeedbackSerializer
from .services import FeedbackService


class FeedbackView(APIView):
    """
    POST /api/feedback/

    The owning student rates a resolved complaint.  One feedback per
    complaint; later changes go through the reopen flow.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Give feedback on a resolved complaint",
        request=GiveFeedbackSerializer,
        responses={
            201: OpenApiResponse(response=FeedbackSerializer, description="Feedback created."),
            400: OpenApiResponse(description="Missing or invalid rating / comment."),
            403: OpenApiResponse(description="Caller does not own the complaint."),
            404: OpenApiResponse(description="Complaint not found."),
            409: OpenApiResponse(description="Complaint not resolved, or feedback already given."),
        },
        tags=["Feedback"],
    )
    def post(self, request: Request) -> Response:
        serializer = GiveFeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feedback = FeedbackService.give_feedback(
            request.user,
            serializer.validated_data["complaint_id"],
            serializer.validated_data["rating"],
            serializer.validated_data.get("comment"),
        )
        return api_response(
            FeedbackSerializer(feedback).data,
            message="Feedback created successfully",
            status=status.HTTP_201_CREATED,
        )
