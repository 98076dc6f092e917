"""
Complaints app ViewSets.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return it in the success envelope.

ViewSets
--------
- ``ComplaintViewSet`` — The single ViewSet for all complaint endpoints.
  Lifecycle operations are custom ``@action`` methods.
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core.responses import api_response

from .serializers import (
    AcceptComplaintSerializer,
    ComplaintCreateSerializer,
    ComplaintFilterSerializer,
    ComplaintListResponseSerializer,
    ComplaintSerializer,
    ComplaintStatsSerializer,
    ReopenComplaintSerializer,
    UpdateStatusSerializer,
)
from .services import (
    ComplaintCreationService,
    ComplaintQueryService,
    ComplaintStatsService,
    ComplaintWorkflowService,
)


class ComplaintViewSet(viewsets.ViewSet):
    """
    Central ViewSet for the complaints app.

    Uses ``viewsets.ViewSet`` (not ``ModelViewSet``) so every action is
    explicitly defined; there is deliberately no update endpoint.

    Permission Strategy
    -------------------
    The base permission is ``IsAuthenticated``.  Role and ownership checks
    are enforced exclusively inside the service layer.
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    # ── Standard CRUD ────────────────────────────────────────────────

    @extend_schema(
        summary="List complaints",
        description=(
            "Paginated, newest-first list of the complaints visible to the "
            "caller: students see their own, workers those assigned to them, "
            "wardens and staff see all."
        ),
        parameters=[
            OpenApiParameter(name="page", type=int, location=OpenApiParameter.QUERY, description="1-based page number (default 1)."),
            OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY, description="Page size, 1–100 (default 10)."),
        ],
        responses={
            200: OpenApiResponse(response=ComplaintListResponseSerializer, description="One page of complaints."),
            400: OpenApiResponse(description="Invalid page or limit."),
            403: OpenApiResponse(description="Role has no complaint visibility."),
        },
        tags=["Complaints"],
    )
    def list(self, request: Request) -> Response:
        filters = ComplaintFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        complaints, pagination = ComplaintQueryService.list_complaints(
            request.user,
            page=filters.validated_data["page"],
            limit=filters.validated_data["limit"],
        )
        return api_response(
            {
                "complaints": ComplaintSerializer(complaints, many=True).data,
                "pagination": pagination,
            },
            message="Complaints fetched successfully",
        )

    @extend_schema(
        summary="File a complaint",
        description="Multipart form; ``image`` is optional and is stored on the media host.",
        request={"multipart/form-data": ComplaintCreateSerializer},
        responses={
            201: OpenApiResponse(response=ComplaintSerializer, description="Complaint created."),
            400: OpenApiResponse(description="Missing fields."),
            500: OpenApiResponse(description="Image upload failed."),
        },
        tags=["Complaints"],
    )
    def create(self, request: Request) -> Response:
        serializer = ComplaintCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        image = data.pop("image", None)
        complaint = ComplaintCreationService.create_complaint(request.user, data, image=image)
        return api_response(
            ComplaintSerializer(complaint).data,
            message="Complaint created successfully",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        summary="Retrieve a complaint",
        responses={
            200: OpenApiResponse(response=ComplaintSerializer, description="Complaint detail."),
            403: OpenApiResponse(description="Complaint not visible to caller."),
            404: OpenApiResponse(description="Complaint not found."),
        },
        tags=["Complaints"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        complaint = ComplaintQueryService.get_complaint_detail(request.user, pk)
        return api_response(
            ComplaintSerializer(complaint).data,
            message="Complaint fetched successfully",
        )

    @extend_schema(
        summary="Delete a complaint",
        description="Removes the complaint, its feedback and its image. Wardens and staff only.",
        responses={
            200: OpenApiResponse(description="Complaint deleted."),
            403: OpenApiResponse(description="Caller is not a warden or staff member."),
            404: OpenApiResponse(description="Complaint not found."),
        },
        tags=["Complaints"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        ComplaintWorkflowService.delete(request.user, pk)
        return api_response(None, message="Complaint deleted successfully")

    # ── Workflow @actions ─────────────────────────────────────────────

    @action(detail=False, methods=["post"], url_path="accept")
    @extend_schema(
        summary="Accept a complaint",
        description="A worker claims an unassigned complaint; it moves to IN_PROGRESS.",
        request=AcceptComplaintSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintSerializer, description="Complaint accepted."),
            403: OpenApiResponse(description="Caller is not a worker."),
            404: OpenApiResponse(description="Complaint not found."),
            409: OpenApiResponse(description="Complaint already assigned."),
        },
        tags=["Complaints – Workflow"],
    )
    def accept(self, request: Request) -> Response:
        serializer = AcceptComplaintSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = ComplaintWorkflowService.accept(
            request.user, serializer.validated_data["complaint_id"],
        )
        return api_response(
            ComplaintSerializer(complaint).data,
            message="Complaint accepted successfully",
        )

    @action(detail=False, methods=["post"], url_path="update-status")
    @extend_schema(
        summary="Update complaint status",
        description="The assigned worker moves the complaint to an allowed next status.",
        request=UpdateStatusSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintSerializer, description="Status updated."),
            400: OpenApiResponse(description="Unknown status."),
            403: OpenApiResponse(description="Caller is not the assigned worker."),
            404: OpenApiResponse(description="Complaint not found."),
            409: OpenApiResponse(description="Transition not allowed."),
        },
        tags=["Complaints – Workflow"],
    )
    def update_status(self, request: Request) -> Response:
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = ComplaintWorkflowService.update_status(
            request.user,
            serializer.validated_data["complaint_id"],
            serializer.validated_data["status"],
        )
        return api_response(
            ComplaintSerializer(complaint).data,
            message="Complaint status updated successfully",
        )

    @action(detail=True, methods=["post"], url_path="reopen")
    @extend_schema(
        summary="Reopen a resolved complaint",
        description="The owning student reopens a resolved complaint, recording a new rating.",
        request=ReopenComplaintSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintSerializer, description="Complaint reopened."),
            400: OpenApiResponse(description="Invalid rating or comment."),
            403: OpenApiResponse(description="Caller is not the owning student."),
            404: OpenApiResponse(description="Complaint not found."),
            409: OpenApiResponse(description="Complaint is not resolved."),
        },
        tags=["Complaints – Workflow"],
    )
    def reopen(self, request: Request, pk: str = None) -> Response:
        serializer = ReopenComplaintSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = ComplaintWorkflowService.reopen(
            request.user,
            pk,
            serializer.validated_data.get("rating"),
            serializer.validated_data.get("comment"),
        )
        return api_response(
            ComplaintSerializer(complaint).data,
            message="Complaint reopened successfully",
        )

    @action(detail=False, methods=["get"], url_path="stats")
    @extend_schema(
        summary="Complaint statistics",
        description="Total complaints and a counter per status. Wardens and staff only.",
        responses={
            200: OpenApiResponse(response=ComplaintStatsSerializer, description="Counters."),
            403: OpenApiResponse(description="Caller is not a warden or staff member."),
        },
        tags=["Complaints"],
    )
    def stats(self, request: Request) -> Response:
        return api_response(
            ComplaintStatsService.get_stats(request.user),
            message="Complaint stats fetched successfully",
        )
