"""
Success envelope shared by every endpoint.

Error responses are shaped by ``core.domain.exception_handler``; this
module is its counterpart for the happy path::

    {"success": true, "statusCode": 200, "message": "...", "data": {...}}
"""

from __future__ import annotations

from typing import Any

from rest_framework import status as http_status
from rest_framework.response import Response


def api_response(
    data: Any = None,
    *,
    message: str = "success",
    status: int = http_status.HTTP_200_OK,
) -> Response:
    """Wrap *data* in the success envelope and return a DRF ``Response``."""
    return Response(
        {
            "success": status < 400,
            "statusCode": status,
            "message": message,
            "data": data,
        },
        status=status,
    )
