"""
core.domain.exception_handler — DRF-compatible global exception handler.

Renders **every** error leaving the API in one envelope::

    {"success": false, "message": "...", "errors": [...], "data": null}

Three sources are handled:

1. DRF's own exceptions (serializer ``ValidationError``, authentication
   failures, ``Http404`` …) — the default handler builds the response,
   we only re-shape its body.
2. ``core.domain.exceptions`` — status code taken from the exception class.
3. Anything else — logged with traceback and rendered as a 500.

A ``stack`` key is added only when ``settings.DEBUG`` is on.

Register in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.domain_exception_handler',
    }
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from django.conf import settings
from rest_framework import exceptions as drf_exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import DomainError

logger = logging.getLogger(__name__)


def _flatten_errors(data: Any, field: str | None = None) -> list[dict[str, Any]]:
    """Turn a DRF error structure into ``[{"field": ..., "message": ...}]``."""
    if isinstance(data, dict):
        errors: list[dict[str, Any]] = []
        for key, value in data.items():
            nested = key if field is None else f"{field}.{key}"
            if key in ("detail", "non_field_errors") and field is None:
                nested = None
            errors.extend(_flatten_errors(value, nested))
        return errors
    if isinstance(data, list):
        errors = []
        for item in data:
            errors.extend(_flatten_errors(item, field))
        return errors
    return [{"field": field, "message": str(data)}]


def _envelope(exc: Exception, message: str, errors: list[dict[str, Any]]) -> dict[str, Any]:
    body: dict[str, Any] = {
        "success": False,
        "message": message,
        "errors": errors,
        "data": None,
    }
    if settings.DEBUG:
        body["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return body


def domain_exception_handler(exc: Exception, context: dict) -> Response:
    """
    DRF exception handler that also handles ``core.domain.exceptions``.

    The default DRF handler is called first.  If it returns ``None``
    (meaning DRF doesn't recognise the exception), we check whether
    it's one of our domain exceptions; unknown exceptions become a 500.
    """
    view = context.get("view", "unknown")

    # Let DRF handle its own exceptions (ValidationError, AuthN, etc.)
    response = drf_default_handler(exc, context)
    if response is not None:
        errors = _flatten_errors(response.data)
        if isinstance(exc, drf_exceptions.ValidationError):
            message = "Validation failed."
            if errors:
                message = errors[0]["message"]
        elif isinstance(response.data, dict) and "detail" in response.data:
            message = str(response.data["detail"])
        else:
            message = "Request failed."
        response.data = _envelope(exc, message, errors)
        return response

    if isinstance(exc, DomainError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "Domain exception [%s] in %s: %s",
            type(exc).__name__,
            view,
            exc,
        )
        return Response(
            _envelope(exc, exc.message, []),
            status=exc.status_code,
        )

    logger.exception("Unhandled exception in %s", view, exc_info=exc)
    return Response(
        _envelope(exc, "Internal Server Error", []),
        status=500,
    )
