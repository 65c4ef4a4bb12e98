"""JSON error envelope for the API.

Every error response has the shape ``{"error": "<message>"}``; validation
errors also carry the per-field ``details`` produced by DRF.
"""
import logging

from django.db.models.deletion import ProtectedError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler


logger = logging.getLogger(__name__)


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            if key in ("non_field_errors", "detail"):
                return message
            return f"{key}: {message}"
        return ""
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ""
    return str(detail)


def api_exception_handler(exc, context):
    if isinstance(exc, ProtectedError):
        exc = ValidationError("This record is referenced by other records and cannot be deleted.")

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception("Unhandled API error in %s", view.__class__.__name__ if view else "unknown view")
        return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        body = {"error": _first_message(exc.detail) or "Invalid input."}
        if isinstance(exc.detail, dict):
            body["details"] = exc.detail
        response.data = body
        return response

    if isinstance(exc, Http404):
        response.data = {"error": "Not found."}
        return response

    detail = response.data.get("detail") if isinstance(response.data, dict) else response.data
    response.data = {"error": str(detail or "Request failed.")}
    return response
