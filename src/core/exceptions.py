"""Custom exception handling to enforce the API error envelope."""

from typing import Any

import structlog
from django.conf import settings
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from authentication.services import BlocklistUnavailable
from .errors import (
    AccessDenied,
    BlogError,
    ContentValidationError,
    EntityNotFound,
    StorageUnavailable,
    UploadFailed,
)

logger = structlog.get_logger(__name__)

FORBIDDEN_MESSAGE = "You do not have permission to perform this action on this resource."


def _normalize_errors(payload: Any) -> list[Any]:
    """Convert DRF's response.data into a list for the envelope."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and "detail" in payload:
        # Common DRF pattern: {"detail": "..."}
        return [payload["detail"]]
    return [payload]


def _failure(errors: list[Any], status_code: int) -> Response:
    return Response({"data": None, "errors": errors}, status=status_code)


def _handle_blog_error(exc: BlogError, context: dict[str, Any]) -> Response:
    """Translate a domain error into its HTTP status and envelope."""

    if isinstance(exc, ContentValidationError):
        return _failure([exc.as_payload()], status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, EntityNotFound):
        return _failure([exc.message], status.HTTP_404_NOT_FOUND)
    if isinstance(exc, AccessDenied):
        if exc.conceal:
            # Must match the EntityNotFound body so drafts are not revealed.
            return _failure([exc.message], status.HTTP_404_NOT_FOUND)
        return _failure([exc.message], status.HTTP_403_FORBIDDEN)
    if isinstance(exc, (StorageUnavailable, UploadFailed)):
        view = context.get("view")
        logger.error(
            "operation_failed",
            kind=exc.kind.value,
            view=type(view).__name__ if view else None,
            error=exc.message,
        )
        return _failure([exc.message], status.HTTP_503_SERVICE_UNAVAILABLE)
    return _failure([exc.message], status.HTTP_400_BAD_REQUEST)


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Wrap DRF and domain errors in `{ "data": null, "errors": [...] }` shape.

    - Domain errors from ``core.errors`` map onto 400/403/404/503.
    - Uses DRF's default handler to produce the base response otherwise.
    - Optionally exposes more detailed auth errors when DEBUG_AUTH_ERRORS is enabled.
    """

    if isinstance(exc, BlogError):
        return _handle_blog_error(exc, context)

    # Blocklist connectivity errors are security-critical and must fail closed.
    if isinstance(exc, BlocklistUnavailable):
        return _failure(
            ["Authentication service unavailable (blocklist)."],
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    # Database errors that escaped an operation boundary are still a
    # temporary outage, not Django's HTML 500 page.
    if isinstance(exc, DatabaseError):
        logger.error("database_error", error=str(exc))
        return _failure([StorageUnavailable.default_message], status.HTTP_503_SERVICE_UNAVAILABLE)

    response = drf_exception_handler(exc, context)

    if response is None:
        return response

    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    if response.status_code >= 400:
        base_errors = response.data

        if response.status_code == status.HTTP_401_UNAUTHORIZED:
            if getattr(settings, "DEBUG_AUTH_ERRORS", False):
                errors = _normalize_errors(base_errors)
            else:
                errors = [
                    "Authentication credentials were not provided or are invalid, "
                    "token revoked, or user is inactive."
                ]
        elif response.status_code == status.HTTP_403_FORBIDDEN:
            errors = [FORBIDDEN_MESSAGE]
        else:
            errors = _normalize_errors(base_errors)

        response.data = {"data": None, "errors": errors}

    return response
