"""Domain error taxonomy shared by the post and profile operations.

Every failure that crosses an operation boundary is one of these kinds; the
DRF exception handler in ``core.exceptions`` maps them onto HTTP responses.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    STORAGE_ERROR = "STORAGE_ERROR"
    UPLOAD_ERROR = "UPLOAD_ERROR"


class BlogError(Exception):
    """Base class for failures scoped to a single requested operation."""

    kind: ErrorKind
    default_message = "The request could not be completed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ContentValidationError(BlogError):
    """Missing or malformed input; carries per-field messages."""

    kind = ErrorKind.VALIDATION_ERROR
    default_message = "Invalid input."

    def __init__(self, field_errors: dict[str, list[str]], message: str | None = None):
        self.field_errors = field_errors
        super().__init__(message)

    def as_payload(self) -> dict[str, Any]:
        return dict(self.field_errors)


class EntityNotFound(BlogError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found."


class AccessDenied(BlogError):
    """Policy said DENY.

    ``conceal`` marks denials that must be indistinguishable from a missing
    entity, such as reading someone else's draft.
    """

    kind = ErrorKind.PERMISSION_DENIED
    default_message = "You do not have permission to perform this action on this resource."

    def __init__(self, message: str | None = None, *, conceal: bool = False):
        self.conceal = conceal
        super().__init__(message)


class StorageUnavailable(BlogError):
    """The database rejected or failed the request; safe to retry."""

    kind = ErrorKind.STORAGE_ERROR
    default_message = "Storage is temporarily unavailable. Please try again."


class UploadFailed(BlogError):
    """Object storage failed to store an uploaded file; safe to retry."""

    kind = ErrorKind.UPLOAD_ERROR
    default_message = "Image upload failed. Please try again."


__all__ = [
    "ErrorKind",
    "BlogError",
    "ContentValidationError",
    "EntityNotFound",
    "AccessDenied",
    "StorageUnavailable",
    "UploadFailed",
]
