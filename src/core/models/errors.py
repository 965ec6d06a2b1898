"""Custom exception classes for the image service.

Every error carries a human readable ``message``, a stable ``error_code``
and optional ``details``. Subclasses only pick their default code; callers
may pass a more specific one (e.g. ``METADATA_FETCH_FAILED``).
"""

from typing import Any, ClassVar

from core.utils.constants import (
    ERROR_CODE_DYNAMODB,
    ERROR_CODE_IMAGE_DUPLICATE_IMAGE,
    ERROR_CODE_METADATA_OPERATION_FAILED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORAGE,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """
    Base exception for all image service errors.

    The base class has no default code, so raising it directly requires an
    explicit ``error_code``.
    """

    default_error_code: ClassVar[str | None] = None

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        code = error_code or self.default_error_code
        if code is None:
            raise TypeError(f"{type(self).__name__} requires an error_code")

        self.message = message
        self.error_code = code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when request validation fails."""

    default_error_code = ERROR_CODE_VALIDATION_FAILED


class NotFoundError(ImageServiceError):
    """Raised when an image, its blob, or its metadata row does not exist."""

    default_error_code = ERROR_CODE_RESOURCE_NOT_FOUND


class DuplicateImageError(ImageServiceError):
    """Raised when an image name is already claimed."""

    default_error_code = ERROR_CODE_IMAGE_DUPLICATE_IMAGE


class MetadataOperationFailedError(ImageServiceError):
    """Raised when an image metadata operation fails."""

    default_error_code = ERROR_CODE_METADATA_OPERATION_FAILED


class DynamoDBError(MetadataOperationFailedError):
    """Raised when a DynamoDB operation fails."""

    default_error_code = ERROR_CODE_DYNAMODB


class StorageError(ImageServiceError):
    """Raised when an image file operation fails."""

    default_error_code = ERROR_CODE_STORAGE


class MIMETypeError(ImageServiceError):
    """Raised when uploaded data is not a recognised image type."""

    default_error_code = ERROR_CODE_UNSUPPORTED_MIME_TYPE
