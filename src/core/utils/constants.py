"""Global constants used throughout the application.

This module centralizes the status codes, defaults, and environment variable
names shared by the lifecycle service, the infrastructure adapters, and the
Lambda handlers.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_INVALID_PAYLOAD = "INVALID_PAYLOAD"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_IMAGE_WRITE_FAILED = "IMAGE_WRITE_FAILED"
ERROR_CODE_IMAGE_READ_FAILED = "IMAGE_READ_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"
ERROR_CODE_IMAGE_DUPLICATE_IMAGE = "DUPLICATE_IMAGE_ERROR"

# Metadata / DynamoDB Errors
ERROR_CODE_DYNAMODB = "DYNAMODB_ERROR"
ERROR_CODE_METADATA_OPERATION_FAILED = "METADATA_OPERATION_FAILED"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_UPDATE_FAILED = "METADATA_UPDATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_DELETE_FAILED = "METADATA_DELETE_FAILED"
ERROR_CODE_METADATA_SEARCH_FAILED = "METADATA_SEARCH_FAILED"

# ============================================================================
# Image Defaults
# ============================================================================

ANONYMOUS_USER: Final[str] = "anonymous"
DEFAULT_IMAGE_FORMAT: Final[str] = "png"
DEFAULT_CLIENT_NAME: Final[str] = "Unknown Client"
GENERATED_NAME_LENGTH: Final[int] = 5

MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
    "image/gif": ("gif",),
    "image/webp": ("webp",),
    "image/bmp": ("bmp",),
    "image/x-icon": ("ico",),
}

EXTENSION_MIME_TYPE_MAP: Final[dict[str, str]] = {
    ext: mime for mime, extensions in MIME_TYPE_EXTENSION_MAP.items() for ext in extensions
}

FALLBACK_CONTENT_TYPE: Final[str] = "application/octet-stream"

# Search lower bound used when only an upper bound is given
SEARCH_EARLIEST_TIMESTAMP: Final[int] = 1

# ============================================================================
# Date / Time Formats
# ============================================================================

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"
FORWARDED_FOR_HEADER = "X-Forwarded-For"
UNKNOWN_ADDRESS = "unknown"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_METADATA_TABLE_NAME = "IMAGE_METADATA_TABLE_NAME"
ENV_AUTH_TOKEN_TABLE_NAME = "AUTH_TOKEN_TABLE_NAME"
ENV_IMAGE_LOCATION = "IMAGE_LOCATION"
ENV_REQUIRE_AUTH = "REQUIRE_AUTH"
ENV_ALLOW_SEARCH = "ALLOW_SEARCH"
ENV_TRUST_HEADERS = "TRUST_HEADERS"
ENV_DATE_FORMAT = "DATE_FORMAT"

DEFAULT_IMAGE_LOCATION = "./images"

# ============================================================================
# Metrics
# ============================================================================

METRICS_NAMESPACE = "ImageShare"
