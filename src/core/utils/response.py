"""
API Gateway proxy responses.

JSON responses always carry the CORS headers, and ``request_id`` is added to
the body when known. Error bodies share one shape::

    {"error": "<CODE>", "message": "...", "timestamp": 1700000000, "details": {...}}
"""

from __future__ import annotations

import base64
import json
from http import HTTPStatus
from typing import Any

from core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    EXPOSE_HEADERS,
)
from core.utils.time import utc_now_epoch

JsonDict = dict[str, Any]


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    CORS: dict[str, str] = {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }

    @classmethod
    def headers_for(
        cls,
        cors_origin: str | None = None,
        *,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> dict[str, str]:
        headers = {"Content-Type": content_type, **cls.CORS}
        if cors_origin:
            headers["Access-Control-Allow-Origin"] = cors_origin
        return headers

    @classmethod
    def json_response(
        cls,
        status: HTTPStatus,
        body: JsonDict | None = None,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> JsonDict:
        payload: JsonDict = dict(body or {})
        if request_id:
            payload["request_id"] = request_id

        return {
            "statusCode": status.value,
            "headers": {**cls.headers_for(cors_origin), **(headers or {})},
            "body": json.dumps(payload),
        }

    @classmethod
    def ok(
        cls,
        body: JsonDict,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return cls.json_response(HTTPStatus.OK, body, request_id=request_id, cors_origin=cors_origin)

    @classmethod
    def outcome(
        cls,
        body: JsonDict,
        *,
        status: HTTPStatus,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Response carrying a serialized operation outcome."""
        return cls.json_response(status, body, request_id=request_id, cors_origin=cors_origin)

    @classmethod
    def error(
        cls,
        *,
        status: HTTPStatus,
        message: str,
        error: str | None = None,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> JsonDict:
        """Error response; ``error`` defaults to the status name (e.g. ``NOT_FOUND``)."""
        payload: JsonDict = {
            "error": error or status.name,
            "message": message,
            "timestamp": utc_now_epoch(),
        }
        if details:
            payload["details"] = details

        return cls.json_response(
            status,
            payload,
            request_id=request_id,
            cors_origin=cors_origin,
            headers=headers,
        )

    @classmethod
    def bad_request(
        cls,
        message: str,
        *,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return cls.error(
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @classmethod
    def not_found(
        cls,
        message: str = "Image not found",
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return cls.error(
            status=HTTPStatus.NOT_FOUND,
            message=message,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @classmethod
    def internal_error(
        cls,
        message: str = "Internal server error",
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return cls.error(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @classmethod
    def method_not_allowed(
        cls,
        allowed: tuple[str, ...],
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        allow = ", ".join(allowed)
        return cls.error(
            status=HTTPStatus.METHOD_NOT_ALLOWED,
            message=f"This endpoint only accepts {allow}",
            cors_origin=cors_origin,
            headers={"Allow": allow},
        )

    @classmethod
    def binary_response(
        cls,
        content: bytes,
        *,
        content_type: str,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Raw image bytes, base64-encoded for the API Gateway binary passthrough."""
        response_headers = cls.headers_for(cors_origin, content_type=content_type)
        response_headers["Content-Length"] = str(len(content))
        if headers:
            response_headers.update(headers)

        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": response_headers,
            "body": base64.b64encode(content).decode("utf-8"),
            "isBase64Encoded": True,
        }
