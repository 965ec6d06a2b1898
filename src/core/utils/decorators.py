"""
Decorators shared by the API Gateway Lambda handlers.

``api_gateway_handler`` answers CORS preflights and turns any exception that
escapes a handler into a JSON error response. ``allow_methods`` restricts a
handler to its HTTP verbs.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import ImageServiceError, NotFoundError
from core.utils.response import JsonDict, ResponseBuilder

logger = Logger(service="api-gateway-handler", UTC=True)

Handler = Callable[..., JsonDict]

# Checked in order; TimeoutError and ConnectionError are OSError subclasses.
# (exception types, status, fixed message or None, log with traceback as exception)
_FALLBACK_RULES: tuple[tuple[tuple[type[Exception], ...], HTTPStatus, str | None, bool], ...] = (
    (
        (ValueError, KeyError, TypeError, AttributeError),
        HTTPStatus.BAD_REQUEST,
        None,
        False,
    ),
    (
        (TimeoutError,),
        HTTPStatus.GATEWAY_TIMEOUT,
        "The request took too long to process. Please try again.",
        True,
    ),
    (
        (ConnectionError, OSError),
        HTTPStatus.SERVICE_UNAVAILABLE,
        "The image store is unavailable. Please try again later.",
        True,
    ),
)

_FRIENDLY_PREFIXES = ("Invalid", "Missing", "Request", "Must", "Cannot", "Unable to", "Image")


def _get_user_friendly_message(exc: Exception) -> str:
    """Keep messages that already read well, replace the rest by type."""
    text = str(exc)
    if text.startswith(_FRIENDLY_PREFIXES):
        return text

    if isinstance(exc, (UnicodeDecodeError, UnicodeEncodeError)):
        return "The request contains invalid characters or encoding."
    if isinstance(exc, ValueError):
        return "The provided data is invalid. Please check your input and try again."
    if isinstance(exc, (KeyError, AttributeError)):
        return "A required field is missing. Please ensure all required fields are provided."
    if isinstance(exc, TypeError):
        return "The data format is incorrect. Please check the request format."
    return "We encountered an issue processing your request. Please try again."


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    server_side: bool = False,
) -> None:
    """
    Log an escaped exception with handler context.

    Server-side failures go through ``logger.exception``; client errors are
    warnings with the traceback attached as a field.
    """
    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if server_side:
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def _error_response(
    exc: Exception,
    *,
    handler_name: str,
    request_id: str | None,
    cors_origin: str | None,
) -> JsonDict:
    if isinstance(exc, NotFoundError):
        _log_error("Image not found", handler_name=handler_name, request_id=request_id, exc=exc)
        return ResponseBuilder.not_found(exc.message, request_id=request_id, cors_origin=cors_origin)

    if isinstance(exc, ImageServiceError):
        _log_error(
            "Service error in handler",
            handler_name=handler_name,
            request_id=request_id,
            exc=exc,
            server_side=True,
        )
        return ResponseBuilder.error(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            error=exc.error_code,
            message=exc.message,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    for types, status, message, server_side in _FALLBACK_RULES:
        if isinstance(exc, types):
            _log_error(
                f"{type(exc).__name__} in handler",
                handler_name=handler_name,
                request_id=request_id,
                exc=exc,
                server_side=server_side,
            )
            return ResponseBuilder.error(
                status=status,
                message=message or _get_user_friendly_message(exc),
                request_id=request_id,
                cors_origin=cors_origin,
            )

    _log_error(
        "Unexpected error in handler",
        handler_name=handler_name,
        request_id=request_id,
        exc=exc,
        server_side=True,
    )
    return ResponseBuilder.internal_error(
        "We're experiencing technical difficulties. Please try again in a few moments.",
        request_id=request_id,
        cors_origin=cors_origin,
    )


def allow_methods(*methods: str) -> Callable[[Handler], Handler]:
    """
    Reject requests whose HTTP method is not in `methods` with 405 and an
    Allow header.

    Example:
        @api_gateway_handler
        @allow_methods("POST")
        def handler(event, context): ...
    """
    allowed = tuple(method.upper() for method in methods)

    def decorator(func: Handler) -> Handler:
        @wraps(func)
        def wrapper(event: Any, context: Any) -> JsonDict:
            method = (event.get("httpMethod") or "").upper()
            if method not in allowed:
                logger.info(
                    "Rejected request with unsupported method",
                    extra={"http_method": method, "allowed": list(allowed)},
                )
                return ResponseBuilder.method_not_allowed(allowed)
            return func(event, context)

        return wrapper

    return decorator


def api_gateway_handler(func: Handler) -> Handler:
    """
    Decorator for API Gateway Lambda handlers.

    Operation outcomes are returned by the handlers themselves; only errors
    that escape them are mapped here:

    - ``NotFoundError`` -> 404
    - other ``ImageServiceError`` -> 500 carrying the error code
    - bad input (``ValueError``, ``KeyError``, ...) -> 400
    - timeouts -> 504, connection/OS errors -> 503, anything else -> 500

    Example:
        @api_gateway_handler
        def lambda_handler(event, context):
            return {"statusCode": 200, "body": "Success"}
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return {
                "statusCode": HTTPStatus.NO_CONTENT.value,
                "headers": ResponseBuilder.headers_for(cors_origin),
                "body": "",
            }

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)
        except Exception as exc:
            return _error_response(
                exc,
                handler_name=func.__name__,
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
