"""Helpers for reading API Gateway proxy events."""

import json
from typing import Any

from core.utils.constants import FORWARDED_FOR_HEADER, UNKNOWN_ADDRESS

JsonDict = dict[str, Any]


def _header(event: JsonDict, name: str) -> str | None:
    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def get_requester_address(event: JsonDict, *, trust_headers: bool) -> str:
    """Return the network origin of a request.

    With trusted headers the first X-Forwarded-For hop wins; otherwise the
    source IP reported by API Gateway is used.
    """
    if trust_headers:
        forwarded = _header(event, FORWARDED_FOR_HEADER)
        if forwarded:
            return forwarded.split(",")[0].strip()

    identity = (event.get("requestContext") or {}).get("identity") or {}
    return identity.get("sourceIp") or UNKNOWN_ADDRESS


def parse_json_body(event: JsonDict) -> JsonDict:
    """Decode the JSON object carried in the event body.

    Raises:
        ValueError: If the body is missing, not JSON, or not a JSON object
    """
    raw = event.get("body")
    if not raw:
        raise ValueError("Request body is empty")

    body = json.loads(raw)
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")

    return body


def request_summary(event: JsonDict, context: Any) -> JsonDict:
    """Structured log context describing an incoming invocation."""
    return {
        "http_method": event.get("httpMethod"),
        "path": event.get("path"),
        "query_params": event.get("queryStringParameters"),
        "request_id": getattr(context, "aws_request_id", None),
        "function_name": getattr(context, "function_name", None),
        "remaining_time_ms": context.get_remaining_time_in_millis()
        if hasattr(context, "get_remaining_time_in_millis")
        else None,
    }
