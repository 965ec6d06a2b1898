import base64
import json
from http import HTTPStatus
from typing import Any, cast

import pytest

from core.utils.response import ResponseBuilder


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    if not body:
        return {}

    return cast(dict[str, Any], json.loads(body))


def test_ok_response() -> None:
    resp = ResponseBuilder.ok({"foo": "bar"}, request_id="req-1", cors_origin="https://example.com")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed["foo"] == "bar"
    assert parsed["request_id"] == "req-1"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"


def test_outcome_response_uses_given_status() -> None:
    body = {"success": True, "status-simple": "replaced"}

    resp = ResponseBuilder.outcome(body, status=HTTPStatus.ACCEPTED, request_id="req-2")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.ACCEPTED
    assert parsed["status-simple"] == "replaced"
    assert parsed["request_id"] == "req-2"
    assert resp["headers"]["Content-Type"] == "application/json"


@pytest.mark.parametrize(
    "func,status,error_name",
    [
        (ResponseBuilder.bad_request, HTTPStatus.BAD_REQUEST, "BAD_REQUEST"),
        (ResponseBuilder.not_found, HTTPStatus.NOT_FOUND, "NOT_FOUND"),
        (
            ResponseBuilder.internal_error,
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
        ),
    ],
)
def test_error_responses_use_explicit_message(func, status, error_name) -> None:
    resp = func("custom message")
    parsed = parse_body(resp)

    assert resp["statusCode"] == status
    assert parsed["error"] == error_name
    assert parsed["message"] == "custom message"
    assert isinstance(parsed["timestamp"], int)


def test_error_with_details_and_code() -> None:
    resp = ResponseBuilder.error(
        status=HTTPStatus.INTERNAL_SERVER_ERROR,
        error="METADATA_FETCH_FAILED",
        message="Unable to retrieve image metadata",
        details={"image_name": "cat"},
    )
    parsed = parse_body(resp)

    assert parsed["error"] == "METADATA_FETCH_FAILED"
    assert parsed["details"] == {"image_name": "cat"}


def test_method_not_allowed_sets_allow_header() -> None:
    resp = ResponseBuilder.method_not_allowed(("POST",))

    assert resp["statusCode"] == HTTPStatus.METHOD_NOT_ALLOWED
    assert resp["headers"]["Allow"] == "POST"
    assert parse_body(resp)["error"] == "METHOD_NOT_ALLOWED"


def test_binary_response() -> None:
    content = b"binary-data"

    resp = ResponseBuilder.binary_response(
        content,
        content_type="image/png",
        headers={"Cache-Control": "max-age=60"},
        cors_origin="*",
    )

    assert resp["statusCode"] == HTTPStatus.OK
    assert resp["isBase64Encoded"] is True
    assert base64.b64decode(resp["body"]) == content
    assert resp["headers"]["Content-Type"] == "image/png"
    assert resp["headers"]["Content-Length"] == str(len(content))
    assert resp["headers"]["Cache-Control"] == "max-age=60"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"


def test_not_found_default_message() -> None:
    resp = ResponseBuilder.not_found(request_id="req-3")
    parsed = parse_body(resp)

    assert parsed["message"] == "Image not found"
    assert parsed["request_id"] == "req-3"
    assert "details" not in parsed


def test_json_headers_include_cors_and_extra_headers() -> None:
    resp = ResponseBuilder.json_response(HTTPStatus.CREATED, {"a": 1}, headers={"X-Extra": "1"})

    assert resp["statusCode"] == HTTPStatus.CREATED
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"
    assert resp["headers"]["Access-Control-Expose-Headers"] == (
        "Content-Type,Content-Length"
    )
    assert resp["headers"]["X-Extra"] == "1"
