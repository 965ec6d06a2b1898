import json
from http import HTTPStatus
from types import SimpleNamespace
from typing import Any, cast

from core.models.errors import DynamoDBError, NotFoundError
from core.utils.decorators import allow_methods, api_gateway_handler
from core.utils.response import JsonDict, ResponseBuilder


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    """Parse JSON body from API Gateway response."""
    body = resp.get("body")
    if not body:
        return {}
    return cast(dict[str, Any], json.loads(body))


def raising_handler(exc: Exception):
    @api_gateway_handler
    def handler(event: Any, context: Any) -> JsonDict:
        raise exc

    return handler


CONTEXT = SimpleNamespace(aws_request_id="req-1")


def test_api_handler_success() -> None:
    """Successful handler execution returns response unchanged."""

    @api_gateway_handler
    def handler(event: Any, context: Any) -> JsonDict:
        return ResponseBuilder.ok({"msg": "ok"}, request_id=context.aws_request_id)

    resp = handler({}, CONTEXT)

    parsed = parse_body(resp)
    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed["msg"] == "ok"
    assert parsed["request_id"] == "req-1"


def test_api_handler_options_preflight() -> None:
    """OPTIONS request returns 204 with CORS headers without calling the handler."""
    calls = []

    @api_gateway_handler
    def handler(event: Any, context: Any) -> JsonDict:
        calls.append(event)
        return ResponseBuilder.ok({})

    resp = handler({"httpMethod": "OPTIONS"}, CONTEXT, cors_origin="https://example.com")

    assert resp["statusCode"] == HTTPStatus.NO_CONTENT
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"
    assert calls == []


def test_not_found_error_maps_to_404() -> None:
    resp = raising_handler(NotFoundError(message="Image not found"))({}, CONTEXT)

    assert resp["statusCode"] == HTTPStatus.NOT_FOUND
    assert parse_body(resp)["message"] == "Image not found"


def test_service_error_maps_to_500_with_error_code() -> None:
    exc = DynamoDBError(message="Unable to retrieve image metadata", error_code="METADATA_FETCH_FAILED")

    resp = raising_handler(exc)({}, CONTEXT)
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR
    assert parsed["error"] == "METADATA_FETCH_FAILED"
    assert parsed["request_id"] == "req-1"


def test_value_error_maps_to_400_with_friendly_message() -> None:
    resp = raising_handler(ValueError("boom"))({}, CONTEXT)

    assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
    assert parse_body(resp)["message"].startswith("The provided data is invalid")


def test_value_error_keeps_friendly_message() -> None:
    resp = raising_handler(ValueError("Invalid image name"))({}, CONTEXT)

    assert parse_body(resp)["message"] == "Invalid image name"


def test_os_error_maps_to_503() -> None:
    resp = raising_handler(OSError("disk gone"))({}, CONTEXT)

    assert resp["statusCode"] == HTTPStatus.SERVICE_UNAVAILABLE


def test_unexpected_error_maps_to_500() -> None:
    resp = raising_handler(RuntimeError("boom"))({}, CONTEXT)

    assert resp["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR
    assert parse_body(resp)["error"] == "INTERNAL_SERVER_ERROR"


class TestAllowMethods:
    @staticmethod
    def make_handler():
        @api_gateway_handler
        @allow_methods("post")
        def handler(event: Any, context: Any) -> JsonDict:
            return ResponseBuilder.ok({"called": True})

        return handler

    def test_allowed_method_passes_through(self) -> None:
        resp = self.make_handler()({"httpMethod": "POST"}, CONTEXT)

        assert resp["statusCode"] == HTTPStatus.OK
        assert parse_body(resp)["called"] is True

    def test_other_method_gets_405_with_allow_header(self) -> None:
        resp = self.make_handler()({"httpMethod": "GET"}, CONTEXT)

        assert resp["statusCode"] == HTTPStatus.METHOD_NOT_ALLOWED
        assert resp["headers"]["Allow"] == "POST"

    def test_missing_method_gets_405(self) -> None:
        resp = self.make_handler()({}, CONTEXT)

        assert resp["statusCode"] == HTTPStatus.METHOD_NOT_ALLOWED

    def test_preflight_is_answered_before_method_check(self) -> None:
        resp = self.make_handler()({"httpMethod": "OPTIONS"}, CONTEXT)

        assert resp["statusCode"] == HTTPStatus.NO_CONTENT


def test_timeout_error_maps_to_504() -> None:
    resp = raising_handler(TimeoutError("slow"))({}, CONTEXT)

    assert resp["statusCode"] == HTTPStatus.GATEWAY_TIMEOUT


def test_key_error_maps_to_400_with_missing_field_message() -> None:
    resp = raising_handler(KeyError("image"))({}, CONTEXT)

    assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
    assert parse_body(resp)["message"].startswith("A required field is missing")
