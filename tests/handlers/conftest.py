import base64
import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


@pytest.fixture
def api_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway proxy event.

    Usage:
        event = api_event(body={"image-name": "cat"})
        event = api_event("GET", path_parameters={"image": "cat.png"})
    """

    def _event(
        method: str = "POST",
        *,
        body: dict[str, Any] | str | None = None,
        path_parameters: dict[str, str] | None = None,
        query: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        source_ip: str = "203.0.113.7",
    ) -> dict[str, Any]:
        return {
            "httpMethod": method,
            "path": "/",
            "headers": {"Content-Type": "application/json", **(headers or {})},
            "pathParameters": path_parameters,
            "queryStringParameters": query,
            "requestContext": {"identity": {"sourceIp": source_ip}},
            "body": json.dumps(body) if isinstance(body, dict) else body,
        }

    return _event


@pytest.fixture
def service_tables(images_table, auth_table, register_user):
    """Both DynamoDB tables plus two registered users."""
    register_user("alice", "alice-token")
    register_user("bob", "bob-token")
    return images_table


@pytest.fixture
def png_payload(sample_image_binary) -> str:
    return base64.b64encode(sample_image_binary).decode()
