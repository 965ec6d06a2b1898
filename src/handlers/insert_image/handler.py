"""
Lambda handler responsible for image upload and replacement.
"""

from http import HTTPStatus
from typing import Any, cast

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.commands import InsertCommand
from core.models.outcomes import InsertOutcome, InsertStatus
from core.services.image_lifecycle import ImageLifecycle
from core.utils.config import load_config
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import allow_methods, api_gateway_handler
from core.utils.request import get_requester_address, parse_json_body, request_summary
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import InsertImageRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

HTTP_STATUS: dict[InsertStatus, HTTPStatus] = {
    InsertStatus.CREATED: HTTPStatus.CREATED,
    InsertStatus.REPLACED: HTTPStatus.ACCEPTED,
    InsertStatus.INVALID_PAYLOAD: HTTPStatus.BAD_REQUEST,
    InsertStatus.NOT_LOGGED_IN: HTTPStatus.UNAUTHORIZED,
    InsertStatus.INVALID_AUTHTOKEN: HTTPStatus.UNAUTHORIZED,
    InsertStatus.ALREADY_EXISTS: HTTPStatus.FORBIDDEN,
    InsertStatus.INVALID_MIME: HTTPStatus.UNSUPPORTED_MEDIA_TYPE,
    InsertStatus.INTERNAL_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
}

METRIC_NAMES: dict[InsertStatus, str] = {
    InsertStatus.CREATED: "ImagesCreated",
    InsertStatus.REPLACED: "ImagesReplaced",
}


def _respond(outcome: InsertOutcome, request_id: str | None, **extra: Any) -> dict[str, Any]:
    metrics.add_metric(
        name=METRIC_NAMES.get(outcome.status, "InsertRejected"),
        unit=MetricUnit.Count,
        value=1,
    )
    body = outcome.to_body()
    body.update(extra)
    return ResponseBuilder.outcome(
        body,
        status=HTTP_STATUS[outcome.status],
        request_id=request_id,
    )


@api_gateway_handler
@allow_methods("POST")
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image insert requests.

    The body carries a base64 encoded image plus optional name, format,
    client name, credentials and hidden flag. A request naming an image the
    caller already owns replaces it.

    Expected API Gateway event structure:
    {
        "httpMethod": "POST",
        "body": "{\"image\": \"...\", \"image-name\": \"cat\", ...}"
    }

    Args:
        event: API Gateway Lambda proxy event containing the insert payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response describing the outcome
    """
    logger.info("Received image insert request", extra=request_summary(event, context))
    request_id = getattr(context, "aws_request_id", None)

    try:
        body = parse_json_body(event)
    except ValueError as exc:
        logger.info("Invalid JSON body received", extra={"error": str(exc)})
        return _respond(InsertOutcome.of(InsertStatus.INVALID_PAYLOAD), request_id)

    is_valid, result = validate_request(InsertImageRequest, body)
    if not is_valid:
        logger.info("Request validation failed", extra={"errors": result})
        return _respond(
            InsertOutcome.of(InsertStatus.INVALID_PAYLOAD),
            request_id,
            details=result,
        )

    request = cast(InsertImageRequest, result)
    config = load_config()
    command: InsertCommand = request.to_command(
        require_auth=config.require_auth,
        requester_address=get_requester_address(event, trust_headers=config.trust_headers),
    )

    outcome = ImageLifecycle.from_config(config).insert(command)
    logger.info(
        "Image insert finished",
        extra={"status": outcome.status.value, "image_name": outcome.name},
    )
    return _respond(outcome, request_id)
