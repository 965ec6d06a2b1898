"""
Lambda handler responsible for deleting an image resource.
"""

from http import HTTPStatus
from typing import Any, cast

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.outcomes import DeleteOutcome, DeleteStatus
from core.services.image_lifecycle import ImageLifecycle
from core.utils.config import load_config
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import allow_methods, api_gateway_handler
from core.utils.request import get_requester_address, parse_json_body, request_summary
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import DeleteImageRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

HTTP_STATUS: dict[DeleteStatus, HTTPStatus] = {
    DeleteStatus.DELETED: HTTPStatus.ACCEPTED,
    DeleteStatus.MALFORMED: HTTPStatus.BAD_REQUEST,
    DeleteStatus.INVALID_AUTHTOKEN: HTTPStatus.UNAUTHORIZED,
    DeleteStatus.NO_PERMISSIONS: HTTPStatus.FORBIDDEN,
    DeleteStatus.DOES_NOT_EXIST: HTTPStatus.NOT_FOUND,
    DeleteStatus.INTERNAL_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def _respond(outcome: DeleteOutcome, request_id: str | None) -> dict[str, Any]:
    metrics.add_metric(
        name="ImagesDeleted" if outcome.success else "DeleteRejected",
        unit=MetricUnit.Count,
        value=1,
    )
    return ResponseBuilder.outcome(
        outcome.to_body(),
        status=HTTP_STATUS[outcome.status],
        request_id=request_id,
    )


@api_gateway_handler
@allow_methods("POST")
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    This function:
    - Decodes and validates the JSON body
    - Delegates deletion to the image lifecycle
    - Translates the outcome into an HTTP response

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info("Received image delete request", extra=request_summary(event, context))
    request_id = getattr(context, "aws_request_id", None)

    try:
        body = parse_json_body(event)
    except ValueError as exc:
        logger.info("Invalid JSON body received", extra={"error": str(exc)})
        return _respond(DeleteOutcome.of(DeleteStatus.MALFORMED), request_id)

    is_valid, result = validate_request(DeleteImageRequest, body)
    if not is_valid:
        logger.info("Request validation failed", extra={"errors": result})
        return _respond(DeleteOutcome.of(DeleteStatus.MALFORMED), request_id)

    request = cast(DeleteImageRequest, result)
    config = load_config()
    command = request.to_command(
        requester_address=get_requester_address(event, trust_headers=config.trust_headers),
    )

    outcome = ImageLifecycle.from_config(config).delete(command)
    logger.info(
        "Image delete finished",
        extra={"status": outcome.status.value, "image_name": command.name},
    )
    return _respond(outcome, request_id)
