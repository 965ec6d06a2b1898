"""
Lambda handler responsible for hiding and unhiding images.
"""

from http import HTTPStatus
from typing import Any, cast

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.outcomes import HideOutcome, HideStatus
from core.services.image_lifecycle import ImageLifecycle
from core.utils.config import load_config
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import allow_methods, api_gateway_handler
from core.utils.request import get_requester_address, parse_json_body, request_summary
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import HideImageRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

HTTP_STATUS: dict[HideStatus, HTTPStatus] = {
    HideStatus.HIDDEN: HTTPStatus.ACCEPTED,
    HideStatus.UNHIDDEN: HTTPStatus.ACCEPTED,
    HideStatus.MALFORMED: HTTPStatus.BAD_REQUEST,
    HideStatus.INVALID_AUTHTOKEN: HTTPStatus.UNAUTHORIZED,
    HideStatus.NO_PERMISSIONS: HTTPStatus.FORBIDDEN,
    HideStatus.DOES_NOT_EXIST: HTTPStatus.NOT_FOUND,
    HideStatus.INTERNAL_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
}

METRIC_NAMES: dict[HideStatus, str] = {
    HideStatus.HIDDEN: "ImagesHidden",
    HideStatus.UNHIDDEN: "ImagesUnhidden",
}


def _respond(outcome: HideOutcome, request_id: str | None) -> dict[str, Any]:
    metrics.add_metric(
        name=METRIC_NAMES.get(outcome.status, "HideRejected"),
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
    Handle requests that hide or unhide an owned image.

    Hidden images are excluded from search but stay reachable by name.
    """
    logger.info("Received image hide request", extra=request_summary(event, context))
    request_id = getattr(context, "aws_request_id", None)

    try:
        body = parse_json_body(event)
    except ValueError as exc:
        logger.info("Invalid JSON body received", extra={"error": str(exc)})
        return _respond(HideOutcome.of(HideStatus.MALFORMED), request_id)

    is_valid, result = validate_request(HideImageRequest, body)
    if not is_valid:
        logger.info("Request validation failed", extra={"errors": result})
        return _respond(HideOutcome.of(HideStatus.MALFORMED), request_id)

    request = cast(HideImageRequest, result)
    config = load_config()
    command = request.to_command(
        requester_address=get_requester_address(event, trust_headers=config.trust_headers),
    )

    outcome = ImageLifecycle.from_config(config).set_hidden(command)
    logger.info(
        "Image hide finished",
        extra={"status": outcome.status.value, "image_name": command.name},
    )
    return _respond(outcome, request_id)
