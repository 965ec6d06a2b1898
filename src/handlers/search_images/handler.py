"""
Lambda handler responsible for searching images by metadata.
"""

from http import HTTPStatus
from typing import Any, cast

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.outcomes import SearchOutcome, SearchStatus
from core.utils.config import load_config
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import allow_methods, api_gateway_handler
from core.utils.request import get_requester_address, parse_json_body, request_summary
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import SearchImagesRequest
from .service import SearchService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

HTTP_STATUS: dict[SearchStatus, HTTPStatus] = {
    SearchStatus.FOUND: HTTPStatus.OK,
    SearchStatus.MALFORMED: HTTPStatus.BAD_REQUEST,
    SearchStatus.FORBIDDEN: HTTPStatus.FORBIDDEN,
    SearchStatus.INTERNAL_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def _respond(outcome: SearchOutcome, request_id: str | None) -> dict[str, Any]:
    metrics.add_metric(
        name="SearchesServed" if outcome.success else "SearchRejected",
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
    Handle image search requests.

    Example body:
    {
        "uploader": "alice",
        "image-format": "png",
        "uploaded-after": 1700000000
    }

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response with matching images
    """
    logger.info("Received image search request", extra=request_summary(event, context))
    request_id = getattr(context, "aws_request_id", None)
    config = load_config()

    if not config.allow_search:
        logger.warning("Search attempted while searching is disabled")
        return _respond(SearchOutcome.of(SearchStatus.FORBIDDEN), request_id)

    try:
        body = parse_json_body(event)
    except ValueError as exc:
        logger.info("Invalid JSON body received", extra={"error": str(exc)})
        return _respond(SearchOutcome.of(SearchStatus.MALFORMED), request_id)

    is_valid, result = validate_request(SearchImagesRequest, body)
    if not is_valid:
        logger.info("Request validation failed", extra={"errors": result})
        return _respond(SearchOutcome.of(SearchStatus.MALFORMED), request_id)

    request = cast(SearchImagesRequest, result)
    command = request.to_command(
        requester_address=get_requester_address(event, trust_headers=config.trust_headers),
    )

    outcome = SearchService.from_config(config).search(command)
    logger.info(
        "Image search finished",
        extra={"status": outcome.status.value, "count": len(outcome.results or [])},
    )
    return _respond(outcome, request_id)
