"""
Lambda handler responsible for image retrieval.
"""

from typing import Any, cast

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.config import load_config
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import allow_methods, api_gateway_handler
from core.utils.request import request_summary
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import GetImageRequest
from .service import GetService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@allow_methods("GET")
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image view requests.

    This function:
     - path naming an image row: return the image metadata as JSON
     - any other path: return the stored file with that name

    Missing images are reported as 404 by ``api_gateway_handler``.

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response dictionary.
    """
    logger.info("Received image view request", extra=request_summary(event, context))
    request_id = getattr(context, "aws_request_id", None)

    path_params = event.get("pathParameters") or {}
    params = {"image": path_params.get("image")}

    is_valid, result = validate_request(GetImageRequest, params)
    if not is_valid:
        logger.info("Request validation failed", extra={"errors": result})
        return ResponseBuilder.bad_request(
            "Invalid request params",
            details={"errors": result},
            request_id=request_id,
        )

    request = cast(GetImageRequest, result)
    service = GetService.from_config(load_config())

    description = service.describe(request.image)
    if description is not None:
        metrics.add_metric(name="ImageDescriptionsServed", unit=MetricUnit.Count, value=1)
        return ResponseBuilder.ok(description, request_id=request_id)

    data, content_type = service.read_blob(request.image)

    metrics.add_metric(name="ImagesServed", unit=MetricUnit.Count, value=1)
    return ResponseBuilder.binary_response(data, content_type=content_type)
