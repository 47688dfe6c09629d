import logging

import sentry_sdk
from drf_standardized_errors.handler import exception_handler as drf_exception_handler
from rest_framework import status
from rest_framework.response import Response

from apps.production.exceptions import ProductionError

logger = logging.getLogger(__name__)


def production_error_response(exc: ProductionError) -> Response:
    """Render a domain error in the drf-standardized-errors client error format."""
    return Response(
        {
            "type": "client_error",
            "errors": [
                {
                    "code": exc.code,
                    "detail": exc.message,
                    "attr": None,
                    "params": exc.params,
                }
            ],
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def exception_handler(exc, context):
    if isinstance(exc, ProductionError):
        logger.info("Rejected %s: %s", exc.code, exc.message)
        return production_error_response(exc)

    # call drf_standardized_errors
    response = drf_exception_handler(exc, context)

    # If response is None --> raise the exception to let Sentry capture it
    if response is None:
        sentry_sdk.capture_exception(exc)
        raise exc

    # If status code is 5xx, capture the exception with Sentry
    if response.status_code >= 500:
        sentry_sdk.capture_exception(exc)

    return response
