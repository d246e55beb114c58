import logging

from django.db.utils import OperationalError, ProgrammingError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from orders.exceptions import OrderError

LOGGER = logging.getLogger(__name__)


def _describe(context):
    request = context.get("request")
    if request is None:
        return "(no request in context)"
    return f"{request.method} {request.get_full_path()}"


def custom_exception_handler(exc, context):
    """
    JSON for every failure: DRF errors as usual, order-core errors as
    {detail, code, items}, DB outages as 503 and anything else as 500
    instead of the default Django HTML page.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, OrderError):
        payload = {"detail": exc.detail, "code": exc.code}
        if exc.items:
            payload["items"] = exc.items
        return Response(payload, status=exc.status_code)

    if isinstance(exc, (OperationalError, ProgrammingError)):
        LOGGER.exception("Database error on %s", _describe(context))
        return Response(
            {
                "detail": "Service unavailable (database). Please retry in a moment.",
                "code": "db_unavailable",
            },
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    LOGGER.exception("Unhandled error on %s", _describe(context))
    return Response(
        {"detail": "Internal server error.", "code": "internal_error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
