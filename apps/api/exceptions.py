"""
Custom exception handlers for API.
"""
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler for DRF.
    Logs errors and provides consistent error responses.
    """
    response = exception_handler(exc, context)

    logger.error(
        f"API Exception: {exc}",
        exc_info=response is None,
        extra={'context': context}
    )

    if response is None:
        return Response(
            {
                'error': 'Internal server error',
                'code': status.HTTP_500_INTERNAL_SERVER_ERROR,
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(response.data, dict) and 'detail' in response.data:
        error = response.data['detail']
    else:
        error = response.data

    response.data = {
        'error': error,
        'code': response.status_code,
    }

    return response
