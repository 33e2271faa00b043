"""
Custom Exception Handler for API
"""
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
import logging

from apps.core.exceptions import (
    BusinessRuleViolation,
    InvalidTransition,
    NotFoundException,
    PersistenceException,
    StorefrontException,
    ValidationException,
)

logger = logging.getLogger(__name__)

# Most specific class first
STATUS_BY_EXCEPTION = [
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (NotFoundException, status.HTTP_404_NOT_FOUND),
    (InvalidTransition, status.HTTP_409_CONFLICT),
    (BusinessRuleViolation, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


def _error_body(message, code, details, status_code):
    return {
        "error": True,
        "message": message,
        "code": code,
        "details": details,
        "status_code": status_code,
    }


def _storefront_response(exc: StorefrontException) -> Response:
    if isinstance(exc, PersistenceException):
        logger.error(f"Persistence failure ({exc.operation}): {exc.message}")
        return Response(
            _error_body("The order could not be saved, please try again", exc.code, {},
                        status.HTTP_500_INTERNAL_SERVER_ERROR),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    status_code = status.HTTP_400_BAD_REQUEST
    for exc_class, mapped in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_class):
            status_code = mapped
            break

    details = {}
    if getattr(exc, 'field', None):
        details["field"] = exc.field
    return Response(_error_body(exc.message, exc.code, details, status_code), status=status_code)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that provides consistent error responses.
    """
    if isinstance(exc, StorefrontException):
        return _storefront_response(exc)

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        # Customize the response format
        details = response.data if isinstance(response.data, dict) else {"detail": response.data}
        response.data = _error_body(
            str(details.get("detail", "Invalid request")),
            "VALIDATION_ERROR" if isinstance(exc, DRFValidationError) else str(getattr(exc, "default_code", "error")).upper(),
            details,
            response.status_code
        )
    else:
        # Handle unexpected exceptions
        logger.exception(f"Unhandled exception: {exc}")
        response = Response(
            _error_body("An unexpected error occurred", "INTERNAL_ERROR", {},
                        status.HTTP_500_INTERNAL_SERVER_ERROR),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return response

