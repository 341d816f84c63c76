"""
Business exceptions shared by the assignment ledger and settlement apps.
"""

from typing import Dict, Any

from rest_framework import status
from rest_framework.response import Response


class BusinessException(Exception):
    """Base exception for business logic errors."""

    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, code: str = "BUSINESS_ERROR", details: Dict[str, Any] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(BusinessException):
    """Raised when data validation fails."""

    def __init__(self, message: str, field_errors: Dict[str, Any] = None):
        super().__init__(message, "VALIDATION_ERROR", field_errors or {})


class NotFoundException(BusinessException):
    """Raised when a referenced order, courier, entry or invoice does not exist."""

    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, entity_type: str, identifier: Any):
        message = f"{entity_type} {identifier} not found"
        super().__init__(message, "NOT_FOUND", {
            "entity_type": entity_type,
            "identifier": str(identifier),
        })


def business_error_response(exc: BusinessException) -> Response:
    """Structured failure body used by every workflow endpoint."""
    return Response({
        'success': False,
        'error': {
            'code': exc.code,
            'message': exc.message,
            'details': exc.details,
        }
    }, status=exc.http_status)
