"""
Custom exceptions for settlement and invoicing.
"""

from typing import Dict, Any

from rest_framework import status

from ocl.exceptions import BusinessException, ValidationException, NotFoundException

__all__ = [
    'BusinessException', 'ValidationException', 'NotFoundException',
    'AggregationFailure', 'DuplicateInvoiceException', 'InvoiceStateException',
]


class AggregationFailure(BusinessException):
    """Raised when settlement data cannot be read; the caller may retry."""

    http_status = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str = "Settlement data could not be loaded, please retry",
                 details: Dict[str, Any] = None):
        details = dict(details or {})
        details['retryable'] = True
        super().__init__(message, "AGGREGATION_FAILED", details)


class DuplicateInvoiceException(BusinessException):
    """Raised when the corporate already has an invoice for the period."""

    http_status = status.HTTP_409_CONFLICT

    def __init__(self, corporate_code: str, period_start, period_end, invoice_number: str):
        message = (
            f"Invoice {invoice_number} already exists for {corporate_code} "
            f"for {period_start} to {period_end}"
        )
        super().__init__(message, "INVOICE_EXISTS", {
            "corporate_code": corporate_code,
            "period_start": str(period_start),
            "period_end": str(period_end),
            "invoice_number": invoice_number
        })


class InvoiceStateException(BusinessException):
    """Raised when an invoice operation does not fit its payment state."""

    def __init__(self, invoice_number: str, invoice_status: str):
        message = f"Invoice {invoice_number} is already {invoice_status}"
        super().__init__(message, "INVALID_INVOICE_STATE", {
            "invoice_number": invoice_number,
            "status": invoice_status
        })
