"""
Custom exceptions for the courier assignment ledger.
"""

from ocl.exceptions import BusinessException, ValidationException, NotFoundException

__all__ = [
    'BusinessException', 'ValidationException', 'NotFoundException',
    'InvalidTransitionException', 'CourierNotApprovedException',
]


class InvalidTransitionException(BusinessException):
    """Raised when attempting an invalid workflow transition."""

    def __init__(self, current_status: str, attempted_status: str, entity_type: str = "AssignedCourier"):
        message = f"Invalid transition for {entity_type}: cannot move from {current_status} to {attempted_status}"
        super().__init__(message, "INVALID_TRANSITION", {
            "current_status": current_status,
            "attempted_status": attempted_status,
            "entity_type": entity_type
        })


class CourierNotApprovedException(BusinessException):
    """Raised when work is handed to a courier who is not approved."""

    def __init__(self, courier_id, courier_status: str):
        message = f"Courier {courier_id} is {courier_status}; only approved couriers can be assigned"
        super().__init__(message, "COURIER_NOT_APPROVED", {
            "courier_id": str(courier_id),
            "courier_status": courier_status
        })
