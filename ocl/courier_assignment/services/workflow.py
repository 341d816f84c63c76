"""
Workflow rules for the courier assignment ledger.

Manages allowed state transitions and the timestamps each transition stamps.
"""

from ..exceptions import InvalidTransitionException
from ..models import AssignedCourier, AssignmentStatus


class AssignmentWorkflow:
    """Workflow rules for AssignedCourier state transitions."""

    ALLOWED_TRANSITIONS = {
        AssignmentStatus.PENDING: [AssignmentStatus.ASSIGNED, AssignmentStatus.CANCELLED],
        AssignmentStatus.ASSIGNED: [AssignmentStatus.IN_PROGRESS, AssignmentStatus.CANCELLED],
        AssignmentStatus.IN_PROGRESS: [AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED],
        AssignmentStatus.COMPLETED: [],  # Final state
        AssignmentStatus.CANCELLED: [],  # Final state
    }

    # Timestamp field stamped when a transition enters the status
    TRANSITION_TIMESTAMPS = {
        AssignmentStatus.IN_PROGRESS: 'started_at',
        AssignmentStatus.COMPLETED: 'completed_at',
        AssignmentStatus.CANCELLED: 'cancelled_at',
    }

    @classmethod
    def validate_transition(cls, assignment: AssignedCourier, new_status: str) -> None:
        """
        Validate if a status transition is allowed.

        Requesting the current status of a non-terminal entry is a no-op and
        passes. Terminal entries reject every request.

        Raises:
            InvalidTransitionException: If transition is not allowed
        """
        current_status = assignment.status

        if new_status not in AssignmentStatus.values or assignment.is_terminal:
            raise InvalidTransitionException(
                current_status=current_status,
                attempted_status=new_status,
                entity_type="AssignedCourier"
            )

        if current_status == new_status:
            return

        if new_status not in cls.ALLOWED_TRANSITIONS.get(current_status, []):
            raise InvalidTransitionException(
                current_status=current_status,
                attempted_status=new_status,
                entity_type="AssignedCourier"
            )

    @classmethod
    def can_transition_to(cls, assignment: AssignedCourier, new_status: str) -> bool:
        """Check if transition is allowed without raising exception."""
        try:
            cls.validate_transition(assignment, new_status)
            return True
        except InvalidTransitionException:
            return False

    @classmethod
    def timestamp_field(cls, new_status: str):
        return cls.TRANSITION_TIMESTAMPS.get(new_status)


def validate_assignment_workflow(assignment: AssignedCourier, new_status: str) -> None:
    """
    Validate assignment workflow transition.

    Raises:
        InvalidTransitionException: If transition is not allowed
    """
    AssignmentWorkflow.validate_transition(assignment, new_status)
