"""
Courier Assignment Ledger Services
"""

from .workflow import AssignmentWorkflow, validate_assignment_workflow
from .assignment_service import AssignmentService

__all__ = [
    # Workflow validators
    'AssignmentWorkflow', 'validate_assignment_workflow',

    # Services
    'AssignmentService',
]
