"""
Courier Assignment Ledger Models
"""

from .assignment import AssignedCourier, AssignmentOrder, AssignmentStatus, AssignmentType, WorkType
from .audit import AuditLog

__all__ = [
    # Ledger models
    'AssignedCourier', 'AssignmentOrder',
    'AssignmentStatus', 'AssignmentType', 'WorkType',

    # Audit
    'AuditLog',
]
