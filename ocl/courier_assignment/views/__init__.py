"""
Courier Assignment Ledger Views
"""

from .assignment_views import AssignmentViewSet

__all__ = [
    'AssignmentViewSet',
]
