"""
In-process notification of ledger status changes.

Receivers subscribe with ``assignment_status_changed.connect(receiver)`` and
are called once per effective status change, after the change has been
committed, with ``assignment``, ``old_status``, ``new_status`` and
``changed_by``. Delivery is best effort: nothing is persisted or retried and
a failing receiver does not affect the caller or the other receivers.
"""

import logging

from django.dispatch import Signal

logger = logging.getLogger(__name__)

assignment_status_changed = Signal()


def notify_status_changed(assignment, old_status, new_status, changed_by=None):
    """Send the status-change signal and log receivers that raised."""
    responses = assignment_status_changed.send_robust(
        sender=assignment.__class__,
        assignment=assignment,
        old_status=old_status,
        new_status=new_status,
        changed_by=changed_by,
    )
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.warning(
                f"Status change receiver {getattr(receiver, '__qualname__', receiver)} failed "
                f"for assignment {assignment.id} ({old_status} -> {new_status}): {response}"
            )
    return responses
