"""
Assignment Service for the courier assignment ledger.

Handles ledger entry creation, courier hand-over, status updates and the
ledger queries used by the admin screens.
"""

import logging
from typing import Iterable, Optional
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from bookings.models import CourierBoy, FreightShipment, MedicineBooking
from ..models import (
    AssignedCourier, AssignmentOrder, AssignmentStatus, AssignmentType,
    WorkType, AuditLog
)
from ..models.assignment import OPEN_STATUSES
from ..exceptions import (
    ValidationException, NotFoundException, InvalidTransitionException,
    CourierNotApprovedException
)
from ..signals import notify_status_changed
from ..sources import OrderLine, CorporateSource, MedicineSource
from .workflow import AssignmentWorkflow, validate_assignment_workflow

logger = logging.getLogger(__name__)

MAX_NOTES_LENGTH = 500


class AssignmentService:
    """Service class for ledger operations."""

    @staticmethod
    def create_assignment(source, orders: Iterable[OrderLine], courier: Optional[CourierBoy] = None,
                          assigned_by=None, notes: str = "") -> AssignedCourier:
        """
        Create a ledger entry for a batch of orders.

        Args:
            source: Validated source variant (CorporateSource, MedicineSource, ...)
            orders: Order lines, all belonging to the source's billing entity
            courier: Optional courier to hand the work to immediately
            assigned_by: Admin creating the entry
            notes: Free text, at most 500 characters

        Returns:
            Created AssignedCourier instance, ``pending`` or ``assigned``

        Raises:
            ValidationException: If the order lines do not fit the source
            CourierNotApprovedException: If the courier is not approved
        """
        lines = list(orders)
        if not lines:
            raise ValidationException("Assignment must contain at least one order", {"orders": "empty"})

        foreign = [line.consignment_number for line in lines if not source.accepts(line)]
        if foreign:
            raise ValidationException(
                f"Orders do not belong to the {source.type} billing entity",
                {"consignment_numbers": foreign}
            )

        numbers = [line.consignment_number for line in lines]
        if len(numbers) != len(set(numbers)):
            raise ValidationException("Duplicate consignments in assignment", {"consignment_numbers": numbers})

        AssignmentService._check_notes(notes)
        if courier is not None:
            AssignmentService._ensure_approved(courier)

        with transaction.atomic():
            assignment = AssignedCourier(
                assigned_by=assigned_by,
                assigned_at=timezone.now(),
                notes=notes or "",
                **source.entry_fields()
            )
            if courier is not None:
                assignment.status = AssignmentStatus.ASSIGNED
                AssignmentService._apply_courier(assignment, courier)
            assignment.save()

            AssignmentOrder.objects.bulk_create([
                AssignmentOrder(assignment=assignment, sequence=i, **line.model_fields())
                for i, line in enumerate(lines, 1)
            ])

            AuditLog.log_change(
                entity=assignment,
                action='created',
                user=assigned_by,
                new_values={
                    'status': assignment.status,
                    'type': assignment.type,
                    'work': assignment.work,
                    'consignment_numbers': numbers,
                    'courier': assignment.courier_info,
                },
                notes=f"{len(lines)} orders assigned"
            )

        logger.info(
            f"Assignment {assignment.id} created ({assignment.type}/{assignment.work}, "
            f"{len(lines)} orders, status {assignment.status})"
        )
        return assignment

    @staticmethod
    def assign_courier(assignment_id: str, courier_id: str, assigned_by) -> AssignedCourier:
        """
        Hand a ledger entry to a courier.

        A pending entry moves to ``assigned``; an assigned or in-progress entry
        keeps its status and gets the new courier. ``assigned_at`` is refreshed.

        Raises:
            NotFoundException: If the entry or courier does not exist
            InvalidTransitionException: If the entry is completed or cancelled
            CourierNotApprovedException: If the courier is not approved
        """
        courier = AssignmentService._get_courier(courier_id)
        AssignmentService._ensure_approved(courier)

        with transaction.atomic():
            assignment = AssignmentService._lock(assignment_id)

            if assignment.is_terminal:
                logger.warning(f"Rejected courier assignment on {assignment.status} assignment {assignment.id}")
                raise InvalidTransitionException(
                    current_status=assignment.status,
                    attempted_status=AssignmentStatus.ASSIGNED,
                )

            old_status = assignment.status
            old_courier = dict(assignment.courier_info)
            if old_status == AssignmentStatus.PENDING:
                validate_assignment_workflow(assignment, AssignmentStatus.ASSIGNED)
                assignment.status = AssignmentStatus.ASSIGNED

            AssignmentService._apply_courier(assignment, courier)
            assignment.assigned_at = timezone.now()
            assignment.assigned_by = assigned_by
            assignment.save()

            AuditLog.log_change(
                entity=assignment,
                action='courier_assigned',
                user=assigned_by,
                old_values={'courier': old_courier},
                new_values={'courier': assignment.courier_info},
                notes=f"Courier {courier.full_name} assigned"
            )

            if assignment.status != old_status:
                AssignmentService._record_status_change(assignment, old_status, assigned_by)

        logger.info(f"Courier {courier.id} assigned to assignment {assignment.id} (status {assignment.status})")
        return assignment

    @staticmethod
    def update_status(assignment_id: str, new_status: str, updated_by, notes: str = "") -> AssignedCourier:
        """
        Move a ledger entry along the workflow.

        Entering ``in_progress``, ``completed`` or ``cancelled`` stamps the
        matching timestamp once. Requesting the current status changes
        nothing and sends no notification.

        Raises:
            NotFoundException: If the entry does not exist
            InvalidTransitionException: If the transition is not allowed
            ValidationException: If moving to ``assigned`` without a courier
        """
        AssignmentService._check_notes(notes)

        with transaction.atomic():
            assignment = AssignmentService._lock(assignment_id)

            try:
                validate_assignment_workflow(assignment, new_status)
            except InvalidTransitionException:
                logger.warning(f"Rejected transition {assignment.status} -> {new_status} on assignment {assignment.id}")
                raise

            if assignment.status == new_status:
                logger.info(f"Assignment {assignment.id} already {new_status}; nothing to do")
                return assignment

            if new_status == AssignmentStatus.ASSIGNED and assignment.courier_id is None:
                raise ValidationException(
                    "A courier must be chosen before the assignment can be marked assigned",
                    {"courier": "required"}
                )

            old_status = assignment.status
            assignment.status = new_status

            stamp = AssignmentWorkflow.timestamp_field(new_status)
            if stamp and getattr(assignment, stamp) is None:
                setattr(assignment, stamp, timezone.now())

            if notes:
                assignment.notes = notes
            assignment.save()

            AssignmentService._record_status_change(assignment, old_status, updated_by, notes)

        logger.info(f"Assignment {assignment.id} status changed from {old_status} to {new_status}")
        return assignment

    @staticmethod
    def find_by_status(status: str, limit: Optional[int] = None, offset: int = 0):
        return AssignmentService._page(AssignedCourier.objects.filter(status=status), limit, offset)

    @staticmethod
    def find_by_courier(courier_id: str, limit: Optional[int] = None, offset: int = 0):
        return AssignmentService._page(AssignedCourier.objects.filter(courier_id=courier_id), limit, offset)

    @staticmethod
    def find_by_type(assignment_type: str, limit: Optional[int] = None, offset: int = 0):
        return AssignmentService._page(AssignedCourier.objects.filter(type=assignment_type), limit, offset)

    @staticmethod
    def find_by_work(work: str, limit: Optional[int] = None, offset: int = 0):
        return AssignmentService._page(AssignedCourier.objects.filter(work=work), limit, offset)

    @staticmethod
    def assign_shipment_to_courier(shipment_id: str, courier_id: str, assigned_by) -> AssignedCourier:
        """
        Put a corporate shipment on a courier's pickup run.

        The shipment joins the courier's open pickup entry for the same
        corporate if there is one, otherwise a new ``assigned`` entry is
        created. A shipment already on the entry is not added again.
        """
        try:
            shipment = FreightShipment.objects.select_related('corporate').get(id=shipment_id)
        except (FreightShipment.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFoundException("FreightShipment", shipment_id)

        courier = AssignmentService._get_courier(courier_id)
        AssignmentService._ensure_approved(courier)

        source = CorporateSource.from_corporate(shipment.corporate, WorkType.PICKUP)
        line = OrderLine.from_shipment(shipment)

        with transaction.atomic():
            entry = AssignedCourier.objects.select_for_update().filter(
                courier=courier,
                corporate=shipment.corporate,
                type=AssignmentType.CORPORATE,
                work=WorkType.PICKUP,
                status__in=OPEN_STATUSES,
            ).order_by('-assigned_at').first()

            if entry is None:
                return AssignmentService.create_assignment(source, [line], courier=courier, assigned_by=assigned_by)

            if not entry.orders.filter(shipment=shipment).exists():
                AssignmentService._append_line(entry, line, assigned_by)
            return entry

    @staticmethod
    def assign_medicine_delivery(booking_id: str, courier_id: str, assigned_by) -> AssignedCourier:
        """
        Put a medicine booking on a courier's delivery run.

        Same joining rule as corporate pickups, keyed by medicine operator.
        """
        try:
            booking = MedicineBooking.objects.select_related('operator').get(id=booking_id)
        except (MedicineBooking.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFoundException("MedicineBooking", booking_id)

        courier = AssignmentService._get_courier(courier_id)
        AssignmentService._ensure_approved(courier)

        source = MedicineSource.from_operator(booking.operator, WorkType.DELIVERY)
        line = OrderLine.from_medicine_booking(booking)

        with transaction.atomic():
            entry = AssignedCourier.objects.select_for_update().filter(
                courier=courier,
                medicine_operator=booking.operator,
                type=AssignmentType.MEDICINE,
                work=WorkType.DELIVERY,
                status__in=OPEN_STATUSES,
            ).order_by('-assigned_at').first()

            if entry is None:
                return AssignmentService.create_assignment(source, [line], courier=courier, assigned_by=assigned_by)

            if not entry.orders.filter(medicine_booking=booking).exists():
                AssignmentService._append_line(entry, line, assigned_by)
            return entry

    # Helpers

    @staticmethod
    def _lock(assignment_id) -> AssignedCourier:
        try:
            return AssignedCourier.objects.select_for_update().get(id=assignment_id)
        except (AssignedCourier.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFoundException("AssignedCourier", assignment_id)

    @staticmethod
    def _get_courier(courier_id) -> CourierBoy:
        try:
            return CourierBoy.objects.get(id=courier_id)
        except (CourierBoy.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFoundException("CourierBoy", courier_id)

    @staticmethod
    def _ensure_approved(courier: CourierBoy) -> None:
        if not courier.is_approved:
            raise CourierNotApprovedException(courier.id, courier.status)

    @staticmethod
    def _check_notes(notes: str) -> None:
        if notes and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationException(
                f"Notes cannot be longer than {MAX_NOTES_LENGTH} characters",
                {"notes": len(notes)}
            )

    @staticmethod
    def _apply_courier(assignment: AssignedCourier, courier: CourierBoy) -> None:
        assignment.courier = courier
        assignment.courier_info = {
            'courier_boy_id': str(courier.id),
            'name': courier.full_name,
            'phone': courier.phone,
            'email': courier.email,
            'area': courier.area,
        }

    @staticmethod
    def _append_line(assignment: AssignedCourier, line: OrderLine, user) -> AssignmentOrder:
        last = assignment.orders.aggregate(last=Max('sequence'))['last'] or 0
        order = AssignmentOrder.objects.create(assignment=assignment, sequence=last + 1, **line.model_fields())
        AuditLog.log_change(
            entity=assignment,
            action='order_added',
            user=user,
            new_values={'consignment_number': line.consignment_number},
            notes=f"Consignment {line.consignment_number} added"
        )
        logger.info(f"Consignment {line.consignment_number} added to assignment {assignment.id}")
        return order

    @staticmethod
    def _record_status_change(assignment: AssignedCourier, old_status: str, user, notes: str = "") -> None:
        new_status = assignment.status
        AuditLog.log_status_change(
            entity=assignment,
            old_status=old_status,
            new_status=new_status,
            user=user,
            notes=notes
        )
        transaction.on_commit(
            lambda: notify_status_changed(assignment, old_status, new_status, user)
        )

    @staticmethod
    def _page(queryset, limit: Optional[int], offset: int):
        if offset is None:
            offset = 0
        if offset < 0 or (limit is not None and limit < 0):
            raise ValidationException("limit and offset must not be negative", {"limit": limit, "offset": offset})
        queryset = queryset.select_related('corporate', 'medicine_operator', 'courier').order_by('-assigned_at')
        if limit is None:
            return queryset[offset:]
        return queryset[offset:offset + limit]
