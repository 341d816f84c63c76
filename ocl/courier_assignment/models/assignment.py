"""
Assignment ledger models.

An ``AssignedCourier`` row is one unit of courier work: a set of corporate
freight consignments or medicine bookings handed to a courier boy for
pickup and/or delivery. Display fields of the billing entity and of the
courier are copied at assignment time so the entry keeps rendering the same
even when the source records are edited later.
"""

import uuid
from django.db import models
from django.db.models import Q
from django.conf import settings
from django.utils import timezone


class AssignmentStatus(models.TextChoices):
    """Assignment status enumeration with workflow states."""
    PENDING = 'pending', 'Pending'
    ASSIGNED = 'assigned', 'Assigned'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class AssignmentType(models.TextChoices):
    """Order source that populated the entry."""
    CORPORATE = 'corporate', 'Corporate'
    OFFICE_USER = 'office_user', 'Office User'
    COURIER_BOY = 'courier_boy', 'Courier Boy'
    MEDICINE = 'medicine', 'Medicine'


class WorkType(models.TextChoices):
    PICKUP = 'pickup', 'Pickup'
    DELIVERY = 'delivery', 'Delivery'
    BOTH = 'both', 'Pickup & Delivery'


TERMINAL_STATUSES = (AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED)
OPEN_STATUSES = (AssignmentStatus.PENDING, AssignmentStatus.ASSIGNED, AssignmentStatus.IN_PROGRESS)


class AssignedCourier(models.Model):
    """
    Ledger entry tying a batch of orders to a courier boy.

    Corporate, office-user and courier-boy entries reference the corporate
    client whose freight is being moved; medicine entries reference the
    medicine operator. Exactly one of the two references is set.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    type = models.CharField(
        max_length=20,
        choices=AssignmentType.choices,
        default=AssignmentType.CORPORATE,
        help_text="Order source schema used by this entry"
    )
    work = models.CharField(
        max_length=10,
        choices=WorkType.choices,
        default=WorkType.PICKUP,
        help_text="Nature of the task assigned"
    )

    # Billing entity reference and snapshot
    corporate = models.ForeignKey(
        'bookings.CorporateClient',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='courier_assignments',
        help_text="Corporate client for freight entries"
    )
    corporate_info = models.JSONField(
        default=dict,
        blank=True,
        help_text="Corporate code, company name, email and contact number at assignment time"
    )
    medicine_operator = models.ForeignKey(
        'bookings.MedicineOperator',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='courier_assignments',
        help_text="Medicine operator for medicine entries"
    )
    medicine_user_info = models.JSONField(
        default=dict,
        blank=True,
        help_text="Operator name, email and phone at assignment time"
    )

    status = models.CharField(
        max_length=20,
        choices=AssignmentStatus.choices,
        default=AssignmentStatus.PENDING,
        help_text="Current status in the assignment workflow"
    )

    # Courier reference and snapshot
    courier = models.ForeignKey(
        'bookings.CourierBoy',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='assignments',
        help_text="Courier boy currently holding the work"
    )
    courier_info = models.JSONField(
        default=dict,
        blank=True,
        help_text="Courier name, phone, email and area at assignment time"
    )

    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='courier_assignments',
        help_text="Admin who performed the assignment"
    )

    # Lifecycle timestamps
    assigned_at = models.DateTimeField(default=timezone.now)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    notes = models.CharField(max_length=500, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-assigned_at']
        indexes = [
            models.Index(fields=['status', '-assigned_at']),
            models.Index(fields=['type', '-assigned_at']),
            models.Index(fields=['work', '-assigned_at']),
            models.Index(fields=['courier', '-assigned_at']),
            models.Index(fields=['corporate']),
            models.Index(fields=['medicine_operator']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(corporate__isnull=False, medicine_operator__isnull=True)
                    | Q(corporate__isnull=True, medicine_operator__isnull=False)
                ),
                name='assignment_exactly_one_source',
            ),
            models.CheckConstraint(
                condition=~Q(status=AssignmentStatus.PENDING) | Q(courier__isnull=True),
                name='assignment_pending_without_courier',
            ),
        ]

    def __str__(self):
        return f"{self.get_type_display()} {self.get_work_display()} - {self.status} ({self.id})"

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    @property
    def entity_name(self):
        """Display name of the billing entity from the snapshot."""
        if self.type == AssignmentType.MEDICINE:
            return self.medicine_user_info.get('name', '')
        return self.corporate_info.get('company_name', '')

    @property
    def total_orders(self):
        return self.orders.count()


class AssignmentOrder(models.Model):
    """
    One order line on a ledger entry.

    References either a corporate freight shipment or a medicine booking,
    never both and never neither, and carries snapshots of the booking
    sub-documents taken when the line was added.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    assignment = models.ForeignKey(
        AssignedCourier,
        on_delete=models.CASCADE,
        related_name='orders'
    )
    sequence = models.PositiveIntegerField(help_text="Position of the line within the entry")

    shipment = models.ForeignKey(
        'bookings.FreightShipment',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='assignment_lines'
    )
    medicine_booking = models.ForeignKey(
        'bookings.MedicineBooking',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='assignment_lines'
    )

    consignment_number = models.PositiveBigIntegerField()
    booking_reference = models.CharField(max_length=50)

    origin_data = models.JSONField(default=dict, blank=True)
    destination_data = models.JSONField(default=dict, blank=True)
    shipment_data = models.JSONField(default=dict, blank=True)
    invoice_data = models.JSONField(default=dict, blank=True)
    charges_data = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ['assignment', 'sequence']
        unique_together = [['assignment', 'sequence']]
        indexes = [
            models.Index(fields=['consignment_number']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(shipment__isnull=False, medicine_booking__isnull=True)
                    | Q(shipment__isnull=True, medicine_booking__isnull=False)
                ),
                name='assignment_order_exactly_one_reference',
            ),
        ]

    def __str__(self):
        return f"{self.consignment_number} ({self.booking_reference})"
