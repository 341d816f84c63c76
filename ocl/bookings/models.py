"""
Booking and courier-roster records consumed by the assignment ledger and
the settlement calculator.

These models carry only the fields the core reads: billing-entity display
data, consignment identifiers, charges, weights, dates and payment state.
"""

import uuid
from decimal import Decimal
from django.db import models
from django.conf import settings
from django.utils import timezone


class CorporateClient(models.Model):
    """Registered corporate client (freight billing entity)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='corporate_account',
        help_text="Portal login for this corporate client"
    )
    corporate_code = models.CharField(
        max_length=20,
        unique=True,
        help_text="Human-facing corporate identifier, e.g. A00001"
    )
    company_name = models.CharField(max_length=200)
    company_address = models.TextField(blank=True)
    gst_number = models.CharField(max_length=20, blank=True)
    state = models.CharField(max_length=100, help_text="Registered state, used for the GST split")
    contact_number = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['company_name']

    def __str__(self):
        return f"{self.company_name} ({self.corporate_code})"


class MedicineOperator(models.Model):
    """Medicine-service operator (medicine billing entity)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='medicine_profile'
    )
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return self.name


class CourierBoyStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class CourierBoy(models.Model):
    """Courier on the roster; only approved couriers take assignments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    full_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20)
    email = models.EmailField(blank=True)
    area = models.CharField(max_length=200, blank=True)
    status = models.CharField(
        max_length=20,
        choices=CourierBoyStatus.choices,
        default=CourierBoyStatus.PENDING
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['full_name']

    def __str__(self):
        return f"{self.full_name} ({self.phone})"

    @property
    def is_approved(self):
        return self.status == CourierBoyStatus.APPROVED


class PaymentType(models.TextChoices):
    """FP = freight paid by the corporate, TP = to-pay by the receiver."""
    FP = 'FP', 'Freight Paid'
    TP = 'TP', 'To Pay'


class PaymentStatus(models.TextChoices):
    UNPAID = 'unpaid', 'Unpaid'
    INVOICED = 'invoiced', 'Invoiced'
    PAID = 'paid', 'Paid'


class ShipmentStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    CANCELLED = 'cancelled', 'Cancelled'


class FreightShipment(models.Model):
    """
    Corporate freight consignment as booked against a consignment number.

    ``booking_data`` holds the booking form sub-documents
    (``originData``, ``destinationData``, ``shipmentData``, ``invoiceData``).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    corporate = models.ForeignKey(
        CorporateClient,
        on_delete=models.CASCADE,
        related_name='shipments'
    )
    consignment_number = models.PositiveBigIntegerField(unique=True)
    booking_reference = models.CharField(max_length=50)
    booking_date = models.DateTimeField(default=timezone.now)
    booking_data = models.JSONField(default=dict, blank=True)

    freight_charges = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    payment_type = models.CharField(max_length=2, choices=PaymentType.choices, default=PaymentType.FP)
    payment_status = models.CharField(max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.UNPAID)
    status = models.CharField(max_length=10, choices=ShipmentStatus.choices, default=ShipmentStatus.ACTIVE)

    invoice = models.ForeignKey(
        'settlement.Invoice',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='billed_shipments'
    )

    class Meta:
        ordering = ['-booking_date']
        indexes = [
            models.Index(fields=['corporate', 'payment_status']),
            models.Index(fields=['booking_date']),
        ]

    def __str__(self):
        return f"Consignment {self.consignment_number} - {self.corporate.company_name}"

    def section(self, name):
        return (self.booking_data or {}).get(name) or {}

    @property
    def destination_city(self):
        return self.section('destinationData').get('city') or 'N/A'

    @property
    def origin_city(self):
        return self.section('originData').get('city') or 'N/A'

    @property
    def service_type(self):
        nature = self.section('shipmentData').get('natureOfConsignment')
        return 'DOX' if nature == 'DOX' else 'NON-DOX'

    @property
    def weight(self):
        data = self.section('shipmentData')
        value = data.get('actualWeight') or data.get('chargeableWeight') or 0
        try:
            return Decimal(str(value))
        except ArithmeticError:
            return Decimal('0')


class MedicineBooking(models.Model):
    """
    Medicine delivery booking.

    Sub-documents mirror the booking form: ``origin``/``destination``
    (name, phone, address fields), ``shipment`` (weights), ``charges``
    (``grandTotal``) and ``billing`` (``partyType`` sender/recipient).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    operator = models.ForeignKey(
        MedicineOperator,
        on_delete=models.CASCADE,
        related_name='bookings'
    )
    consignment_number = models.PositiveBigIntegerField(null=True, blank=True, unique=True)
    booking_reference = models.CharField(max_length=50)
    origin = models.JSONField(default=dict, blank=True)
    destination = models.JSONField(default=dict, blank=True)
    shipment = models.JSONField(default=dict, blank=True)
    charges = models.JSONField(default=dict, blank=True)
    billing = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['operator', 'created_at']),
        ]

    def __str__(self):
        return f"Medicine booking {self.booking_reference}"
