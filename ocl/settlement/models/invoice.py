"""
Persisted corporate invoices.
"""

import uuid
from decimal import Decimal
from django.db import models
from django.conf import settings
from django.utils import timezone


class InvoiceStatus(models.TextChoices):
    """Stored payment state; ``overdue`` is derived from the due date."""
    UNPAID = 'unpaid', 'Unpaid'
    PAID = 'paid', 'Paid'
    OVERDUE = 'overdue', 'Overdue'


class PaymentMethod(models.TextChoices):
    CHEQUE = 'cheque', 'Cheque'
    BANK_TRANSFER = 'bank_transfer', 'Bank Transfer'
    CASH = 'cash', 'Cash'
    OTHER = 'other', 'Other'


def _money_field(help_text=""):
    return models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), help_text=help_text)


class InvoiceQuerySet(models.QuerySet):

    def overdue(self, today=None):
        today = today or timezone.localdate()
        return self.filter(status=InvoiceStatus.UNPAID, due_date__lt=today)

    def outstanding(self):
        return self.filter(status=InvoiceStatus.UNPAID)


class Invoice(models.Model):
    """
    Invoice issued to a corporate client for a billing period.

    Bill-to fields are copied from the corporate at generation time.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice_number = models.CharField(
        max_length=20,
        unique=True,
        help_text="Sequential per month, e.g. 2024-06/007"
    )
    corporate = models.ForeignKey(
        'bookings.CorporateClient',
        on_delete=models.PROTECT,
        related_name='invoices'
    )

    # Bill-to snapshot
    company_name = models.CharField(max_length=200)
    company_address = models.TextField(blank=True)
    gst_number = models.CharField(max_length=20, blank=True)
    state = models.CharField(max_length=100)
    contact_number = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)

    period_start = models.DateField()
    period_end = models.DateField()
    invoice_date = models.DateField(default=timezone.localdate)
    due_date = models.DateField()

    # Totals
    total_freight = _money_field("Sum of freight charges")
    awb_total = _money_field("Sum of per-consignment AWB charges")
    subtotal = _money_field("Freight plus AWB charges, before fuel surcharge")
    fuel_charge = _money_field()
    subtotal_after_fuel = _money_field()
    cgst = _money_field()
    sgst = _money_field()
    igst = _money_field()
    grand_total = _money_field()
    amount_in_words = models.CharField(max_length=300)

    status = models.CharField(
        max_length=10,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.UNPAID
    )
    payment_date = models.DateTimeField(null=True, blank=True)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, blank=True)
    payment_reference = models.CharField(max_length=100, blank=True)
    remarks = models.CharField(max_length=500, blank=True)
    terms = models.JSONField(default=list, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_invoices'
    )
    last_modified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='modified_invoices'
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InvoiceQuerySet.as_manager()

    class Meta:
        ordering = ['-invoice_date', '-invoice_number']
        indexes = [
            models.Index(fields=['corporate', 'status']),
            models.Index(fields=['due_date']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['corporate', 'period_start', 'period_end'],
                name='invoice_unique_corporate_period',
            ),
        ]

    def __str__(self):
        return f"Invoice {self.invoice_number} - {self.company_name}"

    @property
    def is_overdue(self):
        return self.status == InvoiceStatus.UNPAID and self.due_date < timezone.localdate()

    @property
    def display_status(self):
        return InvoiceStatus.OVERDUE if self.is_overdue else self.status

    @property
    def days_overdue(self):
        if not self.is_overdue:
            return 0
        return (timezone.localdate() - self.due_date).days


class InvoiceLine(models.Model):
    """One billed consignment on an invoice."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='lines')
    shipment = models.ForeignKey(
        'bookings.FreightShipment',
        on_delete=models.PROTECT,
        related_name='invoice_lines'
    )
    consignment_number = models.PositiveBigIntegerField()
    booking_date = models.DateField()
    origin = models.CharField(max_length=100)
    destination = models.CharField(max_length=100)
    service_type = models.CharField(max_length=10)
    weight = models.DecimalField(max_digits=10, decimal_places=3, default=Decimal('0'))
    freight_charges = _money_field()
    awb_charge = _money_field()
    total = _money_field("Freight plus AWB charge")

    class Meta:
        ordering = ['booking_date', 'consignment_number']

    def __str__(self):
        return f"{self.invoice.invoice_number} / {self.consignment_number}"
