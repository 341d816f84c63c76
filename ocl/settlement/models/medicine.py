"""
Monthly settlement of medicine bookings with medicine operators.
"""

import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone


class PaidBy(models.TextChoices):
    SENDER = 'sender', 'Sender'
    RECEIVER = 'receiver', 'Receiver'


class MedicineSettlement(models.Model):
    """Settlement record of one numbered medicine booking."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.OneToOneField(
        'bookings.MedicineBooking',
        on_delete=models.PROTECT,
        related_name='settlement'
    )
    operator = models.ForeignKey(
        'bookings.MedicineOperator',
        on_delete=models.PROTECT,
        related_name='settlements'
    )
    consignment_number = models.PositiveBigIntegerField()
    sender_name = models.CharField(max_length=200, blank=True)
    receiver_name = models.CharField(max_length=200, blank=True)
    paid_by = models.CharField(max_length=10, choices=PaidBy.choices, default=PaidBy.SENDER)
    cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    weight = models.DecimalField(max_digits=10, decimal_places=3, default=Decimal('0'))
    commission = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Weight times the per-kg commission rate"
    )
    is_paid = models.BooleanField(default=False)
    settlement_month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    settlement_year = models.PositiveSmallIntegerField()
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['operator', 'settlement_year', 'settlement_month']),
            models.Index(fields=['consignment_number']),
        ]

    def __str__(self):
        return f"Settlement {self.consignment_number} ({self.settlement_month}/{self.settlement_year})"


class MedicineOclCharge(models.Model):
    """OCL charge entered by an admin for a settlement month."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    month = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    year = models.PositiveSmallIntegerField()
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    note = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-year', '-month']
        constraints = [
            models.UniqueConstraint(fields=['year', 'month'], name='ocl_charge_unique_month'),
        ]

    def __str__(self):
        return f"OCL charge {self.month}/{self.year}: {self.amount}"
