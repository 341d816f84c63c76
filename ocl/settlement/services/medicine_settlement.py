"""
Medicine Settlement Service.

Builds the monthly settlement of a medicine operator: one record per
numbered booking, a per-kg commission, and the OCL charge retained before
the remaining balance is paid out. No fuel surcharge or GST applies.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional
from django.db import DatabaseError, transaction

from bookings.models import MedicineBooking
from ..conf import billing_setting
from ..models import MedicineSettlement, MedicineOclCharge, PaidBy
from ..exceptions import AggregationFailure, ValidationException
from .billing import money, ZERO
from .periods import datetime_range, month_bounds, validate_month_year

logger = logging.getLogger(__name__)

WEIGHT_KEYS = ('chargeableWeight', 'actualWeight', 'perKgWeight')


def _decimal(value) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal('0')


def _booking_cost(booking: MedicineBooking) -> Decimal:
    """Charges grand total of a booking; thousands separators are accepted."""
    value = (booking.charges or {}).get('grandTotal') or 0
    try:
        cost = Decimal(str(value).replace(',', '').strip())
    except (InvalidOperation, ValueError):
        cost = None
    if cost is None or not cost.is_finite():
        raise ValidationException(
            f"Booking {booking.booking_reference} has an invalid grand total",
            {"booking_reference": booking.booking_reference, "grand_total": str(value)}
        )
    return money(cost)


class MedicineSettlementService:
    """Service class for medicine settlement operations."""

    @staticmethod
    def booking_weight(booking: MedicineBooking) -> Decimal:
        """First positive weight among chargeable, actual and per-kg weight."""
        shipment = booking.shipment or {}
        for key in WEIGHT_KEYS:
            weight = _decimal(shipment.get(key) or 0)
            if weight > 0:
                return weight
        return Decimal('0')

    @staticmethod
    def settlement_for(booking: MedicineBooking, month: int, year: int) -> MedicineSettlement:
        """Unsaved settlement record for a booking."""
        weight = MedicineSettlementService.booking_weight(booking)
        party = (booking.billing or {}).get('partyType') or PaidBy.SENDER
        paid_by = PaidBy.RECEIVER if party in ('recipient', PaidBy.RECEIVER) else PaidBy.SENDER
        return MedicineSettlement(
            booking=booking,
            operator_id=booking.operator_id,
            consignment_number=booking.consignment_number,
            sender_name=(booking.origin or {}).get('name', ''),
            receiver_name=(booking.destination or {}).get('name', ''),
            paid_by=paid_by,
            cost=_booking_cost(booking),
            weight=weight,
            commission=money(weight * billing_setting('MEDICINE_COMMISSION_PER_KG')),
            is_paid=paid_by == PaidBy.SENDER,
            settlement_month=month,
            settlement_year=year,
        )

    @staticmethod
    def sync_month(operator, month, year) -> List[MedicineSettlement]:
        """
        Create the missing settlement records of the month and return all of
        the operator's records for it, newest first.

        Bookings without a consignment number are skipped until numbered.

        Raises:
            ValidationException: If month/year are out of range or a booking's
                grand total is not a number
            AggregationFailure: If bookings or settlements cannot be read
        """
        month, year = validate_month_year(month, year)
        start, end = datetime_range(*month_bounds(month, year))

        try:
            with transaction.atomic():
                bookings = MedicineBooking.objects.filter(
                    operator=operator,
                    created_at__gte=start,
                    created_at__lt=end,
                    consignment_number__isnull=False,
                    settlement__isnull=True,
                )
                created = MedicineSettlement.objects.bulk_create([
                    MedicineSettlementService.settlement_for(booking, month, year)
                    for booking in bookings
                ])
                records = list(
                    MedicineSettlement.objects.filter(
                        operator=operator, settlement_month=month, settlement_year=year
                    ).select_related('booking').order_by('-booking__created_at', '-consignment_number')
                )
        except DatabaseError as e:
            logger.exception(f"Failed to build medicine settlement {month}/{year} for operator {operator.id}")
            raise AggregationFailure(details={"month": month, "year": year}) from e

        if created:
            logger.info(f"{len(created)} settlement records generated for operator {operator.id} ({month}/{year})")
        return records

    @staticmethod
    def compute_balance(total, total_commission, manual_ocl_charge=None) -> Dict[str, Decimal]:
        """
        OCL charge and remaining balance.

        A manual charge that is unset or zero falls back to
        ``total - total_commission``.
        """
        total = money(total)
        auto_ocl_charge = total - money(total_commission)
        manual = money(manual_ocl_charge) if manual_ocl_charge else ZERO
        ocl_charge = manual if manual else auto_ocl_charge
        return {
            'auto_ocl_charge': auto_ocl_charge,
            'ocl_charge': ocl_charge,
            'remaining_balance': total - ocl_charge,
        }

    @staticmethod
    def summary(operator, month, year) -> Dict[str, Any]:
        """Month totals of the operator's settlement."""
        month, year = validate_month_year(month, year)
        records = MedicineSettlementService.sync_month(operator, month, year)

        total = sum((record.cost for record in records), ZERO)
        total_weight = sum((record.weight for record in records), Decimal('0'))
        total_commission = sum((record.commission for record in records), ZERO)
        manual = MedicineOclCharge.objects.filter(month=month, year=year).first()

        result = {
            'month': month,
            'year': year,
            'total': total,
            'total_weight': total_weight,
            'total_commission': total_commission,
            'total_transactions': len(records),
            'manual_ocl_charge': manual.amount if manual else None,
        }
        result.update(MedicineSettlementService.compute_balance(
            total, total_commission, manual.amount if manual else None
        ))
        return result

    @staticmethod
    def get_ocl_charge(month, year) -> MedicineOclCharge:
        """Stored OCL charge of the month, or an unsaved zero charge."""
        month, year = validate_month_year(month, year)
        charge = MedicineOclCharge.objects.filter(month=month, year=year).first()
        return charge or MedicineOclCharge(month=month, year=year, amount=ZERO)

    @staticmethod
    def set_ocl_charge(month, year, amount, note: str = "", user=None) -> MedicineOclCharge:
        """
        Create or replace the OCL charge of the month.

        Raises:
            ValidationException: If month/year are out of range or the amount
                is negative or not a number
        """
        month, year = validate_month_year(month, year)
        try:
            amount = money(amount)
        except (InvalidOperation, ValueError, TypeError):
            raise ValidationException("Amount must be a number", {"amount": amount})
        if amount < 0:
            raise ValidationException("Amount cannot be negative", {"amount": str(amount)})

        charge, _ = MedicineOclCharge.objects.update_or_create(
            month=month,
            year=year,
            defaults={'amount': amount, 'note': note or ""},
        )
        logger.info(f"OCL charge for {month}/{year} set to {amount} by {getattr(user, 'username', 'system')}")
        return charge
