"""
Invoice Service for corporate invoicing.

Issues numbered invoices for selected unpaid consignments and records
their payment.
"""

import logging
from datetime import timedelta
from decimal import ROUND_FLOOR
from typing import Any, Dict, List, Optional
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Sum
from django.utils import timezone

from bookings.models import FreightShipment, PaymentType, PaymentStatus, ShipmentStatus
from ..conf import billing_setting
from ..models import Invoice, InvoiceLine, InvoiceStatus, PaymentMethod
from ..exceptions import (
    ValidationException, NotFoundException, DuplicateInvoiceException, InvoiceStateException,
    AggregationFailure
)
from .amount_words import amount_in_words
from .billing import BillingCalculator, ZERO

logger = logging.getLogger(__name__)


class InvoiceService:
    """Service class for invoice operations."""

    @staticmethod
    def next_invoice_number(invoice_date) -> str:
        """Next ``YYYY-MM/NNN`` number for the invoice date's month."""
        prefix = f"{invoice_date:%Y-%m}/"
        numbers = Invoice.objects.filter(invoice_number__startswith=prefix).values_list('invoice_number', flat=True)
        last = max((int(number.split('/')[1]) for number in numbers), default=0)
        return f"{prefix}{last + 1:03d}"

    @staticmethod
    def generate_invoice(corporate, shipment_ids: List[str], created_by,
                         start_date=None, end_date=None, invoice_date=None, remarks: str = "") -> Invoice:
        """
        Invoice selected consignments of a corporate.

        The period defaults to the booking dates of the first and last
        consignment. Billed consignments move to ``invoiced``.

        Raises:
            ValidationException: If no consignments are selected or any of them
                is not an unpaid FP consignment of the corporate
            NotFoundException: If a consignment does not exist
            DuplicateInvoiceException: If the period is already invoiced
            AggregationFailure: If no invoice number can be allocated
        """
        if not shipment_ids:
            raise ValidationException("Select at least one consignment to invoice", {"shipment_ids": "empty"})

        invoice_date = invoice_date or timezone.localdate()

        with transaction.atomic():
            try:
                shipments = list(
                    FreightShipment.objects.select_for_update()
                    .filter(id__in=shipment_ids)
                    .order_by('booking_date', 'consignment_number')
                )
            except (ValueError, DjangoValidationError):
                raise ValidationException("Malformed consignment identifier", {"shipment_ids": shipment_ids})

            found = {str(shipment.id) for shipment in shipments}
            missing = [str(pk) for pk in shipment_ids if str(pk) not in found]
            if missing:
                raise NotFoundException("FreightShipment", ', '.join(missing))

            not_billable = [
                shipment.consignment_number for shipment in shipments
                if shipment.corporate_id != corporate.id
                or shipment.payment_type != PaymentType.FP
                or shipment.status != ShipmentStatus.ACTIVE
                or shipment.payment_status != PaymentStatus.UNPAID
            ]
            if not_billable:
                raise ValidationException(
                    "Only unpaid freight-paid consignments of the corporate can be invoiced",
                    {"consignment_numbers": not_billable}
                )

            lines = [BillingCalculator.bill_line(shipment) for shipment in shipments]
            period_start = start_date or lines[0]['booking_date']
            period_end = end_date or lines[-1]['booking_date']
            if period_start > period_end:
                raise ValidationException(
                    "Start date must not be after end date",
                    {"start_date": str(period_start), "end_date": str(period_end)}
                )

            existing = Invoice.objects.filter(
                corporate=corporate, period_start=period_start, period_end=period_end
            ).first()
            if existing is not None:
                raise DuplicateInvoiceException(corporate.corporate_code, period_start, period_end,
                                                existing.invoice_number)

            summary = BillingCalculator.summarize(lines, corporate.state)
            invoice = InvoiceService._create_numbered(
                invoice_date,
                corporate=corporate,
                company_name=corporate.company_name,
                company_address=corporate.company_address,
                gst_number=corporate.gst_number,
                state=corporate.state,
                contact_number=corporate.contact_number,
                email=corporate.email,
                period_start=period_start,
                period_end=period_end,
                invoice_date=invoice_date,
                due_date=invoice_date + timedelta(days=billing_setting('INVOICE_DUE_DAYS')),
                total_freight=summary['total_freight'],
                awb_total=summary['awb_total'],
                subtotal=summary['total_amount'],
                fuel_charge=summary['fuel_charge'],
                subtotal_after_fuel=summary['subtotal_after_fuel'],
                cgst=summary['cgst'],
                sgst=summary['sgst'],
                igst=summary['igst'],
                grand_total=summary['grand_total'],
                amount_in_words=amount_in_words(
                    summary['grand_total'].to_integral_value(rounding=ROUND_FLOOR)
                ),
                remarks=remarks,
                terms=list(billing_setting('INVOICE_TERMS')),
                created_by=created_by,
            )

            InvoiceLine.objects.bulk_create([
                InvoiceLine(
                    invoice=invoice,
                    shipment_id=line['shipment_id'],
                    consignment_number=line['consignment_number'],
                    booking_date=line['booking_date'],
                    origin=line['origin'],
                    destination=line['destination'],
                    service_type=line['service_type'],
                    weight=line['weight'],
                    freight_charges=line['freight_charges'],
                    awb_charge=line['awb_charge'],
                    total=line['total'],
                )
                for line in lines
            ])

            FreightShipment.objects.filter(id__in=[s.id for s in shipments]).update(
                payment_status=PaymentStatus.INVOICED,
                invoice=invoice,
            )

        logger.info(
            f"Invoice {invoice.invoice_number} generated for {corporate.corporate_code}: "
            f"{len(lines)} consignments, grand total {invoice.grand_total}"
        )
        return invoice

    @staticmethod
    def mark_paid(invoice_id: str, payment_method: str, payment_reference: str, user) -> Invoice:
        """
        Record payment of an invoice; its consignments move to ``paid``.

        Raises:
            NotFoundException: If the invoice does not exist
            ValidationException: If the payment method is unknown
            InvoiceStateException: If the invoice is already paid
        """
        if payment_method not in PaymentMethod.values:
            raise ValidationException(
                f"Unknown payment method '{payment_method}'",
                {"payment_method": f"must be one of {', '.join(PaymentMethod.values)}"}
            )

        with transaction.atomic():
            try:
                invoice = Invoice.objects.select_for_update().get(id=invoice_id)
            except (Invoice.DoesNotExist, ValueError, DjangoValidationError):
                raise NotFoundException("Invoice", invoice_id)

            if invoice.status == InvoiceStatus.PAID:
                raise InvoiceStateException(invoice.invoice_number, invoice.status)

            invoice.status = InvoiceStatus.PAID
            invoice.payment_date = timezone.now()
            invoice.payment_method = payment_method
            invoice.payment_reference = payment_reference or ""
            invoice.last_modified_by = user
            invoice.save()

            invoice.billed_shipments.update(payment_status=PaymentStatus.PAID)

        logger.info(f"Invoice {invoice.invoice_number} marked paid via {payment_method}")
        return invoice

    @staticmethod
    def invoice_summary(corporate) -> Dict[str, Any]:
        """Counts and amounts of the corporate's invoices by payment state."""
        invoices = Invoice.objects.filter(corporate=corporate)
        today = timezone.localdate()
        overdue = invoices.overdue(today)
        unpaid = invoices.outstanding().exclude(due_date__lt=today)
        paid = invoices.filter(status=InvoiceStatus.PAID)

        def total(queryset):
            return queryset.aggregate(total=Sum('grand_total'))['total'] or ZERO

        return {
            'total_invoices': invoices.count(),
            'unpaid_invoices': unpaid.count(),
            'overdue_invoices': overdue.count(),
            'paid_invoices': paid.count(),
            'total_amount': total(invoices),
            'unpaid_amount': total(unpaid),
            'overdue_amount': total(overdue),
            'paid_amount': total(paid),
        }

    @staticmethod
    def list_invoices(corporate=None, status: Optional[str] = None):
        """Invoices, newest first, optionally by corporate and displayed status."""
        queryset = Invoice.objects.select_related('corporate')
        if corporate is not None:
            queryset = queryset.filter(corporate=corporate)
        if status == InvoiceStatus.OVERDUE:
            queryset = queryset.overdue()
        elif status == InvoiceStatus.UNPAID:
            queryset = queryset.outstanding().exclude(due_date__lt=timezone.localdate())
        elif status:
            queryset = queryset.filter(status=status)
        return queryset

    # Helpers

    @staticmethod
    def _create_numbered(invoice_date, /, **fields) -> Invoice:
        """
        Create the invoice under the next free number of its month.

        A concurrent request can take the same number or period first; the
        period clash is reported as a duplicate and a number clash is retried
        once with a fresh number.
        """
        for attempt in range(2):
            number = InvoiceService.next_invoice_number(invoice_date)
            try:
                with transaction.atomic():
                    return Invoice.objects.create(invoice_number=number, **fields)
            except IntegrityError:
                existing = Invoice.objects.filter(
                    corporate=fields['corporate'],
                    period_start=fields['period_start'],
                    period_end=fields['period_end'],
                ).first()
                if existing is not None:
                    raise DuplicateInvoiceException(
                        fields['corporate'].corporate_code, fields['period_start'],
                        fields['period_end'], existing.invoice_number
                    )
                logger.warning(f"Invoice number {number} taken concurrently (attempt {attempt + 1})")
        raise AggregationFailure(
            "Invoice number could not be allocated, please retry",
            {"invoice_date": str(invoice_date)}
        )
