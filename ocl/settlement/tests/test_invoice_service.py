"""
Tests for invoice generation and payment.
"""

import uuid
from unittest import mock
from datetime import date, datetime, timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone

from bookings.models import PaymentStatus, PaymentType
from courier_assignment.tests.fixtures import make_admin, make_corporate, make_shipment
from ..exceptions import (
    ValidationException, NotFoundException, DuplicateInvoiceException, InvoiceStateException,
    AggregationFailure
)
from ..models import Invoice, InvoiceStatus, PaymentMethod
from ..services import InvoiceService


def booked_on(*args):
    return timezone.make_aware(datetime(*args))


class InvoiceServiceTestCase(TestCase):

    def setUp(self):
        self.admin = make_admin()
        self.corporate = make_corporate()
        self.first = make_shipment(self.corporate, freight='1000.00', booking_date=booked_on(2025, 3, 10, 12))
        self.second = make_shipment(self.corporate, freight='500.00', booking_date=booked_on(2025, 3, 12, 12))

    def generate(self, shipments, **kwargs):
        kwargs.setdefault('invoice_date', date(2025, 4, 2))
        return InvoiceService.generate_invoice(
            self.corporate, [str(s.id) for s in shipments], self.admin, **kwargs
        )


class GenerateInvoiceTest(InvoiceServiceTestCase):

    def test_invoice_totals_and_lines(self):
        invoice = self.generate([self.first])

        self.assertEqual(invoice.invoice_number, '2025-04/001')
        self.assertEqual(invoice.grand_total, Decimal('1357.00'))
        self.assertEqual(invoice.cgst, Decimal('103.50'))
        self.assertEqual(invoice.amount_in_words, 'One Thousand Three Hundred Fifty Seven Rupees Only')
        self.assertEqual(invoice.due_date, date(2025, 5, 2))
        self.assertEqual(invoice.lines.count(), 1)
        self.assertTrue(invoice.terms)

    def test_period_defaults_to_booking_dates(self):
        invoice = self.generate([self.second, self.first])

        self.assertEqual(invoice.period_start, date(2025, 3, 10))
        self.assertEqual(invoice.period_end, date(2025, 3, 12))
        self.assertEqual(
            list(invoice.lines.order_by('booking_date').values_list('consignment_number', flat=True)),
            [self.first.consignment_number, self.second.consignment_number]
        )

    def test_numbers_run_per_month(self):
        self.generate([self.first], start_date=date(2025, 3, 1), end_date=date(2025, 3, 10))
        invoice = self.generate([self.second], start_date=date(2025, 3, 11), end_date=date(2025, 3, 31))

        self.assertEqual(invoice.invoice_number, '2025-04/002')
        self.assertEqual(InvoiceService.next_invoice_number(date(2025, 5, 1)), '2025-05/001')

    def test_billed_consignments_move_to_invoiced(self):
        invoice = self.generate([self.first])

        self.first.refresh_from_db()
        self.second.refresh_from_db()
        self.assertEqual(self.first.payment_status, PaymentStatus.INVOICED)
        self.assertEqual(self.first.invoice, invoice)
        self.assertEqual(self.second.payment_status, PaymentStatus.UNPAID)

    def test_same_period_twice_conflicts(self):
        period = {'start_date': date(2025, 3, 1), 'end_date': date(2025, 3, 31)}
        existing = self.generate([self.first], **period)

        with self.assertRaises(DuplicateInvoiceException) as ctx:
            self.generate([self.second], **period)

        self.assertEqual(ctx.exception.http_status, 409)
        self.assertEqual(ctx.exception.details['invoice_number'], existing.invoice_number)
        self.second.refresh_from_db()
        self.assertEqual(self.second.payment_status, PaymentStatus.UNPAID)

    def test_already_invoiced_consignment_rejected(self):
        self.generate([self.first])

        with self.assertRaises(ValidationException):
            self.generate([self.first], start_date=date(2025, 3, 1), end_date=date(2025, 3, 31))

    def test_to_pay_consignment_rejected(self):
        to_pay = make_shipment(self.corporate, payment_type=PaymentType.TP)

        with self.assertRaises(ValidationException) as ctx:
            self.generate([to_pay])
        self.assertEqual(ctx.exception.details['consignment_numbers'], [to_pay.consignment_number])

    def test_foreign_consignment_rejected(self):
        other = make_shipment(make_corporate(code='B00002', name='Other Co'))

        with self.assertRaises(ValidationException):
            self.generate([self.first, other])
        self.assertEqual(Invoice.objects.count(), 0)

    def test_unknown_consignment(self):
        with self.assertRaises(NotFoundException):
            InvoiceService.generate_invoice(self.corporate, [str(uuid.uuid4())], self.admin)

    def test_empty_selection(self):
        with self.assertRaises(ValidationException):
            InvoiceService.generate_invoice(self.corporate, [], self.admin)


class PaymentTest(InvoiceServiceTestCase):

    def test_mark_paid(self):
        invoice = self.generate([self.first, self.second])

        paid = InvoiceService.mark_paid(str(invoice.id), PaymentMethod.BANK_TRANSFER, 'UTR123', self.admin)

        self.assertEqual(paid.status, InvoiceStatus.PAID)
        self.assertIsNotNone(paid.payment_date)
        self.assertEqual(paid.last_modified_by, self.admin)
        self.first.refresh_from_db()
        self.assertEqual(self.first.payment_status, PaymentStatus.PAID)

    def test_paying_twice_rejected(self):
        invoice = self.generate([self.first])
        InvoiceService.mark_paid(str(invoice.id), PaymentMethod.CASH, '', self.admin)

        with self.assertRaises(InvoiceStateException):
            InvoiceService.mark_paid(str(invoice.id), PaymentMethod.CASH, '', self.admin)

    def test_unknown_payment_method(self):
        invoice = self.generate([self.first])

        with self.assertRaises(ValidationException):
            InvoiceService.mark_paid(str(invoice.id), 'barter', '', self.admin)

    def test_unknown_invoice(self):
        with self.assertRaises(NotFoundException):
            InvoiceService.mark_paid('not-a-uuid', PaymentMethod.CASH, '', self.admin)


class OverdueTest(InvoiceServiceTestCase):

    def test_past_due_invoice_reads_overdue(self):
        issued = timezone.localdate() - timedelta(days=40)
        invoice = self.generate([self.first], invoice_date=issued)

        self.assertEqual(invoice.display_status, InvoiceStatus.OVERDUE)
        self.assertEqual(invoice.days_overdue, 10)
        self.assertEqual(list(InvoiceService.list_invoices(self.corporate, InvoiceStatus.OVERDUE)), [invoice])
        self.assertEqual(list(InvoiceService.list_invoices(self.corporate, InvoiceStatus.UNPAID)), [])

    def test_summary_counts(self):
        overdue = self.generate([self.first], invoice_date=timezone.localdate() - timedelta(days=40))
        current = self.generate([self.second], invoice_date=timezone.localdate())
        InvoiceService.mark_paid(str(current.id), PaymentMethod.CHEQUE, 'CHQ-1', self.admin)

        summary = InvoiceService.invoice_summary(self.corporate)

        self.assertEqual(summary['total_invoices'], 2)
        self.assertEqual(summary['overdue_invoices'], 1)
        self.assertEqual(summary['unpaid_invoices'], 0)
        self.assertEqual(summary['paid_invoices'], 1)
        self.assertEqual(summary['unpaid_amount'], Decimal('0'))
        self.assertEqual(summary['overdue_amount'], overdue.grand_total)
        self.assertEqual(summary['paid_amount'], current.grand_total)

    def test_unpaid_amount_matches_unpaid_count(self):
        overdue = self.generate([self.first], invoice_date=timezone.localdate() - timedelta(days=40))
        current = self.generate([self.second], invoice_date=timezone.localdate())

        summary = InvoiceService.invoice_summary(self.corporate)

        self.assertEqual(summary['unpaid_invoices'], 1)
        self.assertEqual(summary['unpaid_amount'], current.grand_total)
        self.assertEqual(summary['overdue_invoices'], 1)
        self.assertEqual(summary['overdue_amount'], overdue.grand_total)
        self.assertEqual(summary['unpaid_amount'] + summary['overdue_amount'], summary['total_amount'])


class InvoiceNumberClashTest(InvoiceServiceTestCase):

    def test_taken_number_is_retried_with_the_next(self):
        self.generate([self.first])

        with mock.patch.object(InvoiceService, 'next_invoice_number',
                               side_effect=['2025-04/001', '2025-04/002']):
            invoice = self.generate([self.second])

        self.assertEqual(invoice.invoice_number, '2025-04/002')
        self.assertEqual(Invoice.objects.count(), 2)

    def test_number_that_stays_taken_is_retryable_failure(self):
        self.generate([self.first])

        with mock.patch.object(InvoiceService, 'next_invoice_number', return_value='2025-04/001'):
            with self.assertRaises(AggregationFailure) as ctx:
                self.generate([self.second])

        self.assertTrue(ctx.exception.details['retryable'])
        self.assertEqual(Invoice.objects.count(), 1)
