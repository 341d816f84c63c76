"""
Tests for medicine settlements and the OCL charge.
"""

from datetime import datetime
from decimal import Decimal
from unittest import mock
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from courier_assignment.tests.fixtures import make_admin, make_operator, make_medicine_booking
from ..exceptions import AggregationFailure, ValidationException
from ..models import MedicineSettlement, MedicineOclCharge, PaidBy
from ..services import MedicineSettlementService


def created_on(*args):
    return timezone.make_aware(datetime(*args))


class BalanceTest(SimpleTestCase):

    def test_auto_ocl_charge(self):
        balance = MedicineSettlementService.compute_balance(Decimal('5000'), Decimal('800'))

        self.assertEqual(balance['ocl_charge'], Decimal('4200.00'))
        self.assertEqual(balance['remaining_balance'], Decimal('800.00'))

    def test_manual_charge_wins(self):
        balance = MedicineSettlementService.compute_balance(Decimal('5000'), Decimal('800'), Decimal('3000'))

        self.assertEqual(balance['auto_ocl_charge'], Decimal('4200.00'))
        self.assertEqual(balance['ocl_charge'], Decimal('3000.00'))
        self.assertEqual(balance['remaining_balance'], Decimal('2000.00'))

    def test_zero_manual_charge_falls_back(self):
        balance = MedicineSettlementService.compute_balance(Decimal('5000'), Decimal('800'), Decimal('0'))
        self.assertEqual(balance['ocl_charge'], Decimal('4200.00'))


class MonthlySettlementTest(TestCase):

    def setUp(self):
        self.operator = make_operator()
        self.sender_paid = make_medicine_booking(
            self.operator, grand_total='600', created_at=created_on(2025, 3, 5, 10)
        )
        self.receiver_paid = make_medicine_booking(
            self.operator,
            grand_total='400',
            shipment={'chargeableWeight': '0', 'actualWeight': '2'},
            billing={'partyType': 'recipient'},
            created_at=created_on(2025, 3, 20, 10),
        )

    def test_sync_creates_one_record_per_booking(self):
        records = MedicineSettlementService.sync_month(self.operator, 3, 2025)

        self.assertEqual(len(records), 2)
        self.assertEqual(records[0].booking, self.receiver_paid)
        self.assertEqual(records[0].paid_by, PaidBy.RECEIVER)
        self.assertFalse(records[0].is_paid)
        self.assertEqual(records[0].weight, Decimal('2'))
        self.assertEqual(records[1].paid_by, PaidBy.SENDER)
        self.assertTrue(records[1].is_paid)
        self.assertEqual(records[1].cost, Decimal('600.00'))
        self.assertEqual(records[1].commission, Decimal('30.00'))

    def test_sync_is_idempotent(self):
        MedicineSettlementService.sync_month(self.operator, 3, 2025)
        MedicineSettlementService.sync_month(self.operator, 3, 2025)

        self.assertEqual(MedicineSettlement.objects.count(), 2)

    def test_unnumbered_and_other_month_bookings_skipped(self):
        make_medicine_booking(self.operator, consignment_number=None, created_at=created_on(2025, 3, 6, 10))
        make_medicine_booking(self.operator, created_at=created_on(2025, 4, 1, 0, 5))
        make_medicine_booking(make_operator('Other Pharma'), created_at=created_on(2025, 3, 7, 10))

        records = MedicineSettlementService.sync_month(self.operator, 3, 2025)

        self.assertEqual({r.booking_id for r in records}, {self.sender_paid.id, self.receiver_paid.id})

    def test_summary(self):
        summary = MedicineSettlementService.summary(self.operator, 3, 2025)

        self.assertEqual(summary['total'], Decimal('1000.00'))
        self.assertEqual(summary['total_commission'], Decimal('50.00'))
        self.assertEqual(summary['total_transactions'], 2)
        self.assertIsNone(summary['manual_ocl_charge'])
        self.assertEqual(summary['ocl_charge'], Decimal('950.00'))
        self.assertEqual(summary['remaining_balance'], Decimal('50.00'))

    def test_summary_uses_manual_charge(self):
        MedicineSettlementService.set_ocl_charge(3, 2025, '900', 'agreed rate', make_admin())

        summary = MedicineSettlementService.summary(self.operator, 3, 2025)

        self.assertEqual(summary['manual_ocl_charge'], Decimal('900.00'))
        self.assertEqual(summary['ocl_charge'], Decimal('900.00'))
        self.assertEqual(summary['remaining_balance'], Decimal('100.00'))

    def test_invalid_month(self):
        with self.assertRaises(ValidationException):
            MedicineSettlementService.summary(self.operator, 0, 2025)
        with self.assertRaises(ValidationException):
            MedicineSettlementService.summary(self.operator, 3, 1999)
        self.assertEqual(MedicineSettlement.objects.count(), 0)

    def test_grand_total_with_thousands_separator(self):
        booking = make_medicine_booking(self.operator, grand_total='1,200', created_at=created_on(2025, 3, 8, 10))

        records = MedicineSettlementService.sync_month(self.operator, 3, 2025)

        record = next(r for r in records if r.booking_id == booking.id)
        self.assertEqual(record.cost, Decimal('1200.00'))

    def test_unreadable_grand_total_names_the_booking(self):
        booking = make_medicine_booking(self.operator, grand_total='twelve hundred',
                                        created_at=created_on(2025, 3, 8, 10))

        with self.assertRaises(ValidationException) as ctx:
            MedicineSettlementService.sync_month(self.operator, 3, 2025)

        self.assertEqual(ctx.exception.details['booking_reference'], booking.booking_reference)
        self.assertEqual(MedicineSettlement.objects.count(), 0)

    def test_write_failure_is_retryable(self):
        with mock.patch.object(MedicineSettlement.objects, 'bulk_create', side_effect=DatabaseError("locked")):
            with self.assertRaises(AggregationFailure):
                MedicineSettlementService.sync_month(self.operator, 3, 2025)


class OclChargeTest(TestCase):

    def test_unset_month_reads_zero(self):
        charge = MedicineSettlementService.get_ocl_charge(3, 2025)

        self.assertTrue(charge._state.adding)
        self.assertEqual(charge.amount, Decimal('0.00'))

    def test_set_replaces_existing(self):
        MedicineSettlementService.set_ocl_charge(3, 2025, '900')
        MedicineSettlementService.set_ocl_charge(3, 2025, '750.5', 'revised')

        charge = MedicineSettlementService.get_ocl_charge(3, 2025)
        self.assertEqual(charge.amount, Decimal('750.50'))
        self.assertEqual(charge.note, 'revised')
        self.assertEqual(MedicineOclCharge.objects.count(), 1)

    def test_negative_amount_rejected(self):
        with self.assertRaises(ValidationException):
            MedicineSettlementService.set_ocl_charge(3, 2025, '-1')

    def test_non_numeric_amount_rejected(self):
        with self.assertRaises(ValidationException):
            MedicineSettlementService.set_ocl_charge(3, 2025, 'lots')
