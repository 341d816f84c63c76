"""
Tests for freight billing arithmetic.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from django.test import SimpleTestCase, override_settings
from django.utils import timezone

from bookings.models import FreightShipment
from ..services.billing import BillingCalculator, money


def shipment(freight, nature='NON-DOX', weight='2.5'):
    return FreightShipment(
        id=uuid.uuid4(),
        consignment_number=870001,
        booking_reference='BK-870001',
        booking_date=timezone.make_aware(datetime(2025, 3, 31, 23, 30)),
        booking_data={
            'originData': {'city': 'Guwahati'},
            'destinationData': {'city': 'Shillong'},
            'shipmentData': {'natureOfConsignment': nature, 'actualWeight': weight},
        },
        freight_charges=Decimal(freight),
    )


class TaxComputationTest(SimpleTestCase):

    def test_intra_state_splits_cgst_and_sgst(self):
        taxes = BillingCalculator.compute_taxes(Decimal('1000'), Decimal('1050'), 'Assam')

        self.assertEqual(taxes['fuel_charge'], Decimal('100.00'))
        self.assertEqual(taxes['subtotal_after_fuel'], Decimal('1150.00'))
        self.assertEqual(taxes['cgst'], Decimal('103.50'))
        self.assertEqual(taxes['sgst'], Decimal('103.50'))
        self.assertEqual(taxes['igst'], Decimal('0.00'))
        self.assertEqual(taxes['grand_total'], Decimal('1357.00'))
        self.assertTrue(taxes['is_intra_state'])

    def test_inter_state_charges_igst_only(self):
        taxes = BillingCalculator.compute_taxes(Decimal('1000'), Decimal('1050'), 'Maharashtra')

        self.assertEqual(taxes['cgst'], Decimal('0.00'))
        self.assertEqual(taxes['sgst'], Decimal('0.00'))
        self.assertEqual(taxes['igst'], Decimal('207.00'))
        self.assertEqual(taxes['grand_total'], Decimal('1357.00'))
        self.assertFalse(taxes['is_intra_state'])

    def test_state_match_ignores_case_and_whitespace(self):
        self.assertTrue(BillingCalculator.is_intra_state('  assam '))
        self.assertFalse(BillingCalculator.is_intra_state(''))
        self.assertFalse(BillingCalculator.is_intra_state(None))

    def test_grand_total_identity_holds_with_rounding(self):
        for state in ('Assam', 'West Bengal'):
            taxes = BillingCalculator.compute_taxes(Decimal('333.33'), Decimal('433.33'), state)
            self.assertEqual(
                taxes['grand_total'],
                taxes['subtotal_after_fuel'] + taxes['cgst'] + taxes['sgst'] + taxes['igst']
            )
            self.assertEqual(taxes['gst_amount'], taxes['cgst'] + taxes['sgst'] + taxes['igst'])
            # Only one of the two tax regimes is ever charged
            self.assertTrue(taxes['igst'] == 0 or taxes['cgst'] + taxes['sgst'] == 0)

    @override_settings(OCL_BILLING={'BILLER_STATE': 'Meghalaya'})
    def test_biller_state_is_configurable(self):
        self.assertTrue(BillingCalculator.is_intra_state('Meghalaya'))
        self.assertFalse(BillingCalculator.is_intra_state('Assam'))


class BillLineTest(SimpleTestCase):

    def test_bill_line_adds_awb_charge(self):
        line = BillingCalculator.bill_line(shipment('1000'))

        self.assertEqual(line['freight_charges'], Decimal('1000.00'))
        self.assertEqual(line['awb_charge'], Decimal('50.00'))
        self.assertEqual(line['total'], Decimal('1050.00'))
        self.assertEqual(line['origin'], 'Guwahati')
        self.assertEqual(line['destination'], 'Shillong')
        self.assertEqual(line['service_type'], 'NON-DOX')
        self.assertEqual(line['weight'], Decimal('2.5'))

    def test_booking_date_is_local(self):
        line = BillingCalculator.bill_line(shipment('10'))
        self.assertEqual(str(line['booking_date']), '2025-03-31')

    def test_summary_of_one_line_matches_worked_example(self):
        lines = [BillingCalculator.bill_line(shipment('1000'))]
        summary = BillingCalculator.summarize(lines, 'Assam')

        self.assertEqual(summary['total_bills'], 1)
        self.assertEqual(summary['total_freight'], Decimal('1000.00'))
        self.assertEqual(summary['awb_total'], Decimal('50.00'))
        self.assertEqual(summary['total_amount'], Decimal('1050.00'))
        self.assertEqual(summary['grand_total'], Decimal('1357.00'))

    def test_empty_summary_is_zero(self):
        summary = BillingCalculator.summarize([], 'Assam')

        self.assertEqual(summary['total_bills'], 0)
        for key in ('total_freight', 'awb_total', 'total_amount', 'fuel_charge',
                    'subtotal_after_fuel', 'cgst', 'sgst', 'igst', 'grand_total'):
            self.assertEqual(summary[key], Decimal('0'), key)

    def test_money_rounds_half_up(self):
        self.assertEqual(money('2.345'), Decimal('2.35'))
        self.assertEqual(money(None), Decimal('0.00'))
