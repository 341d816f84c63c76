"""
Freight billing arithmetic.

Per consignment: ``total = freight + AWB charge``. Per period:

* ``fuel_charge = total_freight x FUEL_CHARGE_RATE``
* ``subtotal_after_fuel = total_amount + fuel_charge``
* same state as the biller: CGST and SGST on ``subtotal_after_fuel``;
  any other state: IGST
* ``grand_total = subtotal_after_fuel + cgst + sgst + igst``

All amounts are ``Decimal`` rounded half-up to paise.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from django.utils import timezone

from ..conf import billing_setting

PAISE = Decimal('0.01')
ZERO = Decimal('0.00')


def money(value) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value or 0))
    return value.quantize(PAISE, rounding=ROUND_HALF_UP)


class BillingCalculator:
    """Pure billing computations over freight shipments."""

    @staticmethod
    def is_intra_state(entity_state: str) -> bool:
        biller_state = billing_setting('BILLER_STATE')
        return (entity_state or '').strip().lower() == biller_state.strip().lower()

    @staticmethod
    def bill_line(shipment) -> Dict[str, Any]:
        """Bill line item for one freight shipment."""
        freight = money(shipment.freight_charges)
        awb = money(billing_setting('AWB_CHARGE'))
        return {
            'shipment_id': str(shipment.id),
            'consignment_number': shipment.consignment_number,
            'booking_reference': shipment.booking_reference,
            'booking_date': timezone.localdate(shipment.booking_date),
            'origin': shipment.origin_city,
            'destination': shipment.destination_city,
            'service_type': shipment.service_type,
            'weight': shipment.weight,
            'freight_charges': freight,
            'awb_charge': awb,
            'total': freight + awb,
        }

    @staticmethod
    def compute_taxes(total_freight, total_amount, entity_state: str) -> Dict[str, Any]:
        """
        Fuel surcharge, GST split and grand total for a period.

        Args:
            total_freight: Sum of freight charges
            total_amount: Sum of freight plus AWB charges, before fuel
            entity_state: Registered state of the billing entity
        """
        fuel_charge = money(money(total_freight) * billing_setting('FUEL_CHARGE_RATE'))
        subtotal_after_fuel = money(total_amount) + fuel_charge

        intra_state = BillingCalculator.is_intra_state(entity_state)
        if intra_state:
            cgst = money(subtotal_after_fuel * billing_setting('CGST_RATE'))
            sgst = money(subtotal_after_fuel * billing_setting('SGST_RATE'))
            igst = ZERO
        else:
            cgst = sgst = ZERO
            igst = money(subtotal_after_fuel * billing_setting('IGST_RATE'))

        return {
            'fuel_charge': fuel_charge,
            'subtotal_after_fuel': subtotal_after_fuel,
            'cgst': cgst,
            'sgst': sgst,
            'igst': igst,
            'gst_amount': cgst + sgst + igst,
            'grand_total': subtotal_after_fuel + cgst + sgst + igst,
            'is_intra_state': intra_state,
        }

    @staticmethod
    def summarize(lines: Iterable[Dict[str, Any]], entity_state: str) -> Dict[str, Any]:
        """Period totals of bill lines, including taxes."""
        lines: List[Dict[str, Any]] = list(lines)
        total_freight = sum((line['freight_charges'] for line in lines), ZERO)
        awb_total = sum((line['awb_charge'] for line in lines), ZERO)
        total_amount = sum((line['total'] for line in lines), ZERO)
        total_weight = sum((line['weight'] for line in lines), Decimal('0'))

        summary = {
            'total_bills': len(lines),
            'total_freight': total_freight,
            'awb_total': awb_total,
            'total_amount': total_amount,
            'total_weight': total_weight,
        }
        summary.update(BillingCalculator.compute_taxes(total_freight, total_amount, entity_state))
        return summary
