"""
Corporate Settlement Service.

Aggregates a corporate client's unpaid freight-paid consignments for a
period into bill lines and totals.
"""

import logging
from typing import Any, Dict
from django.db import DatabaseError

from bookings.models import FreightShipment, PaymentType, PaymentStatus, ShipmentStatus
from ..exceptions import AggregationFailure, ValidationException
from .billing import BillingCalculator
from .periods import datetime_range, month_bounds

logger = logging.getLogger(__name__)


class CorporateSettlementService:
    """Service class for corporate settlement queries."""

    @staticmethod
    def unpaid_shipments(corporate, start_date=None, end_date=None):
        """
        Unpaid FP consignments of ``corporate`` booked within the inclusive
        date range, oldest first.
        """
        start, end = datetime_range(start_date, end_date)
        queryset = FreightShipment.objects.select_related('corporate').filter(
            corporate=corporate,
            payment_type=PaymentType.FP,
            status=ShipmentStatus.ACTIVE,
            payment_status=PaymentStatus.UNPAID,
        )
        if start is not None:
            queryset = queryset.filter(booking_date__gte=start)
        if end is not None:
            queryset = queryset.filter(booking_date__lt=end)
        return queryset.order_by('booking_date', 'consignment_number')

    @staticmethod
    def unpaid_bills(corporate, start_date=None, end_date=None, month=None, year=None) -> Dict[str, Any]:
        """
        Bill lines and summary of the corporate's unpaid consignments.

        The period is either an inclusive ``start_date``/``end_date`` range
        (each side optional) or a ``month``/``year`` pair. No matching
        consignments give an empty line list and an all-zero summary.

        Raises:
            ValidationException: If the period is malformed
            AggregationFailure: If the shipments cannot be read
        """
        if month is not None or year is not None:
            if start_date or end_date:
                raise ValidationException(
                    "Give either a date range or a month and year, not both",
                    {"month": month, "year": year}
                )
            start_date, end_date = month_bounds(month, year)

        queryset = CorporateSettlementService.unpaid_shipments(corporate, start_date, end_date)
        try:
            shipments = list(queryset)
        except DatabaseError as e:
            logger.exception(f"Failed to load unpaid shipments for corporate {corporate.corporate_code}")
            raise AggregationFailure(details={"corporate_code": corporate.corporate_code}) from e

        lines = [BillingCalculator.bill_line(shipment) for shipment in shipments]
        return {
            'period': {'start_date': start_date, 'end_date': end_date},
            'bills': lines,
            'summary': BillingCalculator.summarize(lines, corporate.state),
        }
