"""
Consolidated invoice rendering.

Turns an unpaid-bills aggregation and the billing entity's display fields
into an invoice structure, and that structure into HTML for download.
"""

from decimal import ROUND_FLOOR
from typing import Any, Dict, Optional
from django.template.loader import render_to_string
from django.utils import timezone

from ..conf import billing_setting, biller_details
from .amount_words import amount_in_words
from .periods import current_month_bounds


class InvoiceRenderer:
    """Builds the consolidated (unpersisted) invoice representation."""

    TEMPLATE = 'settlement/consolidated_invoice.html'

    @staticmethod
    def invoice_number(invoice_date) -> str:
        return f"INV-{invoice_date:%Y-%m-%d}"

    @staticmethod
    def render(aggregation: Dict[str, Any], entity, invoice_date=None,
               invoice_period: Optional[tuple] = None) -> Dict[str, Any]:
        """
        Args:
            aggregation: Output of ``CorporateSettlementService.unpaid_bills``
            entity: Billing entity (corporate client)
            invoice_date: Defaults to today
            invoice_period: ``(start, end)``; an open side defaults to the
                invoice date's month
        """
        invoice_date = invoice_date or timezone.localdate()
        month_start, month_end = current_month_bounds(invoice_date)
        period_start, period_end = invoice_period or (None, None)
        period_start = period_start or month_start
        period_end = period_end or month_end

        summary = dict(aggregation['summary'])
        summary['amount_in_words'] = amount_in_words(
            summary['grand_total'].to_integral_value(rounding=ROUND_FLOOR)
        )

        items = [
            dict(line, sr_no=index)
            for index, line in enumerate(aggregation['bills'], 1)
        ]

        return {
            'invoice_number': InvoiceRenderer.invoice_number(invoice_date),
            'invoice_date': invoice_date,
            'invoice_period': {'start_date': period_start, 'end_date': period_end},
            'biller': biller_details(),
            'bill_to': {
                'name': entity.company_name,
                'code': getattr(entity, 'corporate_code', ''),
                'address': getattr(entity, 'company_address', ''),
                'gst_number': getattr(entity, 'gst_number', ''),
                'state': entity.state,
                'contact_number': getattr(entity, 'contact_number', ''),
                'email': getattr(entity, 'email', ''),
            },
            'items': items,
            'summary': summary,
            'terms': list(billing_setting('INVOICE_TERMS')),
        }

    @staticmethod
    def render_html(invoice: Dict[str, Any]) -> str:
        return render_to_string(InvoiceRenderer.TEMPLATE, {'invoice': invoice})
