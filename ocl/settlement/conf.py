"""
Billing constants, read from ``settings.OCL_BILLING`` with built-in defaults.

Rates and charges are returned as ``Decimal``.
"""

from decimal import Decimal
from django.conf import settings

DEFAULTS = {
    'BILLER_NAME': 'Our Courier & Logistics Services (I) Pvt.Ltd',
    'BILLER_ADDRESS': '',
    'BILLER_GSTIN': '',
    'BILLER_STATE': 'Assam',
    'BILLER_STATE_CODE': '18',
    'BILLER_CONTACT': '',
    'BILLER_EMAIL': '',
    'FUEL_CHARGE_RATE': '0.10',
    'AWB_CHARGE': '50',
    'CGST_RATE': '0.09',
    'SGST_RATE': '0.09',
    'IGST_RATE': '0.18',
    'MEDICINE_COMMISSION_PER_KG': '10',
    'INVOICE_DUE_DAYS': 30,
    'SETTLEMENT_MIN_YEAR': 2020,
    'SETTLEMENT_MAX_YEAR': 2100,
    'INVOICE_TERMS': [],
}

DECIMAL_SETTINGS = {
    'FUEL_CHARGE_RATE', 'AWB_CHARGE', 'CGST_RATE', 'SGST_RATE', 'IGST_RATE',
    'MEDICINE_COMMISSION_PER_KG',
}


def billing_setting(name):
    """Return the configured value of billing constant ``name``."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown billing setting {name}")
    value = getattr(settings, 'OCL_BILLING', {}).get(name, DEFAULTS[name])
    if name in DECIMAL_SETTINGS:
        return Decimal(str(value))
    return value


def biller_details():
    """Issuer block printed on every invoice."""
    return {
        'name': billing_setting('BILLER_NAME'),
        'address': billing_setting('BILLER_ADDRESS'),
        'gstin': billing_setting('BILLER_GSTIN'),
        'state': billing_setting('BILLER_STATE'),
        'state_code': billing_setting('BILLER_STATE_CODE'),
        'contact': billing_setting('BILLER_CONTACT'),
        'email': billing_setting('BILLER_EMAIL'),
    }
