"""
Settlement & Invoicing Models
"""

from .invoice import Invoice, InvoiceLine, InvoiceStatus, PaymentMethod
from .medicine import MedicineSettlement, MedicineOclCharge, PaidBy

__all__ = [
    # Corporate invoicing
    'Invoice', 'InvoiceLine', 'InvoiceStatus', 'PaymentMethod',

    # Medicine settlement
    'MedicineSettlement', 'MedicineOclCharge', 'PaidBy',
]
