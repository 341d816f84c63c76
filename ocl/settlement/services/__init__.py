"""
Settlement & Invoicing Services
"""

from .amount_words import amount_in_words, int_to_words_indian
from .billing import BillingCalculator, money
from .corporate_settlement import CorporateSettlementService
from .invoice_renderer import InvoiceRenderer
from .invoice_service import InvoiceService
from .medicine_settlement import MedicineSettlementService

__all__ = [
    # Pure helpers
    'amount_in_words', 'int_to_words_indian', 'BillingCalculator', 'money',

    # Services
    'CorporateSettlementService', 'InvoiceRenderer', 'InvoiceService',
    'MedicineSettlementService',
]
