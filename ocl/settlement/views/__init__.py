from .settlement_views import (
    CorporateSettlementViewSet, AdminSettlementViewSet, AdminInvoiceViewSet,
    MedicineSettlementViewSet, OclChargeViewSet
)

__all__ = [
    'CorporateSettlementViewSet', 'AdminSettlementViewSet', 'AdminInvoiceViewSet',
    'MedicineSettlementViewSet', 'OclChargeViewSet',
]
