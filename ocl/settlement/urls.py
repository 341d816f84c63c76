"""
URL configuration for settlement and invoicing.
"""

from rest_framework.routers import SimpleRouter

from .views import (
    CorporateSettlementViewSet, AdminSettlementViewSet, AdminInvoiceViewSet,
    MedicineSettlementViewSet, OclChargeViewSet
)

router = SimpleRouter()
router.register(r'settlement/admin/invoices', AdminInvoiceViewSet, basename='admin-invoice')
router.register(r'settlement/admin', AdminSettlementViewSet, basename='admin-settlement')
router.register(r'settlement', CorporateSettlementViewSet, basename='settlement')
router.register(r'medicine/settlements', MedicineSettlementViewSet, basename='medicine-settlement')
router.register(r'medicine/ocl-charge', OclChargeViewSet, basename='ocl-charge')

urlpatterns = router.urls
