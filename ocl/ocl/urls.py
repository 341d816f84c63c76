"""
URL configuration for the OCL Services back office.
"""
from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include
from django.views.decorators.http import require_http_methods
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView


@require_http_methods(["GET"])
def api_root(request):
    """API root view with available endpoints."""
    return JsonResponse({
        'message': 'OCL Services API',
        'version': '1.0.0',
        'endpoints': {
            'authentication': {
                'token': '/api/auth/token/',
                'token_refresh': '/api/auth/token/refresh/',
            },
            'courier_assignment': {
                'assignments': '/api/assignments/',
                'assign_shipment': '/api/assignments/assign-shipment/',
                'assign_medicine_delivery': '/api/assignments/assign-medicine-delivery/',
            },
            'corporate_settlement': {
                'unpaid_bills': '/api/settlement/unpaid-bills/',
                'consolidated_invoice': '/api/settlement/consolidated-invoice/',
                'generate_invoice': '/api/settlement/generate-invoice/',
                'invoices': '/api/settlement/invoices/',
                'summary': '/api/settlement/summary/',
                'admin_invoices': '/api/settlement/admin/invoices/',
            },
            'medicine_settlement': {
                'settlements': '/api/medicine/settlements/',
                'summary': '/api/medicine/settlements/summary/',
                'ocl_charge': '/api/medicine/ocl-charge/',
            },
        }
    })


urlpatterns = [
    path("admin/", admin.site.urls),

    # API endpoints
    path('api/', api_root, name='api-root'),  # Exact match for /api/ (must be first)
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/', include('courier_assignment.urls')),
    path('api/', include('settlement.urls')),
]
