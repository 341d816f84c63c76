"""
URL configuration for the courier assignment ledger.
"""

from rest_framework.routers import SimpleRouter

from .views import AssignmentViewSet

router = SimpleRouter()
router.register(r'assignments', AssignmentViewSet, basename='assignment')

urlpatterns = router.urls
