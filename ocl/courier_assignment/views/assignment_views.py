"""
Assignment views for the courier assignment ledger.
"""

from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from ..models import AssignedCourier
from ..services import AssignmentService
from ..exceptions import BusinessException
from ..serializers.assignment_serializers import (
    AssignedCourierListSerializer, AssignedCourierDetailSerializer,
    AssignmentCreateSerializer, AssignCourierSerializer, StatusUpdateSerializer,
    AssignShipmentSerializer, AssignMedicineDeliverySerializer
)
from ocl.exceptions import business_error_response
from users.permissions import IsAdminOrOfficeUser


class AssignmentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for the assignment ledger.

    Entries are never deleted; they are created here and moved through
    their lifecycle with the workflow actions.
    """

    queryset = AssignedCourier.objects.select_related(
        'corporate', 'medicine_operator', 'courier', 'assigned_by'
    ).prefetch_related('orders')
    permission_classes = [IsAdminOrOfficeUser]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'type', 'work', 'courier']
    ordering_fields = ['assigned_at', 'status']
    ordering = ['-assigned_at']

    def get_serializer_class(self):
        """Return appropriate serializer based on action."""
        if self.action == 'create':
            return AssignmentCreateSerializer
        elif self.action == 'list':
            return AssignedCourierListSerializer
        elif self.action == 'assign_courier':
            return AssignCourierSerializer
        elif self.action == 'update_status':
            return StatusUpdateSerializer
        elif self.action == 'assign_shipment':
            return AssignShipmentSerializer
        elif self.action == 'assign_medicine_delivery':
            return AssignMedicineDeliverySerializer
        else:
            return AssignedCourierDetailSerializer

    def _detail(self, assignment, http_status=status.HTTP_200_OK):
        return Response({
            'success': True,
            'data': AssignedCourierDetailSerializer(assignment).data
        }, status=http_status)

    def create(self, request, *args, **kwargs):
        """Create a ledger entry from selected orders."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            assignment = serializer.save(assigned_by=request.user)
        except BusinessException as e:
            return business_error_response(e)
        return self._detail(assignment, status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='assign-courier')
    def assign_courier(self, request, pk=None):
        """Hand the entry to a courier boy."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            assignment = AssignmentService.assign_courier(
                pk, str(serializer.validated_data['courier_id']), request.user
            )
        except BusinessException as e:
            return business_error_response(e)
        return self._detail(assignment)

    @action(detail=True, methods=['post'], url_path='update-status')
    def update_status(self, request, pk=None):
        """Move the entry along the workflow."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            assignment = AssignmentService.update_status(
                pk,
                serializer.validated_data['status'],
                request.user,
                serializer.validated_data['notes']
            )
        except BusinessException as e:
            return business_error_response(e)
        return self._detail(assignment)

    @action(detail=False, methods=['post'], url_path='assign-shipment')
    def assign_shipment(self, request):
        """Add a corporate shipment to a courier's pickup run."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            assignment = AssignmentService.assign_shipment_to_courier(
                str(serializer.validated_data['shipment_id']),
                str(serializer.validated_data['courier_id']),
                request.user
            )
        except BusinessException as e:
            return business_error_response(e)
        return self._detail(assignment)

    @action(detail=False, methods=['post'], url_path='assign-medicine-delivery')
    def assign_medicine_delivery(self, request):
        """Add a medicine booking to a courier's delivery run."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            assignment = AssignmentService.assign_medicine_delivery(
                str(serializer.validated_data['booking_id']),
                str(serializer.validated_data['courier_id']),
                request.user
            )
        except BusinessException as e:
            return business_error_response(e)
        return self._detail(assignment)
