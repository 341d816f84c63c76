"""
Assignment serializers for the courier assignment ledger.
"""

from rest_framework import serializers

from bookings.models import CorporateClient, MedicineOperator, CourierBoy, FreightShipment, MedicineBooking
from ..models import AssignedCourier, AssignmentOrder, AssignmentStatus, AssignmentType, WorkType
from ..exceptions import NotFoundException
from ..services.workflow import AssignmentWorkflow
from ..sources import OrderLine, build_source


class AssignmentOrderSerializer(serializers.ModelSerializer):
    """Serializer for AssignmentOrder lines."""

    class Meta:
        model = AssignmentOrder
        fields = [
            'id', 'sequence', 'shipment', 'medicine_booking',
            'consignment_number', 'booking_reference',
            'origin_data', 'destination_data', 'shipment_data',
            'invoice_data', 'charges_data'
        ]
        read_only_fields = fields


class AssignedCourierListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for ledger listings."""

    entity_name = serializers.CharField(read_only=True)
    total_orders = serializers.IntegerField(read_only=True)

    class Meta:
        model = AssignedCourier
        fields = [
            'id', 'type', 'work', 'status', 'entity_name',
            'courier', 'courier_info', 'total_orders', 'assigned_at'
        ]
        read_only_fields = fields


class AssignedCourierDetailSerializer(serializers.ModelSerializer):
    """Full serializer including order lines and lifecycle timestamps."""

    orders = AssignmentOrderSerializer(many=True, read_only=True)
    assigned_by_username = serializers.CharField(source='assigned_by.username', read_only=True, default=None)
    next_statuses = serializers.SerializerMethodField()

    class Meta:
        model = AssignedCourier
        fields = [
            'id', 'type', 'work', 'status',
            'corporate', 'corporate_info', 'medicine_operator', 'medicine_user_info',
            'courier', 'courier_info', 'assigned_by', 'assigned_by_username',
            'assigned_at', 'started_at', 'completed_at', 'cancelled_at',
            'notes', 'orders', 'next_statuses', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_next_statuses(self, obj):
        """Statuses the entry can move to from where it is now."""
        return [
            status for status in AssignmentStatus.values
            if status != obj.status and AssignmentWorkflow.can_transition_to(obj, status)
        ]


def _fetch_in_order(model, ids):
    """Load ``ids`` of ``model`` preserving request order; unknown ids raise NotFoundException."""
    found = model.objects.in_bulk(ids)
    missing = [str(pk) for pk in ids if pk not in found]
    if missing:
        raise NotFoundException(model.__name__, ', '.join(missing))
    return [found[pk] for pk in ids]


class AssignmentCreateSerializer(serializers.Serializer):
    """Serializer for creating ledger entries from selected orders."""

    type = serializers.ChoiceField(choices=AssignmentType.choices, default=AssignmentType.CORPORATE)
    work = serializers.ChoiceField(choices=WorkType.choices, default=WorkType.PICKUP)
    corporate_id = serializers.UUIDField(required=False, allow_null=True)
    medicine_operator_id = serializers.UUIDField(required=False, allow_null=True)
    shipment_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    medicine_booking_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    courier_id = serializers.UUIDField(required=False, allow_null=True)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if not attrs['shipment_ids'] and not attrs['medicine_booking_ids']:
            raise serializers.ValidationError("Select at least one shipment or medicine booking")
        return attrs

    def create(self, validated_data):
        """Resolve the referenced records and create the entry through the service."""
        from ..services import AssignmentService

        assignment_type = validated_data['type']
        if assignment_type == AssignmentType.MEDICINE:
            entity_model, entity_id = MedicineOperator, validated_data.get('medicine_operator_id')
        else:
            entity_model, entity_id = CorporateClient, validated_data.get('corporate_id')

        entity = None
        if entity_id is not None:
            entity = _fetch_in_order(entity_model, [entity_id])[0]
        source = build_source(assignment_type, entity, validated_data['work'])

        lines = [
            OrderLine.from_shipment(shipment)
            for shipment in _fetch_in_order(FreightShipment, validated_data['shipment_ids'])
        ] + [
            OrderLine.from_medicine_booking(booking)
            for booking in _fetch_in_order(MedicineBooking, validated_data['medicine_booking_ids'])
        ]

        courier = None
        if validated_data.get('courier_id'):
            courier = _fetch_in_order(CourierBoy, [validated_data['courier_id']])[0]

        return AssignmentService.create_assignment(
            source,
            lines,
            courier=courier,
            assigned_by=validated_data.get('assigned_by'),
            notes=validated_data['notes'],
        )


class AssignCourierSerializer(serializers.Serializer):
    courier_id = serializers.UUIDField()


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AssignmentStatus.choices)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class AssignShipmentSerializer(serializers.Serializer):
    shipment_id = serializers.UUIDField()
    courier_id = serializers.UUIDField()


class AssignMedicineDeliverySerializer(serializers.Serializer):
    booking_id = serializers.UUIDField()
    courier_id = serializers.UUIDField()
