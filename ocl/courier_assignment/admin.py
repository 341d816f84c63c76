"""
Django admin configuration for the courier assignment ledger.
"""

from django.contrib import admin
from .models import AssignedCourier, AssignmentOrder, AuditLog


class AssignmentOrderInline(admin.TabularInline):
    model = AssignmentOrder
    extra = 0
    fields = ['sequence', 'consignment_number', 'booking_reference', 'shipment', 'medicine_booking']
    readonly_fields = fields
    can_delete = False


@admin.register(AssignedCourier)
class AssignedCourierAdmin(admin.ModelAdmin):
    list_display = ['id', 'type', 'work', 'status', 'entity_name', 'courier', 'assigned_at']
    list_filter = ['status', 'type', 'work', 'assigned_at']
    search_fields = ['corporate__company_name', 'medicine_operator__name', 'courier__full_name',
                     'orders__consignment_number']
    readonly_fields = ['id', 'assigned_at', 'started_at', 'completed_at', 'cancelled_at',
                       'corporate_info', 'medicine_user_info', 'courier_info', 'created_at', 'updated_at']
    inlines = [AssignmentOrderInline]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['entity_type', 'entity_id', 'action', 'user', 'timestamp']
    list_filter = ['entity_type', 'action', 'timestamp']
    search_fields = ['entity_id', 'notes']
    readonly_fields = ['id', 'entity_type', 'entity_id', 'action', 'user', 'old_values', 'new_values',
                       'timestamp', 'notes']
