"""
Django admin configuration for bookings and the courier roster.
"""

from django.contrib import admin
from .models import CorporateClient, MedicineOperator, CourierBoy, FreightShipment, MedicineBooking


@admin.register(CorporateClient)
class CorporateClientAdmin(admin.ModelAdmin):
    list_display = ['corporate_code', 'company_name', 'state', 'gst_number', 'is_active']
    list_filter = ['state', 'is_active']
    search_fields = ['corporate_code', 'company_name', 'email', 'contact_number']
    readonly_fields = ['id', 'created_at']


@admin.register(MedicineOperator)
class MedicineOperatorAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'phone']
    search_fields = ['name', 'email', 'phone']
    readonly_fields = ['id', 'created_at']


@admin.register(CourierBoy)
class CourierBoyAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'phone', 'area', 'status']
    list_filter = ['status', 'area']
    search_fields = ['full_name', 'phone', 'email']
    readonly_fields = ['id', 'created_at']


@admin.register(FreightShipment)
class FreightShipmentAdmin(admin.ModelAdmin):
    list_display = ['consignment_number', 'corporate', 'booking_date', 'freight_charges',
                    'payment_type', 'payment_status', 'status']
    list_filter = ['payment_type', 'payment_status', 'status']
    search_fields = ['consignment_number', 'booking_reference', 'corporate__company_name']
    readonly_fields = ['id']


@admin.register(MedicineBooking)
class MedicineBookingAdmin(admin.ModelAdmin):
    list_display = ['booking_reference', 'consignment_number', 'operator', 'created_at']
    search_fields = ['booking_reference', 'consignment_number']
    readonly_fields = ['id', 'created_at']
