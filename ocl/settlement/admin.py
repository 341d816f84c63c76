"""
Django admin configuration for settlement and invoicing.
"""

from django.contrib import admin
from .models import Invoice, InvoiceLine, MedicineSettlement, MedicineOclCharge


class InvoiceLineInline(admin.TabularInline):
    model = InvoiceLine
    extra = 0
    fields = ['consignment_number', 'booking_date', 'origin', 'destination', 'weight',
              'freight_charges', 'awb_charge', 'total']
    readonly_fields = fields
    can_delete = False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'company_name', 'period_start', 'period_end',
                    'grand_total', 'status', 'due_date']
    list_filter = ['status', 'invoice_date']
    search_fields = ['invoice_number', 'company_name', 'corporate__corporate_code']
    readonly_fields = ['id', 'invoice_number', 'total_freight', 'awb_total', 'subtotal', 'fuel_charge',
                       'subtotal_after_fuel', 'cgst', 'sgst', 'igst', 'grand_total', 'amount_in_words',
                       'created_at', 'updated_at']
    inlines = [InvoiceLineInline]


@admin.register(MedicineSettlement)
class MedicineSettlementAdmin(admin.ModelAdmin):
    list_display = ['consignment_number', 'operator', 'paid_by', 'cost', 'weight', 'commission',
                    'settlement_month', 'settlement_year']
    list_filter = ['settlement_year', 'settlement_month', 'paid_by']
    search_fields = ['consignment_number', 'sender_name', 'receiver_name']


@admin.register(MedicineOclCharge)
class MedicineOclChargeAdmin(admin.ModelAdmin):
    list_display = ['month', 'year', 'amount', 'note', 'updated_at']
    list_filter = ['year']
