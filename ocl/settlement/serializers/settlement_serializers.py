"""
Settlement serializers.
"""

from rest_framework import serializers
from django.utils import timezone

from ..models import Invoice, InvoiceLine, PaymentMethod, MedicineSettlement, MedicineOclCharge


def _money(**kwargs):
    return serializers.DecimalField(max_digits=14, decimal_places=2, **kwargs)


# Query and request payloads

class PeriodQuerySerializer(serializers.Serializer):
    """Either an inclusive date range or a month/year pair."""

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    month = serializers.IntegerField(required=False)
    year = serializers.IntegerField(required=False)

    def validate(self, attrs):
        has_range = 'start_date' in attrs or 'end_date' in attrs
        has_month = 'month' in attrs or 'year' in attrs
        if has_range and has_month:
            raise serializers.ValidationError("Give either a date range or a month and year, not both")
        if has_month and not ('month' in attrs and 'year' in attrs):
            raise serializers.ValidationError("Month and year must be given together")
        return attrs


class MonthQuerySerializer(serializers.Serializer):
    """Settlement month; defaults to the current month."""

    month = serializers.IntegerField(required=False)
    year = serializers.IntegerField(required=False)
    operator_id = serializers.UUIDField(required=False)

    def validate(self, attrs):
        today = timezone.localdate()
        attrs.setdefault('month', today.month)
        attrs.setdefault('year', today.year)
        return attrs


class GenerateInvoiceSerializer(serializers.Serializer):
    corporate_id = serializers.UUIDField(required=False)
    shipment_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    remarks = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class MarkPaidSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    payment_reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class OclChargeInputSerializer(serializers.Serializer):
    month = serializers.IntegerField()
    year = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


# Computed structures

class BillLineSerializer(serializers.Serializer):
    sr_no = serializers.IntegerField(required=False)
    shipment_id = serializers.CharField()
    consignment_number = serializers.IntegerField()
    booking_reference = serializers.CharField()
    booking_date = serializers.DateField()
    origin = serializers.CharField()
    destination = serializers.CharField()
    service_type = serializers.CharField()
    weight = serializers.DecimalField(max_digits=10, decimal_places=3)
    freight_charges = _money()
    awb_charge = _money()
    total = _money()


class SettlementSummarySerializer(serializers.Serializer):
    total_bills = serializers.IntegerField()
    total_freight = _money()
    awb_total = _money()
    total_amount = _money()
    total_weight = serializers.DecimalField(max_digits=12, decimal_places=3)
    fuel_charge = _money()
    subtotal_after_fuel = _money()
    cgst = _money()
    sgst = _money()
    igst = _money()
    gst_amount = _money()
    grand_total = _money()
    is_intra_state = serializers.BooleanField()
    amount_in_words = serializers.CharField(required=False)


class PeriodSerializer(serializers.Serializer):
    start_date = serializers.DateField(allow_null=True)
    end_date = serializers.DateField(allow_null=True)


class UnpaidBillsSerializer(serializers.Serializer):
    period = PeriodSerializer()
    bills = BillLineSerializer(many=True)
    summary = SettlementSummarySerializer()


class ConsolidatedInvoiceSerializer(serializers.Serializer):
    invoice_number = serializers.CharField()
    invoice_date = serializers.DateField()
    invoice_period = PeriodSerializer()
    biller = serializers.DictField()
    bill_to = serializers.DictField()
    items = BillLineSerializer(many=True)
    summary = SettlementSummarySerializer()
    terms = serializers.ListField(child=serializers.CharField())


# Stored records

class InvoiceLineSerializer(serializers.ModelSerializer):

    class Meta:
        model = InvoiceLine
        fields = [
            'id', 'shipment', 'consignment_number', 'booking_date', 'origin',
            'destination', 'service_type', 'weight', 'freight_charges',
            'awb_charge', 'total'
        ]
        read_only_fields = fields


class InvoiceListSerializer(serializers.ModelSerializer):
    """Serializer for invoice listings; ``status`` shows overdue invoices as such."""

    status = serializers.SerializerMethodField()
    days_overdue = serializers.IntegerField(read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_number', 'corporate', 'company_name', 'period_start',
            'period_end', 'invoice_date', 'due_date', 'grand_total', 'status',
            'days_overdue', 'payment_date'
        ]
        read_only_fields = fields

    def get_status(self, obj):
        return str(obj.display_status)


class InvoiceDetailSerializer(InvoiceListSerializer):

    lines = InvoiceLineSerializer(many=True, read_only=True)

    class Meta(InvoiceListSerializer.Meta):
        fields = InvoiceListSerializer.Meta.fields + [
            'company_address', 'gst_number', 'state', 'contact_number', 'email',
            'total_freight', 'awb_total', 'subtotal', 'fuel_charge',
            'subtotal_after_fuel', 'cgst', 'sgst', 'igst', 'amount_in_words',
            'payment_method', 'payment_reference', 'remarks', 'terms', 'lines'
        ]
        read_only_fields = fields


class InvoiceSummarySerializer(serializers.Serializer):
    total_invoices = serializers.IntegerField()
    unpaid_invoices = serializers.IntegerField()
    overdue_invoices = serializers.IntegerField()
    paid_invoices = serializers.IntegerField()
    total_amount = _money()
    unpaid_amount = _money()
    overdue_amount = _money()
    paid_amount = _money()


class MedicineSettlementSerializer(serializers.ModelSerializer):

    class Meta:
        model = MedicineSettlement
        fields = [
            'id', 'booking', 'consignment_number', 'sender_name', 'receiver_name',
            'paid_by', 'cost', 'weight', 'commission', 'is_paid',
            'settlement_month', 'settlement_year', 'created_at'
        ]
        read_only_fields = fields


class MedicineSummarySerializer(serializers.Serializer):
    month = serializers.IntegerField()
    year = serializers.IntegerField()
    total = _money()
    total_weight = serializers.DecimalField(max_digits=12, decimal_places=3)
    total_commission = _money()
    total_transactions = serializers.IntegerField()
    manual_ocl_charge = _money(allow_null=True)
    auto_ocl_charge = _money()
    ocl_charge = _money()
    remaining_balance = _money()


class MedicineOclChargeSerializer(serializers.ModelSerializer):

    class Meta:
        model = MedicineOclCharge
        fields = ['month', 'year', 'amount', 'note', 'updated_at']
        read_only_fields = fields


__all__ = [
    'PeriodQuerySerializer', 'MonthQuerySerializer', 'GenerateInvoiceSerializer',
    'MarkPaidSerializer', 'OclChargeInputSerializer', 'UnpaidBillsSerializer',
    'ConsolidatedInvoiceSerializer', 'InvoiceListSerializer', 'InvoiceDetailSerializer',
    'InvoiceSummarySerializer', 'MedicineSettlementSerializer', 'MedicineSummarySerializer',
    'MedicineOclChargeSerializer',
]
