"""
Settlement views for corporate invoicing and medicine settlements.
"""

from django.http import HttpResponse
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from bookings.models import CorporateClient, MedicineOperator
from ..services import (
    CorporateSettlementService, InvoiceRenderer, InvoiceService, MedicineSettlementService
)
from ..exceptions import BusinessException, ValidationException, NotFoundException
from ..serializers.settlement_serializers import (
    PeriodQuerySerializer, MonthQuerySerializer, GenerateInvoiceSerializer,
    MarkPaidSerializer, OclChargeInputSerializer, UnpaidBillsSerializer,
    ConsolidatedInvoiceSerializer, InvoiceListSerializer, InvoiceDetailSerializer,
    InvoiceSummarySerializer, MedicineSettlementSerializer, MedicineSummarySerializer,
    MedicineOclChargeSerializer
)
from ocl.exceptions import business_error_response
from users.permissions import IsAdmin, IsCorporateUser, IsMedicineUser


def _period(request):
    serializer = PeriodQuerySerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def _lookup(model, pk):
    try:
        return model.objects.get(pk=pk)
    except (model.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundException(model.__name__, pk)


def _ok(data, http_status=status.HTTP_200_OK):
    return Response({'success': True, 'data': data}, status=http_status)


class CorporateSettlementViewSet(viewsets.ViewSet):
    """
    Settlement endpoints of the logged-in corporate client.

    Consignments are always those of the caller's own corporate account.
    """

    permission_classes = [IsCorporateUser]

    @action(detail=False, methods=['get'], url_path='unpaid-bills')
    def unpaid_bills(self, request):
        """Unpaid FP consignments and totals for a period."""
        corporate = request.user.corporate_account
        try:
            result = CorporateSettlementService.unpaid_bills(corporate, **_period(request))
        except BusinessException as e:
            return business_error_response(e)
        return _ok(UnpaidBillsSerializer(result).data)

    @action(detail=False, methods=['get'], url_path='consolidated-invoice')
    def consolidated_invoice(self, request):
        """
        Consolidated invoice of the unpaid consignments.

        ``?output=html`` returns the printable document instead of JSON.
        """
        corporate = request.user.corporate_account
        period = _period(request)
        try:
            result = CorporateSettlementService.unpaid_bills(corporate, **period)
        except BusinessException as e:
            return business_error_response(e)

        invoice_period = (result['period']['start_date'], result['period']['end_date'])
        invoice = InvoiceRenderer.render(result, corporate, invoice_period=invoice_period)

        if request.query_params.get('output') == 'html':
            response = HttpResponse(InvoiceRenderer.render_html(invoice), content_type='text/html')
            response['Content-Disposition'] = (
                f'attachment; filename="{invoice["invoice_number"]}-{corporate.corporate_code}.html"'
            )
            return response
        return _ok(ConsolidatedInvoiceSerializer(invoice).data)

    @action(detail=False, methods=['post'], url_path='generate-invoice')
    def generate_invoice(self, request):
        """Issue a numbered invoice for selected consignments."""
        serializer = GenerateInvoiceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            invoice = InvoiceService.generate_invoice(
                request.user.corporate_account,
                [str(pk) for pk in data['shipment_ids']],
                request.user,
                start_date=data.get('start_date'),
                end_date=data.get('end_date'),
                remarks=data['remarks'],
            )
        except BusinessException as e:
            return business_error_response(e)
        return _ok(InvoiceDetailSerializer(invoice).data, status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def invoices(self, request):
        queryset = InvoiceService.list_invoices(
            request.user.corporate_account, request.query_params.get('status')
        )
        return _ok(InvoiceListSerializer(queryset, many=True).data)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        result = InvoiceService.invoice_summary(request.user.corporate_account)
        return _ok(InvoiceSummarySerializer(result).data)


class AdminSettlementViewSet(viewsets.ViewSet):
    """Settlement lookups across corporates for administrators."""

    permission_classes = [IsAdmin]

    @action(detail=False, methods=['get'], url_path=r'unpaid-bills/(?P<corporate_id>[^/.]+)')
    def unpaid_bills(self, request, corporate_id=None):
        try:
            corporate = _lookup(CorporateClient, corporate_id)
            result = CorporateSettlementService.unpaid_bills(corporate, **_period(request))
        except BusinessException as e:
            return business_error_response(e)
        return _ok(UnpaidBillsSerializer(result).data)


class AdminInvoiceViewSet(viewsets.ReadOnlyModelViewSet):
    """Invoices of all corporates; admins issue invoices and record payments."""

    permission_classes = [IsAdmin]

    def get_queryset(self):
        corporate = self.request.query_params.get('corporate')
        queryset = InvoiceService.list_invoices(status=self.request.query_params.get('status'))
        if corporate:
            queryset = queryset.filter(corporate_id=corporate)
        return queryset.prefetch_related('lines')

    def get_serializer_class(self):
        if self.action == 'list':
            return InvoiceListSerializer
        elif self.action == 'create':
            return GenerateInvoiceSerializer
        elif self.action == 'mark_paid':
            return MarkPaidSerializer
        return InvoiceDetailSerializer

    def create(self, request, *args, **kwargs):
        """Issue an invoice on behalf of a corporate."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if not data.get('corporate_id'):
            return business_error_response(
                ValidationException("corporate_id is required", {"corporate_id": "missing"})
            )
        try:
            corporate = _lookup(CorporateClient, data['corporate_id'])
            invoice = InvoiceService.generate_invoice(
                corporate,
                [str(pk) for pk in data['shipment_ids']],
                request.user,
                start_date=data.get('start_date'),
                end_date=data.get('end_date'),
                remarks=data['remarks'],
            )
        except BusinessException as e:
            return business_error_response(e)
        return _ok(InvoiceDetailSerializer(invoice).data, status.HTTP_201_CREATED)

    @action(detail=True, methods=['patch'], url_path='mark-paid')
    def mark_paid(self, request, pk=None):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            invoice = InvoiceService.mark_paid(
                pk,
                serializer.validated_data['payment_method'],
                serializer.validated_data['payment_reference'],
                request.user
            )
        except BusinessException as e:
            return business_error_response(e)
        return _ok(InvoiceDetailSerializer(invoice).data)


class MedicineSettlementViewSet(viewsets.ViewSet):
    """
    Monthly settlement of a medicine operator.

    Operators see their own records; admins pass ``operator_id``.
    """

    permission_classes = [IsMedicineUser | IsAdmin]

    def _operator(self, request, data):
        if getattr(request.user, 'is_admin', False):
            if not data.get('operator_id'):
                raise ValidationException("operator_id is required", {"operator_id": "missing"})
            return _lookup(MedicineOperator, data['operator_id'])
        return request.user.medicine_profile

    def _query(self, request):
        serializer = MonthQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def list(self, request):
        data = self._query(request)
        try:
            operator = self._operator(request, data)
            records = MedicineSettlementService.sync_month(operator, data['month'], data['year'])
        except BusinessException as e:
            return business_error_response(e)
        return _ok(MedicineSettlementSerializer(records, many=True).data)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        data = self._query(request)
        try:
            operator = self._operator(request, data)
            result = MedicineSettlementService.summary(operator, data['month'], data['year'])
        except BusinessException as e:
            return business_error_response(e)
        return _ok(MedicineSummarySerializer(result).data)


class OclChargeViewSet(viewsets.ViewSet):
    """Manual OCL charge per settlement month."""

    permission_classes = [IsAdmin]

    def list(self, request):
        serializer = MonthQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        try:
            charge = MedicineSettlementService.get_ocl_charge(
                serializer.validated_data['month'], serializer.validated_data['year']
            )
        except BusinessException as e:
            return business_error_response(e)
        return _ok(MedicineOclChargeSerializer(charge).data)

    def create(self, request):
        serializer = OclChargeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            charge = MedicineSettlementService.set_ocl_charge(
                data['month'], data['year'], data['amount'], data['note'], request.user
            )
        except BusinessException as e:
            return business_error_response(e)
        return _ok(MedicineOclChargeSerializer(charge).data)
