from __future__ import annotations

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import MODULE_FINANCIAL, FinancialEntry
from ..permissions import HasActiveTenant, IsTenantAdmin, requires_module
from ..serializers.actions import CashFlowQuerySerializer, PaySerializer
from ..serializers.entities import FinancialEntrySerializer
from ..services import dashboard, financial
from ..services.audit import safe_log_action
from .entities import entity_endpoints

FINANCIAL = [IsAuthenticated, HasActiveTenant, requires_module(MODULE_FINANCIAL)]


def _overdue_filter(request, qs):
    if request.query_params.get('overdue') == 'true':
        qs = qs.filter(status='pending', due_date__lt=timezone.localdate())
    return qs


financial_entries, financial_entry_detail = entity_endpoints(
    'financial-entries', FinancialEntry, FinancialEntrySerializer,
    module=MODULE_FINANCIAL,
    filter_fields=('kind', 'status', 'category', 'due_date', 'payment_method'),
    search_fields=('description', 'counterparty', 'document_number'),
    ordering=('due_date', 'id'),
    scope=_overdue_filter,
    write_permissions=(IsTenantAdmin,),
)


@api_view(['POST'])
@permission_classes(FINANCIAL + [IsTenantAdmin])
def financial_entry_pay(request, pk: int):
    entry = FinancialEntry.objects.filter(tenant=request.tenant, pk=pk).first()
    if not entry:
        raise NotFound('Lançamento não encontrado')
    s = PaySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    entry = financial.mark_paid(entry, payment_date=s.validated_data.get('payment_date'),
                                payment_method=s.validated_data.get('payment_method', ''))
    dashboard.invalidate(request.tenant.id)
    safe_log_action(user=request.user, tenant=request.tenant, action='financial_pay',
                    object_type='financial-entries', object_id=entry.id, detail={'amount': str(entry.amount)})
    return Response(FinancialEntrySerializer(entry, context={'request': request, 'tenant': request.tenant}).data)


@api_view(['GET'])
@permission_classes(FINANCIAL)
def financial_summary(request):
    return Response(financial.summary(request.tenant))


@api_view(['GET'])
@permission_classes(FINANCIAL)
def financial_cash_flow(request):
    q = CashFlowQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    year = q.validated_data.get('year') or timezone.localdate().year
    return Response({'year': year, 'months': financial.cash_flow(request.tenant, year)})
