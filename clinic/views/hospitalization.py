from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import MODULE_CLINIC, Hospitalization
from ..permissions import HasActiveTenant, requires_module
from ..serializers.actions import DischargeSerializer
from ..serializers.entities import HospitalizationProgressSerializer, HospitalizationSerializer
from ..services import hospitalization as hosp
from ..services.audit import safe_log_action
from .entities import entity_endpoints

hospitalizations, hospitalization_detail = entity_endpoints(
    'hospitalizations', Hospitalization, HospitalizationSerializer,
    module=MODULE_CLINIC,
    filter_fields=('pet', 'status', 'room', 'responsible_doctor'),
    ordering=('-admission_date', '-id'),
    scope=lambda request, qs: qs.select_related('pet'),
    create=hosp.admit,
    update=hosp.update,
)


def _get(request, pk) -> Hospitalization:
    obj = Hospitalization.objects.filter(tenant=request.tenant, pk=pk).first()
    if not obj:
        raise NotFound('Internação não encontrada')
    return obj


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasActiveTenant, requires_module(MODULE_CLINIC)])
def hospitalization_progress(request, pk: int):
    """List evolution notes or record a new one."""
    obj = _get(request, pk)
    if request.method == 'GET':
        rows = obj.progress.select_related('recorded_by').order_by('recorded_at', 'id')
        return Response([hosp.serialize_progress(p) for p in rows])
    s = HospitalizationProgressSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    progress = hosp.add_progress(obj, recorded_by=request.user, **s.validated_data)
    return Response(hosp.serialize_progress(progress), status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasActiveTenant, requires_module(MODULE_CLINIC)])
def hospitalization_discharge(request, pk: int):
    obj = _get(request, pk)
    s = DischargeSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    obj = hosp.discharge(
        obj, status=v['status'], summary=v.get('discharge_summary', ''),
        instructions=v.get('discharge_instructions', ''), discharge_date=v.get('discharge_date'),
    )
    safe_log_action(user=request.user, tenant=request.tenant, action='hospitalization_discharge',
                    object_type='hospitalizations', object_id=obj.id, detail={'status': obj.status})
    return Response(HospitalizationSerializer(obj, context={'request': request, 'tenant': request.tenant}).data)
