"""
Pet shop service queue endpoints.

Staff check pets in for a service, move them through the queue and keep
notes.  Completing an entry automatically starts the next waiting pet.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import MODULE_PETSHOP, Pet, QueueService, Service
from ..permissions import HasActiveTenant, requires_module
from ..serializers.actions import QueueCheckInSerializer, QueueNotesSerializer, QueueStatusSerializer
from ..services import dashboard, queue
from ..services.audit import safe_log_action

PETSHOP = [IsAuthenticated, HasActiveTenant, requires_module(MODULE_PETSHOP)]


def _entry(request, pk) -> QueueService:
    entry = (
        QueueService.objects.select_related('pet', 'pet__owner', 'service')
        .filter(tenant=request.tenant, pk=pk)
        .first()
    )
    if not entry:
        raise NotFound('Atendimento não encontrado')
    return entry


@api_view(['GET'])
@permission_classes(PETSHOP)
def queue_today(request):
    """Today's queue ordered by ticket number."""
    rows = queue.entries_for_day(request.tenant)
    if request.query_params.get('status'):
        rows = rows.filter(status=request.query_params['status'])
    return Response([queue.serialize_entry(e) for e in rows])


@api_view(['POST'])
@permission_classes(PETSHOP)
def queue_check_in(request):
    s = QueueCheckInSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    pet = Pet.objects.filter(tenant=request.tenant, pk=v['pet']).select_related('owner').first()
    if not pet:
        raise ValidationError({'pet': 'Pet não encontrado'})
    service = Service.objects.filter(tenant=request.tenant, pk=v['service']).first()
    if not service:
        raise ValidationError({'service': 'Serviço não encontrado'})
    entry = queue.check_in(request.tenant, pet=pet, service=service, operator=request.user, notes=v.get('notes', ''))
    dashboard.invalidate(request.tenant.id)
    return Response(queue.serialize_entry(entry), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes(PETSHOP)
def queue_entry_detail(request, pk: int):
    return Response(queue.serialize_entry(_entry(request, pk), with_history=True))


@api_view(['POST'])
@permission_classes(PETSHOP)
def queue_update_status(request, pk: int):
    """Move an entry along the queue; completing it starts the next waiting pet."""
    entry = _entry(request, pk)
    s = QueueStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    result = queue.update_status(entry, s.validated_data['status'], operator=request.user,
                                 reason=s.validated_data.get('reason', ''))
    dashboard.invalidate(request.tenant.id)
    safe_log_action(user=request.user, tenant=request.tenant, action='queue_status', object_type='queue',
                    object_id=entry.id, detail={'to': s.validated_data['status']})
    started = result['started_next']
    return Response({
        'ok': True,
        'entry': queue.serialize_entry(_entry(request, pk)),
        'started_next': queue.serialize_entry(_entry(request, started.id)) if started else None,
    })


@api_view(['POST'])
@permission_classes(PETSHOP)
def queue_update_notes(request, pk: int):
    entry = _entry(request, pk)
    s = QueueNotesSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    entry = queue.update_notes(entry, s.validated_data['notes'])
    return Response(queue.serialize_entry(entry))
