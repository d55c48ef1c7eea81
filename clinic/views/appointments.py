"""
Appointment endpoints and the calendar day/week views.

Writes report overlapping bookings under ``conflicts`` without blocking
them, and push a ``calendar.refresh`` event to every open calendar of the
tenant.
"""
from __future__ import annotations

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Appointment
from ..permissions import HasActiveTenant
from ..serializers.actions import AppointmentStatusSerializer, CalendarQuerySerializer, ConflictQuerySerializer
from ..serializers.entities import AppointmentSerializer
from ..services import calendar, dashboard
from ..services.appointments import (
    appointments_between, broadcast_calendar_refresh, conflicts_for, find_conflicts, serialize_conflicts,
)
from ..services.audit import safe_log_action
from .entities import entity_endpoints


def _after_save(request, appointment, created):
    broadcast_calendar_refresh(
        request.tenant.id, action='created' if created else 'updated',
        appointment_id=appointment.id, start_at=appointment.start_at,
    )
    return {'conflicts': serialize_conflicts(conflicts_for(appointment), pet_id=appointment.pet_id)}


def _after_delete(request, appointment, pk):
    broadcast_calendar_refresh(request.tenant.id, action='deleted', appointment_id=pk, start_at=appointment.start_at)


appointments, appointment_detail = entity_endpoints(
    'appointments', Appointment, AppointmentSerializer,
    filter_fields=('pet', 'service', 'status', 'type', 'doctor', 'is_telemedicine'),
    search_fields=('reason', 'doctor', 'pet__name'),
    ordering=('start_at', 'id'),
    scope=lambda request, qs: qs.select_related('pet'),
    after_save=_after_save,
    after_delete=_after_delete,
)


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasActiveTenant])
def appointment_conflicts(request):
    """Check a proposed slot before booking it."""
    q = ConflictQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    pet_id = v.get('pet')
    conflicts = find_conflicts(
        request.tenant, start_at=v['start_at'], end_at=v.get('end_at'), pet_id=pet_id,
        doctor=v.get('doctor', ''), exclude_id=v.get('exclude'),
    )
    data = serialize_conflicts(conflicts, pet_id=pet_id)
    return Response({'ok': True, 'has_conflicts': bool(data), 'conflicts': data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasActiveTenant])
def appointment_set_status(request, pk: int):
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appointment = Appointment.objects.filter(tenant=request.tenant, pk=pk).first()
    if not appointment:
        raise NotFound('Agendamento não encontrado')
    old_status = appointment.status
    appointment.status = s.validated_data['status']
    appointment.save(update_fields=['status', 'updated_at'])
    dashboard.invalidate(request.tenant.id)
    broadcast_calendar_refresh(request.tenant.id, action='status', appointment_id=appointment.id,
                               start_at=appointment.start_at)
    safe_log_action(user=request.user, tenant=request.tenant, action='appointment_status',
                    object_type='appointments', object_id=appointment.id,
                    detail={'from': old_status, 'to': appointment.status})
    return Response({'ok': True, 'id': appointment.id, 'status': appointment.status})


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasActiveTenant])
def calendar_day(request):
    q = CalendarQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    day = q.validated_data.get('date') or timezone.localdate()
    rows = appointments_between(
        request.tenant, day, day, doctor=q.validated_data.get('doctor', ''), status=q.validated_data.get('status', ''),
    )
    return Response(calendar.build_day_view(day, rows))


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasActiveTenant])
def calendar_week(request):
    q = CalendarQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    day = q.validated_data.get('date') or timezone.localdate()
    days = calendar.week_days(day)
    rows = appointments_between(
        request.tenant, days[0], days[-1],
        doctor=q.validated_data.get('doctor', ''), status=q.validated_data.get('status', ''),
    )
    return Response(calendar.build_week_view(day, rows))
