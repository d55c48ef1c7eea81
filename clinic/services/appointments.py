"""
Appointment rules: conflict detection and calendar broadcasts.

Conflicts are advisory.  Overlapping bookings for the same pet or the
same doctor are reported back to the caller, who decides whether to
keep them.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from clinic.models import Appointment, Tenant
from clinic.realtime.consumers import calendar_group

logger = logging.getLogger(__name__)


def default_end(start_at: datetime) -> datetime:
    return start_at + timedelta(minutes=settings.APPOINTMENT_DEFAULT_MINUTES)


def find_conflicts(tenant: Tenant, *, start_at: datetime, end_at: Optional[datetime] = None,
                   pet_id: Optional[int] = None, doctor: str = '', exclude_id: Optional[int] = None):
    """Active appointments overlapping ``[start_at, end_at)`` that share the pet or doctor."""
    end_at = end_at or default_end(start_at)
    if end_at <= start_at:
        raise ValidationError({'end_at': 'O término deve ser posterior ao início'})
    who = Q()
    if pet_id:
        who |= Q(pet_id=pet_id)
    if doctor and doctor.strip():
        who |= Q(doctor=doctor.strip())
    if not who:
        return Appointment.objects.none()
    qs = (
        Appointment.objects.filter(tenant=tenant, start_at__lt=end_at, end_at__gt=start_at)
        .exclude(status__in=Appointment.INACTIVE_STATUSES)
        .filter(who)
        .select_related('pet')
        .order_by('start_at')
    )
    if exclude_id:
        qs = qs.exclude(id=exclude_id)
    return qs


def conflicts_for(appointment: Appointment):
    if appointment.status in Appointment.INACTIVE_STATUSES:
        return Appointment.objects.none()
    return find_conflicts(
        appointment.tenant,
        start_at=appointment.start_at,
        end_at=appointment.end_at,
        pet_id=appointment.pet_id,
        doctor=appointment.doctor,
        exclude_id=appointment.id,
    )


def serialize_conflicts(conflicts: Iterable[Appointment], *, pet_id: Optional[int] = None) -> list[dict]:
    data = []
    for other in conflicts:
        data.append({
            'id': other.id,
            'pet_id': other.pet_id,
            'pet_name': other.pet.name if other.pet_id else None,
            'doctor': other.doctor,
            'start_at': other.start_at.isoformat(),
            'end_at': other.end_at.isoformat(),
            'status': other.status,
            'reason': 'pet' if pet_id and other.pet_id == pet_id else 'doctor',
        })
    return data


def appointments_between(tenant: Tenant, start: date, end: date, *, doctor: str = '', status: str = ''):
    """Appointments touching the local dates ``start`` .. ``end`` inclusive."""
    tz = timezone.get_current_timezone()
    range_start = timezone.make_aware(datetime.combine(start, datetime.min.time()), tz)
    range_end = timezone.make_aware(datetime.combine(end + timedelta(days=1), datetime.min.time()), tz)
    qs = (
        Appointment.objects.filter(tenant=tenant, start_at__lt=range_end, end_at__gt=range_start)
        .select_related('pet', 'pet__owner', 'service')
        .order_by('start_at', 'id')
    )
    if doctor:
        qs = qs.filter(doctor=doctor)
    if status:
        qs = qs.filter(status=status)
    return qs


def broadcast_calendar_refresh(tenant_id: int, *, action: str, appointment_id: Optional[int] = None,
                               start_at: Optional[datetime] = None) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    payload = {
        "type": "calendar.refresh",
        "action": action,
        "appointment_id": appointment_id,
        "date": timezone.localtime(start_at).date().isoformat() if start_at else None,
        "ts": timezone.now().isoformat(),
    }
    try:
        async_to_sync(channel_layer.group_send)(calendar_group(tenant_id), payload)
    except Exception:
        logger.exception("Calendar broadcast failed for tenant %s", tenant_id)
