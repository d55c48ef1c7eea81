"""
Pet shop service queue.

Pets are checked in for a service and walk through
``waiting -> in_progress -> completed``; either active state may be
canceled.  Completing an entry pulls the next waiting pet of the day
into service.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from django.db import transaction
from django.db.models import Max
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from clinic.models import Pet, QueueService, QueueTransition, Service, Tenant, User

TRANSITIONS = {
    'waiting': ['in_progress', 'canceled'],
    'in_progress': ['completed', 'canceled'],
    'completed': [],
    'canceled': [],
}
STATUS_LABELS = dict(QueueService.STATUS_CHOICES)


def can_transition(current: str, new: str) -> bool:
    """Return True if a queue entry may move from ``current`` to ``new``."""
    return new in TRANSITIONS.get(current, [])


def _day_bounds(day: date):
    start = timezone.make_aware(datetime.combine(day, datetime.min.time()))
    return start, start + timedelta(days=1)


def entries_for_day(tenant: Tenant, day: Optional[date] = None):
    start, end = _day_bounds(day or timezone.localdate())
    return (
        QueueService.objects.filter(tenant=tenant, checked_in_at__gte=start, checked_in_at__lt=end)
        .select_related('pet', 'pet__owner', 'service')
        .order_by('number')
    )


@transaction.atomic
def check_in(tenant: Tenant, *, pet: Pet, service: Service, operator: Optional[User] = None, notes: str = '') -> QueueService:
    now = timezone.now()
    start, end = _day_bounds(timezone.localtime(now).date())
    # Serialize numbering per tenant
    Tenant.objects.select_for_update().filter(id=tenant.id).first()
    last = (
        QueueService.objects.filter(tenant=tenant, checked_in_at__gte=start, checked_in_at__lt=end)
        .aggregate(n=Max('number'))['n']
    )
    entry = QueueService.objects.create(
        tenant=tenant, pet=pet, service=service, number=(last or 0) + 1,
        status='waiting', checked_in_at=now, notes=notes,
    )
    QueueTransition.objects.create(entry=entry, from_status=None, to_status='waiting', operator=operator, reason='Check-in')
    return entry


@transaction.atomic
def update_status(entry: QueueService, new_status: str, *, operator: Optional[User] = None, reason: str = '') -> dict:
    """Move ``entry`` to ``new_status``; returns the entry and any auto-started successor."""
    locked = QueueService.objects.select_for_update().get(id=entry.id)
    if not can_transition(locked.status, new_status):
        raise ValidationError({
            'status': f'Não é possível passar de {STATUS_LABELS.get(locked.status, locked.status)} '
                      f'para {STATUS_LABELS.get(new_status, new_status)}'
        })
    old_status = locked.status
    now = timezone.now()
    locked.status = new_status
    if new_status == 'in_progress':
        locked.started_at = now
    if new_status == 'completed':
        locked.completed_at = now
    locked.save(update_fields=['status', 'started_at', 'completed_at', 'updated_at'])
    QueueTransition.objects.create(
        entry=locked, from_status=old_status, to_status=new_status, operator=operator,
        reason=reason or 'Atualização de status',
    )

    started_next = None
    if new_status == 'completed':
        start, end = _day_bounds(timezone.localtime(locked.checked_in_at).date())
        started_next = (
            QueueService.objects.select_for_update()
            .filter(tenant_id=locked.tenant_id, status='waiting', checked_in_at__gte=start, checked_in_at__lt=end)
            .order_by('number')
            .first()
        )
        if started_next:
            started_next.status = 'in_progress'
            started_next.started_at = now
            started_next.save(update_fields=['status', 'started_at', 'updated_at'])
            QueueTransition.objects.create(
                entry=started_next, from_status='waiting', to_status='in_progress', operator=None,
                reason='Avanço automático da fila',
            )
    return {'entry': locked, 'started_next': started_next}


def update_notes(entry: QueueService, notes: str) -> QueueService:
    entry.notes = notes
    entry.save(update_fields=['notes', 'updated_at'])
    return entry


def serialize_entry(entry: QueueService, *, with_history: bool = False) -> dict:
    data = {
        'id': entry.id,
        'number': entry.number,
        'pet': entry.pet_id,
        'pet_name': entry.pet.name,
        'owner_name': entry.pet.owner.full_name if entry.pet.owner_id else '',
        'service': entry.service_id,
        'service_name': entry.service.name,
        'status': entry.status,
        'status_label': STATUS_LABELS.get(entry.status, entry.status),
        'checked_in_at': entry.checked_in_at.isoformat(),
        'started_at': entry.started_at.isoformat() if entry.started_at else None,
        'completed_at': entry.completed_at.isoformat() if entry.completed_at else None,
        'notes': entry.notes,
    }
    if with_history:
        data['transitions'] = [
            {
                'from': t.from_status,
                'to': t.to_status,
                'operator': t.operator.username if t.operator else '',
                'timestamp': t.timestamp.isoformat(),
                'reason': t.reason,
            }
            for t in entry.transitions.select_related('operator').order_by('timestamp', 'id')
        ]
    return data
