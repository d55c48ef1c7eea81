"""Scheduling rules for the pick-up and drop-off service."""
from __future__ import annotations

from datetime import date, time
from typing import Optional

from django.db import transaction
from rest_framework.exceptions import ValidationError

from clinic.models import WEEKDAYS, TransportRoute, TransportService

WEEKDAY_LABELS = {
    'monday': 'segunda-feira',
    'tuesday': 'terça-feira',
    'wednesday': 'quarta-feira',
    'thursday': 'quinta-feira',
    'friday': 'sexta-feira',
    'saturday': 'sábado',
    'sunday': 'domingo',
}


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def routes_on(service: TransportService, day: date, *, exclude_id: Optional[int] = None):
    qs = TransportRoute.objects.filter(service=service, scheduled_date=day).exclude(status='canceled')
    if exclude_id:
        qs = qs.exclude(id=exclude_id)
    return qs


def check_schedule(service: TransportService, day: date, pickup_time: time, *, pet_type: str = '',
                   exclude_id: Optional[int] = None) -> None:
    """Raise ``ValidationError`` unless a route may be booked for ``service`` at ``day``/``pickup_time``."""
    if service.status != 'active':
        raise ValidationError({'service': 'Serviço de transporte inativo'})
    weekday = weekday_name(day)
    if service.days_available and weekday not in service.days_available:
        raise ValidationError({'scheduled_date': f'Serviço indisponível em {WEEKDAY_LABELS[weekday]}'})
    if not service.hours_start <= pickup_time <= service.hours_end:
        raise ValidationError({
            'pickup_time': f'Horário fora do atendimento ({service.hours_start:%H:%M} - {service.hours_end:%H:%M})'
        })
    accepted = [t.lower() for t in (service.accepted_pet_types or [])]
    if pet_type and accepted and pet_type.lower() not in accepted:
        raise ValidationError({'pet_type': f'Tipo de pet não atendido: {pet_type}'})
    if routes_on(service, day, exclude_id=exclude_id).count() >= service.max_capacity_per_day:
        raise ValidationError({'scheduled_date': 'Capacidade diária esgotada para este serviço'})


SCHEDULING_FIELDS = {'service', 'scheduled_date', 'pickup_time', 'pet_type'}


@transaction.atomic
def save_route(serializer, *, tenant):
    """Save a route, checking the schedule while the service row is locked."""
    instance = serializer.instance
    attrs = serializer.validated_data
    service = attrs.get('service', getattr(instance, 'service', None))
    status = attrs.get('status', getattr(instance, 'status', 'scheduled'))
    reactivated = instance is not None and instance.status == 'canceled'
    if status != 'canceled' and (instance is None or reactivated or SCHEDULING_FIELDS & set(attrs)):
        # Concurrent bookings for the same service serialize on this lock
        service = TransportService.objects.select_for_update().get(id=service.id)
        check_schedule(
            service,
            attrs.get('scheduled_date', getattr(instance, 'scheduled_date', None)),
            attrs.get('pickup_time', getattr(instance, 'pickup_time', None)),
            pet_type=attrs.get('pet_type', getattr(instance, 'pet_type', '')),
            exclude_id=getattr(instance, 'id', None),
        )
    if instance is None:
        return serializer.save(tenant=tenant)
    return serializer.save()


def day_schedule(tenant, day: date, *, service_id: Optional[int] = None):
    qs = (
        TransportRoute.objects.filter(tenant=tenant, scheduled_date=day)
        .select_related('service', 'pet', 'pet__owner', 'vehicle', 'driver')
        .order_by('pickup_time', 'id')
    )
    if service_id:
        qs = qs.filter(service_id=service_id)
    return qs


def serialize_route(route: TransportRoute) -> dict:
    return {
        'id': route.id,
        'service': route.service_id,
        'service_name': route.service.name,
        'pet': route.pet_id,
        'pet_name': route.pet.name,
        'owner_name': route.pet.owner.full_name if route.pet.owner_id else '',
        'vehicle': route.vehicle_id,
        'vehicle_plate': route.vehicle.plate if route.vehicle else '',
        'driver': route.driver_id,
        'driver_name': route.driver.name if route.driver else '',
        'scheduled_date': route.scheduled_date.isoformat(),
        'pickup_time': route.pickup_time.strftime('%H:%M'),
        'pickup_address': route.pickup_address,
        'dropoff_address': route.dropoff_address,
        'direction': route.direction,
        'status': route.status,
        'price': str(route.price) if route.price is not None else None,
    }
