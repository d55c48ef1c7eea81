"""
Calendar bucketing for the day and week views.

The front end renders a grid of fixed time cells; this module decides
which appointments fall into which cell.  A cell is the half-open
interval ``[start, end)`` and an appointment occupies every cell its own
``[start_at, end_at)`` interval overlaps, so an appointment ending at
09:00 does not spill into the 09:00 cell.  An appointment without an end
lasts ``APPOINTMENT_DEFAULT_MINUTES``; one whose end is not after its
start still occupies the cell containing its start instant.

Appointments are read through attributes (``start_at``, ``end_at``,
``pet``, ``type`` ...) so model instances and light stand-ins both work.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Optional

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

TYPE_LABELS = {
    'consultation': 'Consulta',
    'exam': 'Exame',
    'vaccination': 'Vacinação',
    'surgery': 'Cirurgia',
    'return': 'Retorno',
    'grooming': 'Banho e Tosa',
    'telemedicine': 'Telemedicina',
}
PET_NOT_FOUND = 'Pet não encontrado'
OWNER_NOT_FOUND = 'Proprietário não encontrado'


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime

    def contains(self, start: datetime, end: datetime) -> bool:
        return intervals_overlap(start, end, self.start, self.end)


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap test.  A zero-length ``a`` is treated as an instant."""
    if a_end <= a_start:
        return b_start <= a_start < b_end
    return a_start < b_end and a_end > b_start


def _aware(value: datetime) -> datetime:
    if timezone.is_naive(value):
        return timezone.make_aware(value)
    return value


def appointment_interval(appointment: Any) -> Optional[tuple[datetime, datetime]]:
    """Return ``(start, end)`` for ``appointment`` or None when unusable."""
    start = getattr(appointment, 'start_at', None)
    if not isinstance(start, datetime):
        logger.warning("Skipping appointment %s with invalid start %r", getattr(appointment, 'id', None), start)
        return None
    start = _aware(start)
    end = getattr(appointment, 'end_at', None)
    if end is None:
        end = start + timedelta(minutes=settings.APPOINTMENT_DEFAULT_MINUTES)
    elif not isinstance(end, datetime):
        logger.warning("Skipping appointment %s with invalid end %r", getattr(appointment, 'id', None), end)
        return None
    return start, _aware(end)


def _local_at(day: date, hour: int, minute: int = 0) -> datetime:
    return timezone.make_aware(datetime.combine(day, time(hour, minute)))


def day_slots(day: date, *, start_hour: Optional[int] = None, end_hour: Optional[int] = None,
              minutes: Optional[int] = None) -> list[Slot]:
    """Cells for the day view: every ``minutes`` from ``start_hour`` through the last cell of ``end_hour``."""
    start_hour = settings.CALENDAR_DAY_START_HOUR if start_hour is None else start_hour
    end_hour = settings.CALENDAR_DAY_END_HOUR if end_hour is None else end_hour
    minutes = minutes or settings.CALENDAR_SLOT_MINUTES
    slots = []
    for hour in range(start_hour, end_hour + 1):
        for minute in range(0, 60, minutes):
            start = _local_at(day, hour, minute)
            slots.append(Slot(start, start + timedelta(minutes=minutes)))
    return slots


def week_days(day: date) -> list[date]:
    """The seven days of the week containing ``day``, starting on Sunday."""
    sunday = day - timedelta(days=(day.weekday() + 1) % 7)
    return [sunday + timedelta(days=i) for i in range(7)]


def hour_slots(day: date, *, start_hour: Optional[int] = None, end_hour: Optional[int] = None) -> list[Slot]:
    start_hour = settings.CALENDAR_DAY_START_HOUR if start_hour is None else start_hour
    end_hour = settings.CALENDAR_DAY_END_HOUR if end_hour is None else end_hour
    return [Slot(_local_at(day, h), _local_at(day, h) + timedelta(hours=1)) for h in range(start_hour, end_hour + 1)]


def bucket(slots: Iterable[Slot], appointments: Iterable[Any]) -> list[tuple[Slot, list[Any]]]:
    """Pair every slot with the appointments it overlaps, ordered by start."""
    timed = []
    for appointment in appointments:
        interval = appointment_interval(appointment)
        if interval is not None:
            timed.append((interval, appointment))
    timed.sort(key=lambda pair: pair[0][0])
    return [(slot, [a for (start, end), a in timed if slot.contains(start, end)]) for slot in slots]


def pet_name(appointment: Any) -> str:
    pet = getattr(appointment, 'pet', None)
    return getattr(pet, 'name', None) or PET_NOT_FOUND


def owner_name(appointment: Any) -> str:
    pet = getattr(appointment, 'pet', None)
    owner = getattr(pet, 'owner', None) if pet is not None else None
    return getattr(owner, 'full_name', None) or OWNER_NOT_FOUND


def describe(appointment: Any) -> dict:
    start, end = appointment_interval(appointment)
    appt_type = getattr(appointment, 'type', '') or ''
    return {
        'id': getattr(appointment, 'id', None),
        'pet_id': getattr(appointment, 'pet_id', None),
        'pet_name': pet_name(appointment),
        'owner_name': owner_name(appointment),
        'start_at': start.isoformat(),
        'end_at': end.isoformat(),
        'time': timezone.localtime(start).strftime('%H:%M'),
        'type': appt_type,
        'type_label': TYPE_LABELS.get(appt_type, appt_type),
        'status': getattr(appointment, 'status', ''),
        'doctor': getattr(appointment, 'doctor', '') or '',
    }


def _is_current(slot: Slot, now: datetime) -> bool:
    local_now = timezone.localtime(now)
    local_start = timezone.localtime(slot.start)
    width = int((slot.end - slot.start).total_seconds() // 60)
    return (
        local_now.date() == local_start.date()
        and local_now.hour == local_start.hour
        and abs(local_now.minute - local_start.minute) < width
    )


def build_day_view(day: date, appointments: Iterable[Any], *, now: Optional[datetime] = None) -> dict:
    now = now or timezone.now()
    cells = []
    for slot, items in bucket(day_slots(day), appointments):
        cells.append({
            'start': slot.start.isoformat(),
            'end': slot.end.isoformat(),
            'label': timezone.localtime(slot.start).strftime('%H:%M'),
            'is_current': _is_current(slot, now),
            'appointments': [describe(a) for a in items],
        })
    return {'date': day.isoformat(), 'slots': cells}


def build_week_view(day: date, appointments: Iterable[Any], *, today: Optional[date] = None) -> dict:
    today = today or timezone.localdate()
    appointments = list(appointments)
    days = []
    for current in week_days(day):
        hours = []
        for slot, items in bucket(hour_slots(current), appointments):
            local = timezone.localtime(slot.start)
            hours.append({
                'hour': local.hour,
                'label': f"{local.hour}:00",
                'appointments': [describe(a) for a in items],
            })
        days.append({
            'date': current.isoformat(),
            'label': current.strftime('%d/%m'),
            'is_today': current == today,
            'hours': hours,
        })
    week = week_days(day)
    return {'start': week[0].isoformat(), 'end': week[-1].isoformat(), 'days': days}
