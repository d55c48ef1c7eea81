from datetime import date
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import ExtractMonth
from django.utils import timezone

from clinic.exceptions import ConflictError
from clinic.models import FinancialEntry, Tenant

ZERO = Decimal('0')


@transaction.atomic
def mark_paid(entry: FinancialEntry, *, payment_date: Optional[date] = None, payment_method: str = '') -> FinancialEntry:
    locked = FinancialEntry.objects.select_for_update().get(id=entry.id)
    if locked.status != 'pending':
        raise ConflictError(f'Lançamento já está {locked.get_status_display().lower()}')
    locked.status = 'paid'
    locked.payment_date = payment_date or timezone.localdate()
    if payment_method:
        locked.payment_method = payment_method
    locked.save(update_fields=['status', 'payment_date', 'payment_method', 'updated_at'])
    return locked


def _total(qs) -> Decimal:
    return qs.aggregate(s=Sum('amount'))['s'] or ZERO


def summary(tenant: Tenant, *, today: Optional[date] = None) -> dict:
    """Totals per kind and status plus overdue pending amounts."""
    today = today or timezone.localdate()
    qs = FinancialEntry.objects.filter(tenant=tenant).exclude(status='canceled')
    data = {}
    for kind, _label in FinancialEntry.KIND_CHOICES:
        of_kind = qs.filter(kind=kind)
        overdue = of_kind.filter(status='pending', due_date__lt=today)
        data[kind] = {
            'pending': str(_total(of_kind.filter(status='pending'))),
            'paid': str(_total(of_kind.filter(status='paid'))),
            'overdue': str(_total(overdue)),
            'overdue_count': overdue.count(),
        }
    receivable_paid = _total(qs.filter(kind='receivable', status='paid'))
    payable_paid = _total(qs.filter(kind='payable', status='paid'))
    data['balance'] = str(receivable_paid - payable_paid)
    return data


def cash_flow(tenant: Tenant, year: int) -> list[dict]:
    """Monthly paid incoming and outgoing amounts by payment date."""
    rows = (
        FinancialEntry.objects.filter(tenant=tenant, status='paid', payment_date__year=year)
        .annotate(month=ExtractMonth('payment_date'))
        .values('month', 'kind')
        .annotate(total=Sum('amount'))
    )
    months = {m: {'incoming': ZERO, 'outgoing': ZERO} for m in range(1, 13)}
    for row in rows:
        key = 'incoming' if row['kind'] == 'receivable' else 'outgoing'
        months[row['month']][key] += row['total'] or ZERO
    flow = []
    for month, totals in months.items():
        flow.append({
            'month': month,
            'incoming': str(totals['incoming']),
            'outgoing': str(totals['outgoing']),
            'balance': str(totals['incoming'] - totals['outgoing']),
        })
    return flow
