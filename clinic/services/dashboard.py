from datetime import datetime, timedelta

from django.conf import settings
from django.core.cache import cache
from django.db.models import Count, F, Sum
from django.utils import timezone

from clinic.models import (
    Appointment, FinancialEntry, Hospitalization, Product, QueueService, SupportTicket, Tenant,
)


def cache_key(tenant_id: int) -> str:
    return f"dashboard:{tenant_id}"


def compute(tenant: Tenant) -> dict:
    today = timezone.localdate()
    start = timezone.make_aware(datetime.combine(today, datetime.min.time()))
    end = start + timedelta(days=1)

    by_status = dict(
        Appointment.objects.filter(tenant=tenant, start_at__gte=start, start_at__lt=end)
        .values_list('status').annotate(n=Count('id'))
    )
    entries = FinancialEntry.objects.filter(tenant=tenant, status='pending')
    pending = dict(entries.values_list('kind').annotate(total=Sum('amount')))
    return {
        'date': today.isoformat(),
        'appointments_today': {
            'total': sum(by_status.values()),
            'by_status': {code: by_status.get(code, 0) for code, _ in Appointment.STATUS_CHOICES},
        },
        'active_hospitalizations': Hospitalization.objects.filter(tenant=tenant, status='active').count(),
        'queue_waiting': QueueService.objects.filter(
            tenant=tenant, status='waiting', checked_in_at__gte=start, checked_in_at__lt=end
        ).count(),
        'low_stock_products': Product.objects.filter(
            tenant=tenant, active=True, stock_quantity__lte=F('min_stock')
        ).count(),
        'pending_receivable': str(pending.get('receivable') or 0),
        'pending_payable': str(pending.get('payable') or 0),
        'overdue_entries': entries.filter(due_date__lt=today).count(),
        'open_tickets': SupportTicket.objects.filter(tenant=tenant, status__in=['open', 'in_progress']).count(),
        'generated_at': timezone.now().isoformat(),
    }


def get_dashboard(tenant: Tenant) -> dict:
    key = cache_key(tenant.id)
    data = cache.get(key)
    if data is None:
        data = compute(tenant)
        cache.set(key, data, settings.DASHBOARD_CACHE_SECONDS)
    return data


def invalidate(tenant_id: int) -> None:
    cache.delete(cache_key(tenant_id))
