from __future__ import annotations

import logging
from typing import Optional

import bleach
import requests
from django.conf import settings
from django.db import transaction
from django.db.models import Q
from rest_framework.exceptions import ValidationError

from clinic.models import KnowledgeArticle, SupportMessage, SupportTicket, Tenant, User
from clinic.services.retry import execute_with_retry
from clinic.services.tenancy import is_super

logger = logging.getLogger(__name__)


def clean_text(value: Optional[str]) -> str:
    return bleach.clean((value or '').strip(), strip=True)


def notify_support_desk(ticket: SupportTicket) -> bool:
    """POST the new ticket to the support desk webhook; never raises."""
    url = getattr(settings, 'SUPPORT_WEBHOOK_URL', '')
    if not url:
        return False
    payload = {
        'ticket_id': ticket.id,
        'tenant_id': ticket.tenant_id,
        'title': ticket.title,
        'priority': ticket.priority,
        'category': ticket.category,
        'created_by': ticket.created_by.username if ticket.created_by else None,
    }

    def _post():
        r = requests.post(url, json=payload, timeout=settings.SUPPORT_WEBHOOK_TIMEOUT)
        r.raise_for_status()
        return r

    try:
        execute_with_retry(_post)
    except requests.RequestException as e:
        logger.warning("Support webhook failed for ticket %s: %s", ticket.id, e)
        return False
    return True


def open_ticket(serializer, *, tenant: Tenant, user: User) -> SupportTicket:
    ticket = serializer.save(tenant=tenant, created_by=user)
    transaction.on_commit(lambda: notify_support_desk(ticket))
    return ticket


@transaction.atomic
def post_message(ticket: SupportTicket, sender: User, content: str) -> SupportMessage:
    content = clean_text(content)
    if not content:
        raise ValidationError({'content': 'Mensagem não pode ser vazia'})
    staff_reply = is_super(sender)
    msg = SupportMessage.objects.create(ticket=ticket, sender=sender, content=content, is_staff_reply=staff_reply)
    if staff_reply and ticket.status == 'open':
        ticket.status = 'in_progress'
    ticket.save(update_fields=['status', 'updated_at'])
    return msg


def serialize_message(m: SupportMessage) -> dict:
    return {
        'id': m.id,
        'ticket': m.ticket_id,
        'sender': m.sender.username if m.sender else '',
        'content': m.content,
        'is_staff_reply': m.is_staff_reply,
        'created_at': m.created_at.isoformat(),
    }


def visible_articles(tenant: Optional[Tenant], *, include_drafts: bool = False):
    qs = KnowledgeArticle.objects.all()
    if tenant is not None:
        qs = qs.filter(Q(tenant__isnull=True) | Q(tenant=tenant))
    else:
        qs = qs.filter(tenant__isnull=True)
    if not include_drafts:
        qs = qs.filter(published=True)
    return qs.order_by('-updated_at', '-id')


def search_articles(tenant: Optional[Tenant], q: str = '', *, category: str = '') -> list[KnowledgeArticle]:
    """Case-insensitive search over title, content and tags of published articles."""
    qs = visible_articles(tenant)
    if category:
        qs = qs.filter(category=category)
    q = (q or '').strip().lower()
    if not q:
        return list(qs)
    # tags live in a JSON list, matched in Python for portability across backends
    return [
        a for a in qs
        if q in a.title.lower() or q in a.content.lower() or any(q in str(t).lower() for t in (a.tags or []))
    ]
