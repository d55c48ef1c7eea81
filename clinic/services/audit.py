import logging
from typing import Optional, Any, Dict

from django.contrib.auth import get_user_model

from clinic.models import AuditEvent, Tenant

User = get_user_model()
logger = logging.getLogger(__name__)


def log_action(*, user: Optional[User], action: str, tenant: Optional[Tenant] = None,
               object_type: Optional[str] = None, object_id: Optional[int] = None,
               detail: Optional[Dict[str, Any]] = None) -> AuditEvent:
    return AuditEvent.objects.create(
        tenant=tenant,
        user=user if getattr(user, 'pk', None) else None,
        action=action,
        object_type=object_type, object_id=object_id,
        detail=detail or {},
    )


def safe_log_action(**kwargs) -> Optional[AuditEvent]:
    """Record an audit event without letting a failure break the request."""
    try:
        return log_action(**kwargs)
    except Exception:
        logger.exception("Could not record audit event %s", kwargs.get('action'))
        return None
