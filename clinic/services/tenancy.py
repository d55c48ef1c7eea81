"""
Active tenant resolution and tenant membership management.

A request works inside exactly one tenant.  The front end names it with
an id or an ``access_url`` slug; when it does not, the user's bound
tenant and then their first membership are used.  Suspended and
inactive tenants never resolve.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from clinic.models import Tenant, TenantMembership, User

logger = logging.getLogger(__name__)

ADMIN_ROLES = {'admin', 'super'}
CLINICAL_ROLES = {'admin', 'vet', 'super'}


def is_super(user) -> bool:
    return getattr(user, 'role', '') == 'super'


def lookup_tenant(identifier) -> Optional[Tenant]:
    """Find a tenant by numeric id or ``access_url``."""
    if identifier is None:
        return None
    identifier = str(identifier).strip()
    if not identifier:
        return None
    if identifier.isdigit():
        tenant = Tenant.objects.filter(id=int(identifier)).first()
        if tenant:
            return tenant
    return Tenant.objects.filter(access_url=identifier).first()


def is_member(user, tenant: Tenant) -> bool:
    if is_super(user):
        return True
    return TenantMembership.objects.filter(tenant=tenant, user=user).exists()


def can_use(user, tenant: Optional[Tenant]) -> bool:
    return bool(tenant and tenant.status in Tenant.ACCESSIBLE_STATUSES and is_member(user, tenant))


def resolve_active_tenant(user, hint=None) -> Tenant:
    """Return the tenant the request should act on or raise ``PermissionDenied``."""
    if hint:
        tenant = lookup_tenant(hint)
        if tenant is None:
            raise NotFound('Empresa não encontrada')
        if tenant.status not in Tenant.ACCESSIBLE_STATUSES:
            raise PermissionDenied('Empresa suspensa ou inativa')
        if not is_member(user, tenant):
            logger.warning("User %s tried to access tenant %s without membership", user.pk, tenant.pk)
            raise PermissionDenied('Sem acesso a esta empresa')
        return tenant

    bound = getattr(user, 'tenant', None)
    if can_use(user, bound):
        return bound

    membership = (
        TenantMembership.objects.select_related('tenant')
        .filter(user=user, tenant__status__in=Tenant.ACCESSIBLE_STATUSES)
        .order_by('created_at', 'id')
        .first()
    )
    if membership:
        return membership.tenant
    raise PermissionDenied('Nenhuma empresa ativa para este usuário')


def tenant_role(user, tenant: Optional[Tenant]) -> str:
    """Role of ``user`` inside ``tenant``; platform supers stay ``super``."""
    if is_super(user):
        return 'super'
    if tenant is not None:
        membership = TenantMembership.objects.filter(tenant=tenant, user=user).only('role').first()
        if membership:
            return membership.role
    return getattr(user, 'role', '') or ''


def switch_tenant(user: User, identifier) -> Tenant:
    tenant = resolve_active_tenant(user, identifier)
    user.tenant = tenant
    user.tenant_bind_time = timezone.now()
    user.save(update_fields=['tenant', 'tenant_bind_time'])
    return tenant


def tenants_for_user(user):
    qs = Tenant.objects.all() if is_super(user) else Tenant.objects.filter(memberships__user=user)
    return qs.order_by('company_name', 'id').distinct()


@transaction.atomic
def add_member(tenant: Tenant, *, username: str, role: str = 'staff', password: Optional[str] = None,
               email: str = '', full_name: str = '') -> TenantMembership:
    """Attach an existing user to ``tenant`` or create the user first."""
    if role not in dict(TenantMembership.ROLE_CHOICES):
        raise ValidationError({'role': 'Papel inválido'})
    user = User.objects.filter(username=username).first()
    if user is None:
        if not password:
            raise ValidationError({'password': 'Senha obrigatória para novo usuário'})
        user = User.objects.create_user(username=username, password=password, email=email,
                                        first_name=full_name, role=role, tenant=tenant,
                                        tenant_bind_time=timezone.now())
    membership, created = TenantMembership.objects.get_or_create(tenant=tenant, user=user, defaults={'role': role})
    if not created and membership.role != role:
        membership.role = role
        membership.save(update_fields=['role'])
    return membership


@transaction.atomic
def remove_member(tenant: Tenant, user_id: int) -> None:
    membership = TenantMembership.objects.select_related('user').filter(tenant=tenant, user_id=user_id).first()
    if membership is None:
        raise NotFound('Usuário não pertence a esta empresa')
    user = membership.user
    membership.delete()
    if user.tenant_id == tenant.id:
        user.tenant = None
        user.tenant_bind_time = None
        user.save(update_fields=['tenant', 'tenant_bind_time'])


def serialize_tenant(tenant: Tenant) -> dict:
    return {
        'id': tenant.id,
        'company_name': tenant.company_name,
        'access_url': tenant.access_url,
        'status': tenant.status,
        'selected_modules': tenant.selected_modules or [],
        'setup_status': tenant.setup_status,
        'current_setup_step': tenant.current_setup_step,
        'customization': tenant.customization or {},
        'created_at': tenant.created_at.isoformat() if tenant.created_at else None,
    }


def serialize_membership(membership: TenantMembership) -> dict:
    user = membership.user
    return {
        'user_id': user.id,
        'username': user.username,
        'full_name': user.get_full_name() or user.username,
        'email': user.email,
        'role': membership.role,
        'is_active': user.is_active,
        'joined_at': membership.created_at.isoformat() if membership.created_at else None,
    }
