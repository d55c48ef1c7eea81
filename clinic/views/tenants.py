"""
Tenant administration.

Platform supers create and edit tenants.  Everyone can see which tenants
they belong to and switch the active one; tenant administrators manage
the tenant's users.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Tenant, TenantMembership
from ..permissions import HasActiveTenant, IsSuper, IsTenantAdmin
from ..serializers.auth import MemberSerializer, SwitchTenantSerializer
from ..serializers.entities import TenantSerializer
from ..services import tenancy
from ..services.audit import safe_log_action
from .entities import filter_queryset, paginate


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSuper])
def tenants(request):
    if request.method == 'POST':
        s = TenantSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        tenant = s.save()
        safe_log_action(user=request.user, tenant=tenant, action='tenant_create', object_type='tenant',
                        object_id=tenant.id, detail={'company_name': tenant.company_name})
        return Response(TenantSerializer(tenant).data, status=status.HTTP_201_CREATED)
    qs = filter_queryset(Tenant.objects.order_by('company_name', 'id'), request.query_params,
                         ('status', 'setup_status', 'access_url'), ('company_name', 'access_url'))
    return paginate(request, qs, lambda rows: TenantSerializer(rows, many=True).data)


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsSuper])
def tenant_detail(request, pk: int):
    tenant = Tenant.objects.filter(pk=pk).first()
    if not tenant:
        raise NotFound('Empresa não encontrada')
    if request.method == 'GET':
        return Response(TenantSerializer(tenant).data)
    s = TenantSerializer(tenant, data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    tenant = s.save()
    safe_log_action(user=request.user, tenant=tenant, action='tenant_update', object_type='tenant',
                    object_id=tenant.id, detail={'status': tenant.status})
    return Response(TenantSerializer(tenant).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_tenants(request):
    """Tenants the user can switch to, flagged with the user's role in each."""
    rows = []
    for tenant in tenancy.tenants_for_user(request.user):
        rows.append({
            **tenancy.serialize_tenant(tenant),
            'role': tenancy.tenant_role(request.user, tenant),
            'accessible': tenant.status in Tenant.ACCESSIBLE_STATUSES,
        })
    return Response(rows)


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasActiveTenant])
def tenant_current(request):
    return Response({**tenancy.serialize_tenant(request.tenant), 'role': request.tenant_role})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def tenant_switch(request):
    s = SwitchTenantSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    tenant = tenancy.switch_tenant(request.user, s.validated_data['tenant'])
    safe_log_action(user=request.user, tenant=tenant, action='tenant_switch', object_type='tenant',
                    object_id=tenant.id)
    return Response({
        'ok': True,
        'tenant': tenancy.serialize_tenant(tenant),
        'role': tenancy.tenant_role(request.user, tenant),
    })


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasActiveTenant, IsTenantAdmin])
def tenant_users(request):
    if request.method == 'POST':
        s = MemberSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        v = s.validated_data
        membership = tenancy.add_member(
            request.tenant,
            username=v['username'],
            role=v.get('role') or 'staff',
            password=v.get('password') or None,
            email=v.get('email', ''),
            full_name=v.get('full_name', ''),
        )
        safe_log_action(user=request.user, tenant=request.tenant, action='member_add', object_type='user',
                        object_id=membership.user_id, detail={'role': membership.role})
        return Response(tenancy.serialize_membership(membership), status=status.HTTP_201_CREATED)
    rows = (
        TenantMembership.objects.select_related('user')
        .filter(tenant=request.tenant)
        .order_by('user__username', 'id')
    )
    return Response([tenancy.serialize_membership(m) for m in rows])


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, HasActiveTenant, IsTenantAdmin])
def tenant_user_remove(request, user_id: int):
    tenancy.remove_member(request.tenant, user_id)
    safe_log_action(user=request.user, tenant=request.tenant, action='member_remove', object_type='user',
                    object_id=user_id)
    return Response(status=status.HTTP_204_NO_CONTENT)
