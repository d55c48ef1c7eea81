"""
Authentication views.

Login hands out both a DRF token (``Authorization: Token <key>``) and a
JWT pair, and binds the tenant the user picked on the login screen.
Refresh and logout operate on the JWT refresh token.  These views live
apart from ``clinic.authentication`` so DRF can import the
authentication class without pulling in the views.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed, NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from .serializers.auth import LoginSerializer
from .services import tenancy
from .services.audit import safe_log_action

logger = logging.getLogger(__name__)


def _profile(user, tenant) -> dict:
    return {
        'user': {
            'id': user.id,
            'username': user.username,
            'name': user.get_full_name() or user.username,
            'email': user.email,
            'role': user.role,
        },
        'tenant': tenancy.serialize_tenant(tenant) if tenant else None,
        'tenant_role': tenancy.tenant_role(user, tenant) if tenant else None,
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Username/password login.

    An optional ``tenant`` (id or access_url) selects and binds the active
    tenant; otherwise the usual resolution order applies and a user
    without any reachable tenant still logs in with ``tenant: null``.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ip = request.META.get('REMOTE_ADDR')

    user = authenticate(request, username=vd['username'], password=vd['password'])
    if not user:
        logger.info("Failed login for %s from %s", vd['username'], ip)
        safe_log_action(user=None, action='login', object_type='user',
                        detail={'result': 'fail', 'username': vd['username'], 'ip': ip})
        raise AuthenticationFailed('Usuário ou senha inválidos')

    if vd.get('tenant'):
        tenant = tenancy.switch_tenant(user, vd['tenant'])
    else:
        try:
            tenant = tenancy.resolve_active_tenant(user)
        except (PermissionDenied, NotFound):
            tenant = None

    safe_log_action(user=user, tenant=tenant, action='login', object_type='user', object_id=user.id,
                    detail={'result': 'ok', 'ip': ip})

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return Response({
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        **_profile(user, tenant),
    })

# ScopedRateThrottle reads the scope from the generated view class
login_view.cls.throttle_scope = 'login'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    try:
        tenant = tenancy.resolve_active_tenant(request.user, getattr(request, 'tenant_hint', None))
    except (PermissionDenied, NotFound):
        tenant = None
    return Response({'ok': True, **_profile(request.user, tenant)})


@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or every outstanding one of the user."""
    refresh = request.data.get('refresh')
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as e:
            raise ValidationError({'refresh': str(e)})
        count = 1
    else:
        count = 0
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    safe_log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
                    detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count})
