"""
Setup wizard endpoints.

Reading the state is open to every member; moving the wizard is reserved
to tenant administrators.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import HasActiveTenant, IsTenantAdmin
from ..serializers.actions import OnboardingStepSerializer
from ..services import onboarding
from ..services.audit import safe_log_action

ADMIN = [IsAuthenticated, HasActiveTenant, IsTenantAdmin]


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasActiveTenant])
def onboarding_state(request):
    return Response(onboarding.wizard_state(request.tenant))


@api_view(['POST'])
@permission_classes(ADMIN)
def onboarding_advance(request):
    return Response(onboarding.advance(request.tenant))


@api_view(['POST'])
@permission_classes(ADMIN)
def onboarding_back(request):
    return Response(onboarding.back(request.tenant))


@api_view(['POST'])
@permission_classes(ADMIN)
def onboarding_go_to(request):
    s = OnboardingStepSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response(onboarding.go_to(request.tenant, s.validated_data['step']))


@api_view(['POST'])
@permission_classes(ADMIN)
def onboarding_complete(request):
    state = onboarding.complete(request.tenant)
    safe_log_action(user=request.user, tenant=request.tenant, action='onboarding_complete',
                    object_type='tenant', object_id=request.tenant.id)
    return Response(state)
