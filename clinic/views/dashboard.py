from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import HasActiveTenant
from ..services.dashboard import get_dashboard


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasActiveTenant])
def dashboard_view(request):
    """Today's numbers for the active tenant (cached briefly)."""
    return Response(get_dashboard(request.tenant))
