from __future__ import annotations

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import MODULE_TRANSPORT, TransportDriver, TransportRoute, TransportService, TransportVehicle
from ..permissions import HasActiveTenant, IsTenantAdminOrReadOnly, requires_module
from ..serializers.actions import TransportDayQuerySerializer
from ..serializers.entities import (
    TransportDriverSerializer, TransportRouteSerializer, TransportServiceSerializer, TransportVehicleSerializer,
)
from ..services import transport
from .entities import entity_endpoints

transport_services, transport_service_detail = entity_endpoints(
    'transport-services', TransportService, TransportServiceSerializer,
    module=MODULE_TRANSPORT,
    filter_fields=('status',),
    ordering=('name', 'id'),
    write_permissions=(IsTenantAdminOrReadOnly,),
)

transport_vehicles, transport_vehicle_detail = entity_endpoints(
    'transport-vehicles', TransportVehicle, TransportVehicleSerializer,
    module=MODULE_TRANSPORT,
    filter_fields=('status', 'plate'),
    ordering=('plate', 'id'),
    write_permissions=(IsTenantAdminOrReadOnly,),
)

transport_drivers, transport_driver_detail = entity_endpoints(
    'transport-drivers', TransportDriver, TransportDriverSerializer,
    module=MODULE_TRANSPORT,
    filter_fields=('status',),
    ordering=('name', 'id'),
    write_permissions=(IsTenantAdminOrReadOnly,),
)

transport_routes, transport_route_detail = entity_endpoints(
    'transport-routes', TransportRoute, TransportRouteSerializer,
    module=MODULE_TRANSPORT,
    filter_fields=('service', 'pet', 'vehicle', 'driver', 'scheduled_date', 'status', 'direction'),
    ordering=('scheduled_date', 'pickup_time', 'id'),
    create=transport.save_route,
    update=transport.save_route,
)


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasActiveTenant, requires_module(MODULE_TRANSPORT)])
def transport_day_schedule(request):
    """Routes of one day in pickup order, with capacity per service."""
    q = TransportDayQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    day = q.validated_data.get('date') or timezone.localdate()
    routes = transport.day_schedule(request.tenant, day, service_id=q.validated_data.get('service'))
    capacity = []
    for service in TransportService.objects.filter(tenant=request.tenant, status='active').order_by('name', 'id'):
        capacity.append({
            'service': service.id,
            'name': service.name,
            'available_today': not service.days_available or transport.weekday_name(day) in service.days_available,
            'booked': transport.routes_on(service, day).count(),
            'max_capacity_per_day': service.max_capacity_per_day,
        })
    return Response({
        'date': day.isoformat(),
        'routes': [transport.serialize_route(r) for r in routes],
        'capacity': capacity,
    })
