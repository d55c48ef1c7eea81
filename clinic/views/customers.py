"""
Customers, pets and the service catalog, plus the CPF lookup utility.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Customer, Pet, Service
from ..permissions import IsTenantAdminOrReadOnly
from ..serializers.entities import CustomerSerializer, PetSerializer, ServiceSerializer
from ..services.cpf import format_cpf, lookup_cpf
from .entities import entity_endpoints

customers, customer_detail = entity_endpoints(
    'customers', Customer, CustomerSerializer,
    filter_fields=('cpf', 'email', 'phone'),
    search_fields=('full_name', 'cpf', 'email', 'phone'),
)

pets, pet_detail = entity_endpoints(
    'pets', Pet, PetSerializer,
    filter_fields=('owner', 'species', 'gender', 'microchip'),
    search_fields=('name', 'breed', 'microchip', 'owner__full_name'),
    scope=lambda request, qs: qs.select_related('owner'),
)

services, service_detail = entity_endpoints(
    'services', Service, ServiceSerializer,
    filter_fields=('category',),
    search_fields=('name', 'description'),
    ordering=('name', 'id'),
    write_permissions=(IsTenantAdminOrReadOnly,),
)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def cpf_lookup(request):
    """Validate a CPF and return the masked form the registration form shows."""
    value = request.query_params.get('cpf', '')
    result = lookup_cpf(value)
    return Response({**result, 'formatted': format_cpf(value)})
