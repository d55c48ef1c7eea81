"""
Clinical history (medical records, vaccines, medications, allergies) and
the health plans the clinic works with.

All of it belongs to the clinic management module.  Records flagged
``is_private`` are only visible to administrators and veterinarians.
"""
from __future__ import annotations

from datetime import timedelta

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import MODULE_CLINIC, Allergy, HealthPlan, MedicalRecord, Medication, Vaccine
from ..permissions import HasActiveTenant, IsTenantAdminOrReadOnly, requires_module
from ..serializers.actions import DueVaccinesQuerySerializer
from ..serializers.entities import (
    AllergySerializer, HealthPlanSerializer, MedicalRecordSerializer, MedicationSerializer, VaccineSerializer,
)
from ..services.tenancy import CLINICAL_ROLES
from .entities import entity_endpoints


def _hide_private(request, qs):
    if getattr(request, 'tenant_role', '') in CLINICAL_ROLES:
        return qs
    return qs.filter(is_private=False)


medical_records, medical_record_detail = entity_endpoints(
    'medical-records', MedicalRecord, MedicalRecordSerializer,
    module=MODULE_CLINIC,
    filter_fields=('pet', 'appointment', 'record_type', 'doctor', 'is_private'),
    search_fields=('title', 'diagnosis', 'assessment', 'notes'),
    ordering=('-date', '-id'),
    scope=_hide_private,
)

vaccines, vaccine_detail = entity_endpoints(
    'vaccines', Vaccine, VaccineSerializer,
    module=MODULE_CLINIC,
    filter_fields=('pet', 'name', 'next_due_date'),
    ordering=('-application_date', '-id'),
)

medications, medication_detail = entity_endpoints(
    'medications', Medication, MedicationSerializer,
    module=MODULE_CLINIC,
    filter_fields=('pet', 'name'),
)

allergies, allergy_detail = entity_endpoints(
    'allergies', Allergy, AllergySerializer,
    module=MODULE_CLINIC,
    filter_fields=('pet', 'severity'),
)

health_plans, health_plan_detail = entity_endpoints(
    'health-plans', HealthPlan, HealthPlanSerializer,
    module=MODULE_CLINIC,
    filter_fields=('is_active', 'provider'),
    search_fields=('name', 'provider', 'description'),
    ordering=('name', 'id'),
    write_permissions=(IsTenantAdminOrReadOnly,),
)


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasActiveTenant, requires_module(MODULE_CLINIC)])
def vaccines_due(request):
    """Vaccines whose next dose falls within the next ``days`` days (overdue included)."""
    q = DueVaccinesQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    today = timezone.localdate()
    until = today + timedelta(days=q.validated_data['days'])
    rows = (
        Vaccine.objects.filter(tenant=request.tenant, next_due_date__isnull=False, next_due_date__lte=until)
        .select_related('pet', 'pet__owner')
        .order_by('next_due_date', 'id')
    )
    data = []
    for v in rows:
        data.append({
            'id': v.id,
            'name': v.name,
            'pet': v.pet_id,
            'pet_name': v.pet.name,
            'owner_name': v.pet.owner.full_name,
            'owner_phone': v.pet.owner.phone,
            'next_due_date': v.next_due_date.isoformat(),
            'overdue': v.next_due_date < today,
        })
    return Response(data)
