from typing import Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from clinic.exceptions import ConflictError
from clinic.models import Hospitalization, HospitalizationProgress, Pet, User

DISCHARGE_STATUSES = ('discharged', 'transferred', 'deceased')


@transaction.atomic
def admit(serializer, *, tenant):
    """Save a new hospitalization; a pet can only be admitted once at a time."""
    pet = serializer.validated_data['pet']
    # Lock the pet row so two concurrent admissions serialize here
    Pet.objects.select_for_update().filter(id=pet.id).first()
    status = serializer.validated_data.get('status', 'active')
    if status == 'active' and Hospitalization.objects.filter(tenant=tenant, pet=pet, status='active').exists():
        raise ConflictError(f'{pet.name} já possui uma internação ativa')
    return serializer.save(tenant=tenant)


@transaction.atomic
def update(serializer, *, tenant):
    instance = serializer.instance
    pet = serializer.validated_data.get('pet', instance.pet)
    status = serializer.validated_data.get('status', instance.status)
    if status == 'active':
        Pet.objects.select_for_update().filter(id=pet.id).first()
        clash = (
            Hospitalization.objects.filter(tenant=tenant, pet=pet, status='active')
            .exclude(id=instance.id)
            .exists()
        )
        if clash:
            raise ConflictError(f'{pet.name} já possui uma internação ativa')
    return serializer.save()


@transaction.atomic
def discharge(hospitalization: Hospitalization, *, status: str = 'discharged', summary: str = '',
              instructions: str = '', discharge_date=None) -> Hospitalization:
    locked = Hospitalization.objects.select_for_update().get(id=hospitalization.id)
    if locked.status != 'active':
        raise ConflictError('Apenas internações ativas podem receber alta')
    if status not in DISCHARGE_STATUSES:
        raise ValidationError({'status': f'Status de saída inválido: {status}'})
    locked.status = status
    locked.discharge_date = discharge_date or timezone.now()
    locked.discharge_summary = summary or locked.discharge_summary
    locked.discharge_instructions = instructions or locked.discharge_instructions
    locked.save(update_fields=['status', 'discharge_date', 'discharge_summary', 'discharge_instructions', 'updated_at'])
    return locked


def add_progress(hospitalization: Hospitalization, *, recorded_by: Optional[User], **fields) -> HospitalizationProgress:
    if hospitalization.status != 'active':
        raise ConflictError('Internação encerrada não aceita evolução')
    return HospitalizationProgress.objects.create(hospitalization=hospitalization, recorded_by=recorded_by, **fields)


def serialize_progress(p: HospitalizationProgress) -> dict:
    return {
        'id': p.id,
        'hospitalization': p.hospitalization_id,
        'recorded_at': p.recorded_at.isoformat(),
        'temperature': str(p.temperature) if p.temperature is not None else None,
        'heart_rate': p.heart_rate,
        'respiratory_rate': p.respiratory_rate,
        'weight': str(p.weight) if p.weight is not None else None,
        'notes': p.notes,
        'recorded_by': p.recorded_by.username if p.recorded_by else '',
    }
