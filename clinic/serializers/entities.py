"""
Model serializers for the tenant-owned entities.

Every serializer expects ``context['tenant']``.  Related fields only
accept primary keys of that tenant, so a payload pointing at another
tenant's customer or pet fails validation like an unknown id would.
"""
import bleach
from django.conf import settings
from django.utils import timezone
from rest_framework import serializers

from clinic.models import (
    HEALTH_PLAN_COVERAGE, MODULE_CHOICES, WEEKDAYS,
    Allergy, Appointment, Customer, FinancialEntry, HealthPlan, Hospitalization, HospitalizationProgress,
    KnowledgeArticle, MedicalRecord, Medication, Pet, Product, Service, SupportTicket, Tenant,
    TenantOwned, TransportDriver, TransportRoute, TransportService, TransportVehicle, Vaccine,
)
from clinic.services.appointments import default_end
from clinic.services.calendar import TYPE_LABELS
from clinic.services.cpf import clean_cpf, format_cpf, lookup_cpf
from clinic.services.dates import calculate_age


def _is_tenant_owned(model) -> bool:
    return issubclass(model, TenantOwned)


def _clean(value):
    return bleach.clean((value or '').strip(), strip=True)


class TenantScopedSerializer(serializers.ModelSerializer):
    """ModelSerializer whose related fields are limited to the active tenant."""

    def get_fields(self):
        fields = super().get_fields()
        tenant = self.context.get('tenant')
        for field in fields.values():
            queryset = getattr(field, 'queryset', None)
            if queryset is not None and _is_tenant_owned(queryset.model):
                field.queryset = queryset.filter(tenant=tenant) if tenant is not None else queryset.none()
        return fields


class TenantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = (
            'id', 'company_name', 'access_url', 'status', 'selected_modules', 'setup_status',
            'current_setup_step', 'customization', 'created_at', 'updated_at',
        )
        read_only_fields = ('setup_status', 'current_setup_step', 'created_at', 'updated_at')

    def validate_selected_modules(self, value):
        known = dict(MODULE_CHOICES)
        if not isinstance(value, list) or any(m not in known for m in value):
            raise serializers.ValidationError(f'Módulos válidos: {", ".join(known)}')
        # keep declaration order, drop duplicates
        return [m for m in known if m in value]


class CustomerSerializer(TenantScopedSerializer):
    cpf = serializers.CharField(required=False, allow_blank=True, max_length=20)
    cpf_formatted = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def get_cpf_formatted(self, obj):
        return format_cpf(obj.cpf)

    def validate_full_name(self, v):
        v = _clean(v)
        if len(v) < 2:
            raise serializers.ValidationError('Nome deve ter ao menos 2 caracteres')
        return v

    def validate_cpf(self, v):
        if not (v or '').strip():
            return ''
        result = lookup_cpf(v)
        if not result['valid']:
            raise serializers.ValidationError(result['message'])
        return clean_cpf(v)


class PetSerializer(TenantScopedSerializer):
    age = serializers.SerializerMethodField()
    owner_name = serializers.CharField(source='owner.full_name', read_only=True)

    class Meta:
        model = Pet
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def get_age(self, obj):
        return calculate_age(obj.birth_date) if obj.birth_date else None

    def validate_name(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Nome do pet obrigatório')
        return v


class ServiceSerializer(TenantScopedSerializer):
    class Meta:
        model = Service
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')


class AppointmentSerializer(TenantScopedSerializer):
    end_at = serializers.DateTimeField(required=False, allow_null=True)
    pet_name = serializers.CharField(source='pet.name', read_only=True)
    type_label = serializers.SerializerMethodField()

    class Meta:
        model = Appointment
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def get_type_label(self, obj):
        return TYPE_LABELS.get(obj.type, obj.type)

    def validate(self, attrs):
        instance = self.instance
        start = attrs.get('start_at', getattr(instance, 'start_at', None))
        end = attrs.get('end_at', getattr(instance, 'end_at', None))
        if start is None:
            raise serializers.ValidationError({'start_at': 'Data de início obrigatória'})
        if instance is not None and 'start_at' in attrs and 'end_at' not in attrs:
            # rescheduling keeps the booked duration
            end = start + (instance.end_at - instance.start_at) if instance.end_at else None
        if end is None:
            end = default_end(start)
        if end <= start:
            raise serializers.ValidationError({'end_at': 'O término deve ser posterior ao início'})
        attrs['end_at'] = end
        if attrs.get('type') == 'telemedicine':
            attrs['is_telemedicine'] = True
        return attrs


class MedicalRecordSerializer(TenantScopedSerializer):
    class Meta:
        model = MedicalRecord
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def validate(self, attrs):
        appointment = attrs.get('appointment')
        pet = attrs.get('pet', getattr(self.instance, 'pet', None))
        if appointment is not None and pet is not None and appointment.pet_id != pet.id:
            raise serializers.ValidationError({'appointment': 'Agendamento pertence a outro pet'})
        return attrs


class VaccineSerializer(TenantScopedSerializer):
    class Meta:
        model = Vaccine
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def validate(self, attrs):
        applied = attrs.get('application_date', getattr(self.instance, 'application_date', None))
        due = attrs.get('next_due_date', getattr(self.instance, 'next_due_date', None))
        if applied and due and due < applied:
            raise serializers.ValidationError({'next_due_date': 'Próxima dose antes da aplicação'})
        return attrs


class MedicationSerializer(TenantScopedSerializer):
    class Meta:
        model = Medication
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')


class AllergySerializer(TenantScopedSerializer):
    class Meta:
        model = Allergy
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')


class HealthPlanSerializer(TenantScopedSerializer):
    class Meta:
        model = HealthPlan
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def validate_name(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Nome do plano obrigatório')
        return v

    def validate_coverage(self, value):
        known = dict(HEALTH_PLAN_COVERAGE)
        if not isinstance(value, list) or any(c not in known for c in value):
            raise serializers.ValidationError(f'Coberturas válidas: {", ".join(known)}')
        return [c for c in known if c in value]

    def validate(self, attrs):
        if not attrs.get('has_grace_period', getattr(self.instance, 'has_grace_period', False)):
            attrs['grace_period_days'] = 0
        return attrs


class HospitalizationSerializer(TenantScopedSerializer):
    pet_name = serializers.CharField(source='pet.name', read_only=True)

    class Meta:
        model = Hospitalization
        exclude = ('tenant',)
        read_only_fields = ('discharge_date', 'created_at', 'updated_at')

    def validate_status(self, value):
        if self.instance is not None and value != self.instance.status:
            raise serializers.ValidationError('Use a alta para alterar o status da internação')
        return value


class HospitalizationProgressSerializer(serializers.ModelSerializer):
    class Meta:
        model = HospitalizationProgress
        fields = ('recorded_at', 'temperature', 'heart_rate', 'respiratory_rate', 'weight', 'notes')
        extra_kwargs = {'recorded_at': {'required': False}}


class ProductSerializer(TenantScopedSerializer):
    is_low_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def get_is_low_stock(self, obj):
        return obj.stock_quantity <= obj.min_stock

    def validate_price(self, v):
        if v < 0:
            raise serializers.ValidationError('Preço não pode ser negativo')
        return v


class FinancialEntrySerializer(TenantScopedSerializer):
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = FinancialEntry
        exclude = ('tenant',)
        read_only_fields = ('sale', 'created_at', 'updated_at')

    def validate_amount(self, v):
        if v <= 0:
            raise serializers.ValidationError('Valor deve ser positivo')
        return v

    def validate(self, attrs):
        status = attrs.get('status', getattr(self.instance, 'status', 'pending'))
        if status == 'paid' and not attrs.get('payment_date', getattr(self.instance, 'payment_date', None)):
            attrs['payment_date'] = timezone.localdate()
        return attrs


class TransportServiceSerializer(TenantScopedSerializer):
    class Meta:
        model = TransportService
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def validate_days_available(self, value):
        if not isinstance(value, list) or any(d not in WEEKDAYS for d in value):
            raise serializers.ValidationError(f'Dias válidos: {", ".join(WEEKDAYS)}')
        return value

    def validate_accepted_pet_types(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError('Informe uma lista de tipos de pet')
        return [str(v).strip() for v in value if str(v).strip()]

    def validate(self, attrs):
        start = attrs.get('hours_start', getattr(self.instance, 'hours_start', None))
        end = attrs.get('hours_end', getattr(self.instance, 'hours_end', None))
        if start and end and end <= start:
            raise serializers.ValidationError({'hours_end': 'Horário final deve ser após o inicial'})
        return attrs


class TransportVehicleSerializer(TenantScopedSerializer):
    class Meta:
        model = TransportVehicle
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')


class TransportDriverSerializer(TenantScopedSerializer):
    class Meta:
        model = TransportDriver
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')


class TransportRouteSerializer(TenantScopedSerializer):
    class Meta:
        model = TransportRoute
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def validate(self, attrs):
        instance = self.instance
        service = attrs.get('service', getattr(instance, 'service', None))
        if attrs.get('price') is None and (instance is None or instance.price is None):
            attrs['price'] = service.base_price
        return attrs


class SupportTicketSerializer(TenantScopedSerializer):
    created_by = serializers.CharField(source='created_by.username', read_only=True)
    message_count = serializers.SerializerMethodField()

    class Meta:
        model = SupportTicket
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def get_message_count(self, obj):
        return obj.messages.count()

    def validate_title(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Título obrigatório')
        return v

    def validate_description(self, v):
        return _clean(v)


class KnowledgeArticleSerializer(serializers.ModelSerializer):
    class Meta:
        model = KnowledgeArticle
        exclude = ('tenant',)
        read_only_fields = ('created_at', 'updated_at')

    def validate_content(self, v):
        return bleach.clean(v or '', tags=settings.KNOWLEDGE_ALLOWED_TAGS, strip=True)

    def validate_tags(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError('Informe uma lista de tags')
        return [str(t).strip() for t in value if str(t).strip()]
