"""
Database models for the VetSystem backend.

Every business record belongs to a :class:`Tenant` (a clinic or a pet
shop).  Field names follow the entity shapes the single-page front end
already uses (``full_name``, ``owner``, ``selected_modules`` ...) so that
responses can be handed to it with little translation.
"""
from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator
from django.db import models
from django.utils import timezone


MODULE_CLINIC = 'clinic_management'
MODULE_PETSHOP = 'petshop'
MODULE_FINANCIAL = 'financial'
MODULE_TRANSPORT = 'transport'
MODULE_CHOICES = [
    (MODULE_CLINIC, 'Gestão Clínica'),
    (MODULE_PETSHOP, 'Pet Shop'),
    (MODULE_FINANCIAL, 'Financeiro'),
    (MODULE_TRANSPORT, 'Leva e Traz'),
]


class Tenant(models.Model):
    """One customer organization (clinic or pet shop).

    ``access_url`` is the slug the front end puts in ``?store=``.  The
    onboarding wizard keeps its position in ``current_setup_step``.
    """
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('trial', 'Trial'),
        ('suspended', 'Suspended'),
        ('inactive', 'Inactive'),
    ]
    SETUP_CHOICES = [
        ('pending', 'Pending'),
        ('in_progress', 'In progress'),
        ('completed', 'Completed'),
    ]
    company_name = models.CharField(max_length=255)
    access_url = models.SlugField(max_length=100, unique=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)
    selected_modules = models.JSONField(default=list, blank=True)
    setup_status = models.CharField(max_length=20, choices=SETUP_CHOICES, default='pending')
    current_setup_step = models.PositiveIntegerField(default=1)
    customization = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    ACCESSIBLE_STATUSES = ('active', 'trial')

    def has_module(self, module: str) -> bool:
        return module in (self.selected_modules or [])

    def __str__(self) -> str:
        return f"{self.company_name} ({self.access_url})"


class User(AbstractUser):
    """Custom user with a platform role and an optional active tenant.

    ``super`` users operate the platform and may act on any tenant.
    The other roles only work inside tenants they are members of.
    """
    ROLE_CHOICES = [
        ('super', 'Platform administrator'),
        ('admin', 'Tenant administrator'),
        ('vet', 'Veterinarian'),
        ('staff', 'Staff'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='staff')
    tenant = models.ForeignKey(
        Tenant, null=True, blank=True, on_delete=models.SET_NULL, related_name='bound_users', db_index=True
    )
    tenant_bind_time = models.DateTimeField(null=True, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class TenantMembership(models.Model):
    """Links a user to a tenant with a role inside that tenant."""
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('vet', 'Veterinarian'),
        ('staff', 'Staff'),
    ]
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='memberships')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='staff')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [('tenant', 'user')]

    def __str__(self) -> str:
        return f"{self.user} in {self.tenant} as {self.role}"


class TenantOwned(models.Model):
    """Abstract base for every record that lives inside one tenant."""
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='+', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# ---------------------------------------------------------------------------
# Customers & pets
# ---------------------------------------------------------------------------

class Customer(TenantOwned):
    full_name = models.CharField(max_length=255)
    cpf = models.CharField(max_length=11, blank=True, db_index=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.JSONField(default=dict, blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return self.full_name


class Pet(TenantOwned):
    GENDER_CHOICES = [
        ('male', 'Macho'),
        ('female', 'Fêmea'),
        ('unknown', 'Desconhecido'),
    ]
    owner = models.ForeignKey(Customer, on_delete=models.CASCADE, related_name='pets')
    name = models.CharField(max_length=120)
    species = models.CharField(max_length=60, blank=True)
    breed = models.CharField(max_length=120, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, default='unknown')
    weight = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    microchip = models.CharField(max_length=64, blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.species})"


class Service(TenantOwned):
    """A sellable service (bath, grooming, consultation ...)."""
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=60, blank=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    duration = models.PositiveIntegerField(default=30, help_text="Duração em minutos")
    points = models.PositiveIntegerField(default=0)

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------------

class Appointment(TenantOwned):
    TYPE_CHOICES = [
        ('consultation', 'Consulta'),
        ('exam', 'Exame'),
        ('vaccination', 'Vacinação'),
        ('surgery', 'Cirurgia'),
        ('return', 'Retorno'),
        ('grooming', 'Banho e Tosa'),
        ('telemedicine', 'Telemedicina'),
    ]
    STATUS_CHOICES = [
        ('scheduled', 'Agendado'),
        ('confirmed', 'Confirmado'),
        ('completed', 'Concluído'),
        ('canceled', 'Cancelado'),
        ('no_show', 'Não compareceu'),
    ]
    # Statuses that no longer occupy the calendar for conflict purposes
    INACTIVE_STATUSES = ('canceled', 'no_show')

    pet = models.ForeignKey(Pet, on_delete=models.CASCADE, related_name='appointments')
    service = models.ForeignKey(Service, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments')
    start_at = models.DateTimeField(db_index=True)
    end_at = models.DateTimeField()
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='consultation')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='scheduled', db_index=True)
    doctor = models.CharField(max_length=120, blank=True)
    reason = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    is_telemedicine = models.BooleanField(default=False)
    health_plan_coverage = models.BooleanField(default=False)
    health_plan_authorization = models.CharField(max_length=120, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=['tenant', 'start_at'], name='clinic_appo_tenant__4b1f0e_idx'),
            models.Index(fields=['tenant', 'doctor', 'start_at'], name='clinic_appo_tenant__9c2d7a_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.start_at and not self.end_at:
            self.end_at = self.start_at + timedelta(minutes=settings.APPOINTMENT_DEFAULT_MINUTES)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.get_type_display()} {self.pet_id} @ {self.start_at:%F %H:%M}"


# ---------------------------------------------------------------------------
# Medical records
# ---------------------------------------------------------------------------

class MedicalRecord(TenantOwned):
    RECORD_TYPE_CHOICES = [
        ('consultation', 'Consulta'),
        ('exam', 'Exame'),
        ('surgery', 'Cirurgia'),
        ('vaccination', 'Vacinação'),
        ('return', 'Retorno'),
        ('other', 'Outro'),
    ]
    pet = models.ForeignKey(Pet, on_delete=models.CASCADE, related_name='medical_records')
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='medical_records'
    )
    record_type = models.CharField(max_length=20, choices=RECORD_TYPE_CHOICES, default='consultation')
    date = models.DateTimeField(default=timezone.now)
    title = models.CharField(max_length=255, blank=True)
    subjective = models.TextField(blank=True)
    objective = models.TextField(blank=True)
    assessment = models.TextField(blank=True)
    plan = models.TextField(blank=True)
    diagnosis = models.TextField(blank=True)
    prescription = models.TextField(blank=True)
    lab_results = models.TextField(blank=True)
    weight = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    temperature = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    heart_rate = models.PositiveIntegerField(null=True, blank=True)
    respiratory_rate = models.PositiveIntegerField(null=True, blank=True)
    doctor = models.CharField(max_length=120, blank=True)
    notes = models.TextField(blank=True)
    follow_up_date = models.DateField(null=True, blank=True)
    is_private = models.BooleanField(default=False)
    health_plan_coverage = models.BooleanField(default=False)
    health_plan_authorization = models.CharField(max_length=120, blank=True)

    def __str__(self) -> str:
        return f"{self.record_type} {self.pet_id} {self.date:%F}"


class Vaccine(TenantOwned):
    pet = models.ForeignKey(Pet, on_delete=models.CASCADE, related_name='vaccines')
    name = models.CharField(max_length=120)
    manufacturer = models.CharField(max_length=120, blank=True)
    batch_number = models.CharField(max_length=60, blank=True)
    application_date = models.DateField(default=timezone.localdate)
    next_due_date = models.DateField(null=True, blank=True, db_index=True)
    veterinarian = models.CharField(max_length=120, blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.pet_id})"


class Medication(TenantOwned):
    pet = models.ForeignKey(Pet, on_delete=models.CASCADE, related_name='medications')
    name = models.CharField(max_length=120)
    dosage = models.CharField(max_length=120, blank=True)
    frequency = models.CharField(max_length=120, blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    prescribed_by = models.CharField(max_length=120, blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return self.name


class Allergy(TenantOwned):
    SEVERITY_CHOICES = [
        ('mild', 'Leve'),
        ('moderate', 'Moderada'),
        ('severe', 'Grave'),
    ]
    pet = models.ForeignKey(Pet, on_delete=models.CASCADE, related_name='allergies')
    allergen = models.CharField(max_length=120)
    severity = models.CharField(max_length=10, choices=SEVERITY_CHOICES, default='mild')
    reaction = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.allergen} ({self.severity})"


# ---------------------------------------------------------------------------
# Health plans
# ---------------------------------------------------------------------------

HEALTH_PLAN_COVERAGE = [
    ('consultation', 'Consultas'),
    ('vaccine', 'Vacinas'),
    ('exam', 'Exames'),
    ('surgery', 'Cirurgias'),
    ('hospitalization', 'Internações'),
    ('emergency', 'Emergências'),
    ('telemedicine', 'Telemedicina'),
    ('dental', 'Odontológico'),
]


def _percentage():
    return models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(100)])


class HealthPlan(TenantOwned):
    """A pet health plan the clinic accepts or sells."""
    name = models.CharField(max_length=255)
    provider = models.CharField(max_length=255, blank=True)
    provider_contact = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    # list of HEALTH_PLAN_COVERAGE keys
    coverage = models.JSONField(default=list, blank=True)
    consultation_limit = models.PositiveIntegerField(default=0, help_text="Consultas por ano (0 = sem limite)")
    exam_limit = models.PositiveIntegerField(default=0, help_text="Exames por ano (0 = sem limite)")
    surgery_coverage_percentage = _percentage()
    hospitalization_coverage_percentage = _percentage()
    emergency_coverage_percentage = _percentage()
    dental_coverage_percentage = _percentage()
    has_grace_period = models.BooleanField(default=False)
    grace_period_days = models.PositiveIntegerField(default=0)
    authorization_required = models.BooleanField(default=False)
    monthly_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    annual_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    is_active = models.BooleanField(default=True, db_index=True)

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Hospitalization
# ---------------------------------------------------------------------------

class Hospitalization(TenantOwned):
    STATUS_CHOICES = [
        ('active', 'Internado'),
        ('discharged', 'Alta'),
        ('transferred', 'Transferido'),
        ('deceased', 'Óbito'),
    ]
    pet = models.ForeignKey(Pet, on_delete=models.CASCADE, related_name='hospitalizations')
    admission_date = models.DateTimeField(default=timezone.now)
    discharge_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)
    reason = models.TextField(blank=True)
    diagnosis = models.TextField(blank=True)
    room = models.CharField(max_length=60, blank=True)
    responsible_doctor = models.CharField(max_length=120, blank=True)
    treatment_plan = models.TextField(blank=True)
    nutrition_plan = models.TextField(blank=True)
    discharge_summary = models.TextField(blank=True)
    discharge_instructions = models.TextField(blank=True)
    health_plan_coverage = models.BooleanField(default=False)
    health_plan_authorization = models.CharField(max_length=120, blank=True)

    def __str__(self) -> str:
        return f"Internação {self.id} pet={self.pet_id} ({self.status})"


class HospitalizationProgress(models.Model):
    """A periodic evolution note taken during a hospitalization."""
    hospitalization = models.ForeignKey(Hospitalization, on_delete=models.CASCADE, related_name='progress')
    recorded_at = models.DateTimeField(default=timezone.now)
    temperature = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    heart_rate = models.PositiveIntegerField(null=True, blank=True)
    respiratory_rate = models.PositiveIntegerField(null=True, blank=True)
    weight = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True)
    recorded_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')

    class Meta:
        indexes = [models.Index(fields=['hospitalization', 'recorded_at'], name='clinic_hosp_hospita_5e8a21_idx')]

    def __str__(self) -> str:
        return f"progress {self.hospitalization_id} @ {self.recorded_at:%F %H:%M}"


# ---------------------------------------------------------------------------
# Inventory & sales
# ---------------------------------------------------------------------------

class Product(TenantOwned):
    MODULE_CHOICES = [
        ('petshop', 'Pet Shop'),
        ('clinic', 'Clínica'),
    ]
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=60, blank=True)
    module = models.CharField(max_length=10, choices=MODULE_CHOICES, default='petshop')
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    cost_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    sku = models.CharField(max_length=64, blank=True)
    barcode = models.CharField(max_length=64, blank=True, db_index=True)
    stock_quantity = models.IntegerField(default=0)
    min_stock = models.IntegerField(default=0)
    description = models.TextField(blank=True)
    image_url = models.URLField(blank=True)
    active = models.BooleanField(default=True)

    def __str__(self) -> str:
        return self.name


class Sale(TenantOwned):
    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Dinheiro'),
        ('credit_card', 'Cartão de crédito'),
        ('debit_card', 'Cartão de débito'),
        ('pix', 'PIX'),
    ]
    PAYMENT_STATUS_CHOICES = [
        ('paid', 'Pago'),
        ('pending', 'Pendente'),
        ('refunded', 'Estornado'),
    ]
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='purchases')
    purchase_date = models.DateTimeField(default=timezone.now, db_index=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='cash')
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='paid')
    amount_received = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    change_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    sold_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')

    def __str__(self) -> str:
        return f"Venda {self.id} ({self.total_amount})"


class SaleItem(models.Model):
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, null=True, on_delete=models.SET_NULL, related_name='sale_items')
    product_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)

    def __str__(self) -> str:
        return f"{self.quantity}x {self.product_name}"


# ---------------------------------------------------------------------------
# Financial
# ---------------------------------------------------------------------------

class FinancialEntry(TenantOwned):
    """An account payable or receivable."""
    KIND_CHOICES = [
        ('payable', 'A pagar'),
        ('receivable', 'A receber'),
    ]
    STATUS_CHOICES = [
        ('pending', 'Pendente'),
        ('paid', 'Pago'),
        ('canceled', 'Cancelado'),
    ]
    kind = models.CharField(max_length=12, choices=KIND_CHOICES, db_index=True)
    description = models.CharField(max_length=255)
    counterparty = models.CharField(max_length=255, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    due_date = models.DateField(db_index=True)
    category = models.CharField(max_length=60, blank=True)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='pending', db_index=True)
    payment_date = models.DateField(null=True, blank=True)
    payment_method = models.CharField(max_length=30, blank=True)
    document_number = models.CharField(max_length=60, blank=True)
    notes = models.TextField(blank=True)
    sale = models.OneToOneField(Sale, null=True, blank=True, on_delete=models.SET_NULL, related_name='financial_entry')

    class Meta:
        indexes = [models.Index(fields=['tenant', 'kind', 'status', 'due_date'], name='clinic_fina_tenant__7d3c19_idx')]

    @property
    def is_overdue(self) -> bool:
        return self.status == 'pending' and self.due_date < timezone.localdate()

    def __str__(self) -> str:
        return f"{self.kind} {self.description} {self.amount}"


# ---------------------------------------------------------------------------
# Service queue (pet shop)
# ---------------------------------------------------------------------------

class QueueService(TenantOwned):
    STATUS_CHOICES = [
        ('waiting', 'Aguardando'),
        ('in_progress', 'Em atendimento'),
        ('completed', 'Concluído'),
        ('canceled', 'Cancelado'),
    ]
    pet = models.ForeignKey(Pet, on_delete=models.CASCADE, related_name='queue_entries')
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name='queue_entries')
    number = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='waiting', db_index=True)
    checked_in_at = models.DateTimeField(default=timezone.now, db_index=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"#{self.number} {self.pet_id} ({self.status})"


class QueueTransition(models.Model):
    """Records a status transition for a queue entry."""
    entry = models.ForeignKey(QueueService, related_name='transitions', on_delete=models.CASCADE)
    from_status = models.CharField(max_length=20, null=True, blank=True)
    to_status = models.CharField(max_length=20)
    operator = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    timestamp = models.DateTimeField(auto_now_add=True)
    reason = models.CharField(max_length=255, blank=True)

    def __str__(self) -> str:
        return f"{self.entry_id}: {self.from_status} -> {self.to_status}"


# ---------------------------------------------------------------------------
# Transport (pick-up & drop-off)
# ---------------------------------------------------------------------------

WEEKDAYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']


class TransportService(TenantOwned):
    STATUS_CHOICES = [
        ('active', 'Ativo'),
        ('inactive', 'Inativo'),
    ]
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')
    days_available = models.JSONField(default=list, blank=True)
    hours_start = models.TimeField(default=time(8, 0))
    hours_end = models.TimeField(default=time(18, 0))
    max_capacity_per_day = models.PositiveIntegerField(default=10)
    accepted_pet_types = models.JSONField(default=list, blank=True)
    base_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))

    def __str__(self) -> str:
        return self.name


class TransportVehicle(TenantOwned):
    STATUS_CHOICES = [
        ('available', 'Disponível'),
        ('in_use', 'Em uso'),
        ('maintenance', 'Manutenção'),
    ]
    plate = models.CharField(max_length=16)
    model = models.CharField(max_length=120, blank=True)
    capacity = models.PositiveIntegerField(default=1)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='available')

    def __str__(self) -> str:
        return self.plate


class TransportDriver(TenantOwned):
    STATUS_CHOICES = [
        ('active', 'Ativo'),
        ('inactive', 'Inativo'),
    ]
    name = models.CharField(max_length=120)
    phone = models.CharField(max_length=32, blank=True)
    license_number = models.CharField(max_length=32, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')

    def __str__(self) -> str:
        return self.name


class TransportRoute(TenantOwned):
    DIRECTION_CHOICES = [
        ('pickup', 'Buscar'),
        ('dropoff', 'Levar'),
        ('round_trip', 'Leva e traz'),
    ]
    STATUS_CHOICES = [
        ('scheduled', 'Agendado'),
        ('in_transit', 'Em trânsito'),
        ('completed', 'Concluído'),
        ('canceled', 'Cancelado'),
    ]
    service = models.ForeignKey(TransportService, on_delete=models.PROTECT, related_name='routes')
    pet = models.ForeignKey(Pet, on_delete=models.CASCADE, related_name='transport_routes')
    vehicle = models.ForeignKey(TransportVehicle, null=True, blank=True, on_delete=models.SET_NULL, related_name='routes')
    driver = models.ForeignKey(TransportDriver, null=True, blank=True, on_delete=models.SET_NULL, related_name='routes')
    scheduled_date = models.DateField(db_index=True)
    pickup_time = models.TimeField()
    pickup_address = models.CharField(max_length=255, blank=True)
    dropoff_address = models.CharField(max_length=255, blank=True)
    direction = models.CharField(max_length=12, choices=DIRECTION_CHOICES, default='round_trip')
    pet_type = models.CharField(max_length=30, blank=True)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='scheduled', db_index=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    def __str__(self) -> str:
        return f"Rota {self.id} {self.scheduled_date} {self.pickup_time}"


# ---------------------------------------------------------------------------
# Support
# ---------------------------------------------------------------------------

class SupportTicket(TenantOwned):
    PRIORITY_CHOICES = [
        ('low', 'Baixa'),
        ('medium', 'Média'),
        ('high', 'Alta'),
        ('urgent', 'Urgente'),
    ]
    CATEGORY_CHOICES = [
        ('technical', 'Técnico'),
        ('billing', 'Financeiro'),
        ('feature_request', 'Sugestão'),
        ('other', 'Outro'),
    ]
    STATUS_CHOICES = [
        ('open', 'Aberto'),
        ('in_progress', 'Em andamento'),
        ('resolved', 'Resolvido'),
        ('closed', 'Fechado'),
    ]
    title = models.CharField(max_length=255)
    description = models.TextField()
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='technical')
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='open', db_index=True)
    created_by = models.ForeignKey(User, null=True, on_delete=models.SET_NULL, related_name='support_tickets')

    def __str__(self) -> str:
        return f"{self.title} (#{self.id})"


class SupportMessage(models.Model):
    ticket = models.ForeignKey(SupportTicket, on_delete=models.CASCADE, related_name='messages')
    sender = models.ForeignKey(User, null=True, on_delete=models.SET_NULL, related_name='+')
    content = models.TextField()
    is_staff_reply = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=['ticket', 'created_at'], name='clinic_supp_ticket__3a6b42_idx')]

    def __str__(self) -> str:
        return f"msg {self.id} ticket={self.ticket_id}"


class KnowledgeArticle(models.Model):
    """Help-center article.  ``tenant`` empty means visible to everyone."""
    tenant = models.ForeignKey(Tenant, null=True, blank=True, on_delete=models.CASCADE, related_name='+')
    title = models.CharField(max_length=255)
    content = models.TextField()
    category = models.CharField(max_length=60, blank=True)
    tags = models.JSONField(default=list, blank=True)
    published = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.title


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class AuditEvent(models.Model):
    tenant = models.ForeignKey(Tenant, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='clinic_audi_action_2f9e61_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='clinic_audi_object__8b4d03_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
