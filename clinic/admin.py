"""
Django admin registrations.

Platform operators use ``/admin/`` to inspect tenants and fix data by
hand.  Tenant-owned models show and filter by tenant.
"""
from django.contrib import admin

from .models import (
    Allergy,
    Appointment,
    AuditEvent,
    Customer,
    FinancialEntry,
    HealthPlan,
    Hospitalization,
    HospitalizationProgress,
    KnowledgeArticle,
    MedicalRecord,
    Medication,
    Pet,
    Product,
    QueueService,
    QueueTransition,
    Sale,
    SaleItem,
    Service,
    SupportMessage,
    SupportTicket,
    Tenant,
    TenantMembership,
    TransportDriver,
    TransportRoute,
    TransportService,
    TransportVehicle,
    User,
    Vaccine,
)


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ('id', 'company_name', 'access_url', 'status', 'setup_status', 'created_at')
    list_filter = ('status', 'setup_status')
    search_fields = ('company_name', 'access_url')


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'tenant', 'is_staff', 'is_superuser')
    list_filter = ('role', 'tenant')
    search_fields = ('username', 'first_name', 'last_name', 'email')


@admin.register(TenantMembership)
class TenantMembershipAdmin(admin.ModelAdmin):
    list_display = ('user', 'tenant', 'role', 'created_at')
    list_filter = ('tenant', 'role')
    search_fields = ('user__username', 'tenant__company_name')


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'cpf', 'phone', 'tenant')
    list_filter = ('tenant',)
    search_fields = ('full_name', 'cpf', 'email', 'phone')


@admin.register(Pet)
class PetAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'species', 'breed', 'owner', 'tenant')
    list_filter = ('tenant', 'species')
    search_fields = ('name', 'owner__full_name', 'microchip')


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'price', 'duration', 'tenant')
    list_filter = ('tenant', 'category')
    search_fields = ('name',)


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'pet', 'type', 'status', 'start_at', 'end_at', 'doctor', 'tenant')
    list_filter = ('tenant', 'status', 'type')
    search_fields = ('pet__name', 'doctor', 'reason')
    date_hierarchy = 'start_at'


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'pet', 'record_type', 'date', 'doctor', 'is_private', 'tenant')
    list_filter = ('tenant', 'record_type', 'is_private')
    search_fields = ('pet__name', 'title', 'diagnosis')


@admin.register(Vaccine)
class VaccineAdmin(admin.ModelAdmin):
    list_display = ('name', 'pet', 'application_date', 'next_due_date', 'tenant')
    list_filter = ('tenant',)
    search_fields = ('name', 'pet__name', 'batch_number')


admin.site.register(Medication)
admin.site.register(Allergy)


@admin.register(HealthPlan)
class HealthPlanAdmin(admin.ModelAdmin):
    list_display = ('name', 'provider', 'monthly_fee', 'is_active', 'tenant')
    list_filter = ('tenant', 'is_active')
    search_fields = ('name', 'provider')


class HospitalizationProgressInline(admin.TabularInline):
    model = HospitalizationProgress
    extra = 0


@admin.register(Hospitalization)
class HospitalizationAdmin(admin.ModelAdmin):
    list_display = ('id', 'pet', 'status', 'admission_date', 'discharge_date', 'room', 'tenant')
    list_filter = ('tenant', 'status')
    search_fields = ('pet__name', 'reason', 'responsible_doctor')
    inlines = [HospitalizationProgressInline]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'sku', 'barcode', 'price', 'stock_quantity', 'min_stock', 'active', 'tenant')
    list_filter = ('tenant', 'category', 'active')
    search_fields = ('name', 'sku', 'barcode')


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ('id', 'customer', 'total_amount', 'payment_method', 'payment_status', 'purchase_date', 'tenant')
    list_filter = ('tenant', 'payment_method', 'payment_status')
    inlines = [SaleItemInline]


@admin.register(FinancialEntry)
class FinancialEntryAdmin(admin.ModelAdmin):
    list_display = ('id', 'kind', 'description', 'amount', 'due_date', 'status', 'tenant')
    list_filter = ('tenant', 'kind', 'status', 'category')
    search_fields = ('description', 'counterparty', 'document_number')


@admin.register(QueueService)
class QueueServiceAdmin(admin.ModelAdmin):
    list_display = ('id', 'number', 'pet', 'service', 'status', 'checked_in_at', 'tenant')
    list_filter = ('tenant', 'status')


@admin.register(QueueTransition)
class QueueTransitionAdmin(admin.ModelAdmin):
    list_display = ('entry', 'from_status', 'to_status', 'operator', 'timestamp')
    list_filter = ('to_status',)


admin.site.register(TransportService)
admin.site.register(TransportVehicle)
admin.site.register(TransportDriver)


@admin.register(TransportRoute)
class TransportRouteAdmin(admin.ModelAdmin):
    list_display = ('id', 'service', 'pet', 'scheduled_date', 'pickup_time', 'direction', 'status', 'tenant')
    list_filter = ('tenant', 'status', 'direction')


class SupportMessageInline(admin.TabularInline):
    model = SupportMessage
    extra = 0


@admin.register(SupportTicket)
class SupportTicketAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'priority', 'category', 'status', 'created_by', 'tenant', 'created_at')
    list_filter = ('status', 'priority', 'category', 'tenant')
    search_fields = ('title', 'description')
    inlines = [SupportMessageInline]


@admin.register(KnowledgeArticle)
class KnowledgeArticleAdmin(admin.ModelAdmin):
    list_display = ('title', 'category', 'published', 'tenant', 'updated_at')
    list_filter = ('published', 'category')
    search_fields = ('title', 'content')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'tenant', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('user__username', 'action')
