"""
URL mappings for the VetSystem API.

Entity endpoints follow ``/api/<entity>`` and ``/api/<entity>/<id>``;
actions on one record hang below the record.  Trailing slashes are
omitted to match the front end's request helper.  Fixed paths such as
``/api/appointments/conflicts`` are listed before the ``<int:pk>``
patterns of the same prefix.
"""
from django.urls import path, include

from .auth_views import jwt_logout_view, jwt_refresh_view, login_view, me_view
from .views import (
    appointments,
    customers,
    dashboard,
    financial,
    health,
    hospitalization,
    medical,
    onboarding,
    queue,
    sales,
    support,
    tenants,
    transport,
)


def entity(prefix: str, collection, detail, name: str) -> list:
    return [
        path(f'api/{prefix}', collection, name=f'{name}-list'),
        path(f'api/{prefix}/<int:pk>', detail, name=f'{name}-detail'),
    ]


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),
    path('api/auth/me', me_view, name='me'),

    # Tenants
    path('api/tenants', tenants.tenants, name='tenant-list'),
    path('api/tenants/mine', tenants.my_tenants, name='tenant-mine'),
    path('api/tenants/current', tenants.tenant_current, name='tenant-current'),
    path('api/tenants/switch', tenants.tenant_switch, name='tenant-switch'),
    path('api/tenants/users', tenants.tenant_users, name='tenant-users'),
    path('api/tenants/users/<int:user_id>', tenants.tenant_user_remove, name='tenant-user-remove'),
    path('api/tenants/<int:pk>', tenants.tenant_detail, name='tenant-detail'),

    # Onboarding wizard
    path('api/onboarding', onboarding.onboarding_state, name='onboarding-state'),
    path('api/onboarding/advance', onboarding.onboarding_advance, name='onboarding-advance'),
    path('api/onboarding/back', onboarding.onboarding_back, name='onboarding-back'),
    path('api/onboarding/step', onboarding.onboarding_go_to, name='onboarding-step'),
    path('api/onboarding/complete', onboarding.onboarding_complete, name='onboarding-complete'),

    # Dashboard and utilities
    path('api/dashboard', dashboard.dashboard_view, name='dashboard'),
    path('api/utils/cpf', customers.cpf_lookup, name='cpf-lookup'),

    # Customers, pets, service catalog
    *entity('customers', customers.customers, customers.customer_detail, 'customer'),
    *entity('pets', customers.pets, customers.pet_detail, 'pet'),
    *entity('services', customers.services, customers.service_detail, 'service'),

    # Appointments and calendar
    path('api/appointments/conflicts', appointments.appointment_conflicts, name='appointment-conflicts'),
    path('api/appointments/<int:pk>/status', appointments.appointment_set_status, name='appointment-status'),
    *entity('appointments', appointments.appointments, appointments.appointment_detail, 'appointment'),
    path('api/calendar/day', appointments.calendar_day, name='calendar-day'),
    path('api/calendar/week', appointments.calendar_week, name='calendar-week'),

    # Medical
    *entity('medical-records', medical.medical_records, medical.medical_record_detail, 'medical-record'),
    path('api/vaccines/due', medical.vaccines_due, name='vaccine-due'),
    *entity('vaccines', medical.vaccines, medical.vaccine_detail, 'vaccine'),
    *entity('medications', medical.medications, medical.medication_detail, 'medication'),
    *entity('allergies', medical.allergies, medical.allergy_detail, 'allergy'),
    *entity('health-plans', medical.health_plans, medical.health_plan_detail, 'health-plan'),

    # Hospitalization
    *entity('hospitalizations', hospitalization.hospitalizations, hospitalization.hospitalization_detail,
            'hospitalization'),
    path('api/hospitalizations/<int:pk>/progress', hospitalization.hospitalization_progress,
         name='hospitalization-progress'),
    path('api/hospitalizations/<int:pk>/discharge', hospitalization.hospitalization_discharge,
         name='hospitalization-discharge'),

    # Pet shop
    path('api/products/low-stock', sales.products_low_stock, name='product-low-stock'),
    path('api/products/barcode/<str:barcode>', sales.product_by_barcode, name='product-barcode'),
    *entity('products', sales.products, sales.product_detail, 'product'),
    path('api/sales', sales.sales_history, name='sale-list'),
    path('api/sales/checkout', sales.checkout, name='sale-checkout'),
    path('api/sales/<int:pk>', sales.sale_detail, name='sale-detail'),

    # Service queue
    path('api/queue', queue.queue_today, name='queue-today'),
    path('api/queue/check-in', queue.queue_check_in, name='queue-check-in'),
    path('api/queue/<int:pk>', queue.queue_entry_detail, name='queue-detail'),
    path('api/queue/<int:pk>/status', queue.queue_update_status, name='queue-status'),
    path('api/queue/<int:pk>/notes', queue.queue_update_notes, name='queue-notes'),

    # Financial
    path('api/financial/summary', financial.financial_summary, name='financial-summary'),
    path('api/financial/cash-flow', financial.financial_cash_flow, name='financial-cash-flow'),
    *entity('financial-entries', financial.financial_entries, financial.financial_entry_detail,
            'financial-entry'),
    path('api/financial-entries/<int:pk>/pay', financial.financial_entry_pay, name='financial-entry-pay'),

    # Transport
    path('api/transport/schedule', transport.transport_day_schedule, name='transport-schedule'),
    *entity('transport-services', transport.transport_services, transport.transport_service_detail,
            'transport-service'),
    *entity('transport-vehicles', transport.transport_vehicles, transport.transport_vehicle_detail,
            'transport-vehicle'),
    *entity('transport-drivers', transport.transport_drivers, transport.transport_driver_detail,
            'transport-driver'),
    *entity('transport-routes', transport.transport_routes, transport.transport_route_detail,
            'transport-route'),

    # Support desk and help center
    path('api/support/tickets/all', support.support_tickets_all, name='support-ticket-all'),
    *entity('support-tickets', support.support_tickets, support.support_ticket_detail, 'support-ticket'),
    path('api/support-tickets/<int:pk>/messages', support.support_ticket_messages,
         name='support-ticket-messages'),
    path('api/support-tickets/<int:pk>/status', support.support_ticket_status, name='support-ticket-status'),
    path('api/knowledge-articles', support.knowledge_articles, name='knowledge-article-list'),
    path('api/knowledge-articles/<int:pk>', support.knowledge_article_detail, name='knowledge-article-detail'),
]
