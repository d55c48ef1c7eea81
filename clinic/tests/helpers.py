"""
Shared builders for the API tests.
"""
from datetime import datetime, time

from django.utils import timezone
from rest_framework.test import APIClient, APITestCase

from ..models import MODULE_CHOICES, Customer, Pet, Tenant, TenantMembership, User

ALL_MODULES = [code for code, _ in MODULE_CHOICES]


def make_tenant(slug: str, modules=None, **extra) -> Tenant:
    return Tenant.objects.create(
        company_name=slug.title(),
        access_url=slug,
        selected_modules=ALL_MODULES if modules is None else modules,
        **extra,
    )


def make_member(username: str, tenant: Tenant, role: str = 'admin') -> User:
    user = User.objects.create_user(username=username, password='P@ssw0rd1', role=role, tenant=tenant,
                                    tenant_bind_time=timezone.now())
    TenantMembership.objects.create(tenant=tenant, user=user, role=role)
    return user


def at(day, hour: int, minute: int = 0) -> datetime:
    return timezone.make_aware(datetime.combine(day, time(hour, minute)))


class TenantAPITestCase(APITestCase):
    """Two tenants with an admin each, plus one customer and pet in the first."""

    def setUp(self) -> None:
        self.tenant = make_tenant('alpha')
        self.other = make_tenant('beta')
        self.admin = make_member('alpha_admin', self.tenant, 'admin')
        self.staff = make_member('alpha_staff', self.tenant, 'staff')
        self.other_admin = make_member('beta_admin', self.other, 'admin')
        self.customer = Customer.objects.create(tenant=self.tenant, full_name='Maria Silva')
        self.pet = Pet.objects.create(tenant=self.tenant, owner=self.customer, name='Rex', species='Cão')

    def authenticate(self, user: User, tenant: Tenant = None) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        if tenant is not None:
            client.credentials(HTTP_X_TENANT=str(tenant.id))
        return client
