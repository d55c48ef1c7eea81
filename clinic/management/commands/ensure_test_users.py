from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand

from clinic.models import MODULE_CHOICES, Tenant, TenantMembership, User

TEST_SET = [
    ("super", "super"),
    ("admin1", "admin"),
    ("vet1", "vet"),
    ("staff1", "staff"),
]


class Command(BaseCommand):
    help = "Ensure test users exist with password=123456 and belong to the demo tenant (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--tenant", default="demo", help="access_url of the tenant test users join")

    def handle(self, *args, **opts):
        tenant, created = Tenant.objects.get_or_create(
            access_url=opts["tenant"],
            defaults={"company_name": "Clínica Demo", "selected_modules": [code for code, _ in MODULE_CHOICES]},
        )
        if created:
            self.stdout.write(f"created tenant {tenant.access_url}")
        for username, role in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": make_password("123456"), "is_active": True, "tenant": tenant},
            )
            if not created:
                u.password = make_password("123456")
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            if role != "super":
                TenantMembership.objects.update_or_create(tenant=tenant, user=u, defaults={"role": role})
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
