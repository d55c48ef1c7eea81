"""
Permission classes for tenant scoping, module gating and roles.

``HasActiveTenant`` must come before any class that reads
``request.tenant``; it resolves the tenant once per request.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import MODULE_CHOICES
from .services.tenancy import ADMIN_ROLES, CLINICAL_ROLES, resolve_active_tenant, tenant_role


def _active_tenant(request):
    tenant = getattr(request, 'tenant', None)
    if tenant is None:
        tenant = resolve_active_tenant(request.user, getattr(request, 'tenant_hint', None))
        request.tenant = tenant
    return tenant


class IsSuper(BasePermission):
    """Only platform administrators."""
    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) == "super")


class HasActiveTenant(BasePermission):
    """Resolve the active tenant and attach it as ``request.tenant``."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        _active_tenant(request)
        request.tenant_role = tenant_role(user, request.tenant)
        return True


class IsTenantAdmin(BasePermission):
    """Administrator of the active tenant (or platform super)."""
    message = 'Apenas administradores podem executar esta ação.'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        tenant = _active_tenant(request)
        return tenant_role(request.user, tenant) in ADMIN_ROLES


class IsTenantAdminOrReadOnly(IsTenantAdmin):
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        if request.method in SAFE_METHODS:
            return True
        return super().has_permission(request, view)


class IsClinicalRole(BasePermission):
    """Administrators and veterinarians."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        tenant = _active_tenant(request)
        return tenant_role(request.user, tenant) in CLINICAL_ROLES


_module_permissions: dict = {}


def requires_module(module: str) -> type:
    """Permission class answering 403 unless the active tenant selected ``module``."""
    if module not in dict(MODULE_CHOICES):
        raise ValueError(f"unknown module {module!r}")
    if module not in _module_permissions:
        label = dict(MODULE_CHOICES)[module]

        class RequiresModule(BasePermission):
            message = f'Módulo "{label}" não está habilitado para esta empresa.'

            def has_permission(self, request, view) -> bool:  # type: ignore[override]
                return _active_tenant(request).has_module(module)

        RequiresModule.__name__ = f"Requires_{module}"
        _module_permissions[module] = RequiresModule
    return _module_permissions[module]
