"""
Setup wizard shown to a tenant right after sign-up.

The wizard always starts with ``general`` and ends with ``completion``;
in between there is one step per selected module that needs initial
data.  The current position is persisted on the tenant so the wizard
can be resumed from any device.
"""
from __future__ import annotations

from typing import Iterable

from rest_framework.exceptions import ValidationError

from clinic.models import MODULE_CLINIC, MODULE_FINANCIAL, MODULE_PETSHOP, Tenant

# Ordered module -> wizard step key
MODULE_STEPS = [
    (MODULE_CLINIC, 'customers_pets'),
    (MODULE_PETSHOP, 'products'),
    (MODULE_FINANCIAL, 'financial'),
]


def step_keys(selected_modules: Iterable[str]) -> list[str]:
    selected = set(selected_modules or [])
    return ['general'] + [key for module, key in MODULE_STEPS if module in selected] + ['completion']


def total_steps(selected_modules: Iterable[str]) -> int:
    return len(step_keys(selected_modules))


def step_key(step: int, selected_modules: Iterable[str]) -> str:
    keys = step_keys(selected_modules)
    if not 1 <= step <= len(keys):
        raise ValidationError({'step': f'Etapa inválida: {step} (1-{len(keys)})'})
    return keys[step - 1]


def progress_percent(step: int, total: int) -> int:
    if total <= 0:
        return 0
    return round(min(max(step, 0), total) * 100 / total)


def wizard_state(tenant: Tenant) -> dict:
    keys = step_keys(tenant.selected_modules)
    total = len(keys)
    step = min(max(tenant.current_setup_step or 1, 1), total)
    return {
        'step': step,
        'total': total,
        'key': keys[step - 1],
        'steps': keys,
        'progress': progress_percent(step, total),
        'setup_status': tenant.setup_status,
    }


def advance(tenant: Tenant) -> dict:
    total = total_steps(tenant.selected_modules)
    tenant.current_setup_step = min((tenant.current_setup_step or 1) + 1, total)
    if tenant.setup_status == 'pending':
        tenant.setup_status = 'in_progress'
    tenant.save(update_fields=['current_setup_step', 'setup_status', 'updated_at'])
    return wizard_state(tenant)


def back(tenant: Tenant) -> dict:
    tenant.current_setup_step = max((tenant.current_setup_step or 1) - 1, 1)
    tenant.save(update_fields=['current_setup_step', 'updated_at'])
    return wizard_state(tenant)


def go_to(tenant: Tenant, step: int) -> dict:
    step_key(step, tenant.selected_modules)
    tenant.current_setup_step = step
    if tenant.setup_status == 'pending':
        tenant.setup_status = 'in_progress'
    tenant.save(update_fields=['current_setup_step', 'setup_status', 'updated_at'])
    return wizard_state(tenant)


def complete(tenant: Tenant) -> dict:
    tenant.current_setup_step = total_steps(tenant.selected_modules)
    tenant.setup_status = 'completed'
    tenant.save(update_fields=['current_setup_step', 'setup_status', 'updated_at'])
    return wizard_state(tenant)
