import pytest
from rest_framework.exceptions import ValidationError

from clinic.models import MODULE_CLINIC, MODULE_FINANCIAL, MODULE_PETSHOP, MODULE_TRANSPORT, Tenant
from clinic.services import onboarding


def test_steps_follow_selected_modules():
    assert onboarding.step_keys([]) == ['general', 'completion']
    assert onboarding.step_keys([MODULE_FINANCIAL, MODULE_CLINIC]) == [
        'general', 'customers_pets', 'financial', 'completion',
    ]
    assert onboarding.total_steps([MODULE_CLINIC, MODULE_PETSHOP, MODULE_FINANCIAL]) == 5


def test_transport_adds_no_step():
    assert onboarding.total_steps([MODULE_TRANSPORT]) == 2


def test_step_key_bounds():
    modules = [MODULE_PETSHOP]
    assert onboarding.step_key(1, modules) == 'general'
    assert onboarding.step_key(2, modules) == 'products'
    assert onboarding.step_key(3, modules) == 'completion'
    with pytest.raises(ValidationError):
        onboarding.step_key(0, modules)
    with pytest.raises(ValidationError):
        onboarding.step_key(4, modules)


def test_progress_percent():
    assert onboarding.progress_percent(1, 4) == 25
    assert onboarding.progress_percent(3, 3) == 100
    assert onboarding.progress_percent(1, 0) == 0


@pytest.mark.django_db
def test_wizard_moves_and_persists():
    tenant = Tenant.objects.create(company_name='Alpha', access_url='alpha',
                                   selected_modules=[MODULE_CLINIC, MODULE_PETSHOP])
    state = onboarding.wizard_state(tenant)
    assert (state['step'], state['total'], state['key']) == (1, 4, 'general')

    state = onboarding.advance(tenant)
    assert state['key'] == 'customers_pets'
    tenant.refresh_from_db()
    assert tenant.current_setup_step == 2
    assert tenant.setup_status == 'in_progress'

    for _ in range(5):
        state = onboarding.advance(tenant)
    assert state['step'] == 4
    assert state['progress'] == 100

    for _ in range(6):
        state = onboarding.back(tenant)
    assert state['step'] == 1

    state = onboarding.go_to(tenant, 3)
    assert state['key'] == 'products'
    with pytest.raises(ValidationError):
        onboarding.go_to(tenant, 9)

    state = onboarding.complete(tenant)
    tenant.refresh_from_db()
    assert tenant.setup_status == 'completed'
    assert tenant.current_setup_step == 4
    assert state['key'] == 'completion'
