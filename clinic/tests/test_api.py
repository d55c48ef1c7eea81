"""
Integration tests for the VetSystem API.

These exercise tenant isolation, module gating, the generic entity
endpoints, appointment conflicts and the calendar views through DRF's
APIClient.
"""
from datetime import timedelta

from django.utils import timezone
from rest_framework import status

from ..models import Appointment, AuditEvent, Customer, MedicalRecord, Pet, TenantMembership, User, Vaccine
from .helpers import TenantAPITestCase, at, make_member, make_tenant


class TenancyTests(TenantAPITestCase):
    def test_requires_authentication(self):
        resp = self.client.get('/api/customers')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data['ok'])

    def test_lists_never_leak_other_tenants(self):
        Customer.objects.create(tenant=self.other, full_name='Cliente Beta')
        client = self.authenticate(self.admin, self.tenant)
        resp = client.get('/api/customers')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([c['full_name'] for c in resp.data], ['Maria Silva'])

    def test_other_tenant_record_answers_404(self):
        foreign = Customer.objects.create(tenant=self.other, full_name='Cliente Beta')
        client = self.authenticate(self.admin, self.tenant)
        resp = client.get(f'/api/customers/{foreign.id}')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data['error']['code'], 'not_found')
        resp = client.delete(f'/api/customers/{foreign.id}')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Customer.objects.filter(id=foreign.id).exists())

    def test_foreign_key_to_other_tenant_is_rejected(self):
        foreign_owner = Customer.objects.create(tenant=self.other, full_name='Cliente Beta')
        client = self.authenticate(self.admin, self.tenant)
        resp = client.post('/api/pets', {'name': 'Bob', 'owner': foreign_owner.id}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('owner', resp.data['error']['message'])
        self.assertFalse(Pet.objects.filter(name='Bob').exists())

    def test_non_member_cannot_select_tenant(self):
        client = self.authenticate(self.admin, self.other)
        resp = client.get('/api/customers')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_tenant_can_be_named_by_access_url(self):
        client = self.authenticate(self.admin)
        resp = client.get('/api/customers', {'store': 'alpha'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 1)

    def test_suspended_tenant_is_refused(self):
        self.tenant.status = 'suspended'
        self.tenant.save()
        client = self.authenticate(self.admin, self.tenant)
        resp = client.get('/api/customers')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_bound_tenant_is_used_without_hint(self):
        client = self.authenticate(self.other_admin)
        resp = client.get('/api/tenants/current')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['access_url'], 'beta')
        self.assertEqual(resp.data['role'], 'admin')

    def test_switch_rebinds_user(self):
        gamma = make_tenant('gamma')
        TenantMembership.objects.create(tenant=gamma, user=self.admin, role='vet')
        client = self.authenticate(self.admin)
        resp = client.post('/api/tenants/switch', {'tenant': 'gamma'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['role'], 'vet')
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.tenant_id, gamma.id)
        resp = client.post('/api/tenants/switch', {'tenant': 'beta'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_super_manages_tenants(self):
        root = self.create_super()
        client = self.authenticate(root)
        resp = client.post('/api/tenants', {
            'company_name': 'Pet Feliz', 'access_url': 'pet-feliz',
            'selected_modules': ['financial', 'petshop', 'petshop'],
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['selected_modules'], ['petshop', 'financial'])
        resp = client.post('/api/tenants', {'company_name': 'X', 'access_url': 'x',
                                            'selected_modules': ['spaceship']}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(len(client.get('/api/tenants').data), 3)

        admin_client = self.authenticate(self.admin, self.tenant)
        self.assertEqual(admin_client.get('/api/tenants').status_code, status.HTTP_403_FORBIDDEN)

    def test_super_may_act_on_any_tenant(self):
        root = self.create_super()
        client = self.authenticate(root, self.other)
        resp = client.get('/api/tenants/current')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['role'], 'super')

    def test_admin_adds_and_removes_members(self):
        client = self.authenticate(self.admin, self.tenant)
        resp = client.post('/api/tenants/users', {'username': 'novo_vet', 'role': 'vet', 'password': 'S3nha!forte'},
                           format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        new_id = resp.data['user_id']
        usernames = [m['username'] for m in client.get('/api/tenants/users').data]
        self.assertIn('novo_vet', usernames)

        resp = client.post('/api/tenants/users', {'username': 'sem_senha'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = client.delete(f'/api/tenants/users/{new_id}')
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        resp = client.delete(f'/api/tenants/users/{new_id}')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_staff_cannot_manage_members(self):
        client = self.authenticate(self.staff, self.tenant)
        self.assertEqual(client.get('/api/tenants/users').status_code, status.HTTP_403_FORBIDDEN)

    def create_super(self):
        return User.objects.create_user(username='root', password='P@ssw0rd1', role='super')


class ModuleGatingTests(TenantAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.bare = make_tenant('bare', modules=[])
        self.bare_admin = make_member('bare_admin', self.bare, 'admin')

    def test_disabled_modules_answer_403(self):
        client = self.authenticate(self.bare_admin, self.bare)
        for url in ('/api/products', '/api/medical-records', '/api/hospitalizations',
                    '/api/financial-entries', '/api/transport-routes', '/api/queue'):
            resp = client.get(url)
            self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN, url)
            self.assertEqual(resp.data['error']['code'], 'permission_denied')

    def test_core_entities_need_no_module(self):
        client = self.authenticate(self.bare_admin, self.bare)
        self.assertEqual(client.get('/api/customers').status_code, status.HTTP_200_OK)
        self.assertEqual(client.get('/api/appointments').status_code, status.HTTP_200_OK)

    def test_enabled_module_is_reachable(self):
        client = self.authenticate(self.admin, self.tenant)
        self.assertEqual(client.get('/api/products').status_code, status.HTTP_200_OK)


class EntityCrudTests(TenantAPITestCase):
    def test_customer_lifecycle(self):
        client = self.authenticate(self.admin, self.tenant)
        resp = client.post('/api/customers', {'full_name': 'João Santos', 'cpf': '529.982.247-25'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        cid = resp.data['id']
        self.assertEqual(resp.data['cpf'], '52998224725')
        self.assertEqual(resp.data['cpf_formatted'], '529.982.247-25')
        self.assertEqual(Customer.objects.get(id=cid).tenant_id, self.tenant.id)

        resp = client.patch(f'/api/customers/{cid}', {'phone': '11999990000'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['phone'], '11999990000')

        resp = client.delete(f'/api/customers/{cid}')
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Customer.objects.filter(id=cid).exists())
        self.assertTrue(AuditEvent.objects.filter(action='customers_delete', object_id=cid).exists())

    def test_invalid_cpf_is_rejected(self):
        client = self.authenticate(self.admin, self.tenant)
        resp = client.post('/api/customers', {'full_name': 'João Santos', 'cpf': '111.111.111-11'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error']['code'], 'invalid')

    def test_staff_cannot_delete(self):
        client = self.authenticate(self.staff, self.tenant)
        resp = client.delete(f'/api/customers/{self.customer.id}')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_filter_search_and_pagination(self):
        for name in ('Ana', 'Bia', 'Cacau'):
            Pet.objects.create(tenant=self.tenant, owner=self.customer, name=name, species='Gato')
        client = self.authenticate(self.admin, self.tenant)

        resp = client.get('/api/pets', {'species': 'Gato'})
        self.assertEqual(len(resp.data), 3)
        resp = client.get('/api/pets', {'q': 'cac'})
        self.assertEqual([p['name'] for p in resp.data], ['Cacau'])

        resp = client.get('/api/pets', {'page': 2, 'pageSize': 3})
        self.assertTrue(resp.data['ok'])
        self.assertEqual(resp.data['pagination'], {'total': 4, 'page': 2, 'pageSize': 3})
        self.assertEqual(len(resp.data['data']), 1)

        resp = client.get('/api/pets', {'owner': 'abc'})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pet_age_and_owner_name(self):
        self.pet.birth_date = timezone.localdate() - timedelta(days=400)
        self.pet.save()
        client = self.authenticate(self.admin, self.tenant)
        resp = client.get(f'/api/pets/{self.pet.id}')
        self.assertEqual(resp.data['owner_name'], 'Maria Silva')
        self.assertTrue(resp.data['age'].startswith('1 ano'))

    def test_private_records_hidden_from_staff(self):
        MedicalRecord.objects.create(tenant=self.tenant, pet=self.pet, title='Público')
        MedicalRecord.objects.create(tenant=self.tenant, pet=self.pet, title='Sigiloso', is_private=True)
        staff = self.authenticate(self.staff, self.tenant)
        self.assertEqual([r['title'] for r in staff.get('/api/medical-records').data], ['Público'])
        admin = self.authenticate(self.admin, self.tenant)
        self.assertEqual(len(admin.get('/api/medical-records').data), 2)

    def test_vaccines_due_window(self):
        today = timezone.localdate()
        for name, offset in (('V8', -2), ('Raiva', 10), ('Giárdia', 60)):
            Vaccine.objects.create(tenant=self.tenant, pet=self.pet, name=name,
                                   next_due_date=today + timedelta(days=offset))
        Vaccine.objects.create(tenant=self.tenant, pet=self.pet, name='Sem reforço')
        client = self.authenticate(self.staff, self.tenant)
        self.assertEqual([v['name'] for v in client.get('/api/vaccines/due').data], ['V8', 'Raiva'])
        self.assertEqual(len(client.get('/api/vaccines/due', {'days': 90}).data), 3)

    def test_cpf_lookup_endpoint(self):
        client = self.authenticate(self.staff, self.tenant)
        resp = client.get('/api/utils/cpf', {'cpf': '52998224725'})
        self.assertEqual(resp.data, {'valid': True, 'message': 'CPF válido', 'formatted': '529.982.247-25'})


class AppointmentTests(TenantAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.day = timezone.localdate() + timedelta(days=1)
        self.client_ = self.authenticate(self.admin, self.tenant)

    def book(self, start, end=None, pet=None, doctor=''):
        payload = {'pet': (pet or self.pet).id, 'start_at': start.isoformat(), 'doctor': doctor}
        if end is not None:
            payload['end_at'] = end.isoformat()
        return self.client_.post('/api/appointments', payload, format='json')

    def test_missing_end_defaults_to_thirty_minutes(self):
        resp = self.book(at(self.day, 9))
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        appointment = Appointment.objects.get(id=resp.data['id'])
        self.assertEqual(appointment.end_at - appointment.start_at, timedelta(minutes=30))
        self.assertEqual(resp.data['conflicts'], [])

    def test_moving_start_keeps_duration(self):
        booked = self.book(at(self.day, 9), at(self.day, 11)).data
        resp = self.client_.patch(f'/api/appointments/{booked["id"]}',
                                  {'start_at': at(self.day, 14).isoformat()}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        appointment = Appointment.objects.get(id=booked['id'])
        self.assertEqual(appointment.start_at, at(self.day, 14))
        self.assertEqual(appointment.end_at, at(self.day, 16))

    def test_end_must_follow_start(self):
        resp = self.book(at(self.day, 9), at(self.day, 9))
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_overlap_is_reported_not_blocked(self):
        first = self.book(at(self.day, 9), at(self.day, 10)).data
        resp = self.book(at(self.day, 9, 30), at(self.day, 10, 30))
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual([c['id'] for c in resp.data['conflicts']], [first['id']])
        self.assertEqual(resp.data['conflicts'][0]['reason'], 'pet')

    def test_touching_intervals_do_not_conflict(self):
        self.book(at(self.day, 9), at(self.day, 10))
        resp = self.book(at(self.day, 10), at(self.day, 10, 30))
        self.assertEqual(resp.data['conflicts'], [])

    def test_doctor_conflict_and_canceled_ignored(self):
        other_pet = Pet.objects.create(tenant=self.tenant, owner=self.customer, name='Mel')
        first = self.book(at(self.day, 14), at(self.day, 15), doctor='Dra. Paula').data
        resp = self.client_.get('/api/appointments/conflicts', {
            'start_at': at(self.day, 14, 30).isoformat(), 'pet': other_pet.id, 'doctor': 'Dra. Paula',
        })
        self.assertTrue(resp.data['has_conflicts'])
        self.assertEqual(resp.data['conflicts'][0]['reason'], 'doctor')

        resp = self.client_.post(f"/api/appointments/{first['id']}/status", {'status': 'canceled'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        resp = self.client_.get('/api/appointments/conflicts', {
            'start_at': at(self.day, 14, 30).isoformat(), 'doctor': 'Dra. Paula',
        })
        self.assertFalse(resp.data['has_conflicts'])

    def test_other_tenant_appointments_never_conflict(self):
        beta_owner = Customer.objects.create(tenant=self.other, full_name='Beta')
        beta_pet = Pet.objects.create(tenant=self.other, owner=beta_owner, name='Zeus')
        Appointment.objects.create(tenant=self.other, pet=beta_pet, start_at=at(self.day, 9),
                                   end_at=at(self.day, 10), doctor='Dra. Paula')
        resp = self.book(at(self.day, 9), at(self.day, 10), doctor='Dra. Paula')
        self.assertEqual(resp.data['conflicts'], [])

    def test_calendar_day_view(self):
        self.book(at(self.day, 9), at(self.day, 10))
        resp = self.client_.get('/api/calendar/day', {'date': self.day.isoformat()})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data['slots']), 22)
        filled = [s['label'] for s in resp.data['slots'] if s['appointments']]
        self.assertEqual(filled, ['09:00', '09:30'])
        self.assertEqual(resp.data['slots'][2]['appointments'][0]['owner_name'], 'Maria Silva')

    def test_calendar_week_view_filters_by_doctor(self):
        self.book(at(self.day, 9), doctor='Dr. Carlos')
        self.book(at(self.day, 11), doctor='Dra. Paula')
        resp = self.client_.get('/api/calendar/week', {'date': self.day.isoformat(), 'doctor': 'Dr. Carlos'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data['days']), 7)
        day = next(d for d in resp.data['days'] if d['date'] == self.day.isoformat())
        self.assertEqual([h['hour'] for h in day['hours'] if h['appointments']], [9])


class DashboardAndOnboardingTests(TenantAPITestCase):
    def test_dashboard_counts_today(self):
        today = timezone.localdate()
        Appointment.objects.create(tenant=self.tenant, pet=self.pet, start_at=at(today, 10), end_at=at(today, 11))
        client = self.authenticate(self.staff, self.tenant)
        resp = client.get('/api/dashboard')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['appointments_today']['total'], 1)
        self.assertEqual(resp.data['appointments_today']['by_status']['scheduled'], 1)

    def test_writes_invalidate_dashboard(self):
        client = self.authenticate(self.admin, self.tenant)
        self.assertEqual(client.get('/api/dashboard').data['appointments_today']['total'], 0)
        start = at(timezone.localdate(), 15)
        client.post('/api/appointments', {'pet': self.pet.id, 'start_at': start.isoformat()}, format='json')
        self.assertEqual(client.get('/api/dashboard').data['appointments_today']['total'], 1)

    def test_onboarding_flow(self):
        client = self.authenticate(self.admin, self.tenant)
        state = client.get('/api/onboarding').data
        self.assertEqual((state['step'], state['total'], state['key']), (1, 5, 'general'))
        state = client.post('/api/onboarding/advance').data
        self.assertEqual(state['key'], 'customers_pets')
        state = client.post('/api/onboarding/back').data
        self.assertEqual(state['step'], 1)
        resp = client.post('/api/onboarding/step', {'step': 6}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        state = client.post('/api/onboarding/complete').data
        self.assertEqual(state['setup_status'], 'completed')

    def test_staff_reads_but_cannot_move_wizard(self):
        client = self.authenticate(self.staff, self.tenant)
        self.assertEqual(client.get('/api/onboarding').status_code, status.HTTP_200_OK)
        self.assertEqual(client.post('/api/onboarding/advance').status_code, status.HTTP_403_FORBIDDEN)
