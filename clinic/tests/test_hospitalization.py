from rest_framework import status

from ..models import Hospitalization, Pet
from .helpers import TenantAPITestCase


class HospitalizationTests(TenantAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client_ = self.authenticate(self.admin, self.tenant)

    def admit(self):
        return self.client_.post('/api/hospitalizations', {'pet': self.pet.id, 'reason': 'Gastroenterite'},
                                 format='json')

    def test_pet_has_one_active_admission(self):
        first = self.admit()
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        second = self.admit()
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(second.data['error']['code'], 'conflict')
        self.assertEqual(Hospitalization.objects.filter(pet=self.pet).count(), 1)

    def test_progress_and_discharge(self):
        hid = self.admit().data['id']
        resp = self.client_.post(f'/api/hospitalizations/{hid}/progress',
                                 {'temperature': '38.5', 'heart_rate': 110, 'notes': 'Estável'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['recorded_by'], 'alpha_admin')
        self.assertEqual(len(self.client_.get(f'/api/hospitalizations/{hid}/progress').data), 1)

        resp = self.client_.post(f'/api/hospitalizations/{hid}/discharge',
                                 {'discharge_summary': 'Recuperado'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['status'], 'discharged')
        self.assertIsNotNone(resp.data['discharge_date'])

        again = self.client_.post(f'/api/hospitalizations/{hid}/discharge', {}, format='json')
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT)
        late = self.client_.post(f'/api/hospitalizations/{hid}/progress', {'notes': 'x'}, format='json')
        self.assertEqual(late.status_code, status.HTTP_409_CONFLICT)

        # discharged pets may be admitted again
        self.assertEqual(self.admit().status_code, status.HTTP_201_CREATED)

    def test_status_only_changes_through_discharge(self):
        hid = self.admit().data['id']
        resp = self.client_.patch(f'/api/hospitalizations/{hid}', {'status': 'deceased'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', resp.data['error']['message'])
        stay = Hospitalization.objects.get(id=hid)
        self.assertEqual(stay.status, 'active')
        self.assertIsNone(stay.discharge_date)

        self.client_.post(f'/api/hospitalizations/{hid}/discharge', {}, format='json')
        resp = self.client_.patch(f'/api/hospitalizations/{hid}', {'status': 'active'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Hospitalization.objects.get(id=hid).status, 'discharged')

        # unchanged status and other fields are still editable
        resp = self.client_.patch(f'/api/hospitalizations/{hid}',
                                  {'status': 'discharged', 'diagnosis': 'Gastroenterite aguda'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_moving_stay_to_admitted_pet_clashes(self):
        other = Pet.objects.create(tenant=self.tenant, owner=self.customer, name='Mel', species='Cão')
        self.admit()
        resp = self.client_.post('/api/hospitalizations', {'pet': other.id, 'reason': 'Fratura'}, format='json')
        resp = self.client_.patch(f'/api/hospitalizations/{resp.data["id"]}', {'pet': self.pet.id}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
