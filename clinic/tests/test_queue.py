from rest_framework import status

from ..models import Pet, QueueTransition, Service
from ..services.queue import can_transition
from .helpers import TenantAPITestCase


def test_transitions():
    assert can_transition('waiting', 'in_progress')
    assert can_transition('waiting', 'canceled')
    assert can_transition('in_progress', 'completed')
    assert not can_transition('waiting', 'completed')
    assert not can_transition('completed', 'waiting')
    assert not can_transition('canceled', 'in_progress')


class QueueTests(TenantAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.bath = Service.objects.create(tenant=self.tenant, name='Banho', duration=60)
        self.mel = Pet.objects.create(tenant=self.tenant, owner=self.customer, name='Mel')
        self.client_ = self.authenticate(self.staff, self.tenant)

    def check_in(self, pet):
        return self.client_.post('/api/queue/check-in', {'pet': pet.id, 'service': self.bath.id}, format='json')

    def set_status(self, entry_id, new_status):
        return self.client_.post(f'/api/queue/{entry_id}/status', {'status': new_status}, format='json')

    def test_numbers_follow_check_in_order(self):
        first = self.check_in(self.pet).data
        second = self.check_in(self.mel).data
        self.assertEqual((first['number'], second['number']), (1, 2))
        self.assertEqual([e['pet_name'] for e in self.client_.get('/api/queue').data], ['Rex', 'Mel'])

    def test_completing_starts_next_waiting_pet(self):
        first = self.check_in(self.pet).data
        second = self.check_in(self.mel).data
        self.assertEqual(self.set_status(first['id'], 'in_progress').status_code, status.HTTP_200_OK)
        resp = self.set_status(first['id'], 'completed')
        self.assertEqual(resp.data['entry']['status'], 'completed')
        self.assertEqual(resp.data['started_next']['id'], second['id'])
        self.assertEqual(resp.data['started_next']['status'], 'in_progress')
        history = self.client_.get(f"/api/queue/{second['id']}").data['transitions']
        self.assertEqual([(t['from'], t['to']) for t in history], [(None, 'waiting'), ('waiting', 'in_progress')])

    def test_invalid_transition_is_rejected(self):
        entry = self.check_in(self.pet).data
        resp = self.set_status(entry['id'], 'completed')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(QueueTransition.objects.filter(entry_id=entry['id']).count(), 1)

    def test_notes_and_foreign_pet(self):
        entry = self.check_in(self.pet).data
        resp = self.client_.post(f"/api/queue/{entry['id']}/notes", {'notes': 'Sem perfume'}, format='json')
        self.assertEqual(resp.data['notes'], 'Sem perfume')
        beta_pet = Pet.objects.create(tenant=self.other, owner=self.customer, name='Intruso')
        self.assertEqual(self.check_in(beta_pet).status_code, status.HTTP_400_BAD_REQUEST)
