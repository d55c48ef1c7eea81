from datetime import date, time
from decimal import Decimal

from rest_framework import status

from ..models import TransportRoute, TransportService
from .helpers import TenantAPITestCase

WEDNESDAY = date(2026, 10, 21)
THURSDAY = date(2026, 10, 22)


class TransportTests(TenantAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.service = TransportService.objects.create(
            tenant=self.tenant, name='Leva e traz', days_available=['monday', 'wednesday'],
            hours_start=time(8, 0), hours_end=time(17, 0), max_capacity_per_day=1,
            accepted_pet_types=['Cão'], base_price=Decimal('35.00'),
        )
        self.client_ = self.authenticate(self.staff, self.tenant)

    def book(self, **payload):
        payload.setdefault('service', self.service.id)
        payload.setdefault('pet', self.pet.id)
        payload.setdefault('scheduled_date', WEDNESDAY.isoformat())
        payload.setdefault('pickup_time', '09:00')
        return self.client_.post('/api/transport-routes', payload, format='json')

    def test_route_takes_base_price(self):
        resp = self.book(pet_type='cão')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(resp.data['price']), Decimal('35.00'))

    def test_explicit_price_is_kept(self):
        resp = self.book(price='20.00')
        self.assertEqual(Decimal(resp.data['price']), Decimal('20.00'))

    def test_unavailable_weekday(self):
        resp = self.book(scheduled_date=THURSDAY.isoformat())
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('scheduled_date', resp.data['error']['message'])

    def test_pickup_outside_hours(self):
        resp = self.book(pickup_time='18:30')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('pickup_time', resp.data['error']['message'])

    def test_pet_type_not_accepted(self):
        resp = self.book(pet_type='Gato')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('pet_type', resp.data['error']['message'])

    def test_daily_capacity(self):
        self.assertEqual(self.book().status_code, status.HTTP_201_CREATED)
        resp = self.book(pickup_time='10:00')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('scheduled_date', resp.data['error']['message'])

    def test_canceled_routes_free_capacity(self):
        route_id = self.book().data['id']
        TransportRoute.objects.filter(id=route_id).update(status='canceled')
        self.assertEqual(self.book(pickup_time='10:00').status_code, status.HTTP_201_CREATED)

    def test_reactivating_route_rechecks_capacity(self):
        route_id = self.book().data['id']
        TransportRoute.objects.filter(id=route_id).update(status='canceled')
        self.assertEqual(self.book(pickup_time='10:00').status_code, status.HTTP_201_CREATED)
        resp = self.client_.patch(f'/api/transport-routes/{route_id}', {'status': 'scheduled'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('scheduled_date', resp.data['error']['message'])
        self.assertEqual(TransportRoute.objects.get(id=route_id).status, 'canceled')

    def test_reactivating_route_with_room_left(self):
        self.service.max_capacity_per_day = 2
        self.service.save()
        route_id = self.book().data['id']
        TransportRoute.objects.filter(id=route_id).update(status='canceled')
        self.assertEqual(self.book(pickup_time='10:00').status_code, status.HTTP_201_CREATED)
        resp = self.client_.patch(f'/api/transport-routes/{route_id}', {'status': 'scheduled'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(TransportRoute.objects.filter(scheduled_date=WEDNESDAY, status='scheduled').count(), 2)

    def test_reactivating_route_on_inactive_service(self):
        route_id = self.book().data['id']
        TransportRoute.objects.filter(id=route_id).update(status='canceled')
        self.service.status = 'inactive'
        self.service.save()
        resp = self.client_.patch(f'/api/transport-routes/{route_id}', {'status': 'scheduled'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('service', resp.data['error']['message'])

    def test_inactive_service(self):
        self.service.status = 'inactive'
        self.service.save()
        resp = self.book()
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('service', resp.data['error']['message'])

    def test_staff_cannot_configure_services(self):
        resp = self.client_.post('/api/transport-services', {'name': 'Novo'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_service_hours_must_be_ordered(self):
        admin = self.authenticate(self.admin, self.tenant)
        resp = admin.post('/api/transport-services',
                          {'name': 'Noturno', 'hours_start': '18:00', 'hours_end': '08:00'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        resp = admin.post('/api/transport-services', {'name': 'Sábado', 'days_available': ['sabado']}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_day_schedule(self):
        self.book()
        resp = self.client_.get('/api/transport/schedule', {'date': WEDNESDAY.isoformat()})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['date'], '2026-10-21')
        self.assertEqual([r['pet_name'] for r in resp.data['routes']], ['Rex'])
        self.assertEqual(resp.data['routes'][0]['pickup_time'], '09:00')
        self.assertEqual(resp.data['capacity'], [{
            'service': self.service.id, 'name': 'Leva e traz', 'available_today': True,
            'booked': 1, 'max_capacity_per_day': 1,
        }])
