from decimal import Decimal

from rest_framework import status

from ..models import FinancialEntry, Product, Sale
from .helpers import TenantAPITestCase


class CheckoutTests(TenantAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.food = Product.objects.create(tenant=self.tenant, name='Ração', price=Decimal('100.00'),
                                           barcode='789100', stock_quantity=5, min_stock=2)
        self.toy = Product.objects.create(tenant=self.tenant, name='Bolinha', price=Decimal('12.50'),
                                          stock_quantity=1, min_stock=3)
        self.client_ = self.authenticate(self.staff, self.tenant)

    def checkout(self, **payload):
        payload.setdefault('customer', self.customer.id)
        payload.setdefault('payment_method', 'pix')
        return self.client_.post('/api/sales/checkout', payload, format='json')

    def test_checkout_moves_stock_and_books_receivable(self):
        resp = self.checkout(items=[{'product': self.food.id, 'quantity': 1},
                                    {'product': self.food.id, 'quantity': 1},
                                    {'product': self.toy.id, 'quantity': 1}])
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(resp.data['total_amount']), Decimal('212.50'))
        self.assertEqual([i['quantity'] for i in resp.data['items']], [2, 1])
        self.food.refresh_from_db()
        self.toy.refresh_from_db()
        self.assertEqual(self.food.stock_quantity, 3)
        self.assertEqual(self.toy.stock_quantity, 0)
        entry = FinancialEntry.objects.get(sale_id=resp.data['id'])
        self.assertEqual((entry.kind, entry.status), ('receivable', 'paid'))
        self.assertEqual(entry.amount, Decimal('212.50'))

    def test_cash_needs_enough_money_and_returns_change(self):
        resp = self.checkout(items=[{'product': self.food.id, 'quantity': 1}], payment_method='cash',
                             amount_received='50.00')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        resp = self.checkout(items=[{'product': self.food.id, 'quantity': 1}], payment_method='cash',
                             amount_received='150.00')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(resp.data['change_amount']), Decimal('50.00'))

    def test_failed_checkout_leaves_nothing_behind(self):
        resp = self.checkout(items=[{'product': self.food.id, 'quantity': 1},
                                    {'product': self.toy.id, 'quantity': 2}])
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Estoque insuficiente', str(resp.data['error']['message']))
        self.food.refresh_from_db()
        self.assertEqual(self.food.stock_quantity, 5)
        self.assertFalse(Sale.objects.exists())
        self.assertFalse(FinancialEntry.objects.exists())

    def test_customer_and_items_required(self):
        resp = self.checkout(customer=None, items=[{'product': self.food.id, 'quantity': 1}])
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        resp = self.checkout(items=[])
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_and_foreign_products_are_refused(self):
        self.food.active = False
        self.food.save()
        resp = self.checkout(items=[{'product': self.food.id, 'quantity': 1}])
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        foreign = Product.objects.create(tenant=self.other, name='Alheio', price=Decimal('1'), stock_quantity=9)
        resp = self.checkout(items=[{'product': foreign.id, 'quantity': 1}])
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_barcode_lookup_and_low_stock(self):
        resp = self.client_.get('/api/products/barcode/789100')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['name'], 'Ração')
        self.assertEqual(self.client_.get('/api/products/barcode/000').status_code, status.HTTP_404_NOT_FOUND)
        low = [p['name'] for p in self.client_.get('/api/products/low-stock').data]
        self.assertEqual(low, ['Bolinha'])

    def test_sales_history(self):
        self.checkout(items=[{'product': self.food.id, 'quantity': 1}])
        resp = self.client_.get('/api/sales')
        self.assertEqual(len(resp.data), 1)
        sale_id = resp.data[0]['id']
        self.assertEqual(self.client_.get(f'/api/sales/{sale_id}').data['customer_name'], 'Maria Silva')

    def test_staff_cannot_edit_catalog(self):
        resp = self.client_.post('/api/products', {'name': 'Novo', 'price': '5.00'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
