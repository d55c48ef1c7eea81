"""
Management command to populate a demo tenant with sample data.
"""
import random
from datetime import datetime, time, timedelta
from decimal import Decimal

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from clinic.models import (
    MODULE_CHOICES, Appointment, Customer, FinancialEntry, KnowledgeArticle, Pet, Product, Service,
    Tenant, TenantMembership, TransportService, User, Vaccine,
)


class Command(BaseCommand):
    help = 'Populate a demo tenant with customers, pets, appointments, products and entries'

    def add_arguments(self, parser):
        parser.add_argument('--tenant', default='demo', help='access_url of the demo tenant')
        parser.add_argument('--seed', type=int, default=None, help='random seed for reproducible data')

    @transaction.atomic
    def handle(self, *args, **options):
        if options['seed'] is not None:
            random.seed(options['seed'])
        self.stdout.write('Criando dados de demonstração...')

        tenant = self.create_tenant(options['tenant'])
        self.create_users(tenant)
        customers = self.create_customers(tenant)
        pets = self.create_pets(tenant, customers)
        services = self.create_services(tenant)
        self.create_appointments(tenant, pets, services)
        self.create_vaccines(tenant, pets)
        self.create_products(tenant)
        self.create_financial_entries(tenant)
        self.create_transport(tenant)
        self.create_articles()

        self.stdout.write(self.style.SUCCESS(f'Dados de demonstração criados em "{tenant.access_url}"'))

    def create_tenant(self, access_url):
        tenant, created = Tenant.objects.get_or_create(
            access_url=access_url,
            defaults={
                'company_name': 'Clínica Veterinária Demo',
                'selected_modules': [code for code, _ in MODULE_CHOICES],
                'setup_status': 'completed',
            },
        )
        self.stdout.write(f'{"Criada" if created else "Usando"} empresa: {tenant.company_name}')
        return tenant

    def create_users(self, tenant):
        users_data = [
            {'username': 'demo_admin', 'role': 'admin', 'first_name': 'Ana', 'last_name': 'Souza'},
            {'username': 'demo_vet', 'role': 'vet', 'first_name': 'Carlos', 'last_name': 'Lima'},
            {'username': 'demo_staff', 'role': 'staff', 'first_name': 'Júlia', 'last_name': 'Alves'},
        ]
        for data in users_data:
            user, _ = User.objects.get_or_create(
                username=data['username'],
                defaults={**data, 'password': make_password('123456'), 'tenant': tenant,
                          'tenant_bind_time': timezone.now()},
            )
            TenantMembership.objects.get_or_create(tenant=tenant, user=user, defaults={'role': data['role']})
            self.stdout.write(f'Usuário: {user.username} ({data["role"]})')

    def create_customers(self, tenant):
        names = ['Maria Silva', 'João Santos', 'Fernanda Costa', 'Pedro Oliveira', 'Luana Rocha']
        customers = []
        for i, name in enumerate(names):
            customer, _ = Customer.objects.get_or_create(
                tenant=tenant, full_name=name,
                defaults={'email': f'cliente{i + 1}@example.com', 'phone': f'1199{random.randint(1000000, 9999999)}'},
            )
            customers.append(customer)
        self.stdout.write(f'Clientes: {len(customers)}')
        return customers

    def create_pets(self, tenant, customers):
        species = [('Cão', ['SRD', 'Labrador', 'Poodle']), ('Gato', ['SRD', 'Siamês', 'Persa'])]
        pet_names = ['Rex', 'Mel', 'Thor', 'Luna', 'Bob', 'Nina', 'Fred', 'Mia']
        today = timezone.localdate()
        pets = []
        for i, name in enumerate(pet_names):
            kind, breeds = random.choice(species)
            pet, _ = Pet.objects.get_or_create(
                tenant=tenant, name=name, owner=customers[i % len(customers)],
                defaults={
                    'species': kind,
                    'breed': random.choice(breeds),
                    'birth_date': today - timedelta(days=random.randint(60, 365 * 12)),
                    'weight': Decimal(random.randint(20, 350)) / 10,
                },
            )
            pets.append(pet)
        self.stdout.write(f'Pets: {len(pets)}')
        return pets

    def create_services(self, tenant):
        services_data = [
            ('Consulta', 'clinica', Decimal('150.00'), 30),
            ('Banho', 'estetica', Decimal('60.00'), 60),
            ('Tosa', 'estetica', Decimal('80.00'), 90),
            ('Vacinação', 'clinica', Decimal('90.00'), 15),
        ]
        services = []
        for name, category, price, duration in services_data:
            service, _ = Service.objects.get_or_create(
                tenant=tenant, name=name,
                defaults={'category': category, 'price': price, 'duration': duration},
            )
            services.append(service)
        return services

    def create_appointments(self, tenant, pets, services):
        today = timezone.localdate()
        doctors = ['Dr. Carlos Lima', 'Dra. Paula Reis']
        types = [code for code, _ in Appointment.TYPE_CHOICES if code != 'telemedicine']
        count = 0
        for offset in range(-2, 5):
            day = today + timedelta(days=offset)
            for hour in random.sample(range(8, 18), 3):
                start = timezone.make_aware(datetime.combine(day, time(hour, random.choice([0, 30]))))
                Appointment.objects.create(
                    tenant=tenant,
                    pet=random.choice(pets),
                    service=random.choice(services),
                    start_at=start,
                    end_at=start + timedelta(minutes=30),
                    type=random.choice(types),
                    status='completed' if offset < 0 else 'scheduled',
                    doctor=random.choice(doctors),
                )
                count += 1
        self.stdout.write(f'Consultas: {count}')

    def create_vaccines(self, tenant, pets):
        today = timezone.localdate()
        for pet in pets:
            applied = today - timedelta(days=random.randint(200, 360))
            Vaccine.objects.get_or_create(
                tenant=tenant, pet=pet, name='V10',
                defaults={'application_date': applied, 'next_due_date': applied + timedelta(days=365)},
            )

    def create_products(self, tenant):
        products_data = [
            ('Ração Premium 15kg', 'racao', Decimal('229.90'), '7891000000011', 12, 5),
            ('Shampoo Neutro', 'higiene', Decimal('34.90'), '7891000000028', 3, 5),
            ('Coleira Antipulgas', 'farmacia', Decimal('119.00'), '7891000000035', 8, 2),
            ('Petisco Natural', 'petiscos', Decimal('19.90'), '7891000000042', 40, 10),
        ]
        for name, category, price, barcode, stock, min_stock in products_data:
            Product.objects.get_or_create(
                tenant=tenant, barcode=barcode,
                defaults={'name': name, 'category': category, 'price': price,
                          'cost_price': (price * Decimal('0.6')).quantize(Decimal('0.01')),
                          'stock_quantity': stock, 'min_stock': min_stock},
            )
        self.stdout.write(f'Produtos: {len(products_data)}')

    def create_financial_entries(self, tenant):
        today = timezone.localdate()
        entries = [
            ('payable', 'Aluguel', Decimal('3500.00'), today + timedelta(days=5)),
            ('payable', 'Fornecedor de ração', Decimal('1800.00'), today - timedelta(days=3)),
            ('receivable', 'Convênio PetSaúde', Decimal('950.00'), today + timedelta(days=10)),
        ]
        for kind, description, amount, due in entries:
            FinancialEntry.objects.get_or_create(
                tenant=tenant, kind=kind, description=description,
                defaults={'amount': amount, 'due_date': due},
            )

    def create_transport(self, tenant):
        TransportService.objects.get_or_create(
            tenant=tenant, name='Leva e Traz',
            defaults={
                'days_available': ['monday', 'tuesday', 'wednesday', 'thursday', 'friday'],
                'hours_start': time(8, 0),
                'hours_end': time(17, 0),
                'max_capacity_per_day': 8,
                'accepted_pet_types': ['dog', 'cat'],
                'base_price': Decimal('25.00'),
            },
        )

    def create_articles(self):
        articles = [
            ('Como cadastrar um pet', 'Abra Clientes, escolha o tutor e clique em <strong>Novo pet</strong>.',
             'primeiros_passos', ['pets', 'cadastro']),
            ('Fechando uma venda', 'No PDV, leia o código de barras e finalize com a forma de pagamento.',
             'petshop', ['pdv', 'vendas']),
        ]
        for title, content, category, tags in articles:
            KnowledgeArticle.objects.get_or_create(
                tenant=None, title=title,
                defaults={'content': content, 'category': category, 'tags': tags},
            )
