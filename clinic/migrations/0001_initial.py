import datetime
from decimal import Decimal

import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def tenant_fk():
    return models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='clinic.tenant')


def timestamps():
    return [
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company_name', models.CharField(max_length=255)),
                ('access_url', models.SlugField(max_length=100, unique=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('trial', 'Trial'), ('suspended', 'Suspended'), ('inactive', 'Inactive')], db_index=True, default='active', max_length=20)),
                ('selected_modules', models.JSONField(blank=True, default=list)),
                ('setup_status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In progress'), ('completed', 'Completed')], default='pending', max_length=20)),
                ('current_setup_step', models.PositiveIntegerField(default=1)),
                ('customization', models.JSONField(blank=True, default=dict)),
                *timestamps(),
            ],
        ),
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(choices=[('super', 'Platform administrator'), ('admin', 'Tenant administrator'), ('vet', 'Veterinarian'), ('staff', 'Staff')], default='staff', max_length=10)),
                ('tenant_bind_time', models.DateTimeField(blank=True, null=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='bound_users', to='clinic.tenant')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='TenantMembership',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('admin', 'Administrator'), ('vet', 'Veterinarian'), ('staff', 'Staff')], default='staff', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memberships', to='clinic.tenant')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memberships', to=settings.AUTH_USER_MODEL)),
            ],
            options={'unique_together': {('tenant', 'user')}},
        ),
        migrations.CreateModel(
            name='Customer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('full_name', models.CharField(max_length=255)),
                ('cpf', models.CharField(blank=True, db_index=True, max_length=11)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('address', models.JSONField(blank=True, default=dict)),
                ('notes', models.TextField(blank=True)),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='Pet',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('name', models.CharField(max_length=120)),
                ('species', models.CharField(blank=True, max_length=60)),
                ('breed', models.CharField(blank=True, max_length=120)),
                ('birth_date', models.DateField(blank=True, null=True)),
                ('gender', models.CharField(choices=[('male', 'Macho'), ('female', 'Fêmea'), ('unknown', 'Desconhecido')], default='unknown', max_length=10)),
                ('weight', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('microchip', models.CharField(blank=True, max_length=64)),
                ('notes', models.TextField(blank=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pets', to='clinic.customer')),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='Service',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('name', models.CharField(max_length=255)),
                ('category', models.CharField(blank=True, max_length=60)),
                ('description', models.TextField(blank=True)),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10)),
                ('duration', models.PositiveIntegerField(default=30, help_text='Duração em minutos')),
                ('points', models.PositiveIntegerField(default=0)),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='Appointment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('start_at', models.DateTimeField(db_index=True)),
                ('end_at', models.DateTimeField()),
                ('type', models.CharField(choices=[('consultation', 'Consulta'), ('exam', 'Exame'), ('vaccination', 'Vacinação'), ('surgery', 'Cirurgia'), ('return', 'Retorno'), ('grooming', 'Banho e Tosa'), ('telemedicine', 'Telemedicina')], default='consultation', max_length=20)),
                ('status', models.CharField(choices=[('scheduled', 'Agendado'), ('confirmed', 'Confirmado'), ('completed', 'Concluído'), ('canceled', 'Cancelado'), ('no_show', 'Não compareceu')], db_index=True, default='scheduled', max_length=20)),
                ('doctor', models.CharField(blank=True, max_length=120)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('notes', models.TextField(blank=True)),
                ('is_telemedicine', models.BooleanField(default=False)),
                ('health_plan_coverage', models.BooleanField(default=False)),
                ('health_plan_authorization', models.CharField(blank=True, max_length=120)),
                ('pet', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='appointments', to='clinic.pet')),
                ('service', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='appointments', to='clinic.service')),
                ('tenant', tenant_fk()),
            ],
            options={
                'indexes': [
                    models.Index(fields=['tenant', 'start_at'], name='clinic_appo_tenant__4b1f0e_idx'),
                    models.Index(fields=['tenant', 'doctor', 'start_at'], name='clinic_appo_tenant__9c2d7a_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MedicalRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('record_type', models.CharField(choices=[('consultation', 'Consulta'), ('exam', 'Exame'), ('surgery', 'Cirurgia'), ('vaccination', 'Vacinação'), ('return', 'Retorno'), ('other', 'Outro')], default='consultation', max_length=20)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('title', models.CharField(blank=True, max_length=255)),
                ('subjective', models.TextField(blank=True)),
                ('objective', models.TextField(blank=True)),
                ('assessment', models.TextField(blank=True)),
                ('plan', models.TextField(blank=True)),
                ('diagnosis', models.TextField(blank=True)),
                ('prescription', models.TextField(blank=True)),
                ('lab_results', models.TextField(blank=True)),
                ('weight', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('temperature', models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ('heart_rate', models.PositiveIntegerField(blank=True, null=True)),
                ('respiratory_rate', models.PositiveIntegerField(blank=True, null=True)),
                ('doctor', models.CharField(blank=True, max_length=120)),
                ('notes', models.TextField(blank=True)),
                ('follow_up_date', models.DateField(blank=True, null=True)),
                ('is_private', models.BooleanField(default=False)),
                ('health_plan_coverage', models.BooleanField(default=False)),
                ('health_plan_authorization', models.CharField(blank=True, max_length=120)),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='medical_records', to='clinic.appointment')),
                ('pet', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='medical_records', to='clinic.pet')),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='Vaccine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('name', models.CharField(max_length=120)),
                ('manufacturer', models.CharField(blank=True, max_length=120)),
                ('batch_number', models.CharField(blank=True, max_length=60)),
                ('application_date', models.DateField(default=django.utils.timezone.localdate)),
                ('next_due_date', models.DateField(blank=True, db_index=True, null=True)),
                ('veterinarian', models.CharField(blank=True, max_length=120)),
                ('notes', models.TextField(blank=True)),
                ('pet', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vaccines', to='clinic.pet')),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='Medication',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('name', models.CharField(max_length=120)),
                ('dosage', models.CharField(blank=True, max_length=120)),
                ('frequency', models.CharField(blank=True, max_length=120)),
                ('start_date', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('prescribed_by', models.CharField(blank=True, max_length=120)),
                ('notes', models.TextField(blank=True)),
                ('pet', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='medications', to='clinic.pet')),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='Allergy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('allergen', models.CharField(max_length=120)),
                ('severity', models.CharField(choices=[('mild', 'Leve'), ('moderate', 'Moderada'), ('severe', 'Grave')], default='mild', max_length=10)),
                ('reaction', models.CharField(blank=True, max_length=255)),
                ('notes', models.TextField(blank=True)),
                ('pet', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='allergies', to='clinic.pet')),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='Hospitalization',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('admission_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('discharge_date', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('active', 'Internado'), ('discharged', 'Alta'), ('transferred', 'Transferido'), ('deceased', 'Óbito')], db_index=True, default='active', max_length=20)),
                ('reason', models.TextField(blank=True)),
                ('diagnosis', models.TextField(blank=True)),
                ('room', models.CharField(blank=True, max_length=60)),
                ('responsible_doctor', models.CharField(blank=True, max_length=120)),
                ('treatment_plan', models.TextField(blank=True)),
                ('nutrition_plan', models.TextField(blank=True)),
                ('discharge_summary', models.TextField(blank=True)),
                ('discharge_instructions', models.TextField(blank=True)),
                ('health_plan_coverage', models.BooleanField(default=False)),
                ('health_plan_authorization', models.CharField(blank=True, max_length=120)),
                ('pet', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hospitalizations', to='clinic.pet')),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='HospitalizationProgress',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('recorded_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('temperature', models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ('heart_rate', models.PositiveIntegerField(blank=True, null=True)),
                ('respiratory_rate', models.PositiveIntegerField(blank=True, null=True)),
                ('weight', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('notes', models.TextField(blank=True)),
                ('hospitalization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='progress', to='clinic.hospitalization')),
                ('recorded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [models.Index(fields=['hospitalization', 'recorded_at'], name='clinic_hosp_hospita_5e8a21_idx')],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('name', models.CharField(max_length=255)),
                ('category', models.CharField(blank=True, max_length=60)),
                ('module', models.CharField(choices=[('petshop', 'Pet Shop'), ('clinic', 'Clínica')], default='petshop', max_length=10)),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10)),
                ('cost_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10)),
                ('sku', models.CharField(blank=True, max_length=64)),
                ('barcode', models.CharField(blank=True, db_index=True, max_length=64)),
                ('stock_quantity', models.IntegerField(default=0)),
                ('min_stock', models.IntegerField(default=0)),
                ('description', models.TextField(blank=True)),
                ('image_url', models.URLField(blank=True)),
                ('active', models.BooleanField(default=True)),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='Sale',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('purchase_date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('payment_method', models.CharField(choices=[('cash', 'Dinheiro'), ('credit_card', 'Cartão de crédito'), ('debit_card', 'Cartão de débito'), ('pix', 'PIX')], default='cash', max_length=20)),
                ('payment_status', models.CharField(choices=[('paid', 'Pago'), ('pending', 'Pendente'), ('refunded', 'Estornado')], default='paid', max_length=20)),
                ('amount_received', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('change_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchases', to='clinic.customer')),
                ('sold_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='SaleItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_name', models.CharField(max_length=255)),
                ('quantity', models.PositiveIntegerField()),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('total_price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('product', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sale_items', to='clinic.product')),
                ('sale', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='clinic.sale')),
            ],
        ),
        migrations.CreateModel(
            name='FinancialEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('kind', models.CharField(choices=[('payable', 'A pagar'), ('receivable', 'A receber')], db_index=True, max_length=12)),
                ('description', models.CharField(max_length=255)),
                ('counterparty', models.CharField(blank=True, max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('due_date', models.DateField(db_index=True)),
                ('category', models.CharField(blank=True, max_length=60)),
                ('status', models.CharField(choices=[('pending', 'Pendente'), ('paid', 'Pago'), ('canceled', 'Cancelado')], db_index=True, default='pending', max_length=12)),
                ('payment_date', models.DateField(blank=True, null=True)),
                ('payment_method', models.CharField(blank=True, max_length=30)),
                ('document_number', models.CharField(blank=True, max_length=60)),
                ('notes', models.TextField(blank=True)),
                ('sale', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='financial_entry', to='clinic.sale')),
                ('tenant', tenant_fk()),
            ],
            options={
                'indexes': [models.Index(fields=['tenant', 'kind', 'status', 'due_date'], name='clinic_fina_tenant__7d3c19_idx')],
            },
        ),
        migrations.CreateModel(
            name='QueueService',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('number', models.PositiveIntegerField()),
                ('status', models.CharField(choices=[('waiting', 'Aguardando'), ('in_progress', 'Em atendimento'), ('completed', 'Concluído'), ('canceled', 'Cancelado')], db_index=True, default='waiting', max_length=20)),
                ('checked_in_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('pet', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='queue_entries', to='clinic.pet')),
                ('service', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='queue_entries', to='clinic.service')),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='QueueTransition',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('from_status', models.CharField(blank=True, max_length=20, null=True)),
                ('to_status', models.CharField(max_length=20)),
                ('timestamp', models.DateTimeField(auto_now_add=True)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('entry', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transitions', to='clinic.queueservice')),
                ('operator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='TransportService',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('active', 'Ativo'), ('inactive', 'Inativo')], default='active', max_length=10)),
                ('days_available', models.JSONField(blank=True, default=list)),
                ('hours_start', models.TimeField(default=datetime.time(8, 0))),
                ('hours_end', models.TimeField(default=datetime.time(18, 0))),
                ('max_capacity_per_day', models.PositiveIntegerField(default=10)),
                ('accepted_pet_types', models.JSONField(blank=True, default=list)),
                ('base_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10)),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='TransportVehicle',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('plate', models.CharField(max_length=16)),
                ('model', models.CharField(blank=True, max_length=120)),
                ('capacity', models.PositiveIntegerField(default=1)),
                ('status', models.CharField(choices=[('available', 'Disponível'), ('in_use', 'Em uso'), ('maintenance', 'Manutenção')], default='available', max_length=12)),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='TransportDriver',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('name', models.CharField(max_length=120)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('license_number', models.CharField(blank=True, max_length=32)),
                ('status', models.CharField(choices=[('active', 'Ativo'), ('inactive', 'Inativo')], default='active', max_length=10)),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='TransportRoute',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('scheduled_date', models.DateField(db_index=True)),
                ('pickup_time', models.TimeField()),
                ('pickup_address', models.CharField(blank=True, max_length=255)),
                ('dropoff_address', models.CharField(blank=True, max_length=255)),
                ('direction', models.CharField(choices=[('pickup', 'Buscar'), ('dropoff', 'Levar'), ('round_trip', 'Leva e traz')], default='round_trip', max_length=12)),
                ('pet_type', models.CharField(blank=True, max_length=30)),
                ('status', models.CharField(choices=[('scheduled', 'Agendado'), ('in_transit', 'Em trânsito'), ('completed', 'Concluído'), ('canceled', 'Cancelado')], db_index=True, default='scheduled', max_length=12)),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='routes', to='clinic.transportdriver')),
                ('pet', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transport_routes', to='clinic.pet')),
                ('service', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='routes', to='clinic.transportservice')),
                ('tenant', tenant_fk()),
                ('vehicle', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='routes', to='clinic.transportvehicle')),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='SupportTicket',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *timestamps(),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField()),
                ('priority', models.CharField(choices=[('low', 'Baixa'), ('medium', 'Média'), ('high', 'Alta'), ('urgent', 'Urgente')], default='medium', max_length=10)),
                ('category', models.CharField(choices=[('technical', 'Técnico'), ('billing', 'Financeiro'), ('feature_request', 'Sugestão'), ('other', 'Outro')], default='technical', max_length=20)),
                ('status', models.CharField(choices=[('open', 'Aberto'), ('in_progress', 'Em andamento'), ('resolved', 'Resolvido'), ('closed', 'Fechado')], db_index=True, default='open', max_length=12)),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='support_tickets', to=settings.AUTH_USER_MODEL)),
                ('tenant', tenant_fk()),
            ],
            options={'abstract': False},
        ),
        migrations.CreateModel(
            name='SupportMessage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('content', models.TextField()),
                ('is_staff_reply', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('sender', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('ticket', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='messages', to='clinic.supportticket')),
            ],
            options={
                'indexes': [models.Index(fields=['ticket', 'created_at'], name='clinic_supp_ticket__3a6b42_idx')],
            },
        ),
        migrations.CreateModel(
            name='KnowledgeArticle',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('content', models.TextField()),
                ('category', models.CharField(blank=True, max_length=60)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('published', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='+', to='clinic.tenant')),
            ],
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.IntegerField(blank=True, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='clinic.tenant')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['action', 'created_at'], name='clinic_audi_action_2f9e61_idx'),
                    models.Index(fields=['object_type', 'object_id', 'created_at'], name='clinic_audi_object__8b4d03_idx'),
                ],
            },
        ),
    ]
