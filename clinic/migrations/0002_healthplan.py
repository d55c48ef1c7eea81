from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def percentage():
    return models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(100)])


class Migration(migrations.Migration):

    dependencies = [
        ('clinic', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='HealthPlan',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('provider', models.CharField(blank=True, max_length=255)),
                ('provider_contact', models.CharField(blank=True, max_length=255)),
                ('description', models.TextField(blank=True)),
                ('coverage', models.JSONField(blank=True, default=list)),
                ('consultation_limit', models.PositiveIntegerField(default=0, help_text='Consultas por ano (0 = sem limite)')),
                ('exam_limit', models.PositiveIntegerField(default=0, help_text='Exames por ano (0 = sem limite)')),
                ('surgery_coverage_percentage', percentage()),
                ('hospitalization_coverage_percentage', percentage()),
                ('emergency_coverage_percentage', percentage()),
                ('dental_coverage_percentage', percentage()),
                ('has_grace_period', models.BooleanField(default=False)),
                ('grace_period_days', models.PositiveIntegerField(default=0)),
                ('authorization_required', models.BooleanField(default=False)),
                ('monthly_fee', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10)),
                ('annual_fee', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='clinic.tenant')),
            ],
            options={'abstract': False},
        ),
    ]
