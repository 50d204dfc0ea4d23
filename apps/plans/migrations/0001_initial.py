# Generated manually for plans app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


ROLE_CHOICES = [
    ('director', '部長'),
    ('manager', '課長'),
    ('staff', '一般'),
    ('newbie', '新人'),
    ('male', '男性'),
    ('female', '女性'),
    ('late', '遅刻'),
    ('non_drinker', '下戸'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('schedules', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Plan',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('date', models.DateTimeField()),
                ('emoji', models.CharField(blank=True, max_length=32)),
                ('description', models.TextField(blank=True)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('total_amount', models.CharField(blank=True, max_length=50)),
                ('role_multipliers', models.JSONField(blank=True, default=dict)),
                ('role_names', models.JSONField(blank=True, default=dict)),
                ('confirmed_date', models.DateTimeField(blank=True, null=True)),
                ('confirmed_location', models.CharField(blank=True, max_length=200)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='plans', to=settings.AUTH_USER_MODEL)),
                ('schedule_event', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='plans', to='schedules.scheduleevent')),
            ],
            options={
                'db_table': 'plans',
                'ordering': ['-date', '-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'date'], name='plans_owner_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CustomRole',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=50)),
                ('multiplier', models.DecimalField(decimal_places=2, max_digits=4, validators=[MinValueValidator(Decimal('0'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('plan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='custom_roles', to='plans.plan')),
            ],
            options={
                'db_table': 'plan_custom_roles',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='Participant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('position', models.PositiveIntegerField(default=0)),
                ('role_type', models.CharField(choices=[('standard', 'Standard'), ('custom', 'Custom')], default='standard', max_length=10)),
                ('role', models.CharField(choices=ROLE_CHOICES, default='staff', max_length=20)),
                ('custom_role_name', models.CharField(blank=True, max_length=50)),
                ('custom_multiplier', models.DecimalField(blank=True, decimal_places=2, max_digits=4, null=True, validators=[MinValueValidator(Decimal('0'))])),
                ('has_collected', models.BooleanField(default=False)),
                ('has_fixed_amount', models.BooleanField(default=False)),
                ('fixed_amount', models.PositiveIntegerField(default=0)),
                ('source', models.CharField(choices=[('manual', '手動追加'), ('web_response', 'Web回答')], default='manual', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('plan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='participants', to='plans.plan')),
            ],
            options={
                'db_table': 'plan_participants',
                'ordering': ['position', 'created_at'],
                'indexes': [
                    models.Index(fields=['plan', 'position'], name='plan_part_position_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AmountItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('amount', models.PositiveIntegerField(default=0)),
                ('applies_to_all', models.BooleanField(default=True)),
                ('use_multiplier', models.BooleanField(default=True)),
                ('position', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('participants', models.ManyToManyField(blank=True, related_name='amount_items', to='plans.participant')),
                ('plan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='amount_items', to='plans.plan')),
            ],
            options={
                'db_table': 'plan_amount_items',
                'ordering': ['position', 'created_at'],
            },
        ),
    ]
