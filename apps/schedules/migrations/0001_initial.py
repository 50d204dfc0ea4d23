# Generated manually for schedules app

import uuid
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ScheduleEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('candidate_dates', models.JSONField(blank=True, default=list, encoder=DjangoJSONEncoder)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('budget', models.PositiveIntegerField(blank=True, null=True)),
                ('deadline', models.DateTimeField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='schedule_events', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'schedule_events',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_by', 'created_at'], name='sched_event_creator_idx'),
                    models.Index(fields=['is_active', 'deadline'], name='sched_event_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ScheduleResponse',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('participant_name', models.CharField(max_length=100)),
                ('available_dates', models.JSONField(blank=True, default=list, encoder=DjangoJSONEncoder)),
                ('maybe_dates', models.JSONField(blank=True, default=list, encoder=DjangoJSONEncoder)),
                ('status', models.CharField(choices=[('attending', '参加'), ('maybe', '微妙'), ('not_attending', '不参加'), ('undecided', '未回答')], default='undecided', max_length=20)),
                ('comment', models.TextField(blank=True)),
                ('department', models.CharField(blank=True, max_length=100)),
                ('response_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='responses', to='schedules.scheduleevent')),
            ],
            options={
                'db_table': 'schedule_responses',
                'ordering': ['response_date', 'created_at'],
                'indexes': [
                    models.Index(fields=['event', 'response_date'], name='sched_resp_event_idx'),
                ],
            },
        ),
    ]
