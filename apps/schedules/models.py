from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone
import uuid

# Responses removed by the organizer keep their row; the name gets this prefix
DELETED_RESPONSE_PREFIX = '[削除済み]'


class AttendanceStatus(models.TextChoices):
    ATTENDING = 'attending', '参加'
    MAYBE = 'maybe', '微妙'
    NOT_ATTENDING = 'not_attending', '不参加'
    UNDECIDED = 'undecided', '未回答'


class ScheduleEvent(models.Model):
    """Date poll for a nomikai, answered through the public web form."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='schedule_events'
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # ISO timestamps, kept in chronological order
    candidate_dates = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)

    location = models.CharField(max_length=200, blank=True)
    budget = models.PositiveIntegerField(null=True, blank=True)
    deadline = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'schedule_events'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='sched_event_creator_idx'),
            models.Index(fields=['is_active', 'deadline'], name='sched_event_active_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    @property
    def web_url(self):
        return f"{settings.KANJY_WEB_FORM_BASE_URL}{str(self.id).lower()}"

    @property
    def is_closed(self):
        """Closed when deactivated or past its deadline."""
        if not self.is_active:
            return True
        return self.deadline is not None and self.deadline < timezone.now()


class ScheduleResponseQuerySet(models.QuerySet):

    def active(self):
        return self.exclude(participant_name__startswith=DELETED_RESPONSE_PREFIX)


class ScheduleResponse(models.Model):
    """One respondent's answer to a schedule event."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(ScheduleEvent, on_delete=models.CASCADE, related_name='responses')

    # Free text, not an identity
    participant_name = models.CharField(max_length=100)

    available_dates = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    maybe_dates = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    status = models.CharField(
        max_length=20,
        choices=AttendanceStatus.choices,
        default=AttendanceStatus.UNDECIDED
    )
    comment = models.TextField(blank=True)
    department = models.CharField(max_length=100, blank=True)

    response_date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ScheduleResponseQuerySet.as_manager()

    class Meta:
        db_table = 'schedule_responses'
        indexes = [
            models.Index(fields=['event', 'response_date'], name='sched_resp_event_idx'),
        ]
        ordering = ['response_date', 'created_at']

    def __str__(self):
        return f"{self.participant_name} ({self.get_status_display()})"

    @property
    def is_deleted(self):
        return self.participant_name.startswith(DELETED_RESPONSE_PREFIX)
