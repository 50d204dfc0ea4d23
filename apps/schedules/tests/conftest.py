import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.schedules.models import ScheduleEvent, ScheduleResponse, AttendanceStatus


CANDIDATES = [
    '2024-01-15T19:00:00+09:00',
    '2024-01-16T19:00:00+09:00',
    '2024-01-17T19:00:00+09:00',
]


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='kanji@example.com',
        password='TestPass123!',
        display_name='幹事',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(user, other_user):
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def event(user):
    return ScheduleEvent.objects.create(
        created_by=user,
        title='新年会',
        candidate_dates=list(CANDIDATES),
        location='渋谷',
        budget=5000,
    )


@pytest.fixture
def closed_event(user):
    return ScheduleEvent.objects.create(
        created_by=user,
        title='締切済み',
        candidate_dates=list(CANDIDATES),
        deadline=timezone.now() - timedelta(days=1),
    )


@pytest.fixture
def responses(event):
    """Three responses; 1/16 is the most available date."""
    return [
        ScheduleResponse.objects.create(
            event=event,
            participant_name='佐藤',
            available_dates=[CANDIDATES[0], CANDIDATES[1]],
            status=AttendanceStatus.ATTENDING,
        ),
        ScheduleResponse.objects.create(
            event=event,
            participant_name='鈴木',
            available_dates=[CANDIDATES[1]],
            maybe_dates=[CANDIDATES[2]],
            status=AttendanceStatus.MAYBE,
        ),
        ScheduleResponse.objects.create(
            event=event,
            participant_name='高橋',
            available_dates=[],
            status=AttendanceStatus.NOT_ATTENDING,
        ),
    ]
