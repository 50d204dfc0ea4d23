import pytest
from datetime import datetime
from zoneinfo import ZoneInfo
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.accounts.services import update_payment_settings
from apps.plans.models import Participant, Plan, Role
from apps.schedules.models import AttendanceStatus, ScheduleEvent, ScheduleResponse

TOKYO = ZoneInfo('Asia/Tokyo')

CANDIDATES = [
    '2024-01-15T19:00:00+09:00',
    '2024-01-16T19:00:00+09:00',
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
def other_client(other_user):
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def plan(user):
    return Plan.objects.create(
        owner=user,
        name='新年会',
        emoji='🍻',
        date=datetime(2024, 1, 15, 19, 0, tzinfo=TOKYO),
        location='渋谷',
        total_amount='9,000円',
    )


@pytest.fixture
def participants(plan):
    """A director and a staff member: 6000 / 3000 of 9000."""
    return [
        Participant.objects.create(plan=plan, name='部長さん', role=Role.DIRECTOR, position=0),
        Participant.objects.create(plan=plan, name='一般さん', role=Role.STAFF, position=1),
    ]


@pytest.fixture
def event(user):
    return ScheduleEvent.objects.create(
        created_by=user,
        title='新年会',
        candidate_dates=list(CANDIDATES),
    )


@pytest.fixture
def responses(event):
    """Two attending on the 15th, one maybe and one attending only on the 16th."""
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
            available_dates=[CANDIDATES[0]],
            status=AttendanceStatus.ATTENDING,
        ),
        ScheduleResponse.objects.create(
            event=event,
            participant_name='高橋',
            available_dates=[CANDIDATES[0]],
            status=AttendanceStatus.MAYBE,
        ),
        ScheduleResponse.objects.create(
            event=event,
            participant_name='田中',
            available_dates=[CANDIDATES[1]],
            status=AttendanceStatus.ATTENDING,
        ),
    ]


@pytest.fixture
def linked_plan(plan, event):
    plan.schedule_event = event
    plan.save()
    return plan


@pytest.fixture
def user_with_bank(user):
    update_payment_settings(
        user=user,
        bank_name='みずほ銀行',
        branch_name='渋谷支店',
        account_number='1234567',
        account_holder='カンジ タロウ',
    )
    user.refresh_from_db()
    return user
