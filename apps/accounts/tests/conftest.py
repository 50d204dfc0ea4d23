import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test organizer."""
    return User.objects.create_user(
        email='kanji@example.com',
        password='TestPass123!',
        display_name='幹事 太郎',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive organizer."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def user_with_payment_settings(user):
    """Organizer with PayPay and bank destinations saved."""
    user.preferences = {
        'payment': {
            'paypay_id': 'kanji-taro',
            'bank_name': 'みずほ銀行',
            'branch_name': '渋谷支店',
            'account_type': '普通',
            'account_number': '1234567',
            'account_holder': 'カンジ タロウ',
        }
    }
    user.save(update_fields=['preferences'])
    return user
