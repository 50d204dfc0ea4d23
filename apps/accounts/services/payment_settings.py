"""Organizer payment destination settings."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model

User = get_user_model()

logger = logging.getLogger(__name__)

PAYMENT_PREFERENCES_KEY = 'payment'

PAYMENT_SETTING_FIELDS = (
    'paypay_id',
    'bank_name',
    'branch_name',
    'account_type',
    'account_number',
    'account_holder',
)

DEFAULT_ACCOUNT_TYPE = '普通'


def get_payment_settings(user) -> dict:
    """
    Return the organizer's payment settings with every field present.

    Missing fields are returned as empty strings, except account_type
    which defaults to 普通.
    """
    stored = (user.preferences or {}).get(PAYMENT_PREFERENCES_KEY) or {}
    settings_ = {field: str(stored.get(field) or '') for field in PAYMENT_SETTING_FIELDS}
    if not settings_['account_type']:
        settings_['account_type'] = DEFAULT_ACCOUNT_TYPE
    return settings_


@transaction.atomic
def update_payment_settings(*, user, **fields) -> dict:
    """
    Update the organizer's payment settings.

    Only known fields are written; values are stripped of surrounding
    whitespace.

    Args:
        user: Organizer whose settings are updated
        **fields: Any of PAYMENT_SETTING_FIELDS

    Returns:
        The full settings dict after the update
    """
    user = User.objects.select_for_update().get(pk=user.pk)

    preferences = dict(user.preferences or {})
    payment = dict(preferences.get(PAYMENT_PREFERENCES_KEY) or {})

    for field in PAYMENT_SETTING_FIELDS:
        if field in fields and fields[field] is not None:
            payment[field] = str(fields[field]).strip()

    preferences[PAYMENT_PREFERENCES_KEY] = payment
    user.preferences = preferences
    user.save(update_fields=['preferences'])

    logger.info("Updated payment settings for organizer %s", user.id)
    return get_payment_settings(user)


def format_bank_info(payment_settings: dict) -> str:
    """
    Compose a one-line bank transfer destination.

    Returns an empty string when no bank field is filled in, otherwise
    "<bank> <branch> <type> <number> 名義：<holder>" with empty parts
    left out.
    """
    bank_name = payment_settings.get('bank_name', '').strip()
    branch_name = payment_settings.get('branch_name', '').strip()
    account_number = payment_settings.get('account_number', '').strip()
    account_holder = payment_settings.get('account_holder', '').strip()

    if not (bank_name or branch_name or account_number or account_holder):
        return ''

    account_type = payment_settings.get('account_type', '').strip() or DEFAULT_ACCOUNT_TYPE

    parts = [part for part in (bank_name, branch_name, account_type, account_number) if part]
    if account_holder:
        parts.append(f'名義：{account_holder}')
    return ' '.join(parts)
