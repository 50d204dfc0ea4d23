"""
Shareable text for payment requests and invitations.

The organizer pastes these into chat apps, so the output is plain text
with Japanese date formatting.
"""

from typing import Iterable, Optional

from django.db.models import TextChoices

from apps.accounts.services import format_bank_info, get_payment_settings
from apps.plans.models import Plan
from apps.schedules.services.attendance import to_organizer_datetime

WEEKDAYS = ('月', '火', '水', '木', '金', '土', '日')

DEFAULT_PAYMENT_MESSAGE = 'お支払いよろしくお願いします。'
DEFAULT_DUE_TEXT = 'お支払い期限: 7日以内'
DEFAULT_INVITATION_MESSAGE = 'お待ちしております！'
UNSET = '(未設定)'


class PaymentMethod(TextChoices):
    PAYPAY = 'paypay', 'PayPay'
    BANK_TRANSFER = 'bank_transfer', '銀行振込'
    CASH = 'cash', '現金'


class PaymentTone(TextChoices):
    CASUAL = 'casual', 'カジュアル'
    FORMAL = 'formal', 'フォーマル'
    SIMPLE = 'simple', 'シンプル'


PAYMENT_TONE_TEMPLATES = {
    PaymentTone.CASUAL: (
        '昨日はお疲れ様！精算のお知らせです。\n'
        '楽しかったね！ありがとう。\n'
        '会費計算したので、画像で自分の金額確認してみてー！\n'
        'また飲もう！'
    ),
    PaymentTone.FORMAL: (
        'お疲れ様です。昨日の会費の精算詳細をご連絡します。\n'
        '各自の金額については添付の画像をご確認ください。\n'
        'よろしくお願いいたします。'
    ),
    PaymentTone.SIMPLE: (
        '会費の集金案内です。\n'
        '各自の金額は添付の画像をご確認ください。\n'
        '期限内の送金をお願いします。'
    ),
}

INVITATION_MESSAGE_TEMPLATES = [
    'お待ちしております！',
    'みんなで楽しい時間を過ごしましょう！',
    'お会いできるのを楽しみにしています！',
    'ぜひご参加ください！',
    'お気軽にご参加ください！',
    'お待ちしています！',
    '楽しみにしています！',
    'ぜひお越しください！',
]


def format_japanese_date(value) -> str:
    """1月15日(月)"""
    stamp = to_organizer_datetime(value)
    if stamp is None:
        return ''
    return f"{stamp.month}月{stamp.day}日({WEEKDAYS[stamp.weekday()]})"


def format_japanese_datetime(value) -> str:
    """2024年1月15日(月) 19:00"""
    stamp = to_organizer_datetime(value)
    if stamp is None:
        return ''
    return (
        f"{stamp.year}年{stamp.month}月{stamp.day}日({WEEKDAYS[stamp.weekday()]}) "
        f"{stamp:%H:%M}"
    )


def generate_payment_text(
    *,
    plan: Plan,
    payment_methods: Iterable[str],
    message: Optional[str] = None,
    due_text: Optional[str] = None,
    payment_settings: Optional[dict] = None,
) -> str:
    """
    Build the payment request text for a plan.

    Args:
        plan: The plan being collected for
        payment_methods: PaymentMethod values to list, in display order
        message: Body message; DEFAULT_PAYMENT_MESSAGE when None
        due_text: Payment due text; DEFAULT_DUE_TEXT when None
        payment_settings: Destinations; the plan owner's saved settings when None

    Returns:
        The text, sections separated by blank lines
    """
    if message is None:
        message = DEFAULT_PAYMENT_MESSAGE
    if due_text is None:
        due_text = DEFAULT_DUE_TEXT
    if payment_settings is None:
        payment_settings = get_payment_settings(plan.owner)

    methods = set(payment_methods)

    text = '【集金のお願い】\n'
    text += f'{plan.name}\n'
    if plan.date:
        text += f'開催日: {format_japanese_date(plan.date)}\n'
    text += '\n'

    if message:
        text += f'{message}\n'
    if due_text:
        text += f'期限: {due_text}\n'
    text += '\n'

    text += '■ 金額一覧\n'
    text += '添付の画像をご確認ください。\n\n'

    text += '■ お支払い先\n'

    if PaymentMethod.PAYPAY in methods:
        text += 'PayPay\n'
        paypay_id = payment_settings.get('paypay_id', '')
        if paypay_id:
            text += f'ID: {paypay_id}\n'
            text += '(↑長押しでコピーできます)\n'
        else:
            text += f'ID: {UNSET}\n'
        text += '\n'

    if PaymentMethod.BANK_TRANSFER in methods:
        text += '銀行振込\n'
        bank_info = format_bank_info(payment_settings)
        text += f'{bank_info or UNSET}\n'
        text += '\n'

    if PaymentMethod.CASH in methods:
        text += '現金（当日手渡し）\n'

    return text


def generate_invitation_text(
    *,
    plan: Plan,
    message: Optional[str] = None,
    meeting_place: str = '',
    meeting_time: str = '',
    notes: str = '',
) -> str:
    """
    Build the invitation text announcing a confirmed plan.

    Uses the confirmed date and location when set, otherwise the plan's.
    The participant count is the size of the roster.
    """
    if message is None:
        message = DEFAULT_INVITATION_MESSAGE

    when = plan.confirmed_date or plan.date
    where = plan.confirmed_location or plan.location
    title = f'{plan.emoji} {plan.name}'.strip()

    text = '【開催のご案内】\n'
    text += f'{title}\n\n'
    if when:
        text += f'日時: {format_japanese_datetime(when)}\n'
    if where:
        text += f'場所: {where}\n'
    text += f'参加者: {plan.participants.count()}人\n'

    if message:
        text += f'\n{message}\n'

    details = []
    if meeting_place:
        details.append(f'集合場所: {meeting_place}')
    if meeting_time:
        details.append(f'集合時間: {meeting_time}')
    if notes:
        details.append(f'持ち物・注意事項: {notes}')
    if details:
        text += '\n■ 詳細情報\n'
        text += '\n'.join(details) + '\n'

    return text
