import pytest
import uuid
from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from apps.plans.models import Participant, Plan, Role, RoleType
from apps.plans.services import (
    create_plan,
    quick_create_plan,
    update_plan,
    delete_plan,
    link_schedule_event,
    confirm_plan,
    get_split_summary,
    get_plan_for_owner,
    add_participant,
    update_participant,
    delete_participant,
    set_collection_status,
    toggle_collection_status,
    get_role_table,
    set_role_multiplier,
    set_role_name,
    add_custom_role,
    delete_custom_role,
    add_amount_item,
    update_amount_item,
    reorder_amount_items,
    compute_total_owed,
    generate_payment_text,
    generate_invitation_text,
    PaymentMethod,
    PlanNotFoundError,
    ParticipantNotFoundError,
    InsufficientPermissionsError,
    InvalidPlanDataError,
    InvalidConfirmedDateError,
)

TOKYO = ZoneInfo('Asia/Tokyo')


@pytest.mark.django_db
class TestPlanManagement:

    def test_create_plan(self, user):
        plan = create_plan(owner=user, name='  忘年会  ', emoji='🎉', total_amount='30,000')

        assert plan.name == '忘年会'
        assert plan.owner == user
        assert plan.role_names[Role.DIRECTOR] == '部長'
        assert plan.date is not None

    def test_create_plan_blank_name(self, user):
        with pytest.raises(InvalidPlanDataError):
            create_plan(owner=user, name='   ')

    def test_create_plan_from_event(self, user, event):
        event.location = '新宿'
        event.save()

        plan = create_plan(owner=user, name='新年会', schedule_event_id=event.id)

        assert plan.schedule_event == event
        assert plan.location == '新宿'

    def test_create_plan_with_foreign_event(self, other_user, event):
        with pytest.raises(InsufficientPermissionsError):
            create_plan(owner=other_user, name='新年会', schedule_event_id=event.id)

    def test_quick_create(self, user):
        plan = quick_create_plan(owner=user, name='ランチ会')

        assert Plan.objects.filter(id=plan.id, owner=user).exists()

    def test_update_plan(self, plan, user):
        updated = update_plan(plan_id=plan.id, user=user, total_amount='12,000', location='新橋')

        assert updated.total_amount == '12,000'
        assert updated.location == '新橋'
        assert updated.name == '新年会'

    def test_update_requires_owner(self, plan, other_user):
        with pytest.raises(InsufficientPermissionsError):
            update_plan(plan_id=plan.id, user=other_user, name='乗っ取り')

    def test_delete_plan_cascades(self, plan, user, participants):
        delete_plan(plan_id=plan.id, user=user)

        assert not Plan.objects.filter(id=plan.id).exists()
        assert not Participant.objects.filter(plan_id=plan.id).exists()

    def test_delete_missing_plan(self, user):
        with pytest.raises(PlanNotFoundError):
            delete_plan(plan_id=uuid.uuid4(), user=user)

    def test_link_and_unlink(self, plan, user, event):
        link_schedule_event(plan_id=plan.id, user=user, event_id=event.id)
        plan.refresh_from_db()
        assert plan.schedule_event_id == event.id

        link_schedule_event(plan_id=plan.id, user=user, event_id=None)
        plan.refresh_from_db()
        assert plan.schedule_event_id is None


@pytest.mark.django_db
class TestConfirmPlan:

    def test_confirm_rebuilds_roster(self, linked_plan, user, participants, responses):
        confirmed = datetime(2024, 1, 15, 19, 0, tzinfo=TOKYO)

        plan = confirm_plan(
            plan_id=linked_plan.id,
            user=user,
            confirmed_date=confirmed,
            confirmed_location='恵比寿',
        )

        assert plan.confirmed_date == confirmed
        assert plan.date == confirmed
        assert plan.location == '恵比寿'
        names = list(plan.participants.values_list('name', flat=True))
        assert names == ['佐藤', '鈴木']

    def test_any_time_on_candidate_day(self, linked_plan, user, responses):
        plan = confirm_plan(
            plan_id=linked_plan.id,
            user=user,
            confirmed_date=datetime(2024, 1, 16, 9, 30, tzinfo=TOKYO),
        )

        names = list(plan.participants.values_list('name', flat=True))
        assert names == ['佐藤', '田中']

    def test_rejects_non_candidate(self, linked_plan, user, participants):
        with pytest.raises(InvalidConfirmedDateError):
            confirm_plan(
                plan_id=linked_plan.id,
                user=user,
                confirmed_date=datetime(2024, 1, 20, 19, 0, tzinfo=TOKYO),
            )

        assert linked_plan.participants.count() == 2

    def test_without_event_keeps_roster(self, plan, user, participants):
        confirm_plan(
            plan_id=plan.id,
            user=user,
            confirmed_date=datetime(2024, 2, 1, 19, 0, tzinfo=TOKYO),
        )

        assert plan.participants.count() == 2


@pytest.mark.django_db
class TestParticipants:

    def test_add_appends(self, plan, user, participants):
        participant = add_participant(plan_id=plan.id, user=user, name='新人くん', role=Role.NEWBIE)

        assert participant.position == 2
        assert participant.effective_multiplier == Decimal('0.5')

    def test_add_with_custom_role(self, plan, user):
        custom = add_custom_role(plan_id=plan.id, user=user, name='主賓', multiplier=Decimal('0'))

        participant = add_participant(plan_id=plan.id, user=user, name='山田', custom_role_id=custom.id)

        assert participant.role_type == RoleType.CUSTOM
        assert participant.role_display_name == '主賓'
        assert participant.effective_multiplier == Decimal('0')

    def test_add_blank_name(self, plan, user):
        with pytest.raises(InvalidPlanDataError):
            add_participant(plan_id=plan.id, user=user, name='')

    def test_update(self, user, participants):
        updated = update_participant(
            participant_id=participants[1].id,
            user=user,
            has_fixed_amount=True,
            fixed_amount=2000,
        )

        assert updated.has_fixed_amount is True
        assert updated.fixed_amount == 2000

    def test_update_requires_owner(self, other_user, participants):
        with pytest.raises(InsufficientPermissionsError):
            update_participant(participant_id=participants[0].id, user=other_user, name='x')

    def test_delete(self, user, participants):
        delete_participant(participant_id=participants[0].id, user=user)

        with pytest.raises(ParticipantNotFoundError):
            delete_participant(participant_id=participants[0].id, user=user)

    def test_toggle_collected(self, user, participants):
        assert toggle_collection_status(participant_id=participants[0].id, user=user).has_collected
        assert not toggle_collection_status(participant_id=participants[0].id, user=user).has_collected


@pytest.mark.django_db
class TestRoles:

    def test_default_table(self, plan):
        table = {row['role']: row for row in get_role_table(plan)}

        assert table[Role.DIRECTOR]['multiplier'] == Decimal('2.0')
        assert table[Role.NON_DRINKER]['name'] == '下戸'
        assert len(table) == 8

    def test_override_multiplier_changes_split(self, plan, user, participants):
        set_role_multiplier(plan_id=plan.id, user=user, role=Role.DIRECTOR, multiplier=Decimal('1.0'))
        plan.refresh_from_db()

        summary = get_split_summary(plan)

        assert [row['amount'] for row in summary['participants']] == [4500, 4500]

    def test_override_stored_as_exact_decimal(self, plan, user):
        set_role_multiplier(plan_id=plan.id, user=user, role='staff', multiplier=Decimal('1.10'))
        plan.refresh_from_db()

        assert plan.role_multipliers == {'staff': '1.10'}
        assert plan.get_role_multiplier(Role.STAFF) == Decimal('1.10')

    def test_override_out_of_range(self, plan, user):
        with pytest.raises(InvalidPlanDataError):
            set_role_multiplier(plan_id=plan.id, user=user, role=Role.STAFF, multiplier=Decimal('100'))

    def test_unknown_role(self, plan, user):
        with pytest.raises(InvalidPlanDataError):
            set_role_name(plan_id=plan.id, user=user, role='ceo', name='社長')

    def test_rename(self, plan, user):
        set_role_name(plan_id=plan.id, user=user, role=Role.STAFF, name='メンバー')
        plan.refresh_from_db()

        assert plan.get_role_name(Role.STAFF) == 'メンバー'

    def test_delete_custom_role_keeps_participant_copy(self, plan, user):
        custom = add_custom_role(plan_id=plan.id, user=user, name='幹事', multiplier=Decimal('0.5'))
        participant = add_participant(plan_id=plan.id, user=user, name='山田', custom_role_id=custom.id)

        delete_custom_role(custom_role_id=custom.id, user=user)
        participant.refresh_from_db()

        assert participant.custom_role_name == '幹事'
        assert participant.effective_multiplier == Decimal('0.5')


@pytest.mark.django_db
class TestSplitSummary:

    def test_summary(self, plan, participants):
        participants[0].has_collected = True
        participants[0].save()

        summary = get_split_summary(plan)

        assert summary['total_amount'] == 9000
        assert summary['base_unit'] == 3000
        assert [row['amount'] for row in summary['participants']] == [6000, 3000]
        assert summary['collected_amount'] == 6000
        assert summary['outstanding_amount'] == 3000
        assert summary['collected_count'] == 1
        assert summary['outstanding_count'] == 1
        assert summary['remainder'] == 0

    def test_remainder_reported(self, plan, user):
        update_plan(plan_id=plan.id, user=user, total_amount='10000')
        for name in ('A', 'B', 'C'):
            add_participant(plan_id=plan.id, user=user, name=name)
        plan.refresh_from_db()

        summary = get_split_summary(plan)

        assert summary['allocated_amount'] == 9999
        assert summary['remainder'] == 1

    def test_amount_items(self, plan, user, participants):
        director, staff = participants
        add_amount_item(plan_id=plan.id, user=user, name='一次会', amount=6000)
        add_amount_item(
            plan_id=plan.id,
            user=user,
            name='二次会',
            amount=1000,
            participant_ids=[staff.id],
            use_multiplier=False,
        )

        summary = get_split_summary(plan)

        assert summary['total_amount'] == 7000
        assert [row['amount'] for row in summary['participants']] == [4000, 3000]
        assert [row['name'] for row in summary['items']] == ['一次会', '二次会']

        items = list(plan.amount_items.all())
        roster = list(plan.participants.all())
        assert compute_total_owed(roster[0], roster, items=items) == 4000

    def test_equal_item_ignores_fixed(self, plan, user, participants):
        update_participant(participant_id=participants[0].id, user=user, has_fixed_amount=True, fixed_amount=500)
        add_amount_item(plan_id=plan.id, user=user, name='タクシー', amount=3000, use_multiplier=False)

        summary = get_split_summary(plan)

        assert [row['amount'] for row in summary['participants']] == [1500, 1500]

    def test_item_subset_must_be_on_plan(self, plan, user, other_user):
        other_plan = create_plan(owner=other_user, name='別')
        outsider = add_participant(plan_id=other_plan.id, user=other_user, name='部外者')

        with pytest.raises(InvalidPlanDataError):
            add_amount_item(plan_id=plan.id, user=user, name='x', amount=100, participant_ids=[outsider.id])

    def test_update_item_back_to_everyone(self, plan, user, participants):
        item = add_amount_item(
            plan_id=plan.id, user=user, name='二次会', amount=1000, participant_ids=[participants[1].id]
        )

        item = update_amount_item(item_id=item.id, user=user, applies_to_all=True)

        assert item.applies_to_all is True
        assert item.participants.count() == 0

    def test_reorder_items(self, plan, user):
        first = add_amount_item(plan_id=plan.id, user=user, name='一次会', amount=1000)
        second = add_amount_item(plan_id=plan.id, user=user, name='二次会', amount=1000)

        reorder_amount_items(plan_id=plan.id, user=user, item_ids=[second.id, first.id])

        assert list(plan.amount_items.values_list('name', flat=True)) == ['二次会', '一次会']

    def test_reorder_requires_every_item(self, plan, user):
        first = add_amount_item(plan_id=plan.id, user=user, name='一次会', amount=1000)
        add_amount_item(plan_id=plan.id, user=user, name='二次会', amount=1000)

        with pytest.raises(InvalidPlanDataError):
            reorder_amount_items(plan_id=plan.id, user=user, item_ids=[first.id])


@pytest.mark.django_db
class TestShareText:

    def test_payment_text(self, plan):
        text = generate_payment_text(
            plan=plan,
            payment_methods=[PaymentMethod.PAYPAY, PaymentMethod.BANK_TRANSFER, PaymentMethod.CASH],
            payment_settings={'paypay_id': 'kanji123'},
        )

        assert text.startswith('【集金のお願い】\n新年会\n開催日: 1月15日(月)\n\n')
        assert 'お支払いよろしくお願いします。\n期限: お支払い期限: 7日以内\n' in text
        assert 'PayPay\nID: kanji123\n(↑長押しでコピーできます)\n' in text
        assert '銀行振込\n(未設定)\n' in text
        assert text.endswith('現金（当日手渡し）\n')

    def test_payment_text_uses_owner_settings(self, plan, user_with_bank):
        text = generate_payment_text(plan=plan, payment_methods=[PaymentMethod.BANK_TRANSFER])

        assert 'みずほ銀行 渋谷支店 普通 1234567 名義：カンジ タロウ' in text
        assert 'PayPay' not in text

    def test_payment_text_without_message(self, plan):
        text = generate_payment_text(plan=plan, payment_methods=[], message='', due_text='', payment_settings={})

        assert text == '【集金のお願い】\n新年会\n開催日: 1月15日(月)\n\n\n■ 金額一覧\n添付の画像をご確認ください。\n\n■ お支払い先\n'

    def test_invitation_text(self, plan, participants):
        text = generate_invitation_text(plan=plan, meeting_place='ハチ公前', notes='特になし')

        assert text.startswith('【開催のご案内】\n🍻 新年会\n\n日時: 2024年1月15日(月) 19:00\n場所: 渋谷\n参加者: 2人\n')
        assert '\nお待ちしております！\n' in text
        assert '■ 詳細情報\n集合場所: ハチ公前\n持ち物・注意事項: 特になし\n' in text
        assert '集合時間' not in text



@pytest.mark.django_db
class TestPlanAccess:

    def test_owner_gets_plan(self, plan, user):
        assert get_plan_for_owner(plan_id=plan.id, user=user) == plan

    def test_other_user_is_refused(self, plan, other_user):
        with pytest.raises(InsufficientPermissionsError):
            get_plan_for_owner(plan_id=plan.id, user=other_user)

    def test_set_collection_status(self, user, participants):
        participant = set_collection_status(participant_id=participants[0].id, user=user, has_collected=True)

        assert participant.has_collected is True
        assert set_collection_status(
            participant_id=participants[0].id, user=user, has_collected=True
        ).has_collected is True
