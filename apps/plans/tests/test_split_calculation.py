"""Split arithmetic on unsaved participants; no database needed."""

from decimal import Decimal

from apps.plans.models import Participant, Role, RoleType
from apps.plans.services import (
    parse_amount,
    format_amount,
    compute_base_unit,
    compute_share,
    compute_shares,
)


def person(name, role=Role.STAFF, fixed=None, custom=None):
    participant = Participant(name=name, role=role)
    if custom is not None:
        participant.role_type = RoleType.CUSTOM
        participant.custom_role_name = 'custom'
        participant.custom_multiplier = Decimal(custom)
    if fixed is not None:
        participant.has_fixed_amount = True
        participant.fixed_amount = fixed
    return participant


class TestParseAmount:

    def test_digits_only(self):
        assert parse_amount('12,000円') == 12000

    def test_empty_and_invalid(self):
        assert parse_amount('') == 0
        assert parse_amount('abc') == 0
        assert parse_amount(None) == 0

    def test_numbers(self):
        assert parse_amount(500) == 500
        assert parse_amount(-500) == 0
        assert parse_amount(Decimal('1200.7')) == 1200

    def test_format_amount(self):
        assert format_amount(12000) == '12,000'
        assert format_amount('') == '0'


class TestComputeShare:

    def test_weighted_split(self):
        a = person('A', Role.DIRECTOR)
        b = person('B', Role.STAFF)

        assert compute_share(9000, a, [a, b]) == 6000
        assert compute_share(9000, b, [a, b]) == 3000

    def test_remainder_not_redistributed(self):
        people = [person('A'), person('B'), person('C')]
        shares = [share for _, share in compute_shares(10000, people)]

        assert shares == [3333, 3333, 3333]
        assert sum(shares) == 9999

    def test_fixed_amount_reduces_remaining(self):
        a = person('A', fixed=2000)
        b = person('B')

        assert compute_share(5000, a, [a, b]) == 2000
        assert compute_share(5000, b, [a, b]) == 3000

    def test_fixed_share_independent_of_total_and_others(self):
        a = person('A', fixed=2000)
        b = person('B', Role.DIRECTOR)

        assert compute_share(100, a, [a, b]) == 2000
        assert compute_share(99999, a, [a, b, person('C', Role.NEWBIE)]) == 2000

    def test_fixed_over_total_clamps_remaining(self):
        a = person('A', fixed=8000)
        b = person('B')

        assert compute_share(5000, b, [a, b]) == 0

    def test_all_zero_multipliers(self):
        a = person('A', custom='0')
        b = person('B', custom='0')

        assert compute_share(5000, a, [a, b]) == 0
        assert compute_base_unit(5000, [a, b]) == 0

    def test_only_fixed_participants(self):
        a = person('A', fixed=1000)

        assert compute_base_unit(5000, [a]) == 0

    def test_text_total(self):
        a = person('A')
        b = person('B')

        assert compute_share('4,000円', a, [a, b]) == 2000

    def test_rounds_half_up(self):
        # 1001 / 2.0 = 500.5
        a = person('A')
        b = person('B')

        assert compute_share(1001, a, [a, b]) == 501

    def test_variable_shares_sum_close_to_remaining(self):
        people = [
            person('A', Role.DIRECTOR),
            person('B', Role.MANAGER),
            person('C', Role.NEWBIE),
            person('D', Role.NON_DRINKER),
            person('E', fixed=1234),
        ]
        total = 23457
        shares = compute_shares(total, people)
        variable_sum = sum(share for p, share in shares if not p.has_fixed_amount)

        assert abs(variable_sum - (total - 1234)) <= 4

    def test_monotonic_in_own_multiplier(self):
        others = [person('B'), person('C', Role.MANAGER)]
        low = person('A', Role.NEWBIE)
        high = person('A', Role.DIRECTOR)

        assert compute_share(10000, low, [low] + others) < compute_share(10000, high, [high] + others)

    def test_custom_multiplier(self):
        a = person('A', custom='3.0')
        b = person('B')

        assert compute_share(8000, a, [a, b]) == 6000

    def test_empty_roster(self):
        assert compute_shares(5000, []) == []
        assert compute_base_unit(5000, []) == 0

    def test_zero_total_gives_zero_shares(self):
        people = [person('A', Role.DIRECTOR), person('B'), person('C', Role.NEWBIE)]

        for total in (0, '', 'abc'):
            assert [share for _, share in compute_shares(total, people)] == [0, 0, 0]

    def test_single_zero_multiplier_owes_nothing(self):
        a = person('A', custom='0')

        assert compute_share(100, a, [a]) == 0
        assert compute_share(10 ** 9, a, [a]) == 0


class TestLongTotals:

    def test_thirty_digit_total(self):
        a = person('A')

        assert compute_share('1' * 30, a, [a]) == int('1' * 30)

    def test_fifty_digit_total_rounds_half_up(self):
        people = [person('A'), person('B')]
        shares = [share for _, share in compute_shares('9' * 50, people)]

        assert shares == [10 ** 50 // 2, 10 ** 50 // 2]

    def test_long_total_weighted(self):
        a = person('A', Role.DIRECTOR)
        b = person('B')
        total = 3 * 10 ** 45

        assert compute_share(total, a, [a, b]) == 2 * 10 ** 45
        assert compute_base_unit(total, [a, b]) == Decimal(10 ** 45)
