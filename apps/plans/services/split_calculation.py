"""
Weighted bill split.

Participants with a fixed amount pay exactly that. The rest of the total
is divided by the sum of the other participants' multipliers, and each
of them pays that base unit times their own multiplier, rounded half up
to whole yen. The rounding remainder is not redistributed, so the shares
may not add up to the total exactly.

Nothing here touches the database except item_participants, which reads
an amount item's participant set when it does not apply to everyone.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Iterable, List, Tuple

ZERO = Decimal('0')

# Enough digits for a 50-character total plus the multiplier scale.
PRECISION = 80


def parse_amount(value) -> int:
    """
    Normalize a money amount to a non-negative integer.

    Text keeps its digits only, so "12,000円" is 12000. Empty or
    digit-less text is 0. Numbers pass through, negatives become 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, (float, Decimal)):
        try:
            return max(0, int(value))
        except (ValueError, OverflowError, InvalidOperation):
            return 0

    digits = ''.join(ch for ch in str(value) if ch.isdecimal())
    return int(digits) if digits else 0


def format_amount(value) -> str:
    """Comma-grouped amount, e.g. 12,000."""
    return f"{parse_amount(value):,}"


def _precision(value) -> int:
    return max(PRECISION, Decimal(value).adjusted() + 20)


def round_half_up(value: Decimal) -> int:
    with localcontext() as ctx:
        ctx.prec = _precision(value)
        return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def divide(amount, divisor) -> Decimal:
    """amount / divisor without losing digits of a long total."""
    with localcontext() as ctx:
        ctx.prec = _precision(amount)
        return Decimal(amount) / Decimal(divisor)


def weighted_share(base_unit: Decimal, multiplier: Decimal) -> int:
    """base_unit times multiplier, rounded half up to whole yen."""
    with localcontext() as ctx:
        ctx.prec = _precision(base_unit)
        return round_half_up(base_unit * multiplier)


def _multiplier(participant) -> Decimal:
    try:
        value = Decimal(str(participant.effective_multiplier))
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not value.is_finite() or value < 0:
        return ZERO
    return value


def _fixed_amount(participant) -> int:
    return parse_amount(participant.fixed_amount)


def compute_base_unit(total, participants: Iterable) -> Decimal:
    """
    Amount owed per 1.0 of multiplier.

    Zero when nobody is left to share the remainder or the multipliers
    sum to zero.
    """
    participants = list(participants)
    total = parse_amount(total)

    fixed_sum = sum(_fixed_amount(p) for p in participants if p.has_fixed_amount)
    remaining = max(0, total - fixed_sum)

    variable = [p for p in participants if not p.has_fixed_amount]
    multiplier_sum = sum((_multiplier(p) for p in variable), ZERO)
    if not variable or multiplier_sum == 0:
        return ZERO

    return divide(remaining, multiplier_sum)


def compute_share(total, participant, all_participants: Iterable) -> int:
    """Amount participant owes out of total, shared with all_participants."""
    if participant.has_fixed_amount:
        return _fixed_amount(participant)

    base_unit = compute_base_unit(total, all_participants)
    if base_unit == 0:
        return 0
    return weighted_share(base_unit, _multiplier(participant))


def compute_shares(total, participants: Iterable) -> List[Tuple[object, int]]:
    """(participant, share) pairs in input order."""
    participants = list(participants)
    base_unit = compute_base_unit(total, participants)

    shares = []
    for participant in participants:
        if participant.has_fixed_amount:
            share = _fixed_amount(participant)
        elif base_unit == 0:
            share = 0
        else:
            share = weighted_share(base_unit, _multiplier(participant))
        shares.append((participant, share))
    return shares


def item_participants(item, plan_participants: Iterable) -> list:
    """Participants sharing an amount item, in roster order."""
    plan_participants = list(plan_participants)
    if item.applies_to_all:
        return plan_participants
    member_ids = {p.pk for p in item.participants.all()}
    return [p for p in plan_participants if p.pk in member_ids]


def compute_item_share(item, participant, plan_participants: Iterable) -> int:
    """
    Amount participant owes for one amount item.

    Participants outside the item owe nothing for it. With
    use_multiplier the item is split like a whole bill; otherwise it is
    divided equally and fixed amounts are ignored.
    """
    members = item_participants(item, plan_participants)
    if not any(p.pk == participant.pk for p in members):
        return 0

    amount = parse_amount(item.amount)
    if item.use_multiplier:
        return compute_share(amount, participant, members)

    return round_half_up(divide(amount, len(members)))


def compute_total_owed(participant, plan_participants: Iterable, total=0, items: Iterable = ()) -> int:
    """
    What participant owes for the whole plan.

    The sum over amount items when there are any, otherwise their share
    of total across the roster.
    """
    plan_participants = list(plan_participants)
    items = list(items)
    if items:
        return sum(compute_item_share(item, participant, plan_participants) for item in items)
    return compute_share(total, participant, plan_participants)
