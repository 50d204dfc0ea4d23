"""
Amount item management service.

A plan's bill can be split into independent items (first party, second
party...), each shared by everyone or by a subset of the roster.
"""

from typing import Iterable, List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Max

from apps.accounts.models import User
from apps.plans.models import AmountItem, Plan

from .exceptions import InvalidPlanDataError
from .plan_access import get_amount_item_for_owner, lock_plan_for_owner


def _roster_subset(plan: Plan, participant_ids: Iterable[UUID]) -> list:
    participant_ids = set(participant_ids)
    participants = list(plan.participants.filter(id__in=participant_ids))
    if len(participants) != len(participant_ids):
        raise InvalidPlanDataError("Some participants are not on this plan")
    return participants


def _clean_name(name: str) -> str:
    name = (name or '').strip()
    if not name:
        raise InvalidPlanDataError("Item name cannot be blank")
    return name


@transaction.atomic
def add_amount_item(
    *,
    plan_id: UUID,
    user: User,
    name: str,
    amount: int,
    participant_ids: Optional[List[UUID]] = None,
    use_multiplier: bool = True,
) -> AmountItem:
    """
    Add an amount item at the end of the plan's list.

    Args:
        plan_id: UUID of the plan
        user: Plan owner
        name: Item name
        amount: Item amount in yen
        participant_ids: Participants sharing the item; None means everyone
        use_multiplier: Split by role multipliers instead of equally

    Returns:
        Created AmountItem instance

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        InvalidPlanDataError: If name is blank or a participant is not on the plan
    """
    plan = lock_plan_for_owner(plan_id=plan_id, user=user)

    last_position = plan.amount_items.aggregate(last=Max('position'))['last']
    item = AmountItem.objects.create(
        plan=plan,
        name=_clean_name(name),
        amount=max(0, amount),
        applies_to_all=participant_ids is None,
        use_multiplier=use_multiplier,
        position=0 if last_position is None else last_position + 1,
    )
    if participant_ids is not None:
        item.participants.set(_roster_subset(plan, participant_ids))

    return item


@transaction.atomic
def update_amount_item(
    *,
    item_id: UUID,
    user: User,
    name: Optional[str] = None,
    amount: Optional[int] = None,
    use_multiplier: Optional[bool] = None,
    applies_to_all: Optional[bool] = None,
    participant_ids: Optional[List[UUID]] = None,
) -> AmountItem:
    """
    Update an amount item; None leaves a field unchanged.

    Passing participant_ids restricts the item to those participants.

    Raises:
        AmountItemNotFoundError: If item doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        InvalidPlanDataError: If name is blank or a participant is not on the plan
    """
    item = get_amount_item_for_owner(item_id=item_id, user=user)

    if name is not None:
        item.name = _clean_name(name)
    if amount is not None:
        item.amount = max(0, amount)
    if use_multiplier is not None:
        item.use_multiplier = use_multiplier
    if applies_to_all is not None:
        item.applies_to_all = applies_to_all
    if participant_ids is not None:
        item.participants.set(_roster_subset(item.plan, participant_ids))
        item.applies_to_all = False
    item.save()

    if item.applies_to_all:
        item.participants.clear()

    return item


@transaction.atomic
def delete_amount_item(*, item_id: UUID, user: User) -> None:
    """
    Raises:
        AmountItemNotFoundError: If item doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
    """
    item = get_amount_item_for_owner(item_id=item_id, user=user)
    item.delete()


@transaction.atomic
def reorder_amount_items(*, plan_id: UUID, user: User, item_ids: List[UUID]) -> List[AmountItem]:
    """
    Set the display order of the plan's items.

    item_ids must list every item of the plan exactly once.

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        InvalidPlanDataError: If item_ids doesn't match the plan's items
    """
    plan = lock_plan_for_owner(plan_id=plan_id, user=user)
    items = {item.id: item for item in plan.amount_items.all()}

    if len(item_ids) != len(items) or set(item_ids) != set(items):
        raise InvalidPlanDataError("item_ids must list every item of the plan once")

    ordered = []
    for position, item_id in enumerate(item_ids):
        item = items[item_id]
        item.position = position
        ordered.append(item)
    AmountItem.objects.bulk_update(ordered, ['position'])
    return ordered
