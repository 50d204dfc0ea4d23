"""
Owner-checked lookups shared by the plans services.
"""

from uuid import UUID

from apps.accounts.models import User
from apps.plans.models import AmountItem, CustomRole, Participant, Plan

from .exceptions import (
    AmountItemNotFoundError,
    CustomRoleNotFoundError,
    InsufficientPermissionsError,
    ParticipantNotFoundError,
    PlanNotFoundError,
)


def _check_owner(plan: Plan, user: User) -> None:
    if plan.owner_id != user.id:
        raise InsufficientPermissionsError("Only the plan owner can do this")


def get_plan(*, plan_id: UUID) -> Plan:
    """
    Get a plan by ID.

    Raises:
        PlanNotFoundError: If plan doesn't exist
    """
    try:
        return Plan.objects.select_related('owner', 'schedule_event').get(id=plan_id)
    except Plan.DoesNotExist:
        raise PlanNotFoundError(f"Plan with ID {plan_id} not found")


def get_plan_for_owner(*, plan_id: UUID, user: User) -> Plan:
    """
    Get a plan owned by user.

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
    """
    plan = get_plan(plan_id=plan_id)
    _check_owner(plan, user)
    return plan


def lock_plan_for_owner(*, plan_id: UUID, user: User) -> Plan:
    """
    Same as get_plan_for_owner, holding a row lock until the transaction ends.

    Must be called inside transaction.atomic().
    """
    try:
        plan = Plan.objects.select_for_update().get(id=plan_id)
    except Plan.DoesNotExist:
        raise PlanNotFoundError(f"Plan with ID {plan_id} not found")
    _check_owner(plan, user)
    return plan


def get_participant_for_owner(*, participant_id: UUID, user: User, lock: bool = False) -> Participant:
    """
    Raises:
        ParticipantNotFoundError: If participant doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
    """
    queryset = Participant.objects.select_related('plan')
    if lock:
        queryset = queryset.select_for_update(of=('self',))
    try:
        participant = queryset.get(id=participant_id)
    except Participant.DoesNotExist:
        raise ParticipantNotFoundError(f"Participant with ID {participant_id} not found")
    _check_owner(participant.plan, user)
    return participant


def get_custom_role_for_owner(*, custom_role_id: UUID, user: User) -> CustomRole:
    """
    Raises:
        CustomRoleNotFoundError: If custom role doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
    """
    try:
        custom_role = CustomRole.objects.select_related('plan').get(id=custom_role_id)
    except CustomRole.DoesNotExist:
        raise CustomRoleNotFoundError(f"Custom role with ID {custom_role_id} not found")
    _check_owner(custom_role.plan, user)
    return custom_role


def get_amount_item_for_owner(*, item_id: UUID, user: User) -> AmountItem:
    """
    Raises:
        AmountItemNotFoundError: If amount item doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
    """
    try:
        item = AmountItem.objects.select_related('plan').get(id=item_id)
    except AmountItem.DoesNotExist:
        raise AmountItemNotFoundError(f"Amount item with ID {item_id} not found")
    _check_owner(item.plan, user)
    return item
