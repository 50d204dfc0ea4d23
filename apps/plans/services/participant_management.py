"""
Participant roster management service.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Max

from apps.accounts.models import User
from apps.plans.models import CustomRole, Participant, ParticipantSource, Plan, Role

from .exceptions import CustomRoleNotFoundError, InvalidPlanDataError
from .plan_access import get_participant_for_owner, lock_plan_for_owner

logger = logging.getLogger(__name__)


def _get_custom_role(plan: Plan, custom_role_id: UUID) -> CustomRole:
    try:
        return plan.custom_roles.get(id=custom_role_id)
    except CustomRole.DoesNotExist:
        raise CustomRoleNotFoundError(f"Custom role with ID {custom_role_id} not found")


def _apply_role(participant: Participant, role: Optional[str], custom_role_id: Optional[UUID]) -> None:
    if custom_role_id is not None:
        participant.assign_custom_role(_get_custom_role(participant.plan, custom_role_id))
    elif role is not None:
        if role not in Role.values:
            raise InvalidPlanDataError(f"Unknown role: {role}")
        participant.assign_standard_role(role)


def _clean_name(name: str) -> str:
    name = (name or '').strip()
    if not name:
        raise InvalidPlanDataError("Participant name cannot be blank")
    return name


@transaction.atomic
def add_participant(
    *,
    plan_id: UUID,
    user: User,
    name: str,
    role: str = Role.STAFF,
    custom_role_id: Optional[UUID] = None,
    has_fixed_amount: bool = False,
    fixed_amount: int = 0,
) -> Participant:
    """
    Add a participant to the end of the roster.

    A custom role, when given, takes precedence over role.

    Args:
        plan_id: UUID of the plan
        user: Plan owner
        name: Participant's name
        role: Standard role value
        custom_role_id: Custom role of the plan to copy
        has_fixed_amount: Whether the participant pays a fixed amount
        fixed_amount: The fixed amount in yen

    Returns:
        Created Participant instance

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        CustomRoleNotFoundError: If the custom role isn't on the plan
        InvalidPlanDataError: If name is blank or role unknown
    """
    plan = lock_plan_for_owner(plan_id=plan_id, user=user)

    last_position = plan.participants.aggregate(last=Max('position'))['last']
    participant = Participant(
        plan=plan,
        name=_clean_name(name),
        position=0 if last_position is None else last_position + 1,
        has_fixed_amount=has_fixed_amount,
        fixed_amount=max(0, fixed_amount),
        source=ParticipantSource.MANUAL,
    )
    _apply_role(participant, role, custom_role_id)
    participant.save()

    logger.info("Added participant %s to plan %s", participant.id, plan.id)
    return participant


@transaction.atomic
def update_participant(
    *,
    participant_id: UUID,
    user: User,
    name: Optional[str] = None,
    role: Optional[str] = None,
    custom_role_id: Optional[UUID] = None,
    has_collected: Optional[bool] = None,
    has_fixed_amount: Optional[bool] = None,
    fixed_amount: Optional[int] = None,
) -> Participant:
    """
    Update a participant in place; None leaves a field unchanged.

    Raises:
        ParticipantNotFoundError: If participant doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        CustomRoleNotFoundError: If the custom role isn't on the plan
        InvalidPlanDataError: If name is blank or role unknown
    """
    participant = get_participant_for_owner(participant_id=participant_id, user=user, lock=True)

    if name is not None:
        participant.name = _clean_name(name)
    _apply_role(participant, role, custom_role_id)
    if has_collected is not None:
        participant.has_collected = has_collected
    if has_fixed_amount is not None:
        participant.has_fixed_amount = has_fixed_amount
    if fixed_amount is not None:
        participant.fixed_amount = max(0, fixed_amount)

    participant.save()
    return participant


@transaction.atomic
def delete_participant(*, participant_id: UUID, user: User) -> None:
    """
    Remove a participant from the roster.

    Raises:
        ParticipantNotFoundError: If participant doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
    """
    participant = get_participant_for_owner(participant_id=participant_id, user=user, lock=True)
    participant.delete()
    logger.info("Deleted participant %s", participant_id)


@transaction.atomic
def set_collection_status(*, participant_id: UUID, user: User, has_collected: bool) -> Participant:
    """Mark whether the participant has paid."""
    participant = get_participant_for_owner(participant_id=participant_id, user=user, lock=True)
    participant.has_collected = has_collected
    participant.save(update_fields=['has_collected', 'updated_at'])
    return participant


@transaction.atomic
def toggle_collection_status(*, participant_id: UUID, user: User) -> Participant:
    """Flip the participant's paid flag."""
    participant = get_participant_for_owner(participant_id=participant_id, user=user, lock=True)
    participant.has_collected = not participant.has_collected
    participant.save(update_fields=['has_collected', 'updated_at'])
    return participant
