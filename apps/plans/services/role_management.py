"""
Role table management service.

Each plan can override the multiplier and display name of any standard
role and keeps its own catalogue of custom roles.
"""

import logging
from decimal import Decimal
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.plans.models import CustomRole, Plan, Role

from .exceptions import InvalidPlanDataError
from .plan_access import get_custom_role_for_owner, lock_plan_for_owner

logger = logging.getLogger(__name__)

MAX_MULTIPLIER = Decimal('99.99')


def _check_role(role: str) -> None:
    if role not in Role.values:
        raise InvalidPlanDataError(f"Unknown role: {role}")


def _check_multiplier(multiplier: Decimal) -> Decimal:
    multiplier = Decimal(str(multiplier))
    if not multiplier.is_finite() or multiplier < 0 or multiplier > MAX_MULTIPLIER:
        raise InvalidPlanDataError("Multiplier must be between 0 and 99.99")
    return multiplier


def get_role_table(plan: Plan) -> list:
    """Standard roles with the plan's effective name and multiplier."""
    return [
        {
            'role': role.value,
            'name': plan.get_role_name(role.value),
            'multiplier': plan.get_role_multiplier(role.value),
        }
        for role in Role
    ]


@transaction.atomic
def set_role_multiplier(*, plan_id: UUID, user: User, role: str, multiplier: Decimal) -> Plan:
    """
    Override a standard role's multiplier for one plan.

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        InvalidPlanDataError: If role is unknown or multiplier out of range
    """
    _check_role(role)
    multiplier = _check_multiplier(multiplier)

    plan = lock_plan_for_owner(plan_id=plan_id, user=user)
    role_multipliers = dict(plan.role_multipliers or {})
    role_multipliers[role] = str(multiplier)
    plan.role_multipliers = role_multipliers
    plan.save(update_fields=['role_multipliers', 'updated_at'])
    return plan


@transaction.atomic
def set_role_name(*, plan_id: UUID, user: User, role: str, name: str) -> Plan:
    """
    Override a standard role's display name for one plan.

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        InvalidPlanDataError: If role is unknown or name blank
    """
    _check_role(role)
    name = (name or '').strip()
    if not name:
        raise InvalidPlanDataError("Role name cannot be blank")

    plan = lock_plan_for_owner(plan_id=plan_id, user=user)
    role_names = dict(plan.role_names or {})
    role_names[role] = name
    plan.role_names = role_names
    plan.save(update_fields=['role_names', 'updated_at'])
    return plan


@transaction.atomic
def add_custom_role(*, plan_id: UUID, user: User, name: str, multiplier: Decimal) -> CustomRole:
    """
    Add a custom role to the plan's catalogue.

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        InvalidPlanDataError: If name is blank or multiplier out of range
    """
    name = (name or '').strip()
    if not name:
        raise InvalidPlanDataError("Role name cannot be blank")
    multiplier = _check_multiplier(multiplier)

    plan = lock_plan_for_owner(plan_id=plan_id, user=user)
    custom_role = CustomRole.objects.create(plan=plan, name=name, multiplier=multiplier)

    logger.info("Added custom role %s to plan %s", custom_role.id, plan.id)
    return custom_role


@transaction.atomic
def delete_custom_role(*, custom_role_id: UUID, user: User) -> None:
    """
    Remove a custom role from the catalogue.

    Participants already using it keep their copied name and multiplier.

    Raises:
        CustomRoleNotFoundError: If custom role doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
    """
    custom_role = get_custom_role_for_owner(custom_role_id=custom_role_id, user=user)
    custom_role.delete()
