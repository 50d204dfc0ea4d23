"""
Plan management service.

Handles plan CRUD, linking a plan to a schedule event and confirming
the date, which rebuilds the roster from the event's responses.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.plans.models import Plan, Role
from apps.schedules.models import ScheduleEvent
from apps.schedules.services import is_same_day

from .exceptions import (
    InsufficientPermissionsError,
    InvalidConfirmedDateError,
    InvalidPlanDataError,
)
from .plan_access import lock_plan_for_owner
from .response_sync import sync_participants_from_responses
from .split_calculation import (
    compute_base_unit,
    compute_total_owed,
    divide,
    item_participants,
    parse_amount,
    round_half_up,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    'name',
    'date',
    'emoji',
    'description',
    'location',
    'total_amount',
)


def _resolve_event(event_id: Optional[UUID], user: User) -> Optional[ScheduleEvent]:
    if event_id is None:
        return None
    try:
        event = ScheduleEvent.objects.get(id=event_id)
    except ScheduleEvent.DoesNotExist:
        raise InvalidPlanDataError(f"Schedule event with ID {event_id} not found")
    if event.created_by_id != user.id:
        raise InsufficientPermissionsError("You can only link your own schedule events")
    return event


def _default_role_names() -> dict:
    return {role.value: role.label for role in Role}


@transaction.atomic
def create_plan(
    *,
    owner: User,
    name: str,
    date: Optional[datetime] = None,
    emoji: str = '',
    description: str = '',
    location: str = '',
    total_amount: str = '',
    schedule_event_id: Optional[UUID] = None,
) -> Plan:
    """
    Create a plan.

    Args:
        owner: Organizer creating the plan
        name: Plan name (must not be blank)
        date: When it takes place (defaults to now)
        emoji: Optional icon
        description: Optional description
        location: Optional venue
        total_amount: Bill total as typed
        schedule_event_id: Optional schedule event to link

    Returns:
        Created Plan instance

    Raises:
        InvalidPlanDataError: If name is blank or the event doesn't exist
        InsufficientPermissionsError: If the event belongs to someone else
    """
    name = (name or '').strip()
    if not name:
        raise InvalidPlanDataError("Plan name cannot be blank")

    event = _resolve_event(schedule_event_id, owner)

    plan = Plan.objects.create(
        owner=owner,
        name=name,
        date=date or timezone.now(),
        emoji=emoji,
        description=description or (event.description if event else ''),
        location=location or (event.location if event else ''),
        total_amount=total_amount,
        role_names=_default_role_names(),
        schedule_event=event,
    )

    logger.info("Created plan %s for organizer %s", plan.id, owner.id)
    return plan


def quick_create_plan(*, owner: User, name: str, emoji: str = '') -> Plan:
    """Create a plan from just a name, dated now."""
    return create_plan(owner=owner, name=name, emoji=emoji)


@transaction.atomic
def update_plan(*, plan_id: UUID, user: User, **fields) -> Plan:
    """
    Update a plan's basic fields.

    Args:
        plan_id: UUID of the plan
        user: Plan owner
        **fields: Any of UPDATABLE_FIELDS

    Returns:
        Updated Plan instance

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        InvalidPlanDataError: If name is blank
    """
    plan = lock_plan_for_owner(plan_id=plan_id, user=user)

    update_fields = []
    for field in UPDATABLE_FIELDS:
        if field not in fields:
            continue
        value = fields[field]
        if field == 'name':
            value = (value or '').strip()
            if not value:
                raise InvalidPlanDataError("Plan name cannot be blank")
        setattr(plan, field, value)
        update_fields.append(field)

    if update_fields:
        plan.save(update_fields=update_fields + ['updated_at'])

    return plan


@transaction.atomic
def delete_plan(*, plan_id: UUID, user: User) -> None:
    """
    Delete a plan with its roster, custom roles and amount items.

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
    """
    plan = lock_plan_for_owner(plan_id=plan_id, user=user)
    plan.delete()
    logger.info("Deleted plan %s", plan_id)


@transaction.atomic
def link_schedule_event(*, plan_id: UUID, user: User, event_id: Optional[UUID]) -> Plan:
    """
    Link the plan to a schedule event, or unlink it with None.

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan or the event
        InvalidPlanDataError: If the event doesn't exist
    """
    plan = lock_plan_for_owner(plan_id=plan_id, user=user)
    plan.schedule_event = _resolve_event(event_id, user)
    plan.save(update_fields=['schedule_event', 'updated_at'])
    return plan


@transaction.atomic
def confirm_plan(
    *,
    plan_id: UUID,
    user: User,
    confirmed_date: datetime,
    confirmed_location: str = '',
) -> Plan:
    """
    Fix the plan's date and rebuild its roster from the responses.

    When the plan is linked to a schedule event the date must fall on one
    of its candidate days, and the roster is replaced by the attending
    respondents available that day. Without an event only the date and
    location are stored.

    Args:
        plan_id: UUID of the plan
        user: Plan owner
        confirmed_date: The chosen date
        confirmed_location: Optional venue

    Returns:
        Updated Plan instance

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        InvalidConfirmedDateError: If the date is not a candidate
    """
    plan = lock_plan_for_owner(plan_id=plan_id, user=user)
    event = plan.schedule_event

    if event is not None and not any(
        is_same_day(candidate, confirmed_date) for candidate in event.candidate_dates
    ):
        raise InvalidConfirmedDateError("The confirmed date must be one of the candidate dates")

    plan.confirmed_date = confirmed_date
    plan.date = confirmed_date
    plan.confirmed_location = confirmed_location
    update_fields = ['confirmed_date', 'date', 'confirmed_location', 'updated_at']
    if confirmed_location:
        plan.location = confirmed_location
        update_fields.append('location')
    plan.save(update_fields=update_fields)

    if event is not None:
        sync_participants_from_responses(plan_id=plan.id, user=user, confirmed_date=confirmed_date)

    logger.info("Confirmed plan %s for %s", plan.id, confirmed_date.isoformat())
    return plan


def get_split_summary(plan: Plan) -> dict:
    """
    Everything the bill screen shows for a plan.

    Returns:
        Dict with the plan total, the per-1.0 base unit, each participant's
        owed amount and the collected/outstanding totals and counts.
        Per-item base units are included when the plan has amount items.
    """
    participants = list(plan.participants.all())
    items = list(plan.amount_items.prefetch_related('participants'))

    item_rows = []
    if items:
        total = sum(parse_amount(item.amount) for item in items)
        for item in items:
            members = item_participants(item, participants)
            if item.use_multiplier:
                item_base = compute_base_unit(item.amount, members)
            elif members:
                item_base = divide(parse_amount(item.amount), len(members))
            else:
                item_base = 0
            item_rows.append({
                'id': item.id,
                'name': item.name,
                'amount': parse_amount(item.amount),
                'use_multiplier': item.use_multiplier,
                'participant_count': len(members),
                'base_unit': round_half_up(item_base) if item_base else 0,
            })
        base_unit = item_rows[0]['base_unit']
    else:
        total = parse_amount(plan.total_amount)
        base = compute_base_unit(total, participants)
        base_unit = round_half_up(base) if base else 0

    rows = [
        {
            'participant': participant,
            'amount': compute_total_owed(participant, participants, total=total, items=items),
        }
        for participant in participants
    ]

    allocated = sum(row['amount'] for row in rows)
    collected = sum(row['amount'] for row in rows if row['participant'].has_collected)
    collected_count = sum(1 for row in rows if row['participant'].has_collected)

    return {
        'total_amount': total,
        'base_unit': base_unit,
        'allocated_amount': allocated,
        'remainder': total - allocated,
        'collected_amount': collected,
        'outstanding_amount': allocated - collected,
        'collected_count': collected_count,
        'outstanding_count': len(rows) - collected_count,
        'participants': rows,
        'items': item_rows,
    }
