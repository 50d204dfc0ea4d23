"""
Turn schedule responses into a plan's roster.

Respondents are identified by display name only. Two responses with the
same name become two participants on replace and one on merge; renaming
a participant breaks the link to the response.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.plans.models import Participant, ParticipantSource, Plan, Role, RoleType
from apps.schedules.models import AttendanceStatus
from apps.schedules.services import contains_day, get_active_responses

from .exceptions import NoScheduleLinkedError
from .plan_access import lock_plan_for_owner

logger = logging.getLogger(__name__)


def _participant_from_response(response, plan: Optional[Plan] = None, position: int = 0) -> Participant:
    return Participant(
        plan=plan,
        name=response.participant_name,
        position=position,
        role_type=RoleType.STANDARD,
        role=Role.STAFF,
        has_collected=False,
        has_fixed_amount=False,
        fixed_amount=0,
        source=ParticipantSource.WEB_RESPONSE,
    )


def reconcile_participants(
    responses: Iterable,
    confirmed_date=None,
    plan: Optional[Plan] = None,
) -> List[Participant]:
    """
    Build the roster implied by the responses.

    Without a confirmed date everyone who responded is listed, whatever
    their status. With one, only attending responses available on that
    day are kept. The participants are unsaved and keep response order.

    Args:
        responses: Schedule responses in display order
        confirmed_date: The date the organizer picked, if any
        plan: Plan to attach the participants to

    Returns:
        List of unsaved Participant instances
    """
    if confirmed_date is None:
        kept = list(responses)
    else:
        kept = [
            response for response in responses
            if response.status == AttendanceStatus.ATTENDING
            and contains_day(response.available_dates, confirmed_date)
        ]

    return [
        _participant_from_response(response, plan=plan, position=index)
        for index, response in enumerate(kept)
    ]


@transaction.atomic
def sync_participants_from_responses(
    *,
    plan_id: UUID,
    user: User,
    confirmed_date: Optional[datetime] = None,
) -> List[Participant]:
    """
    Replace the plan's roster with the reconciled responses.

    Uses the given date, falling back to the plan's confirmed date. The
    existing roster is deleted, including manually added participants.

    Args:
        plan_id: UUID of the plan
        user: Plan owner
        confirmed_date: Date to filter attendance by

    Returns:
        The saved participants

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        NoScheduleLinkedError: If the plan has no schedule event
    """
    plan = lock_plan_for_owner(plan_id=plan_id, user=user)
    if plan.schedule_event_id is None:
        raise NoScheduleLinkedError("This plan is not linked to a schedule event")

    if confirmed_date is None:
        confirmed_date = plan.confirmed_date

    responses = get_active_responses(event=plan.schedule_event)
    participants = reconcile_participants(responses, confirmed_date, plan=plan)

    plan.participants.all().delete()
    Participant.objects.bulk_create(participants)

    logger.info(
        "Synced plan %s roster from responses: %d participants",
        plan.id,
        len(participants)
    )
    return participants


@transaction.atomic
def merge_participants_from_responses(*, plan_id: UUID, user: User) -> int:
    """
    Append respondents who are not on the roster yet.

    A respondent counts as present when a participant has exactly the
    same name. No status or date filter applies.

    Returns:
        Number of participants added

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user doesn't own the plan
        NoScheduleLinkedError: If the plan has no schedule event
    """
    plan = lock_plan_for_owner(plan_id=plan_id, user=user)
    if plan.schedule_event_id is None:
        raise NoScheduleLinkedError("This plan is not linked to a schedule event")

    existing = set(plan.participants.values_list('name', flat=True))
    next_position = plan.participants.count()

    added = []
    for response in get_active_responses(event=plan.schedule_event):
        name = response.participant_name
        if name in existing:
            continue
        existing.add(name)
        added.append(_participant_from_response(response, plan=plan, position=next_position))
        next_position += 1

    Participant.objects.bulk_create(added)

    logger.info("Merged %d respondents into plan %s", len(added), plan.id)
    return len(added)


def get_roster_counts(*, plan: Plan) -> dict:
    """Roster size by provenance."""
    participants = plan.participants.all()
    return {
        'total_count': participants.count(),
        'manual_count': participants.filter(source=ParticipantSource.MANUAL).count(),
        'web_response_count': participants.filter(source=ParticipantSource.WEB_RESPONSE).count(),
    }
