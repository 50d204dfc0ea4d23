"""
Response management service.

Respondents submit through the public web form without an account.
Organizers may remove a response; the row is kept and its name is
prefixed with DELETED_RESPONSE_PREFIX so it no longer counts anywhere.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.schedules.models import (
    AttendanceStatus,
    DELETED_RESPONSE_PREFIX,
    ScheduleEvent,
    ScheduleResponse,
)

from .attendance import contains_day, to_organizer_datetime
from .exceptions import (
    EventClosedError,
    EventNotFoundError,
    InsufficientPermissionsError,
    InvalidResponseDateError,
    ResponseNotFoundError,
)

logger = logging.getLogger(__name__)


def _match_candidates(dates, candidate_dates) -> list:
    """
    Map each submitted date onto its candidate, rejecting unknown days.

    A candidate at the same instant wins over the first one on that day.
    """
    matched = []
    for value in dates or []:
        submitted = to_organizer_datetime(value)
        if submitted is None:
            raise InvalidResponseDateError(f"Invalid date: {value}")
        candidate = next(
            (c for c in candidate_dates if to_organizer_datetime(c) == submitted),
            None
        ) or next(
            (c for c in candidate_dates if contains_day([c], value)),
            None
        )
        if candidate is None:
            raise InvalidResponseDateError(f"{value} is not a candidate date")
        if candidate not in matched:
            matched.append(candidate)
    return matched


@transaction.atomic
def submit_response(
    *,
    event_id: UUID,
    participant_name: str,
    available_dates: list,
    status: str = AttendanceStatus.UNDECIDED,
    maybe_dates: Optional[list] = None,
    comment: str = '',
    department: str = '',
) -> ScheduleResponse:
    """
    Record a response from the public web form.

    Submitted dates are stored as the matching candidate values.

    Args:
        event_id: UUID of the event
        participant_name: Respondent's display name
        available_dates: Dates the respondent can attend
        status: Attendance status
        maybe_dates: Dates the respondent might attend
        comment: Optional comment
        department: Optional department

    Returns:
        Created ScheduleResponse instance

    Raises:
        EventNotFoundError: If event doesn't exist
        EventClosedError: If event is inactive or past its deadline
        InvalidResponseDateError: If a date is not one of the candidates
    """
    try:
        event = ScheduleEvent.objects.get(id=event_id)
    except ScheduleEvent.DoesNotExist:
        raise EventNotFoundError(f"Event with ID {event_id} not found")

    if event.is_closed:
        raise EventClosedError("This event is no longer accepting responses")

    response = ScheduleResponse.objects.create(
        event=event,
        participant_name=participant_name.strip(),
        available_dates=_match_candidates(available_dates, event.candidate_dates),
        maybe_dates=_match_candidates(maybe_dates, event.candidate_dates),
        status=status,
        comment=comment,
        department=department,
    )
    logger.info("Response %s submitted to event %s", response.id, event.id)
    return response


def get_active_responses(*, event: ScheduleEvent) -> QuerySet:
    """Responses of the event that were not deleted by the organizer."""
    return event.responses.active()


@transaction.atomic
def delete_response(*, response_id: UUID, user: User) -> ScheduleResponse:
    """
    Mark a response as deleted.

    Raises:
        ResponseNotFoundError: If response doesn't exist or is already deleted
        InsufficientPermissionsError: If user is not the event's organizer
    """
    try:
        response = (
            ScheduleResponse.objects
            .select_for_update()
            .select_related('event')
            .get(id=response_id)
        )
    except ScheduleResponse.DoesNotExist:
        raise ResponseNotFoundError(f"Response with ID {response_id} not found")

    if response.event.created_by_id != user.id:
        raise InsufficientPermissionsError("Only the organizer can delete responses")

    if response.is_deleted:
        raise ResponseNotFoundError(f"Response with ID {response_id} not found")

    response.participant_name = f"{DELETED_RESPONSE_PREFIX}{response.participant_name}"
    response.save(update_fields=['participant_name'])

    logger.info("Response %s marked deleted", response.id)
    return response
