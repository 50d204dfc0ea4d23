"""
Schedule event management service.

Events are created and edited by their organizer; the public web form
only reads them.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.schedules.models import ScheduleEvent

from .attendance import sort_dates, to_organizer_datetime
from .exceptions import EventNotFoundError, InsufficientPermissionsError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    'title',
    'description',
    'candidate_dates',
    'location',
    'budget',
    'deadline',
    'is_active',
)


def normalize_candidate_dates(dates) -> list:
    """
    Chronologically sorted candidates without exact duplicates.

    Values are stored as ISO strings in the organizer time zone.
    """
    normalized = []
    seen = set()
    for value in sort_dates(dates):
        stamp = to_organizer_datetime(value)
        if stamp in seen:
            continue
        seen.add(stamp)
        normalized.append(stamp.isoformat())
    return normalized


def get_event(*, event_id: UUID) -> ScheduleEvent:
    """
    Get an event by ID.

    Raises:
        EventNotFoundError: If event doesn't exist
    """
    try:
        return ScheduleEvent.objects.select_related('created_by').get(id=event_id)
    except ScheduleEvent.DoesNotExist:
        raise EventNotFoundError(f"Event with ID {event_id} not found")


def get_event_for_organizer(*, event_id: UUID, user: User) -> ScheduleEvent:
    """
    Get an event owned by user.

    Raises:
        EventNotFoundError: If event doesn't exist
        InsufficientPermissionsError: If user did not create the event
    """
    event = get_event(event_id=event_id)
    if event.created_by_id != user.id:
        raise InsufficientPermissionsError("Only the organizer can manage this event")
    return event


def create_event(
    *,
    created_by: User,
    title: str,
    candidate_dates: list,
    description: str = '',
    location: str = '',
    budget: Optional[int] = None,
    deadline: Optional[datetime] = None,
    is_active: bool = True,
) -> ScheduleEvent:
    """
    Create a schedule event.

    Args:
        created_by: Organizer creating the event
        title: Event title
        candidate_dates: Candidate timestamps (any order)
        description: Optional description
        location: Optional venue
        budget: Optional per-person budget in yen
        deadline: Optional response deadline
        is_active: Whether the web form accepts responses

    Returns:
        Created ScheduleEvent instance
    """
    event = ScheduleEvent.objects.create(
        created_by=created_by,
        title=title.strip(),
        description=description,
        candidate_dates=normalize_candidate_dates(candidate_dates),
        location=location,
        budget=budget,
        deadline=deadline,
        is_active=is_active,
    )
    logger.info("Created schedule event %s with %d candidates", event.id, len(event.candidate_dates))
    return event


@transaction.atomic
def update_event(*, event_id: UUID, user: User, **fields) -> ScheduleEvent:
    """
    Update an event's editable fields.

    Args:
        event_id: UUID of the event
        user: Organizer performing the update
        **fields: Any of UPDATABLE_FIELDS

    Returns:
        Updated ScheduleEvent instance

    Raises:
        EventNotFoundError: If event doesn't exist
        InsufficientPermissionsError: If user did not create the event
    """
    try:
        event = ScheduleEvent.objects.select_for_update().get(id=event_id)
    except ScheduleEvent.DoesNotExist:
        raise EventNotFoundError(f"Event with ID {event_id} not found")

    if event.created_by_id != user.id:
        raise InsufficientPermissionsError("Only the organizer can manage this event")

    update_fields = []
    for field in UPDATABLE_FIELDS:
        if field not in fields:
            continue
        value = fields[field]
        if field == 'candidate_dates':
            value = normalize_candidate_dates(value)
        elif field == 'title':
            value = value.strip()
        setattr(event, field, value)
        update_fields.append(field)

    if update_fields:
        event.save(update_fields=update_fields + ['updated_at'])

    return event


@transaction.atomic
def delete_event(*, event_id: UUID, user: User) -> None:
    """
    Delete an event and its responses.

    Plans linked to the event keep their roster; the link is cleared.

    Raises:
        EventNotFoundError: If event doesn't exist
        InsufficientPermissionsError: If user did not create the event
    """
    event = get_event_for_organizer(event_id=event_id, user=user)
    event.delete()
    logger.info("Deleted schedule event %s", event_id)
