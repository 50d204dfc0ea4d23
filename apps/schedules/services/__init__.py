"""Services for schedules business logic."""

from .exceptions import (
    SchedulesServiceError,
    EventNotFoundError,
    ResponseNotFoundError,
    EventClosedError,
    InvalidResponseDateError,
    InsufficientPermissionsError,
)
from .attendance import (
    is_same_day,
    contains_day,
    to_organizer_date,
    count_available_on,
    count_maybe_on,
    optimal_date,
    event_statistics,
    date_statistics,
)
from .event_management import (
    create_event,
    update_event,
    delete_event,
    get_event,
    get_event_for_organizer,
    normalize_candidate_dates,
)
from .response_management import (
    submit_response,
    delete_response,
    get_active_responses,
)

__all__ = [
    # Exceptions
    'SchedulesServiceError',
    'EventNotFoundError',
    'ResponseNotFoundError',
    'EventClosedError',
    'InvalidResponseDateError',
    'InsufficientPermissionsError',
    # Attendance
    'is_same_day',
    'contains_day',
    'to_organizer_date',
    'count_available_on',
    'count_maybe_on',
    'optimal_date',
    'event_statistics',
    'date_statistics',
    # Events
    'create_event',
    'update_event',
    'delete_event',
    'get_event',
    'get_event_for_organizer',
    'normalize_candidate_dates',
    # Responses
    'submit_response',
    'delete_response',
    'get_active_responses',
]
