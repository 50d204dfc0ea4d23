"""
Domain-specific exceptions for schedules app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class SchedulesServiceError(Exception):
    """Base exception for all schedules service errors."""
    pass


class EventNotFoundError(SchedulesServiceError):
    """Raised when a schedule event does not exist."""
    pass


class ResponseNotFoundError(SchedulesServiceError):
    """Raised when a response does not exist or was already deleted."""
    pass


class EventClosedError(SchedulesServiceError):
    """Raised when responding to an inactive event or after its deadline."""
    pass


class InvalidResponseDateError(SchedulesServiceError):
    """Raised when a response lists a date that is not a candidate."""
    pass


class InsufficientPermissionsError(SchedulesServiceError):
    """Raised when a user is not the event's organizer."""
    pass
