"""
Domain-specific exceptions for plans app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class PlansServiceError(Exception):
    """Base exception for all plans service errors."""
    pass


class PlanNotFoundError(PlansServiceError):
    """Raised when a plan does not exist."""
    pass


class ParticipantNotFoundError(PlansServiceError):
    """Raised when a participant does not exist."""
    pass


class CustomRoleNotFoundError(PlansServiceError):
    """Raised when a custom role does not exist on the plan."""
    pass


class AmountItemNotFoundError(PlansServiceError):
    """Raised when an amount item does not exist."""
    pass


class InsufficientPermissionsError(PlansServiceError):
    """Raised when a user does not own the plan."""
    pass


class InvalidPlanDataError(PlansServiceError):
    """Raised when plan input breaks a business rule."""
    pass


class NoScheduleLinkedError(PlansServiceError):
    """Raised when an operation needs a linked schedule event."""
    pass


class InvalidConfirmedDateError(PlansServiceError):
    """Raised when the confirmed date is not one of the event's candidates."""
    pass
