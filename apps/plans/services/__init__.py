"""Services for plans business logic."""

from .exceptions import (
    PlansServiceError,
    PlanNotFoundError,
    ParticipantNotFoundError,
    CustomRoleNotFoundError,
    AmountItemNotFoundError,
    InsufficientPermissionsError,
    InvalidPlanDataError,
    NoScheduleLinkedError,
    InvalidConfirmedDateError,
)
from .split_calculation import (
    parse_amount,
    format_amount,
    compute_base_unit,
    compute_share,
    compute_shares,
    compute_item_share,
    compute_total_owed,
)
from .plan_access import (
    get_plan,
    get_plan_for_owner,
)
from .response_sync import (
    reconcile_participants,
    sync_participants_from_responses,
    merge_participants_from_responses,
    get_roster_counts,
)
from .plan_management import (
    create_plan,
    quick_create_plan,
    update_plan,
    delete_plan,
    link_schedule_event,
    confirm_plan,
    get_split_summary,
)
from .participant_management import (
    add_participant,
    update_participant,
    delete_participant,
    set_collection_status,
    toggle_collection_status,
)
from .role_management import (
    get_role_table,
    set_role_multiplier,
    set_role_name,
    add_custom_role,
    delete_custom_role,
)
from .amount_items import (
    add_amount_item,
    update_amount_item,
    delete_amount_item,
    reorder_amount_items,
)
from .share_text import (
    generate_payment_text,
    generate_invitation_text,
    PaymentMethod,
    PaymentTone,
    PAYMENT_TONE_TEMPLATES,
    INVITATION_MESSAGE_TEMPLATES,
)

__all__ = [
    # Exceptions
    'PlansServiceError',
    'PlanNotFoundError',
    'ParticipantNotFoundError',
    'CustomRoleNotFoundError',
    'AmountItemNotFoundError',
    'InsufficientPermissionsError',
    'InvalidPlanDataError',
    'NoScheduleLinkedError',
    'InvalidConfirmedDateError',
    # Split calculation
    'parse_amount',
    'format_amount',
    'compute_base_unit',
    'compute_share',
    'compute_shares',
    'compute_item_share',
    'compute_total_owed',
    # Plans
    'get_plan',
    'get_plan_for_owner',
    'create_plan',
    'quick_create_plan',
    'update_plan',
    'delete_plan',
    'link_schedule_event',
    'confirm_plan',
    'get_split_summary',
    # Responses
    'reconcile_participants',
    'sync_participants_from_responses',
    'merge_participants_from_responses',
    'get_roster_counts',
    # Participants
    'add_participant',
    'update_participant',
    'delete_participant',
    'set_collection_status',
    'toggle_collection_status',
    # Roles
    'get_role_table',
    'set_role_multiplier',
    'set_role_name',
    'add_custom_role',
    'delete_custom_role',
    # Amount items
    'add_amount_item',
    'update_amount_item',
    'delete_amount_item',
    'reorder_amount_items',
    # Share text
    'generate_payment_text',
    'generate_invitation_text',
    'PaymentMethod',
    'PaymentTone',
    'PAYMENT_TONE_TEMPLATES',
    'INVITATION_MESSAGE_TEMPLATES',
]
