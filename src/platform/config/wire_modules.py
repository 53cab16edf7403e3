"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.marketplace.app.command import (
    advisor_profile_use_case,
    auth_session_use_case,
    cancel_reservation_use_case,
    community_command_use_case,
    create_reservation_use_case,
    favorite_command_use_case,
    notification_command_use_case,
    payment_use_case,
    process_advisor_approval_use_case,
    request_certificate_approval_use_case,
    review_command_use_case,
    signup_use_case,
    update_blocked_times_use_case,
    user_account_use_case,
)
from src.service.marketplace.app.query import (
    advisor_query_use_case,
    approval_query_use_case,
    community_query_use_case,
    favorite_query_use_case,
    list_reservations_use_case,
    notification_query_use_case,
    review_query_use_case,
    user_query_use_case,
)
from src.service.marketplace.driving_adapter.http_controller import (
    auth_controller,
    user_controller,
)


WIRE_MODULES: list[ModuleType] = [
    signup_use_case,
    auth_session_use_case,
    user_account_use_case,
    user_query_use_case,
    advisor_profile_use_case,
    update_blocked_times_use_case,
    request_certificate_approval_use_case,
    process_advisor_approval_use_case,
    advisor_query_use_case,
    approval_query_use_case,
    create_reservation_use_case,
    cancel_reservation_use_case,
    list_reservations_use_case,
    payment_use_case,
    notification_command_use_case,
    notification_query_use_case,
    community_command_use_case,
    community_query_use_case,
    favorite_command_use_case,
    favorite_query_use_case,
    review_command_use_case,
    review_query_use_case,
    auth_controller,
    user_controller,
]
