"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.event.in_process_event_bus import InProcessEventBus
from src.service.marketplace.app.command.deliver_notification_use_case import (
    DeliverNotificationUseCase,
)
from src.service.marketplace.driven_adapter.payment.toss_payment_gateway_impl import (
    TossPaymentGatewayImpl,
)
from src.service.marketplace.driven_adapter.repo.advisor_repo_impl import AdvisorRepoImpl
from src.service.marketplace.driven_adapter.repo.approval_request_repo_impl import (
    ApprovalRequestRepoImpl,
)
from src.service.marketplace.driven_adapter.repo.community_repo_impl import CommunityRepoImpl
from src.service.marketplace.driven_adapter.repo.favorite_repo_impl import FavoriteRepoImpl
from src.service.marketplace.driven_adapter.repo.notification_repo_impl import (
    NotificationRepoImpl,
)
from src.service.marketplace.driven_adapter.repo.reservation_repo_impl import ReservationRepoImpl
from src.service.marketplace.driven_adapter.repo.review_repo_impl import ReviewRepoImpl
from src.service.marketplace.driven_adapter.repo.user_command_repo_impl import UserCommandRepoImpl
from src.service.marketplace.driven_adapter.repo.user_query_repo_impl import UserQueryRepoImpl
from src.service.marketplace.driven_adapter.security.bcrypt_password_hasher import (
    BcryptPasswordHasher,
)
from src.service.marketplace.driven_adapter.state.notification_counter_impl import (
    NotificationCounterImpl,
)
from src.service.marketplace.driven_adapter.state.refresh_token_store_impl import (
    RefreshTokenStoreImpl,
)
from src.service.marketplace.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database
    database = providers.Singleton(Database)

    # Repositories (stateless - use session_factory per-request)
    user_command_repo = providers.Singleton(
        UserCommandRepoImpl, session_factory=database.provided.session
    )
    user_query_repo = providers.Singleton(
        UserQueryRepoImpl, session_factory=database.provided.session
    )
    advisor_repo = providers.Singleton(AdvisorRepoImpl, session_factory=database.provided.session)
    approval_request_repo = providers.Singleton(
        ApprovalRequestRepoImpl, session_factory=database.provided.session
    )
    reservation_repo = providers.Singleton(
        ReservationRepoImpl, session_factory=database.provided.session
    )
    notification_repo = providers.Singleton(
        NotificationRepoImpl, session_factory=database.provided.session
    )
    community_repo = providers.Singleton(
        CommunityRepoImpl, session_factory=database.provided.session
    )
    favorite_repo = providers.Singleton(FavoriteRepoImpl, session_factory=database.provided.session)
    review_repo = providers.Singleton(ReviewRepoImpl, session_factory=database.provided.session)

    # Auth
    jwt_auth = providers.Singleton(JwtAuth)
    password_hasher = providers.Singleton(BcryptPasswordHasher)

    # Redis state
    refresh_token_store = providers.Singleton(RefreshTokenStoreImpl)
    notification_counter = providers.Singleton(NotificationCounterImpl)

    # External payment gateway
    payment_gateway = providers.Singleton(TossPaymentGatewayImpl)

    # Domain events (task group attached by main.py lifespan)
    event_bus = providers.Singleton(InProcessEventBus)

    # Called by event listeners, not by HTTP
    notification_delivery_use_case = providers.Singleton(
        DeliverNotificationUseCase,
        notification_repo=notification_repo,
        notification_counter=notification_counter,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
