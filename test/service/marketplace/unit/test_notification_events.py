"""
Unit tests for the in-process event bus and the notification listener

- Without a task group, listeners run inline in subscription order
- A failing listener is logged and never reaches the publisher
- Each domain event turns into exactly one notification for the right user
"""

from datetime import date, time
from unittest.mock import AsyncMock, Mock

import pytest

from src.platform.event.in_process_event_bus import InProcessEventBus
from src.service.marketplace.app.command.deliver_notification_use_case import (
    DeliverNotificationUseCase,
)
from src.service.marketplace.domain.domain_event.marketplace_events import (
    AdvisorApprovalProcessedEvent,
    CommentCreatedEvent,
    ReservationCanceledEvent,
    ReservationCreatedEvent,
    ReviewCreatedEvent,
)
from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalStatus,
    RejectionReason,
)
from src.service.marketplace.domain.entity.notification_entity import Notification
from src.service.marketplace.domain.entity.reservation_entity import CancelReason
from src.service.marketplace.domain.enum.notification_type import NotificationType
from src.service.marketplace.driving_adapter.event_listener.notification_event_listener import (
    NotificationEventListener,
)


def _comment_event(commenter_id: int) -> CommentCreatedEvent:
    return CommentCreatedEvent(
        comment_id=5,
        post_id=4,
        post_title='How do you size positions?',
        post_author_id=1,
        commenter_id=commenter_id,
        commenter_nickname='yuna',
    )


@pytest.mark.unit
class TestInProcessEventBus:
    @pytest.mark.asyncio
    async def test_inline_dispatch_in_order(self):
        bus = InProcessEventBus()
        calls = []

        async def first(event):
            calls.append(('first', event.review_id))

        async def second(event):
            calls.append(('second', event.review_id))

        bus.subscribe(ReviewCreatedEvent, first)
        bus.subscribe(ReviewCreatedEvent, second)
        bus.subscribe(ReviewCreatedEvent, first)

        await bus.publish(
            ReviewCreatedEvent(
                review_id=9, advisor_id=2, reviewer_id=1, reviewer_nickname='minsu', rating=5
            )
        )

        assert calls == [('first', 9), ('second', 9)]

    @pytest.mark.asyncio
    async def test_listener_failure_is_swallowed(self):
        bus = InProcessEventBus()
        survivor = AsyncMock()

        async def broken(event):
            raise RuntimeError('database unavailable')

        bus.subscribe(CommentCreatedEvent, broken)
        bus.subscribe(CommentCreatedEvent, survivor)

        await bus.publish(_comment_event(commenter_id=2))

        survivor.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_publish_without_listeners(self):
        bus = InProcessEventBus()

        await bus.publish(_comment_event(commenter_id=2))

    @pytest.mark.asyncio
    async def test_clear_removes_listeners(self):
        bus = InProcessEventBus()
        listener = AsyncMock()
        bus.subscribe(CommentCreatedEvent, listener)

        bus.clear()
        await bus.publish(_comment_event(commenter_id=2))

        listener.assert_not_awaited()


@pytest.fixture
def mock_deliver_use_case() -> Mock:
    use_case = AsyncMock()
    use_case.deliver.side_effect = lambda notification: notification
    return use_case


@pytest.fixture
def event_bus(mock_deliver_use_case: Mock) -> InProcessEventBus:
    bus = InProcessEventBus()
    NotificationEventListener(deliver_notification_use_case=mock_deliver_use_case).register(bus)
    return bus


def _delivered(mock_deliver_use_case: Mock) -> list[Notification]:
    return [call.args[0] for call in mock_deliver_use_case.deliver.await_args_list]


@pytest.mark.unit
class TestNotificationEventListener:
    @pytest.mark.asyncio
    async def test_reservation_created_notifies_advisor(
        self, event_bus: InProcessEventBus, mock_deliver_use_case: Mock
    ):
        await event_bus.publish(
            ReservationCreatedEvent(
                reservation_id=11,
                client_id=1,
                client_name='Kim Minsu',
                advisor_id=2,
                date=date(2026, 10, 26),
                start_time=time(10),
            )
        )

        [notification] = _delivered(mock_deliver_use_case)
        assert notification.user_id == 2
        assert notification.type == NotificationType.RESERVATION_CREATED
        assert notification.related_id == 11
        assert notification.message == 'Kim Minsu booked a consultation on 2026-10-26 at 10:00.'

    @pytest.mark.asyncio
    async def test_reservation_canceled_notifies_other_party(
        self, event_bus: InProcessEventBus, mock_deliver_use_case: Mock
    ):
        await event_bus.publish(
            ReservationCanceledEvent(
                reservation_id=11,
                canceled_by=2,
                canceled_by_name='Lee Jiwon',
                recipient_id=1,
                date=date(2026, 10, 26),
                start_time=time(14),
                cancel_reason=CancelReason.HEALTH_ISSUE,
            )
        )

        [notification] = _delivered(mock_deliver_use_case)
        assert notification.user_id == 1
        assert notification.type == NotificationType.RESERVATION_CANCELED
        assert notification.message.endswith('Reason: HEALTH_ISSUE')

    @pytest.mark.asyncio
    async def test_comment_notifies_post_author(
        self, event_bus: InProcessEventBus, mock_deliver_use_case: Mock
    ):
        await event_bus.publish(_comment_event(commenter_id=2))

        [notification] = _delivered(mock_deliver_use_case)
        assert notification.user_id == 1
        assert notification.type == NotificationType.COMMENT_CREATED
        assert notification.related_id == 4

    @pytest.mark.asyncio
    async def test_own_comment_is_skipped(
        self, event_bus: InProcessEventBus, mock_deliver_use_case: Mock
    ):
        await event_bus.publish(_comment_event(commenter_id=1))

        mock_deliver_use_case.deliver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejection_uses_custom_reason(
        self, event_bus: InProcessEventBus, mock_deliver_use_case: Mock
    ):
        await event_bus.publish(
            AdvisorApprovalProcessedEvent(
                request_id=3,
                advisor_id=7,
                status=ApprovalStatus.REJECTED,
                rejection_reason=RejectionReason.OTHER,
                custom_reason='Certificate image is unreadable',
            )
        )

        [notification] = _delivered(mock_deliver_use_case)
        assert notification.type == NotificationType.ADVISOR_REJECTION
        assert notification.message.endswith('Reason: Certificate image is unreadable')

    @pytest.mark.asyncio
    async def test_approval(self, event_bus: InProcessEventBus, mock_deliver_use_case: Mock):
        await event_bus.publish(
            AdvisorApprovalProcessedEvent(
                request_id=3, advisor_id=7, status=ApprovalStatus.APPROVED
            )
        )

        [notification] = _delivered(mock_deliver_use_case)
        assert notification.type == NotificationType.ADVISOR_APPROVAL
        assert notification.user_id == 7


@pytest.mark.unit
class TestDeliverNotificationUseCase:
    @pytest.mark.asyncio
    async def test_deliver_stores_and_bumps_counter(self):
        # Given
        notification_repo = AsyncMock()
        notification_repo.create.side_effect = lambda n: n
        notification_counter = AsyncMock()
        notification_counter.increment.return_value = 3
        use_case = DeliverNotificationUseCase(
            notification_repo=notification_repo, notification_counter=notification_counter
        )
        notification = Notification(
            user_id=2,
            type=NotificationType.REVIEW_CREATED,
            title='New review',
            message='minsu left a 5-star review.',
            related_id=9,
        )

        # When
        delivered = await use_case.deliver(notification)

        # Then
        assert delivered is notification
        notification_repo.create.assert_awaited_once_with(notification)
        notification_counter.increment.assert_awaited_once_with(user_id=2)
