"""
Notification Event Listener

Turns marketplace domain events into notification rows:
- ReservationCreated -> advisor
- ReservationCanceled -> the other party
- CommentCreated -> post author (not when commenting on one's own post)
- ReviewCreated -> advisor
- AdvisorApprovalProcessed -> advisor
"""

from opentelemetry import trace

from src.platform.event.in_process_event_bus import InProcessEventBus
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.deliver_notification_use_case import (
    DeliverNotificationUseCase,
)
from src.service.marketplace.domain import consultation_schedule
from src.service.marketplace.domain.domain_event.marketplace_events import (
    AdvisorApprovalProcessedEvent,
    CommentCreatedEvent,
    ReservationCanceledEvent,
    ReservationCreatedEvent,
    ReviewCreatedEvent,
)
from src.service.marketplace.domain.entity.notification_entity import Notification
from src.service.marketplace.domain.enum.notification_type import NotificationType


class NotificationEventListener:
    def __init__(self, *, deliver_notification_use_case: DeliverNotificationUseCase) -> None:
        self.deliver_notification_use_case = deliver_notification_use_case
        self.tracer = trace.get_tracer(__name__)

    def register(self, event_bus: InProcessEventBus) -> None:
        event_bus.subscribe(ReservationCreatedEvent, self.on_reservation_created)
        event_bus.subscribe(ReservationCanceledEvent, self.on_reservation_canceled)
        event_bus.subscribe(CommentCreatedEvent, self.on_comment_created)
        event_bus.subscribe(ReviewCreatedEvent, self.on_review_created)
        event_bus.subscribe(AdvisorApprovalProcessedEvent, self.on_advisor_approval_processed)
        Logger.base.info('✅ [NOTIFICATION] Event listeners registered')

    async def _deliver(self, notification: Notification) -> None:
        with self.tracer.start_as_current_span(
            'listener.deliver_notification',
            attributes={
                'notification.type': notification.type.value,
                'notification.user_id': notification.user_id,
            },
        ):
            await self.deliver_notification_use_case.deliver(notification)

    async def on_reservation_created(self, event: ReservationCreatedEvent) -> None:
        slot = consultation_schedule.format_slot(event.start_time)
        await self._deliver(
            Notification(
                user_id=event.advisor_id,
                type=NotificationType.RESERVATION_CREATED,
                title='New consultation booked',
                message=f'{event.client_name} booked a consultation on {event.date} at {slot}.',
                related_id=event.reservation_id,
            )
        )

    async def on_reservation_canceled(self, event: ReservationCanceledEvent) -> None:
        slot = consultation_schedule.format_slot(event.start_time)
        message = f'{event.canceled_by_name} canceled the consultation on {event.date} at {slot}.'
        if event.cancel_reason:
            message += f' Reason: {event.cancel_reason.value}'
        await self._deliver(
            Notification(
                user_id=event.recipient_id,
                type=NotificationType.RESERVATION_CANCELED,
                title='Consultation canceled',
                message=message,
                related_id=event.reservation_id,
            )
        )

    async def on_comment_created(self, event: CommentCreatedEvent) -> None:
        if event.commenter_id == event.post_author_id:
            Logger.base.debug(f'🔕 [NOTIFICATION] Own comment on post #{event.post_id}, skipped')
            return

        await self._deliver(
            Notification(
                user_id=event.post_author_id,
                type=NotificationType.COMMENT_CREATED,
                title='New comment',
                message=f'{event.commenter_nickname} commented on "{event.post_title}".',
                related_id=event.post_id,
            )
        )

    async def on_review_created(self, event: ReviewCreatedEvent) -> None:
        await self._deliver(
            Notification(
                user_id=event.advisor_id,
                type=NotificationType.REVIEW_CREATED,
                title='New review',
                message=f'{event.reviewer_nickname} left a {event.rating}-star review.',
                related_id=event.review_id,
            )
        )

    async def on_advisor_approval_processed(self, event: AdvisorApprovalProcessedEvent) -> None:
        if event.approved:
            notification = Notification(
                user_id=event.advisor_id,
                type=NotificationType.ADVISOR_APPROVAL,
                title='Certificate approved',
                message='Your advisor certificate was approved. You can now take reservations.',
                related_id=event.request_id,
            )
        else:
            reason = event.custom_reason or (
                event.rejection_reason.value if event.rejection_reason else 'not specified'
            )
            notification = Notification(
                user_id=event.advisor_id,
                type=NotificationType.ADVISOR_REJECTION,
                title='Certificate rejected',
                message=f'Your advisor certificate was rejected. Reason: {reason}',
                related_id=event.request_id,
            )
        await self._deliver(notification)
