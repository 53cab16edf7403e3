from enum import StrEnum


class NotificationType(StrEnum):
    RESERVATION_CREATED = 'RESERVATION_CREATED'
    RESERVATION_CANCELED = 'RESERVATION_CANCELED'
    RESERVATION_APPROVED = 'RESERVATION_APPROVED'
    COMMENT_CREATED = 'COMMENT_CREATED'
    REVIEW_CREATED = 'REVIEW_CREATED'
    ADVISOR_APPROVAL = 'ADVISOR_APPROVAL'
    ADVISOR_REJECTION = 'ADVISOR_REJECTION'
    SYSTEM_NOTICE = 'SYSTEM_NOTICE'
    SYSTEM_MAINTENANCE = 'SYSTEM_MAINTENANCE'
