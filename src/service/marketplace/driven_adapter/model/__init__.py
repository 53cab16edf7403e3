"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.marketplace.driven_adapter.model.advisor_model import (
    AdvisorBlockedTimeModel,
    AdvisorCareerModel,
    AdvisorCertificateModel,
    AdvisorModel,
)
from src.service.marketplace.driven_adapter.model.approval_request_model import (
    ApprovalRequestModel,
)
from src.service.marketplace.driven_adapter.model.community_model import CommentModel, PostModel
from src.service.marketplace.driven_adapter.model.favorite_model import FavoriteModel
from src.service.marketplace.driven_adapter.model.notification_model import NotificationModel
from src.service.marketplace.driven_adapter.model.reservation_model import ReservationModel
from src.service.marketplace.driven_adapter.model.review_model import ReviewModel
from src.service.marketplace.driven_adapter.model.user_model import UserModel

__all__ = [
    'AdvisorBlockedTimeModel',
    'AdvisorCareerModel',
    'AdvisorCertificateModel',
    'AdvisorModel',
    'ApprovalRequestModel',
    'CommentModel',
    'FavoriteModel',
    'NotificationModel',
    'PostModel',
    'ReservationModel',
    'ReviewModel',
    'UserModel',
]
