"""Marketplace Domain Enums"""

from src.service.marketplace.domain.enum.notification_type import NotificationType
from src.service.marketplace.domain.enum.post_category import PostCategory
from src.service.marketplace.domain.enum.trade_style import TradeStyle

__all__ = ['NotificationType', 'PostCategory', 'TradeStyle']
