from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class FavoriteModel(Base):
    __tablename__ = 'favorites'
    __table_args__ = (UniqueConstraint('user_id', 'advisor_id', name='uq_favorite_user_advisor'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True
    )
    advisor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('advisors.user_id', ondelete='CASCADE'), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
