from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class ApprovalRequestModel(Base):
    __tablename__ = 'advisor_approval_requests'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    advisor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('advisors.user_id', ondelete='CASCADE'), nullable=False, index=True
    )
    certificate_name: Mapped[str] = mapped_column(String(100), nullable=False)
    certificate_file_sn: Mapped[str] = mapped_column(String(8), nullable=False)
    birth: Mapped[str] = mapped_column(String(8), nullable=False)
    certificate_file_number: Mapped[str] = mapped_column(String(6), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='PENDING', nullable=False, index=True)
    previous_request_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('advisor_approval_requests.id'), nullable=True
    )
    rejection_reason: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    custom_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    processed_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('users.id'), nullable=True
    )
