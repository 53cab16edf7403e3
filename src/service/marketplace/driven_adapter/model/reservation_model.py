from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text, Time, func, text
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


ACTIVE_SLOT_PREDICATE = text("status != 'CANCELED'")


class ReservationModel(Base):
    __tablename__ = 'reservations'
    __table_args__ = (
        # One live reservation per advisor slot; canceled rows do not hold it
        Index(
            'uq_reservations_active_slot',
            'advisor_id',
            'date',
            'start_time',
            unique=True,
            sqlite_where=ACTIVE_SLOT_PREDICATE,
            postgresql_where=ACTIVE_SLOT_PREDICATE,
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('users.id'), nullable=False, index=True
    )
    advisor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('advisors.user_id'), nullable=False, index=True
    )
    date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    request_message: Mapped[str] = mapped_column(Text, default='', nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='PENDING', nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), default='NONE', nullable=False)
    amount: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    order_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, unique=True)
    payment_key: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    card_company: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    receipt_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    cancel_reason: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    cancel_memo: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    canceled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    canceled_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
