from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class AdvisorModel(Base):
    """One row per advisor user; the primary key is the user id"""

    __tablename__ = 'advisors'

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True
    )
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    short_intro: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    long_intro: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    preferred_trade_style: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    public_contact: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    consultation_fee: Mapped[int] = mapped_column(Integer, nullable=False)
    certificate_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    certificate_file_sn: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    birth: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    certificate_file_number: Mapped[Optional[str]] = mapped_column(String(6), nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_profile_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class AdvisorCareerModel(Base):
    __tablename__ = 'advisor_careers'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    advisor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('advisors.user_id', ondelete='CASCADE'), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    started_at: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    ended_at: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class AdvisorCertificateModel(Base):
    """Approved certificates (one per approval)"""

    __tablename__ = 'advisor_certificates'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    advisor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('advisors.user_id', ondelete='CASCADE'), nullable=False, index=True
    )
    certificate_name: Mapped[str] = mapped_column(String(100), nullable=False)
    certificate_file_sn: Mapped[str] = mapped_column(String(8), nullable=False)
    birth: Mapped[str] = mapped_column(String(8), nullable=False)
    certificate_file_number: Mapped[str] = mapped_column(String(6), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class AdvisorBlockedTimeModel(Base):
    __tablename__ = 'advisor_blocked_times'
    __table_args__ = (
        UniqueConstraint('advisor_id', 'blocked_date', 'blocked_time', name='uq_advisor_blocked_slot'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    advisor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('advisors.user_id', ondelete='CASCADE'), nullable=False, index=True
    )
    blocked_date: Mapped[date] = mapped_column(Date, nullable=False)
    blocked_time: Mapped[time] = mapped_column(Time, nullable=False)
