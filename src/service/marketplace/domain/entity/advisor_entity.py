from datetime import date, datetime, timezone
from enum import StrEnum
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
)
from src.service.marketplace.domain.enum.trade_style import TradeStyle


MIN_CONSULTATION_FEE = 10_000
MAX_CONSULTATION_FEE = 1_000_000
SHORT_INTRO_MAX_LENGTH = 100


class CareerAction(StrEnum):
    CREATE = 'CREATE'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'


@attrs.define
class AdvisorCareer:
    title: str
    description: str
    started_at: Optional[date] = None
    ended_at: Optional[date] = None
    id: Optional[int] = None
    advisor_id: Optional[int] = None
    created_at: Optional[datetime] = None


@attrs.define
class AdvisorCertificate:
    certificate_name: str
    certificate_file_sn: str
    birth: str
    certificate_file_number: str
    id: Optional[int] = None
    advisor_id: Optional[int] = None
    created_at: Optional[datetime] = None


@attrs.define
class CareerChange:
    """One career_entries item of a profile create/update request"""

    action: Optional[CareerAction]
    title: Optional[str] = None
    description: Optional[str] = None
    started_at: Optional[date] = None
    ended_at: Optional[date] = None
    id: Optional[int] = None


@attrs.define
class Advisor:
    user_id: int
    consultation_fee: int
    name: str = ''
    nickname: str = ''
    profile_image_url: Optional[str] = None
    short_intro: Optional[str] = None
    long_intro: Optional[str] = None
    preferred_trade_style: Optional[TradeStyle] = None
    public_contact: Optional[str] = None
    certificate_name: Optional[str] = None
    certificate_file_sn: Optional[str] = None
    birth: Optional[str] = None
    certificate_file_number: Optional[str] = None
    is_approved: bool = False
    approved_at: Optional[datetime] = None
    is_profile_completed: bool = False
    created_at: Optional[datetime] = None

    def validate_approved(self) -> None:
        if not self.is_approved:
            raise ForbiddenError('ADVISOR_NOT_APPROVED')

    def validate_can_create_profile(self) -> None:
        self.validate_approved()
        if self.is_profile_completed:
            raise ConflictError('PROFILE_ALREADY_EXISTS')

    @staticmethod
    def validate_consultation_fee(fee: int) -> None:
        if fee < MIN_CONSULTATION_FEE or fee > MAX_CONSULTATION_FEE:
            raise DomainError(
                f'Consultation fee must be between {MIN_CONSULTATION_FEE} and {MAX_CONSULTATION_FEE}'
            )

    @staticmethod
    def validate_short_intro(short_intro: Optional[str]) -> str:
        if not short_intro or not short_intro.strip():
            raise DomainError('short_intro is required')
        if len(short_intro) > SHORT_INTRO_MAX_LENGTH:
            raise DomainError(f'short_intro must be at most {SHORT_INTRO_MAX_LENGTH} characters')
        return short_intro.strip()

    def complete_profile(
        self,
        *,
        short_intro: str,
        preferred_trade_style: TradeStyle,
        long_intro: Optional[str] = None,
        public_contact: Optional[str] = None,
        profile_image_url: Optional[str] = None,
        consultation_fee: Optional[int] = None,
    ) -> 'Advisor':
        self.validate_can_create_profile()
        if consultation_fee is not None:
            self.validate_consultation_fee(consultation_fee)

        return attrs.evolve(
            self,
            short_intro=self.validate_short_intro(short_intro),
            long_intro=long_intro,
            preferred_trade_style=preferred_trade_style,
            public_contact=public_contact,
            profile_image_url=profile_image_url or self.profile_image_url,
            consultation_fee=consultation_fee
            if consultation_fee is not None
            else self.consultation_fee,
            is_profile_completed=True,
        )

    def apply_profile_update(
        self,
        *,
        short_intro: Optional[str] = None,
        long_intro: Optional[str] = None,
        preferred_trade_style: Optional[TradeStyle] = None,
        public_contact: Optional[str] = None,
        profile_image_url: Optional[str] = None,
        consultation_fee: Optional[int] = None,
    ) -> 'Advisor':
        """None leaves a field unchanged"""
        if not self.is_profile_completed:
            raise NotFoundError('PROFILE_NOT_FOUND')
        if consultation_fee is not None:
            self.validate_consultation_fee(consultation_fee)

        return attrs.evolve(
            self,
            short_intro=self.validate_short_intro(short_intro)
            if short_intro is not None
            else self.short_intro,
            long_intro=long_intro if long_intro is not None else self.long_intro,
            preferred_trade_style=preferred_trade_style or self.preferred_trade_style,
            public_contact=public_contact if public_contact is not None else self.public_contact,
            profile_image_url=profile_image_url or self.profile_image_url,
            consultation_fee=consultation_fee
            if consultation_fee is not None
            else self.consultation_fee,
        )

    def approve_certificate(
        self,
        *,
        certificate_name: str,
        certificate_file_sn: str,
        birth: str,
        certificate_file_number: str,
    ) -> 'Advisor':
        return attrs.evolve(
            self,
            certificate_name=certificate_name,
            certificate_file_sn=certificate_file_sn,
            birth=birth,
            certificate_file_number=certificate_file_number,
            is_approved=True,
            approved_at=datetime.now(timezone.utc),
        )


def validate_initial_career_entries(entries: List[CareerChange]) -> None:
    if not entries:
        raise DomainError('At least one career entry is required')
    for entry in entries:
        if entry.action not in (None, CareerAction.CREATE):
            raise DomainError('Only CREATE career actions are allowed when creating a profile')
        validate_career_content(entry)


def validate_career_content(entry: CareerChange) -> None:
    if not entry.title or not entry.title.strip():
        raise DomainError('Career title is required')
    if not entry.description or not entry.description.strip():
        raise DomainError('Career description is required')
    if entry.started_at and entry.ended_at and entry.ended_at < entry.started_at:
        raise DomainError('Career end date must not be before its start date')


def plan_career_changes(
    *, existing: List[AdvisorCareer], changes: List[CareerChange]
) -> tuple[List[CareerChange], List[CareerChange], List[int]]:
    """
    Split update-request career entries into (creates, updates, delete_ids).

    Raises:
        DomainError: malformed entry or no career would remain
        ForbiddenError: UPDATE/DELETE of a career the advisor does not own
    """
    owned_ids = {career.id for career in existing}
    creates: List[CareerChange] = []
    updates: List[CareerChange] = []
    delete_ids: List[int] = []

    for change in changes:
        if change.action is None or change.action == CareerAction.CREATE:
            validate_career_content(change)
            creates.append(change)
            continue

        if change.id is None:
            raise DomainError(f'Career id is required for {change.action.value}')
        if change.id not in owned_ids:
            raise ForbiddenError('CAREER_NOT_OWNED')

        if change.action == CareerAction.UPDATE:
            validate_career_content(change)
            updates.append(change)
        else:
            delete_ids.append(change.id)

    remaining = len(owned_ids) - len(set(delete_ids)) + len(creates)
    if remaining < 1:
        raise DomainError('At least one career entry must remain')

    return creates, updates, delete_ids
