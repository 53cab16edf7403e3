from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.marketplace.app.dto.advisor_dto import (
    AdvisorDetail,
    AdvisorSummary,
    AvailableTimes,
)
from src.service.marketplace.domain.entity.advisor_entity import (
    Advisor,
    AdvisorCareer,
    AdvisorCertificate,
    CareerAction,
    CareerChange,
)
from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalRequest,
    ApprovalStatus,
    RejectionReason,
)
from src.service.marketplace.domain.enum.trade_style import TradeStyle
from src.service.marketplace.driving_adapter.http_controller.schema.review_schema import (
    ReviewResponse,
)


class CertificateResponse(BaseModel):
    certificate_name: str
    issued_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, cert: AdvisorCertificate) -> 'CertificateResponse':
        return cls(certificate_name=cert.certificate_name, issued_at=cert.created_at)


class CareerResponse(BaseModel):
    id: int
    title: str
    description: str
    started_at: Optional[date] = None
    ended_at: Optional[date] = None

    @classmethod
    def from_entity(cls, career: AdvisorCareer) -> 'CareerResponse':
        return cls(
            id=career.id or 0,
            title=career.title,
            description=career.description,
            started_at=career.started_at,
            ended_at=career.ended_at,
        )


class AdvisorSummaryResponse(BaseModel):
    id: int
    nickname: str
    profile_image_url: Optional[str] = None
    short_intro: Optional[str] = None
    preferred_trade_style: Optional[TradeStyle] = None
    preferred_trade_style_name: Optional[str] = None
    consultation_fee: int
    average_rating: float
    review_count: int
    certificates: List[CertificateResponse] = []

    @classmethod
    def from_dto(cls, summary: AdvisorSummary) -> 'AdvisorSummaryResponse':
        style = summary.preferred_trade_style
        return cls(
            id=summary.advisor_id,
            nickname=summary.nickname,
            profile_image_url=summary.profile_image_url,
            short_intro=summary.short_intro,
            preferred_trade_style=style,
            preferred_trade_style_name=style.display_name if style else None,
            consultation_fee=summary.consultation_fee,
            average_rating=summary.average_rating,
            review_count=summary.review_count,
            certificates=[CertificateResponse.from_entity(c) for c in summary.certificates],
        )


class AdvisorDetailResponse(AdvisorSummaryResponse):
    long_intro: Optional[str] = None
    public_contact: Optional[str] = None
    careers: List[CareerResponse] = []
    reviews: List[ReviewResponse] = []
    has_more_reviews: bool = False

    @classmethod
    def from_detail(cls, detail: AdvisorDetail) -> 'AdvisorDetailResponse':
        return cls(
            **AdvisorSummaryResponse.from_dto(detail.summary).model_dump(),
            long_intro=detail.long_intro,
            public_contact=detail.public_contact,
            careers=[CareerResponse.from_entity(c) for c in detail.careers],
            reviews=[ReviewResponse.from_item(r) for r in detail.recent_reviews],
            has_more_reviews=detail.has_more_reviews,
        )


class TimeSlotResponse(BaseModel):
    time: str
    is_available: bool
    is_reserved: bool
    is_blocked: bool


class AvailableTimesResponse(BaseModel):
    date: str
    slots: List[TimeSlotResponse]

    @classmethod
    def from_dto(cls, available: AvailableTimes) -> 'AvailableTimesResponse':
        return cls(
            date=available.date,
            slots=[
                TimeSlotResponse(
                    time=slot.time,
                    is_available=slot.is_available,
                    is_reserved=slot.is_reserved,
                    is_blocked=slot.is_blocked,
                )
                for slot in available.slots
            ],
        )


class BlockedTimesRequest(BaseModel):
    blocked_times: List[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {'example': {'blocked_times': ['09:00', '13:00']}}


class BlockedTimesResponse(BaseModel):
    date: str
    blocked_times: List[str]


class CareerEntryRequest(BaseModel):
    action: Optional[CareerAction] = None
    id: Optional[int] = None
    title: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    started_at: Optional[date] = None
    ended_at: Optional[date] = None

    def to_change(self) -> CareerChange:
        return CareerChange(
            action=self.action,
            id=self.id,
            title=self.title,
            description=self.description,
            started_at=self.started_at,
            ended_at=self.ended_at,
        )


class CreateProfileRequest(BaseModel):
    short_intro: str = Field(..., max_length=100)
    preferred_trade_style: TradeStyle
    career_entries: List[CareerEntryRequest]
    long_intro: Optional[str] = None
    public_contact: Optional[str] = Field(None, max_length=100)
    profile_image_url: Optional[str] = Field(None, max_length=500)
    consultation_fee: Optional[int] = None

    class Config:
        json_schema_extra = {
            'example': {
                'short_intro': 'Ten years of swing trading',
                'preferred_trade_style': 'MID',
                'career_entries': [
                    {
                        'action': 'CREATE',
                        'title': 'Securities analyst',
                        'description': 'Covered semiconductors',
                        'started_at': '2015-03-01',
                        'ended_at': '2020-12-31',
                    }
                ],
                'consultation_fee': 50000,
            }
        }


class UpdateProfileRequest(BaseModel):
    short_intro: Optional[str] = Field(None, max_length=100)
    preferred_trade_style: Optional[TradeStyle] = None
    career_entries: Optional[List[CareerEntryRequest]] = None
    long_intro: Optional[str] = None
    public_contact: Optional[str] = Field(None, max_length=100)
    profile_image_url: Optional[str] = Field(None, max_length=500)
    consultation_fee: Optional[int] = None


class AdvisorProfileResponse(BaseModel):
    advisor_id: int
    short_intro: Optional[str] = None
    long_intro: Optional[str] = None
    preferred_trade_style: Optional[TradeStyle] = None
    public_contact: Optional[str] = None
    profile_image_url: Optional[str] = None
    consultation_fee: int
    is_profile_completed: bool

    @classmethod
    def from_entity(cls, advisor: Advisor) -> 'AdvisorProfileResponse':
        return cls(
            advisor_id=advisor.user_id,
            short_intro=advisor.short_intro,
            long_intro=advisor.long_intro,
            preferred_trade_style=advisor.preferred_trade_style,
            public_contact=advisor.public_contact,
            profile_image_url=advisor.profile_image_url,
            consultation_fee=advisor.consultation_fee,
            is_profile_completed=advisor.is_profile_completed,
        )


class CertificateApprovalRequest(BaseModel):
    certificate_name: str = Field(..., min_length=1, max_length=100)
    certificate_file_sn: str = Field(..., pattern=r'^\d{8}$')
    birth: str = Field(..., pattern=r'^\d{8}$')
    certificate_file_number: str = Field(..., pattern=r'^\d{6}$')
    previous_request_id: Optional[int] = None

    class Config:
        json_schema_extra = {
            'example': {
                'certificate_name': 'Investment Advisor',
                'certificate_file_sn': '12345678',
                'birth': '19900101',
                'certificate_file_number': '123456',
            }
        }


class ApprovalRequestResponse(BaseModel):
    request_id: int
    certificate_name: str
    status: ApprovalStatus
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    previous_request_id: Optional[int] = None
    rejection_reason: Optional[RejectionReason] = None
    custom_reason: Optional[str] = None

    @classmethod
    def from_entity(cls, request: ApprovalRequest) -> 'ApprovalRequestResponse':
        return cls(
            request_id=request.id or 0,
            certificate_name=request.certificate_name,
            status=request.status,
            requested_at=request.requested_at,
            processed_at=request.processed_at,
            previous_request_id=request.previous_request_id,
            rejection_reason=request.rejection_reason,
            custom_reason=request.custom_reason,
        )
