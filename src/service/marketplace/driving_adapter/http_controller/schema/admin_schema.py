from datetime import datetime
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field

from src.service.marketplace.app.dto.approval_dto import AdminApprovalItem
from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalRequest,
    ApprovalStatus,
    RejectionReason,
)


class ApprovalStatusFilter(StrEnum):
    ALL = 'ALL'
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'

    def to_status(self) -> Optional[ApprovalStatus]:
        return None if self == ApprovalStatusFilter.ALL else ApprovalStatus(self.value)


class AdminApprovalItemResponse(BaseModel):
    request_id: int
    advisor_id: int
    advisor_name: str
    advisor_email: str
    certificate_name: str
    certificate_file_sn: str
    birth: str
    certificate_file_number: str
    status: ApprovalStatus
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    rejection_reason: Optional[RejectionReason] = None
    custom_reason: Optional[str] = None

    @classmethod
    def from_item(cls, item: AdminApprovalItem) -> 'AdminApprovalItemResponse':
        return cls(
            request_id=item.request_id,
            advisor_id=item.advisor_id,
            advisor_name=item.advisor_name,
            advisor_email=item.advisor_email,
            certificate_name=item.certificate_name,
            certificate_file_sn=item.certificate_file_sn,
            birth=item.birth,
            certificate_file_number=item.certificate_file_number,
            status=item.status,
            requested_at=item.requested_at,
            processed_at=item.processed_at,
            rejection_reason=item.rejection_reason,
            custom_reason=item.custom_reason,
        )


class RejectRequest(BaseModel):
    rejection_reason: RejectionReason
    custom_reason: Optional[str] = Field(None, max_length=500)

    class Config:
        json_schema_extra = {
            'example': {'rejection_reason': 'OTHER', 'custom_reason': 'Certificate image is unreadable'}
        }


class ApprovalDecisionResponse(BaseModel):
    request_id: int
    advisor_id: int
    status: ApprovalStatus
    processed_at: Optional[datetime] = None
    processed_by: Optional[int] = None
    rejection_reason: Optional[RejectionReason] = None
    custom_reason: Optional[str] = None

    @classmethod
    def from_entity(cls, request: ApprovalRequest) -> 'ApprovalDecisionResponse':
        return cls(
            request_id=request.id or 0,
            advisor_id=request.advisor_id,
            status=request.status,
            processed_at=request.processed_at,
            processed_by=request.processed_by,
            rejection_reason=request.rejection_reason,
            custom_reason=request.custom_reason,
        )
