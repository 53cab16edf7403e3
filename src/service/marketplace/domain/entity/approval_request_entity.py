from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional

import attrs

from src.platform.exception.exceptions import ConflictError, DomainError


class ApprovalStatus(StrEnum):
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'


class RejectionReason(StrEnum):
    INVALID_CERTIFICATE = 'INVALID_CERTIFICATE'
    EXPIRED_CERTIFICATE = 'EXPIRED_CERTIFICATE'
    INSUFFICIENT_DOCUMENTS = 'INSUFFICIENT_DOCUMENTS'
    VERIFICATION_FAILED = 'VERIFICATION_FAILED'
    OTHER = 'OTHER'


@attrs.define
class ApprovalRequest:
    advisor_id: int
    certificate_name: str
    certificate_file_sn: str
    birth: str
    certificate_file_number: str
    id: Optional[int] = None
    status: ApprovalStatus = ApprovalStatus.PENDING
    previous_request_id: Optional[int] = None
    rejection_reason: Optional[RejectionReason] = None
    custom_reason: Optional[str] = None
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    processed_by: Optional[int] = None

    def _validate_pending(self) -> None:
        if self.status != ApprovalStatus.PENDING:
            raise ConflictError('ALREADY_PROCESSED')

    def approve(self, *, admin_id: int) -> 'ApprovalRequest':
        self._validate_pending()
        return attrs.evolve(
            self,
            status=ApprovalStatus.APPROVED,
            processed_at=datetime.now(timezone.utc),
            processed_by=admin_id,
        )

    def reject(
        self, *, admin_id: int, reason: RejectionReason, custom_reason: Optional[str]
    ) -> 'ApprovalRequest':
        self._validate_pending()
        if reason == RejectionReason.OTHER and not (custom_reason and custom_reason.strip()):
            raise DomainError('custom_reason is required when rejection_reason is OTHER')

        return attrs.evolve(
            self,
            status=ApprovalStatus.REJECTED,
            rejection_reason=reason,
            custom_reason=custom_reason.strip() if custom_reason else None,
            processed_at=datetime.now(timezone.utc),
            processed_by=admin_id,
        )
