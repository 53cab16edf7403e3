from datetime import datetime
from typing import Optional

import attrs

from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalStatus,
    RejectionReason,
)


@attrs.define
class AdminApprovalItem:
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
