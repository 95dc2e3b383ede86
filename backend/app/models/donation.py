# 후원 모델
# - 카카오페이 결제 준비(READY) → 승인(APPROVED) / 취소 / 실패

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed, Link, PydanticObjectId
from pydantic import Field

from .funding import Funding


class DonationStatus(str, Enum):
    READY = "READY"
    APPROVED = "APPROVED"
    CANCELED = "CANCELED"
    FAILED = "FAILED"


class Donation(Document):
    funding: Link[Funding]
    sponsor_nickname: str
    sponsor_comment: Optional[str] = None
    amount: int = Field(gt=0)
    order_id: Indexed(str, unique=True)  # 가맹점 주문번호 (partner_order_id)
    tid: Optional[str] = None  # 카카오페이 결제 고유번호
    status: DonationStatus = DonationStatus.READY
    created_at: datetime = Field(default_factory=datetime.utcnow)
    approved_at: Optional[datetime] = None

    class Settings:
        name = "donations"

    @property
    def funding_id(self) -> PydanticObjectId:
        # fetch 전에는 Link, fetch 후에는 Funding
        funding = self.funding
        return funding.ref.id if isinstance(funding, Link) else funding.id
