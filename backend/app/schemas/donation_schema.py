# 요청/응답 스키마 정의 - 후원

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..models.donation import Donation


class DonationReadyRequest(BaseModel):
    funding_id: str
    amount: int = Field(gt=0)
    sponsor_nickname: str = Field(min_length=1, max_length=20)
    sponsor_comment: Optional[str] = Field(default=None, max_length=100)


class DonationReadyResponse(BaseModel):
    tid: str
    next_redirect_pc_url: str
    next_redirect_mobile_url: Optional[str] = None


class DonationApproveResponse(BaseModel):
    funding_id: str
    amount: int
    sponsor_nickname: str

    @classmethod
    def from_donation(cls, donation: Donation) -> "DonationApproveResponse":
        return cls(funding_id=str(donation.funding_id), amount=donation.amount, sponsor_nickname=donation.sponsor_nickname)


class DonationResponse(BaseModel):
    sponsor_nickname: str
    sponsor_comment: Optional[str] = None
    amount: int
    approved_at: Optional[datetime] = None

    @classmethod
    def from_donation(cls, donation: Donation) -> "DonationResponse":
        return cls(
            sponsor_nickname=donation.sponsor_nickname,
            sponsor_comment=donation.sponsor_comment,
            amount=donation.amount,
            approved_at=donation.approved_at,
        )
