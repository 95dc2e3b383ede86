# 요청/응답 스키마 정의 - 펀딩

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, HttpUrl

from ..models.funding import Funding, FundingStatus


class ItemLinkRequest(BaseModel):
    item_link: HttpUrl


class ItemPreview(BaseModel):
    item_link: str
    item_name: Optional[str] = None
    item_image: Optional[str] = None


class FundingCreateRequest(BaseModel):
    item_link: HttpUrl
    title: str = Field(min_length=1, max_length=50)
    content: str = Field(default="", max_length=500)
    show_name: str = Field(min_length=1, max_length=20)
    target_amount: int = Field(gt=0)
    end_date: datetime


class FundingUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=50)
    content: Optional[str] = Field(default=None, max_length=500)
    show_name: Optional[str] = Field(default=None, min_length=1, max_length=20)
    end_date: Optional[datetime] = None


class FundingResponse(BaseModel):
    id: str
    item_link: str
    item_name: Optional[str] = None
    item_image: Optional[str] = None
    title: str
    content: str
    show_name: str
    target_amount: int
    current_amount: int
    achievement_rate: int
    end_date: datetime
    status: FundingStatus

    @classmethod
    def from_funding(cls, funding: Funding) -> "FundingResponse":
        return cls(
            id=str(funding.id),
            item_link=funding.item_link,
            item_name=funding.item_name,
            item_image=funding.item_image,
            title=funding.title,
            content=funding.content,
            show_name=funding.show_name,
            target_amount=funding.target_amount,
            current_amount=funding.current_amount,
            achievement_rate=funding.achievement_rate,
            end_date=funding.end_date,
            status=funding.status,
        )
