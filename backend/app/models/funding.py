# 펀딩 모델
# - 한 사용자가 여러 개의 펀딩을 소유 (user 링크)
# - 펀딩 아이템 링크와 미리보기 정보(이름, 이미지)를 함께 저장

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Link
from pydantic import Field

from .user import User


class FundingStatus(str, Enum):
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


class Funding(Document):
    user: Link[User]
    item_link: str
    item_image: Optional[str] = None
    item_name: Optional[str] = None
    title: str
    content: str = ""
    show_name: str
    target_amount: int = Field(gt=0)
    current_amount: int = 0
    end_date: datetime
    status: FundingStatus = FundingStatus.ACTIVE
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "fundings"

    @property
    def achievement_rate(self) -> int:
        return int(self.current_amount * 100 / self.target_amount)
