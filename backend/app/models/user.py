# User 도메인 모델 (Beanie Document)
# - 이메일, 비밀번호 해시, 닉네임, 소셜 로그인 ID, 리프레시 토큰
# - 이메일은 unique 인덱스, 카카오/구글 ID는 값이 있을 때만 unique

from datetime import datetime
from typing import Optional

from beanie import Document, Indexed
from pydantic import EmailStr, Field
from pymongo import ASCENDING, IndexModel


class User(Document):
    email: Indexed(EmailStr, unique=True)  # 중복 방지 인덱스
    # 소셜 로그인 전용 계정은 비밀번호가 없습니다
    password: Optional[str] = Field(default=None, repr=False)
    nickname: str
    kakao_id: Optional[int] = None
    google_id: Optional[str] = None
    refresh_token: Optional[str] = Field(default=None, repr=False)
    is_email_opt_in: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"  # 컬렉션명
        indexes = [
            IndexModel(
                [("kakao_id", ASCENDING)],
                unique=True,
                partialFilterExpression={"kakao_id": {"$type": "number"}},
            ),
            IndexModel(
                [("google_id", ASCENDING)],
                unique=True,
                partialFilterExpression={"google_id": {"$type": "string"}},
            ),
            IndexModel([("refresh_token", ASCENDING)], sparse=True),
        ]

    @property
    def is_social_only(self) -> bool:
        return self.password is None
