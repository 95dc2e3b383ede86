# 요청/응답 스키마 정의 (Pydantic 모델) - 회원/인증

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from ..models.user import User


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=64)
    nickname: str = Field(min_length=1, max_length=20)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ReissueRequest(BaseModel):
    refresh_token: str


class WithdrawRequest(BaseModel):
    # 소셜 로그인 전용 계정은 비밀번호 없이 탈퇴
    password: Optional[str] = None


class UserUpdateRequest(BaseModel):
    nickname: Optional[str] = Field(default=None, min_length=1, max_length=20)
    is_email_opt_in: Optional[bool] = None


class UserPublic(BaseModel):
    id: str
    email: EmailStr
    nickname: str
    kakao_linked: bool
    google_linked: bool
    is_email_opt_in: bool

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(
            id=str(user.id),
            email=user.email,
            nickname=user.nickname,
            kakao_linked=user.kakao_id is not None,
            google_linked=user.google_id is not None,
            is_email_opt_in=user.is_email_opt_in,
        )


class LoginResult(BaseModel):
    user: UserPublic
    refresh_token: str
