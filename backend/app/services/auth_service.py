# 인증 서비스 레이어
# - 이메일 중복 체크, 회원가입
# - 로그인 (비밀번호 검증, JWT 발급, 리프레시 토큰 교체)
# - 카카오/구글 소셜 로그인
# - 회원정보 수정, 회원탈퇴

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends
from fastapi.concurrency import run_in_threadpool

from ..core.exceptions import BaseResponseException, ExternalAPIError
from ..core.jwt_util import JwtUtil, get_jwt_util
from ..core.response_status import BaseResponseStatus
from ..core.security import create_refresh_token, get_password_hash, verify_password
from ..models.user import User
from ..repositories.user_repository import UserRepository
from . import oauth_client
from .oauth_client import OAuthProfile

logger = logging.getLogger(__name__)

# 이메일 제공에 동의하지 않은 소셜 계정에 부여하는 내부 이메일 도메인
SOCIAL_EMAIL_DOMAIN = "giftipie.me"


@dataclass
class LoginTokens:
    user: User
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(self, repo: UserRepository, jwt_util: JwtUtil):
        self.repo = repo
        self.jwt_util = jwt_util

    async def register(self, email: str, password: str, nickname: str) -> User:
        existing = await self.repo.get_by_email(email)
        if existing:
            raise BaseResponseException(BaseResponseStatus.EMAIL_ALREADY_EXISTS)
        user = User(email=email, password=get_password_hash(password), nickname=nickname)
        try:
            user = await self.repo.create(user)
        except Exception as e:
            logger.error(f"회원가입 저장 실패 ({email}): {e}", exc_info=True)
            raise BaseResponseException(BaseResponseStatus.REGISTER_ACCOUNT_FAILURE) from e
        logger.info(f"회원가입 완료: {email}")
        return user

    async def login(self, email: str, password: str) -> LoginTokens:
        user = await self.repo.get_by_email(email)
        if not user:
            raise BaseResponseException(BaseResponseStatus.NOT_FOUND_USER)
        if not verify_password(password, user.password):
            logger.warning(f"로그인 실패 - 비밀번호 불일치: {email}")
            raise BaseResponseException(BaseResponseStatus.PASSWORD_MISMATCH)
        return await self._issue(user)

    async def reissue(self, refresh_token: str) -> LoginTokens:
        user = await self.repo.get_by_refresh_token(refresh_token)
        if not user:
            raise BaseResponseException(BaseResponseStatus.INVALID_TOKEN)
        return await self._issue(user)

    async def kakao_login(self, code: str) -> LoginTokens:
        profile = await self._fetch_profile(code, oauth_client.kakao_get_token, oauth_client.kakao_get_profile)
        user = await self.repo.get_by_kakao_id(profile.provider_id)
        if user is None:
            user = await self._link_or_create(profile, email_prefix="kakao", kakao_id=profile.provider_id)
        return await self._issue(user)

    async def google_login(self, code: str) -> LoginTokens:
        profile = await self._fetch_profile(code, oauth_client.google_get_token, oauth_client.google_get_profile)
        user = await self.repo.get_by_google_id(profile.provider_id)
        if user is None:
            user = await self._link_or_create(profile, email_prefix="google", google_id=profile.provider_id)
        return await self._issue(user)

    async def update_profile(self, user: User, nickname: Optional[str] = None,
                             is_email_opt_in: Optional[bool] = None) -> User:
        if nickname is not None:
            user.nickname = nickname
        if is_email_opt_in is not None:
            user.is_email_opt_in = is_email_opt_in
        return await self.repo.save(user)

    async def withdraw(self, user: User, password: Optional[str] = None) -> None:
        # 일반 가입 계정은 비밀번호를 한 번 더 확인
        if not user.is_social_only and not verify_password(password or "", user.password):
            raise BaseResponseException(BaseResponseStatus.PASSWORD_MISMATCH)
        # 후원금이 들어온 펀딩이 있으면 탈퇴 불가 (펀딩 삭제 규칙과 동일)
        if await self.repo.has_received_donations(user):
            raise BaseResponseException(BaseResponseStatus.DELETE_ACCOUNT_FAILURE)
        try:
            await self.repo.delete(user)
        except Exception as e:
            logger.error(f"회원탈퇴 실패 ({user.email}): {e}", exc_info=True)
            raise BaseResponseException(BaseResponseStatus.DELETE_ACCOUNT_FAILURE) from e
        logger.info(f"회원탈퇴 완료: {user.email}")

    # ---- 내부 헬퍼 ----

    async def _issue(self, user: User) -> LoginTokens:
        # 로그인할 때마다 리프레시 토큰 교체
        user.refresh_token = create_refresh_token()
        await self.repo.save(user)
        access_token = self.jwt_util.create_token(user.email)
        return LoginTokens(user=user, access_token=access_token, refresh_token=user.refresh_token)

    async def _fetch_profile(self, code: str, get_token: Callable[[str], str],
                             get_profile: Callable[[str], OAuthProfile]) -> OAuthProfile:
        if not code:
            raise BaseResponseException(BaseResponseStatus.BAD_REQUEST)
        try:
            access_token = await run_in_threadpool(get_token, code)
            return await run_in_threadpool(get_profile, access_token)
        except ExternalAPIError as e:
            logger.error(f"소셜 로그인 실패: {e}")
            raise BaseResponseException(BaseResponseStatus.LOGIN_FAILURE) from e

    async def _link_or_create(self, profile: OAuthProfile, email_prefix: str, **provider_ids) -> User:
        email = profile.email or f"{email_prefix}_{profile.provider_id}@{SOCIAL_EMAIL_DOMAIN}"
        user = await self.repo.get_by_email(email)
        if user is not None:
            # 같은 이메일로 가입된 계정이 있으면 소셜 ID 연결
            for key, value in provider_ids.items():
                setattr(user, key, value)
            logger.info(f"기존 계정에 {email_prefix} 계정 연결: {email}")
            return await self.repo.save(user)

        user = User(email=email, nickname=profile.nickname, **provider_ids)
        logger.info(f"{email_prefix} 계정으로 신규 가입: {email}")
        return await self.repo.create(user)


def get_auth_service(
    repo: UserRepository = Depends(UserRepository),
    jwt_util: JwtUtil = Depends(get_jwt_util),
) -> AuthService:
    return AuthService(repo, jwt_util)
