# 보안/인증 유틸리티
# - 비밀번호 해싱/검증
# - 리프레시 토큰 발급
# - 현재 사용자 가져오기(의존성): 쿠키 → 헤더 순서로 JWT 탐색

import logging
import secrets
from typing import Optional

from fastapi import Depends, Request
from passlib.context import CryptContext

from ..models.user import User
from ..repositories.user_repository import UserRepository
from .exceptions import BaseResponseException
from .jwt_util import JwtUtil, get_jwt_util
from .response_status import BaseResponseStatus

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_refresh_token() -> str:
    return secrets.token_urlsafe(48)


def _find_token(request: Request, jwt_util: JwtUtil) -> Optional[str]:
    return jwt_util.get_token_from_cookie(request) or jwt_util.get_token_from_header(request)


async def _authenticate(decoded_token: str, jwt_util: JwtUtil, repo: UserRepository) -> User:
    token_value = jwt_util.substring_token(decoded_token)
    claims = jwt_util.get_user_info_from_token(token_value)
    email = claims.get("sub")
    if not isinstance(email, str) or not email:
        raise BaseResponseException(BaseResponseStatus.AUTHENTICATION_FAILED)

    user = await repo.get_by_email(email)
    if user is None:
        logger.warning(f"토큰 사용자 없음: {email}")
        raise BaseResponseException(BaseResponseStatus.NOT_FOUND_USER)
    return user


async def get_current_user(
    request: Request,
    jwt_util: JwtUtil = Depends(get_jwt_util),
    repo: UserRepository = Depends(UserRepository),
) -> User:
    decoded_token = _find_token(request, jwt_util)
    if decoded_token is None:
        raise BaseResponseException(BaseResponseStatus.NOT_FOUND_TOKEN)
    return await _authenticate(decoded_token, jwt_util, repo)


async def get_optional_user(
    request: Request,
    jwt_util: JwtUtil = Depends(get_jwt_util),
    repo: UserRepository = Depends(UserRepository),
) -> Optional[User]:
    # 토큰이 아예 없으면 비회원, 토큰이 있는데 잘못됐으면 에러
    decoded_token = _find_token(request, jwt_util)
    if decoded_token is None:
        return None
    return await _authenticate(decoded_token, jwt_util, repo)
