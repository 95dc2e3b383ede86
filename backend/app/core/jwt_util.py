# JWT 유틸리티
# - 쿠키/헤더에서 토큰 추출 (URL 디코딩)
# - 토큰 검증 및 클레임 파싱
# - 토큰 생성, 쿠키로 전달, 로그아웃 시 쿠키 만료

import base64
import binascii
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from urllib.parse import quote, unquote

import jwt
from fastapi import Request, Response

from .exceptions import BaseResponseException, InvalidSecretKeyError
from .response_status import BaseResponseStatus

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "
TOKEN_TIME = timedelta(hours=24)
ALGORITHM = "HS256"
# HS256 키 최소 길이 (256비트)
MIN_KEY_BYTES = 32


def _preview(token: str) -> str:
    return token[:20] + "..." if len(token) > 20 else token


class JwtUtil:
    """
    서명 키를 한 번 만들어 두고 모든 토큰 작업에 재사용합니다.

    주니어 개발자님께: 이 객체는 앱 생성 시점에 한 번만 만들어져
    app.state.jwt_util 에 보관됩니다. 생성 이후에는 키가 바뀌지 않으므로
    여러 요청이 동시에 읽어도 안전합니다.
    """

    def __init__(self, secret_key: str, token_time: timedelta = TOKEN_TIME):
        try:
            key = base64.b64decode(secret_key or "", validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidSecretKeyError(f"JWT_SECRET_KEY is not valid base64: {e}") from e
        if len(key) < MIN_KEY_BYTES:
            raise InvalidSecretKeyError(
                f"JWT_SECRET_KEY must decode to at least {MIN_KEY_BYTES} bytes (got {len(key)})"
            )
        self._key = key
        self.token_time = token_time

    # 1. 쿠키에서 JWT 토큰을 가져오는 경우
    def get_token_from_cookie(self, request: Request) -> Optional[str]:
        raw = request.cookies.get(AUTHORIZATION_HEADER)
        if raw is None:
            return None
        try:
            decoded = unquote(raw, errors="strict")
        except UnicodeDecodeError:
            logger.warning("[get_token_from_cookie] 쿠키 값 디코딩 실패")
            return None
        logger.debug("[get_token_from_cookie] decodeToken: %s", _preview(decoded))
        return decoded

    # 2. 헤더에서 JWT 토큰을 가져오는 경우
    def get_token_from_header(self, request: Request) -> Optional[str]:
        raw = request.headers.get(AUTHORIZATION_HEADER)
        if raw is None:
            return None
        try:
            decoded = unquote(raw, errors="strict")
        except UnicodeDecodeError:
            logger.warning("[get_token_from_header] 헤더 값 디코딩 실패")
            return None
        logger.debug("[get_token_from_header] decodeToken: %s", _preview(decoded))
        return decoded

    @staticmethod
    def substring_token(decoded_token: Optional[str]) -> str:
        if decoded_token and decoded_token.strip() and decoded_token.startswith(BEARER_PREFIX):
            return decoded_token[len(BEARER_PREFIX):]
        raise BaseResponseException(BaseResponseStatus.NOT_FOUND_TOKEN)

    def _parse(self, token_value: Optional[str]) -> Dict[str, Any]:
        if not token_value or not token_value.strip():
            raise BaseResponseException(BaseResponseStatus.NOT_FOUND_TOKEN)
        try:
            return jwt.decode(
                token_value,
                self._key,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("[validateToken] 만료된 토큰: %s", _preview(token_value))
            raise BaseResponseException(BaseResponseStatus.EXPIRED_TOKEN)
        except jwt.InvalidTokenError as e:
            logger.info("[validateToken] 유효하지 않은 토큰 (%s): %s", type(e).__name__, _preview(token_value))
            raise BaseResponseException(BaseResponseStatus.INVALID_TOKEN)

    def validate_token(self, token_value: Optional[str]) -> bool:
        """서명과 만료 시간을 검증합니다. 실패 시 BaseResponseException."""
        self._parse(token_value)
        return True

    def get_user_info_from_token(self, token_value: str) -> Dict[str, Any]:
        return self._parse(token_value)

    def create_token(self, email: str, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(tz=timezone.utc)
        payload = {
            "sub": email,
            "iat": issued_at,
            "exp": issued_at + self.token_time,
        }
        token = BEARER_PREFIX + jwt.encode(payload, self._key, algorithm=ALGORITHM)
        logger.info("[createToken] JWT 생성 완료: %s", email)
        return token

    @staticmethod
    def add_jwt_to_cookie(token: str, response: Response) -> str:
        # 공백은 %20 으로 인코딩됩니다
        encoded = quote(token, safe="")
        response.set_cookie(
            AUTHORIZATION_HEADER,
            encoded,
            path="/",
            httponly=True,
            secure=True,
            samesite="none",
        )
        logger.info("[addJwtToCookie] JWT 쿠키 전달 완료")
        return encoded

    def logout(self, request: Request, response: Response) -> None:
        if AUTHORIZATION_HEADER not in request.cookies:
            return
        response.set_cookie(
            AUTHORIZATION_HEADER,
            "",
            max_age=0,
            path="/",
            httponly=True,
            secure=True,
            samesite="none",
        )


def get_jwt_util(request: Request) -> JwtUtil:
    """앱 생성 시 만들어 둔 JwtUtil 을 꺼내는 의존성"""
    return request.app.state.jwt_util
