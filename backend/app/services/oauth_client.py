# 소셜 로그인(OAuth) 클라이언트
# - 인가 코드 → 액세스 토큰 교환
# - 액세스 토큰으로 사용자 프로필 조회
# 모두 동기 함수이므로 async 코드에서는 run_in_threadpool 로 호출합니다.

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..core.config import settings
from ..core.exceptions import ExternalAPIError
from ..core.http_client import request_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OAuthProfile:
    provider_id: Union[int, str]
    email: Optional[str]
    nickname: str


# ---- 카카오 ----

def kakao_get_token(code: str) -> str:
    data = {
        "grant_type": "authorization_code",
        "client_id": settings.KAKAO_CLIENT_ID,
        "redirect_uri": settings.KAKAO_REDIRECT_URI,
        "code": code,
    }
    if settings.KAKAO_CLIENT_SECRET:
        data["client_secret"] = settings.KAKAO_CLIENT_SECRET
    body = request_json(
        "kakao-oauth",
        "POST",
        f"{settings.KAKAO_AUTH_BASE}/oauth/token",
        data=data,
        headers={"Content-type": "application/x-www-form-urlencoded;charset=utf-8"},
    )
    token = body.get("access_token")
    if not token:
        raise ExternalAPIError("kakao-oauth", "access_token 이 응답에 없습니다.")
    return token


def kakao_get_profile(access_token: str) -> OAuthProfile:
    body = request_json(
        "kakao-api",
        "POST",
        f"{settings.KAKAO_API_BASE}/v2/user/me",
        headers={
            "Authorization": f"Bearer {access_token}",
            "Content-type": "application/x-www-form-urlencoded;charset=utf-8",
        },
    )
    # 응답 예: {"id": 123, "properties": {"nickname": ".."}, "kakao_account": {"email": ".."}}
    kakao_id = body.get("id")
    if kakao_id is None:
        raise ExternalAPIError("kakao-api", "사용자 id 가 응답에 없습니다.")
    properties = body.get("properties") or {}
    account = body.get("kakao_account") or {}
    return OAuthProfile(
        provider_id=int(kakao_id),
        email=account.get("email"),
        nickname=properties.get("nickname") or f"kakao_{kakao_id}",
    )


# ---- 구글 ----

def google_get_token(code: str) -> str:
    body = request_json(
        "google-oauth",
        "POST",
        settings.GOOGLE_TOKEN_URL,
        data={
            "grant_type": "authorization_code",
            "client_id": settings.GOOGLE_CLIENT_ID,
            "client_secret": settings.GOOGLE_CLIENT_SECRET,
            "redirect_uri": settings.GOOGLE_REDIRECT_URI,
            "code": code,
        },
    )
    token = body.get("access_token")
    if not token:
        raise ExternalAPIError("google-oauth", "access_token 이 응답에 없습니다.")
    return token


def google_get_profile(access_token: str) -> OAuthProfile:
    body = request_json(
        "google-api",
        "GET",
        settings.GOOGLE_USERINFO_URL,
        headers={"Authorization": f"Bearer {access_token}"},
    )
    google_id = body.get("id")
    if not google_id:
        raise ExternalAPIError("google-api", "사용자 id 가 응답에 없습니다.")
    email = body.get("email")
    return OAuthProfile(
        provider_id=str(google_id),
        email=email,
        nickname=body.get("name") or (email.split("@")[0] if email else f"google_{google_id}"),
    )
