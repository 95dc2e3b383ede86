# 외부 HTTP 호출 공통 함수
# - requests 호출 결과를 ExternalAPIError 로 통일
# - api_retry 로 네트워크 오류/5xx 재시도

import logging
from typing import Any, Dict

import requests

from .config import settings
from .exceptions import ExternalAPIError
from .retry import api_retry

logger = logging.getLogger(__name__)


def _send(api_name: str, method: str, url: str, **kwargs) -> requests.Response:
    logger.info(f"[{api_name}] {method} {url}")
    try:
        resp = requests.request(method, url, timeout=settings.HTTP_TIMEOUT_SECONDS, **kwargs)
    except requests.exceptions.RequestException as e:
        raise ExternalAPIError(api_name, str(e)) from e
    if resp.status_code >= 400:
        raise ExternalAPIError(api_name, resp.text[:200], status_code=resp.status_code)
    return resp


@api_retry
def request_json(api_name: str, method: str, url: str, **kwargs) -> Dict[str, Any]:
    resp = _send(api_name, method, url, **kwargs)
    try:
        return resp.json()
    except ValueError as e:
        raise ExternalAPIError(api_name, f"JSON 파싱 실패: {e}", status_code=resp.status_code) from e


@api_retry
def fetch_text(api_name: str, url: str, **kwargs) -> str:
    resp = _send(api_name, "GET", url, **kwargs)
    # Content-Type 에 charset 이 없으면 requests 는 text/html 을 ISO-8859-1 로 읽습니다.
    # <meta charset> 로만 인코딩을 밝히는 쇼핑몰이 많아 본문으로 추정합니다.
    if "charset=" not in resp.headers.get("Content-Type", "").lower():
        resp.encoding = resp.apparent_encoding
    return resp.text
