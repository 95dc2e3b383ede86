# 재시도 로직 유틸리티
# - OAuth 제공자, 카카오페이 등 외부 API 호출은 일시적 오류로 실패할 수 있으므로
#   tenacity로 지수 백오프 재시도를 적용합니다.
# - 4xx 응답(잘못된 인가 코드 등)은 다시 보내도 같은 결과이므로 재시도하지 않습니다.

import logging

from tenacity import (
    after_log,
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import ExternalAPIError

logger = logging.getLogger(__name__)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, ExternalAPIError) and exc.retryable


def create_api_retry_decorator(
    max_attempts: int = 3,
    initial_wait: float = 1.0,
    max_wait: float = 10.0,
):
    """
    외부 API 호출용 재시도 데코레이터를 생성합니다.

    - max_attempts: 최대 시도 횟수 (처음 1번 + 재시도 포함)
    - initial_wait / max_wait: 지수 백오프 대기 시간의 하한/상한 (초)

    모든 시도가 실패하면 마지막 ExternalAPIError를 그대로 다시 던집니다.
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=2, min=initial_wait, max=max_wait),
        retry=retry_if_exception(_is_retryable),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        after=after_log(logger, logging.ERROR),
        reraise=True,
    )


# 기본 재시도 데코레이터 (바로 사용 가능)
api_retry = create_api_retry_decorator(
    max_attempts=3,
    initial_wait=1.0,
    max_wait=10.0
)
