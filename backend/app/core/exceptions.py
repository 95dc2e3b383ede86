# 커스텀 예외 클래스 정의
# - 요청 처리 중 실패는 BaseResponseException 하나로 표현하고,
#   main.py의 예외 핸들러가 공통 응답 본문으로 변환합니다.

from typing import Optional

from .response_status import BaseResponseStatus


class BaseResponseException(Exception):
    """응답 상태 카탈로그의 항목을 담아 던지는 예외

    Attributes:
        status: 클라이언트에게 내려갈 BaseResponseStatus 항목
    """
    def __init__(self, status: BaseResponseStatus):
        self.status = status
        super().__init__(f"[{status.code}] {status.message}")


class InvalidSecretKeyError(ValueError):
    """JWT 비밀키 설정이 잘못된 경우 (서버 시작 단계에서 발생)"""
    pass


class ExternalAPIError(Exception):
    """외부 API 호출 실패 시 발생하는 예외

    카카오/구글 OAuth, 카카오페이, 펀딩 아이템 링크 미리보기 등
    네트워크 오류, 타임아웃, 상대 서버 오류를 모두 포함합니다.

    Attributes:
        api_name: API 서비스 이름 (예: "kakao-oauth")
        status_code: HTTP 상태 코드 (있는 경우)
        message: 에러 메시지
    """
    def __init__(self, api_name: str, message: str, status_code: Optional[int] = None):
        self.api_name = api_name
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{api_name}] API 호출 실패: {message}")

    @property
    def retryable(self) -> bool:
        # 네트워크 오류나 5xx 만 재시도 대상
        return self.status_code is None or self.status_code >= 500
