# 공통 응답 상태 카탈로그
# - 모든 API 응답은 (성공 여부, 코드, 메시지) 세 가지 값을 함께 내려줍니다.
# - 2000: 성공 / 4000: 클라이언트 에러 / 5000: 서버 에러

from enum import Enum


class BaseResponseStatus(Enum):
    """API 응답 상태 목록. 런타임에 변경되지 않습니다."""

    # ---- 1. 요청 성공 (2000) ----

    # 공통
    SUCCESS = (True, 2000, "요청에 성공하였습니다.")

    # 회원가입 / 로그인 / 회원탈퇴
    REGISTER_ACCOUNT_SUCCESS = (True, 2000, "회원가입이 완료되었습니다")
    LOGIN_SUCCESS = (True, 2000, "로그인이 완료되었습니다.")
    KAKAO_LOGIN_SUCCESS = (True, 2000, "카카오 로그인이 완료되었습니다.")
    GOOGLE_LOGIN_SUCCESS = (True, 2000, "구글 로그인이 완료되었습니다.")
    DELETE_ACCOUNT_SUCCESS = (True, 2000, "회원탈퇴가 완료되었습니다.")
    LOGOUT_SUCCESS = (True, 2000, "로그아웃이 완료되었습니다.")
    TOKEN_REISSUE_SUCCESS = (True, 2000, "토큰이 재발급되었습니다.")

    # 펀딩
    FUNDING_ITEM_LINK_SUCCESS = (True, 2000, "펀딩 아이템이 저장되었습니다.")

    # 후원
    DONATION_READY_SUCCESS = (True, 2000, "후원 결제준비 요청이 완료되었습니다.")
    DONATION_APPROVE_SUCCESS = (True, 2000, "후원 결제승인 요청이 완료되었습니다.")

    # ---- 2. 클라이언트 에러 (4000) ----

    # 공통
    BAD_REQUEST = (False, 4000, "잘못된 요청입니다.")

    # 회원가입 / 로그인 / 회원탈퇴
    NOT_FOUND_USER = (False, 4000, "가입된 사용자 정보가 없습니다.")
    PASSWORD_MISMATCH = (False, 4000, "비밀번호가 일치하지 않습니다.")
    EMAIL_ALREADY_EXISTS = (False, 4000, "이미 가입된 이메일입니다.")
    LOGIN_FAILURE = (False, 4000, "로그인에 실패했습니다.")
    REGISTER_ACCOUNT_FAILURE = (False, 4000, "회원가입에 실패했습니다.")
    DELETE_ACCOUNT_FAILURE = (False, 4000, "회원탈퇴에 실패했습니다.")

    # 인증 및 인가
    AUTHENTICATION_FAILED = (False, 4000, "인증에 실패했습니다")
    INVALID_TOKEN = (False, 4000, "JWT 토큰이 유효하지 않습니다.")
    NOT_FOUND_TOKEN = (False, 4000, "JWT 토큰을 찾을 수 없습니다.")
    EXPIRED_TOKEN = (False, 4000, "JWT 토큰이 만료되었습니다.")

    # 알림
    NOTIFICATION_NOT_FOUND = (False, 4000, "알림을 찾을 수 없습니다.")
    NOTIFICATION_NOT_READ = (False, 4000, "알림을 읽지 못했습니다.")
    NOTIFICATION_NOT_DELETED = (False, 4000, "알림을 삭제할 수 없습니다.")
    UNAUTHORIZED_READ_NOTIFICATION = (False, 4000, "알림 조회 권한이 없습니다.")
    UNAUTHORIZED_DELETE_NOTIFICATION = (False, 4000, "알림 삭제 권한이 없습니다.")

    # 펀딩
    UNAUTHORIZED_TO_ADD_LINK = (False, 4000, "링크 추가 권한이 없습니다.")
    FUNDING_ITEM_ALREADY_EXISTS = (False, 4000, "이미 등록된 펀딩 아이템입니다.")
    FUNDING_ITEM_PREVIEW_FAILED = (False, 4000, "펀딩 아이템 미리보기에 실패했습니다.")
    FUNDING_ITEM_SAVE_FAILED = (False, 5000, "펀딩 아이템 저장에 실패했습니다.")
    FUNDING_NOT_FOUND = (False, 4000, "펀딩을 찾을 수 없습니다.")
    FUNDING_NOT_DELETED = (False, 4000, "펀딩을 삭제할 수 없습니다.")
    UNAUTHORIZED_UPDATE_FUNDING = (False, 4000, "펀딩 수정 권한이 없습니다.")
    UNAUTHORIZED_DELETE_FUNDING = (False, 4000, "펀딩 삭제 권한이 없습니다.")
    UNAUTHORIZED_READ_FUNDING = (False, 4000, "펀딩 조회 권한이 없습니다.")

    # 후원
    DONATION_FAIL = (False, 4000, "후원 결제에 실패했습니다.")
    DONATION_CANCEL = (False, 4000, "후원 결제가 취소되었습니다.")

    # ---- 3. 서버 에러 (5000) ----

    # 공통
    SERVER_ERROR = (False, 5000, "서버와 연결에 실패하였습니다.")
    UNEXPECTED_ERROR = (False, 5000, "예상치 못한 에러가 발생했습니다.")
    FAIL_TO_ENCODING = (False, 5000, "요청 인코딩에 실패했습니다.")
    FAIL_TO_JSON = (False, 5000, "JSON 파싱 에러가 발생했습니다.")

    # 이메일
    EMAIL_SEND_FAILED = (False, 5000, "이메일 전송에 실패했습니다.")

    def __init__(self, is_success: bool, code: int, message: str):
        self.is_success = is_success
        self.code = code
        self.message = message

    @property
    def http_status(self) -> int:
        """응답을 만들 때 사용할 HTTP 상태 코드"""
        if self.is_success:
            return 200
        if self.code >= 5000:
            return 500
        if self in _UNAUTHENTICATED:
            return 401
        if self.name.startswith("UNAUTHORIZED_"):
            return 403
        if self.name.endswith("_NOT_FOUND") or self is BaseResponseStatus.NOT_FOUND_USER:
            return 404
        return 400


_UNAUTHENTICATED = frozenset({
    BaseResponseStatus.AUTHENTICATION_FAILED,
    BaseResponseStatus.INVALID_TOKEN,
    BaseResponseStatus.NOT_FOUND_TOKEN,
    BaseResponseStatus.EXPIRED_TOKEN,
})
