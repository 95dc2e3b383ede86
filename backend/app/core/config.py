# 설정 모듈
# - .env 값들을 한 곳에서 관리
# - 기본값을 제공하여 로컬 실행 편의성 확보

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 프로젝트 루트 디렉토리 경로 찾기
# 주니어 개발자님께: 이 파일은 backend/app/core/config.py에 있으므로,
# backend 디렉토리에서 1단계 상위로 올라가면 프로젝트 루트가 됩니다.
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    APP_NAME: str = "giftipie"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    MONGODB_URI: str = "mongodb://localhost:27017/giftipie"

    # base64로 인코딩된 HMAC 비밀키 (디코딩 후 32바이트 이상)
    JWT_SECRET_KEY: str = Field(..., description="JWT 서명용 비밀키 (base64). 반드시 강력한 랜덤 값으로 설정하세요.")
    JWT_EXPIRE_HOURS: int = 24

    CORS_ALLOW_ORIGINS: str = "http://localhost:5173,http://localhost:3000"
    FRONTEND_URL: str = "http://localhost:5173"
    BACKEND_URL: str = "http://localhost:8000"

    # 카카오 로그인
    KAKAO_CLIENT_ID: str = ""
    KAKAO_CLIENT_SECRET: Optional[str] = None
    KAKAO_REDIRECT_URI: str = "http://localhost:8000/api/v1/auth/kakao/callback"
    KAKAO_AUTH_BASE: str = "https://kauth.kakao.com"
    KAKAO_API_BASE: str = "https://kapi.kakao.com"

    # 구글 로그인
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URI: str = "http://localhost:8000/api/v1/auth/google/callback"
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    GOOGLE_USERINFO_URL: str = "https://www.googleapis.com/oauth2/v2/userinfo"

    # 카카오페이 (후원 결제)
    KAKAOPAY_API_BASE: str = "https://open-api.kakaopay.com/online/v1/payment"
    KAKAOPAY_SECRET_KEY: str = ""
    KAKAOPAY_CID: str = "TC0ONETIME"

    # 외부 HTTP 호출 타임아웃 (초)
    HTTP_TIMEOUT_SECONDS: float = 10.0

    REDIS_URL: str = "redis://localhost:6379/0"
    TIMEZONE: str = "Asia/Seoul"

    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = "Giftipie <noreply@giftipie.me>"
    SMTP_TLS: bool = True

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH) if ENV_FILE_PATH.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]


settings = Settings()
