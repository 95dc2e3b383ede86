# FastAPI 진입점
# - Beanie ODM 초기화 (MongoDB)
# - JwtUtil 생성 (비밀키가 잘못되면 앱이 뜨지 않음)
# - 공통 응답 형식({"isSuccess", "code", "message", "result"}) 예외 핸들러
# - 라우터 라우팅, CORS 설정
# - Celery는 별도 프로세스로 동작 (tasks/notification_tasks.py 참고)

import logging
from datetime import datetime, timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.auth import router as auth_router
from .api.v1.donations import router as donations_router
from .api.v1.fundings import router as fundings_router
from .api.v1.notifications import router as notifications_router
from .api.v1.users import router as users_router
from .core.config import settings
from .core.database import init_db
from .core.exceptions import BaseResponseException
from .core.jwt_util import JwtUtil
from .core.response_status import BaseResponseStatus
from .schemas.common import BaseResponse

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
logger = logging.getLogger(__name__)

# FastAPI 애플리케이션 인스턴스 생성
app = FastAPI(
    title="Giftipie API",
    description="선물 펀딩 서비스 - 펀딩 생성, 카카오페이 후원, 알림",
    version="1.0.0"
)

# 주니어 개발자님께: 비밀키 검증은 여기서 한 번만 합니다.
# 키가 base64가 아니거나 32바이트보다 짧으면 InvalidSecretKeyError로 시작이 중단됩니다.
app.state.jwt_util = JwtUtil(settings.JWT_SECRET_KEY, timedelta(hours=settings.JWT_EXPIRE_HOURS))

# CORS 허용 도메인 세팅 (쿠키 인증이므로 allow_credentials 필수)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or [settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status: BaseResponseStatus) -> JSONResponse:
    return JSONResponse(status_code=status.http_status, content=BaseResponse.of(status).model_dump(by_alias=True))


@app.exception_handler(BaseResponseException)
async def base_response_exception_handler(request: Request, exc: BaseResponseException):
    logger.info(f"{request.method} {request.url.path} -> {exc.status.name}")
    return _error_response(exc.status)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"{request.method} {request.url.path} 요청 검증 실패: {exc.errors()}")
    return _error_response(BaseResponseStatus.BAD_REQUEST)


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} 처리 중 예외", exc_info=exc)
    return _error_response(BaseResponseStatus.UNEXPECTED_ERROR)


# Beanie 초기화 (앱 시작 시 1회)
@app.on_event("startup")
async def app_init():
    try:
        await init_db(ping=True)
        logger.info(f"MongoDB 연결 성공: {settings.MONGODB_URI}")
    except Exception as e:
        # 연결 실패해도 서버는 뜨지만, DB를 쓰는 API는 UNEXPECTED_ERROR로 응답합니다.
        logger.warning(f"MongoDB 연결 실패: {e}")
        logger.warning(f"MongoDB URI를 확인하세요: {settings.MONGODB_URI}")


# 간단한 헬스체크
@app.get("/")
async def root():
    return {"ok": True, "app": settings.APP_NAME, "time": datetime.utcnow().isoformat()}


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME, "version": "1.0.0"}


# API v1 라우터 등록
app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(fundings_router, prefix="/api/v1")
app.include_router(donations_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
