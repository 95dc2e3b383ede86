# 인증 라우터
# - 회원가입: POST /api/v1/auth/register
# - 로그인: POST /api/v1/auth/login (JWT 쿠키 발급)
# - 로그아웃: POST /api/v1/auth/logout (쿠키 만료)
# - 토큰 재발급: POST /api/v1/auth/token/reissue
# - 소셜 로그인 콜백: GET /api/v1/auth/kakao/callback, /api/v1/auth/google/callback

from fastapi import APIRouter, Depends, Request, Response

from ...core.jwt_util import JwtUtil, get_jwt_util
from ...core.response_status import BaseResponseStatus
from ...schemas.common import BaseResponse
from ...schemas.user_schema import LoginRequest, LoginResult, ReissueRequest, SignupRequest, UserPublic
from ...services.auth_service import AuthService, LoginTokens, get_auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _login_response(tokens: LoginTokens, response: Response, status: BaseResponseStatus) -> BaseResponse[LoginResult]:
    JwtUtil.add_jwt_to_cookie(tokens.access_token, response)
    result = LoginResult(user=UserPublic.from_user(tokens.user), refresh_token=tokens.refresh_token)
    return BaseResponse.of(status, result)


@router.post("/register", response_model=BaseResponse[UserPublic], summary="회원가입 (이메일 중복 체크 포함)")
async def register(payload: SignupRequest, service: AuthService = Depends(get_auth_service)):
    user = await service.register(payload.email, payload.password, payload.nickname)
    return BaseResponse.of(BaseResponseStatus.REGISTER_ACCOUNT_SUCCESS, UserPublic.from_user(user))


@router.post("/login", response_model=BaseResponse[LoginResult], summary="로그인 (JWT 쿠키 + 리프레시 토큰 발급)")
async def login(payload: LoginRequest, response: Response, service: AuthService = Depends(get_auth_service)):
    tokens = await service.login(payload.email, payload.password)
    return _login_response(tokens, response, BaseResponseStatus.LOGIN_SUCCESS)


@router.post("/logout", response_model=BaseResponse[None], summary="로그아웃 (JWT 쿠키 만료)")
async def logout(request: Request, response: Response, jwt_util: JwtUtil = Depends(get_jwt_util)):
    jwt_util.logout(request, response)
    return BaseResponse.of(BaseResponseStatus.LOGOUT_SUCCESS)


@router.post("/token/reissue", response_model=BaseResponse[LoginResult], summary="리프레시 토큰으로 JWT 재발급")
async def reissue(payload: ReissueRequest, response: Response, service: AuthService = Depends(get_auth_service)):
    tokens = await service.reissue(payload.refresh_token)
    return _login_response(tokens, response, BaseResponseStatus.TOKEN_REISSUE_SUCCESS)


@router.get("/kakao/callback", response_model=BaseResponse[LoginResult], summary="카카오 로그인 콜백")
async def kakao_callback(code: str, response: Response, service: AuthService = Depends(get_auth_service)):
    tokens = await service.kakao_login(code)
    return _login_response(tokens, response, BaseResponseStatus.KAKAO_LOGIN_SUCCESS)


@router.get("/google/callback", response_model=BaseResponse[LoginResult], summary="구글 로그인 콜백")
async def google_callback(code: str, response: Response, service: AuthService = Depends(get_auth_service)):
    tokens = await service.google_login(code)
    return _login_response(tokens, response, BaseResponseStatus.GOOGLE_LOGIN_SUCCESS)
