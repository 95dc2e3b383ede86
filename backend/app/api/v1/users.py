# 회원 라우터 (로그인 필요)
# - GET /api/v1/users/me : 내 정보
# - PATCH /api/v1/users/me : 닉네임 / 이메일 알림 수신 여부 수정
# - DELETE /api/v1/users/me : 회원탈퇴 (JWT 쿠키도 만료)

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from ...core.jwt_util import JwtUtil, get_jwt_util
from ...core.response_status import BaseResponseStatus
from ...core.security import get_current_user
from ...models.user import User
from ...schemas.common import BaseResponse
from ...schemas.user_schema import UserPublic, UserUpdateRequest, WithdrawRequest
from ...services.auth_service import AuthService, get_auth_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=BaseResponse[UserPublic], summary="내 정보 조회")
async def me(user: User = Depends(get_current_user)):
    return BaseResponse.of(BaseResponseStatus.SUCCESS, UserPublic.from_user(user))


@router.patch("/me", response_model=BaseResponse[UserPublic], summary="내 정보 수정")
async def update_me(
    payload: UserUpdateRequest,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    user = await service.update_profile(user, payload.nickname, payload.is_email_opt_in)
    return BaseResponse.of(BaseResponseStatus.SUCCESS, UserPublic.from_user(user))


@router.delete("/me", response_model=BaseResponse[None], summary="회원탈퇴")
async def withdraw(
    request: Request,
    response: Response,
    payload: Optional[WithdrawRequest] = None,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
    jwt_util: JwtUtil = Depends(get_jwt_util),
):
    # 소셜 전용 계정은 본문 없이 탈퇴 가능
    await service.withdraw(user, payload.password if payload else None)
    jwt_util.logout(request, response)
    return BaseResponse.of(BaseResponseStatus.DELETE_ACCOUNT_SUCCESS)
