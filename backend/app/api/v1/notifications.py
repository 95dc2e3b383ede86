# 알림 라우터 (로그인 필요)
# - GET /api/v1/notifications : 내 알림 목록
# - PATCH /api/v1/notifications/{id}/read : 읽음 처리
# - DELETE /api/v1/notifications/read : 읽은 알림 전체 삭제
# - DELETE /api/v1/notifications/{id} : 알림 삭제 (읽은 알림만)

from typing import List

from beanie import PydanticObjectId
from fastapi import APIRouter, Depends

from ...core.response_status import BaseResponseStatus
from ...core.security import get_current_user
from ...models.user import User
from ...schemas.common import BaseResponse
from ...schemas.notification_schema import NotificationResponse
from ...services.notification_service import NotificationService, get_notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=BaseResponse[List[NotificationResponse]], summary="내 알림 목록")
async def list_notifications(
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    notifications = await service.get_notifications(user)
    return BaseResponse.of(
        BaseResponseStatus.SUCCESS,
        [NotificationResponse.from_notification(n) for n in notifications],
    )


@router.patch("/{notification_id}/read", response_model=BaseResponse[NotificationResponse], summary="알림 읽음 처리")
async def read_notification(
    notification_id: PydanticObjectId,
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    notification = await service.read_notification(user, notification_id)
    return BaseResponse.of(BaseResponseStatus.SUCCESS, NotificationResponse.from_notification(notification))


# /{notification_id} 보다 먼저 등록해야 "read"가 id로 잡히지 않음
@router.delete("/read", response_model=BaseResponse[int], summary="읽은 알림 전체 삭제")
async def delete_read_notifications(
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    deleted = await service.delete_read_notifications(user)
    return BaseResponse.of(BaseResponseStatus.SUCCESS, deleted)


@router.delete("/{notification_id}", response_model=BaseResponse[None], summary="알림 삭제")
async def delete_notification(
    notification_id: PydanticObjectId,
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    await service.delete_notification(user, notification_id)
    return BaseResponse.of(BaseResponseStatus.SUCCESS)
