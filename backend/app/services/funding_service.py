# 펀딩 서비스 레이어
# - 펀딩 아이템 링크 미리보기
# - 펀딩 생성/조회/수정/종료/삭제 (소유자 확인)
# - 기간이 지난 펀딩 일괄 종료 (Celery 주기 작업에서 호출)

import logging
from datetime import datetime, timezone
from typing import List, Optional

from beanie import PydanticObjectId
from fastapi import Depends
from fastapi.concurrency import run_in_threadpool

from ..core.config import settings
from ..core.exceptions import BaseResponseException, ExternalAPIError
from ..core.response_status import BaseResponseStatus
from ..models.funding import Funding, FundingStatus
from ..models.notification import NotificationType
from ..models.user import User
from ..repositories.funding_repository import FundingRepository
from ..repositories.notification_repository import NotificationRepository
from ..repositories.user_repository import UserRepository
from ..schemas.funding_schema import FundingCreateRequest, FundingUpdateRequest, ItemPreview
from . import link_preview
from .notification_service import NotificationService, get_notification_service

logger = logging.getLogger(__name__)


def _to_utc_naive(value: datetime) -> datetime:
    # DB 에는 UTC naive datetime 으로 저장합니다
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def funding_url(funding: Funding) -> str:
    return f"{settings.FRONTEND_URL}/fundings/{funding.id}"


class FundingService:
    def __init__(self, funding_repo: FundingRepository, user_repo: UserRepository,
                 notification_service: NotificationService):
        self.funding_repo = funding_repo
        self.user_repo = user_repo
        self.notification_service = notification_service

    async def preview_item_link(self, user: Optional[User], item_link: str) -> ItemPreview:
        if user is None:
            raise BaseResponseException(BaseResponseStatus.UNAUTHORIZED_TO_ADD_LINK)
        try:
            preview = await run_in_threadpool(link_preview.fetch_preview, item_link)
        except ExternalAPIError as e:
            logger.warning(f"아이템 미리보기 실패 ({item_link}): {e}")
            raise BaseResponseException(BaseResponseStatus.FUNDING_ITEM_PREVIEW_FAILED) from e
        return ItemPreview(item_link=item_link, **preview)

    async def create_funding(self, user: User, request: FundingCreateRequest) -> Funding:
        item_link = str(request.item_link)
        end_date = _to_utc_naive(request.end_date)
        if end_date <= datetime.utcnow():
            raise BaseResponseException(BaseResponseStatus.BAD_REQUEST)
        if await self.funding_repo.exists_active_item_link(user, item_link):
            raise BaseResponseException(BaseResponseStatus.FUNDING_ITEM_ALREADY_EXISTS)

        preview = await self.preview_item_link(user, item_link)
        funding = Funding(
            user=user,
            item_link=item_link,
            item_name=preview.item_name,
            item_image=preview.item_image,
            title=request.title,
            content=request.content,
            show_name=request.show_name,
            target_amount=request.target_amount,
            end_date=end_date,
        )
        try:
            funding = await self.funding_repo.create(funding)
        except Exception as e:
            logger.error(f"펀딩 저장 실패 ({user.email}): {e}", exc_info=True)
            raise BaseResponseException(BaseResponseStatus.FUNDING_ITEM_SAVE_FAILED) from e
        logger.info(f"펀딩 생성: {funding.id} ({user.email})")
        return funding

    async def get_funding(self, funding_id: PydanticObjectId) -> Funding:
        funding = await self.funding_repo.get(funding_id)
        if funding is None:
            raise BaseResponseException(BaseResponseStatus.FUNDING_NOT_FOUND)
        return funding

    async def get_my_fundings(self, user: User) -> List[Funding]:
        return await self.funding_repo.find_by_user(user)

    async def update_funding(self, user: User, funding_id: PydanticObjectId,
                             request: FundingUpdateRequest) -> Funding:
        funding = await self._get_owned(user, funding_id, BaseResponseStatus.UNAUTHORIZED_UPDATE_FUNDING)
        if funding.status != FundingStatus.ACTIVE:
            raise BaseResponseException(BaseResponseStatus.BAD_REQUEST)

        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "end_date" in changes:
            changes["end_date"] = _to_utc_naive(changes["end_date"])
            if changes["end_date"] <= datetime.utcnow():
                raise BaseResponseException(BaseResponseStatus.BAD_REQUEST)
        for key, value in changes.items():
            setattr(funding, key, value)
        return await self.funding_repo.save(funding)

    async def finish_funding(self, user: User, funding_id: PydanticObjectId) -> Funding:
        funding = await self._get_owned(user, funding_id, BaseResponseStatus.UNAUTHORIZED_UPDATE_FUNDING)
        funding.status = FundingStatus.FINISHED
        return await self.funding_repo.save(funding)

    async def delete_funding(self, user: User, funding_id: PydanticObjectId) -> None:
        funding = await self._get_owned(user, funding_id, BaseResponseStatus.UNAUTHORIZED_DELETE_FUNDING)
        # 후원이 들어온 펀딩은 삭제 불가
        if await self.funding_repo.has_approved_donations(funding):
            raise BaseResponseException(BaseResponseStatus.FUNDING_NOT_DELETED)
        await self.funding_repo.delete(funding)
        logger.info(f"펀딩 삭제: {funding_id} ({user.email})")

    async def finish_expired_fundings(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        expired = await self.funding_repo.find_expired_active(now)
        for funding in expired:
            funding.status = FundingStatus.FINISHED
            await self.funding_repo.save(funding)
            owner = funding.user
            if isinstance(owner, User):
                await self.notification_service.notify(
                    owner,
                    NotificationType.FUNDING_TIME_OUT,
                    f"'{funding.title}' 펀딩 기간이 종료되었습니다. 달성률 {funding.achievement_rate}%",
                    funding_url(funding),
                )
        logger.info(f"기간 만료 펀딩 종료 처리: {len(expired)}건")
        return len(expired)

    async def _get_owned(self, user: User, funding_id: PydanticObjectId,
                         forbidden: BaseResponseStatus) -> Funding:
        owner = await self.user_repo.get_by_funding_id(funding_id)
        if owner is None:
            raise BaseResponseException(BaseResponseStatus.FUNDING_NOT_FOUND)
        if owner.id != user.id:
            raise BaseResponseException(forbidden)
        return await self.get_funding(funding_id)


def build_funding_service() -> FundingService:
    return FundingService(FundingRepository(), UserRepository(), NotificationService(NotificationRepository()))


def get_funding_service(
    funding_repo: FundingRepository = Depends(FundingRepository),
    user_repo: UserRepository = Depends(UserRepository),
    notification_service: NotificationService = Depends(get_notification_service),
) -> FundingService:
    return FundingService(funding_repo, user_repo, notification_service)
