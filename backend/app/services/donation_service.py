# 후원 서비스 레이어
# - 카카오페이 결제 준비 → 승인 / 취소 / 실패
# - 승인 시 펀딩 금액 누적, 펀딩 주인에게 알림

import logging
import uuid
from datetime import datetime
from typing import List

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Depends
from fastapi.concurrency import run_in_threadpool

from ..core.exceptions import BaseResponseException, ExternalAPIError
from ..core.response_status import BaseResponseStatus
from ..models.donation import Donation, DonationStatus
from ..models.funding import Funding, FundingStatus
from ..models.notification import NotificationType
from ..repositories.donation_repository import DonationRepository
from ..repositories.funding_repository import FundingRepository
from ..repositories.user_repository import UserRepository
from ..schemas.donation_schema import DonationReadyRequest, DonationReadyResponse
from . import kakaopay_client
from .funding_service import funding_url
from .notification_service import NotificationService, get_notification_service

logger = logging.getLogger(__name__)


class DonationService:
    def __init__(self, donation_repo: DonationRepository, funding_repo: FundingRepository,
                 user_repo: UserRepository, notification_service: NotificationService):
        self.donation_repo = donation_repo
        self.funding_repo = funding_repo
        self.user_repo = user_repo
        self.notification_service = notification_service

    async def ready(self, request: DonationReadyRequest) -> DonationReadyResponse:
        funding = await self._get_funding(request.funding_id)
        if funding.status != FundingStatus.ACTIVE:
            raise BaseResponseException(BaseResponseStatus.DONATION_FAIL)

        order_id = uuid.uuid4().hex
        try:
            body = await run_in_threadpool(
                kakaopay_client.ready,
                order_id,
                str(funding.id),
                funding.item_name or funding.title,
                request.amount,
            )
        except ExternalAPIError as e:
            logger.error(f"카카오페이 결제 준비 실패 (funding={funding.id}): {e}")
            raise BaseResponseException(BaseResponseStatus.DONATION_FAIL) from e

        donation = Donation(
            funding=funding,
            sponsor_nickname=request.sponsor_nickname,
            sponsor_comment=request.sponsor_comment,
            amount=request.amount,
            order_id=order_id,
            tid=body.get("tid"),
        )
        await self.donation_repo.create(donation)
        logger.info(f"후원 결제 준비: order={order_id} tid={donation.tid}")
        return DonationReadyResponse(
            tid=body.get("tid", ""),
            next_redirect_pc_url=body.get("next_redirect_pc_url", ""),
            next_redirect_mobile_url=body.get("next_redirect_mobile_url"),
        )

    async def approve(self, order_id: str, pg_token: str) -> Donation:
        donation = await self.donation_repo.get_by_order_id(order_id)
        if donation is None or donation.status != DonationStatus.READY:
            raise BaseResponseException(BaseResponseStatus.DONATION_FAIL)
        funding = await self.funding_repo.get(donation.funding_id)
        if funding is None:
            raise BaseResponseException(BaseResponseStatus.FUNDING_NOT_FOUND)

        try:
            await run_in_threadpool(kakaopay_client.approve, donation.tid, order_id, str(funding.id), pg_token)
        except ExternalAPIError as e:
            logger.error(f"카카오페이 결제 승인 실패 (order={order_id}): {e}")
            # 다른 요청이 이미 승인했다면 READY 가 아니므로 바뀌지 않음
            await self.donation_repo.change_status(order_id, DonationStatus.READY, DonationStatus.FAILED)
            raise BaseResponseException(BaseResponseStatus.DONATION_FAIL) from e

        approved_at = datetime.utcnow()
        if not await self.donation_repo.change_status(
            order_id, DonationStatus.READY, DonationStatus.APPROVED, approved_at=approved_at
        ):
            logger.warning(f"이미 처리된 후원 승인 요청: order={order_id}")
            raise BaseResponseException(BaseResponseStatus.DONATION_FAIL)
        donation.status = DonationStatus.APPROVED
        donation.approved_at = approved_at

        before = funding.current_amount
        funding = await self.funding_repo.add_amount(funding, donation.amount)
        logger.info(f"후원 승인: order={order_id} funding={funding.id} amount={donation.amount}")

        await self._notify_owner(funding, donation, reached=before < funding.target_amount <= funding.current_amount)
        return donation

    async def cancel(self, order_id: str) -> None:
        await self._close(order_id, DonationStatus.CANCELED)
        raise BaseResponseException(BaseResponseStatus.DONATION_CANCEL)

    async def fail(self, order_id: str) -> None:
        await self._close(order_id, DonationStatus.FAILED)
        raise BaseResponseException(BaseResponseStatus.DONATION_FAIL)

    async def get_donations(self, funding_id: str) -> List[Donation]:
        funding = await self._get_funding(funding_id)
        return await self.donation_repo.find_approved_by_funding(funding)

    async def _close(self, order_id: str, status: DonationStatus) -> None:
        if await self.donation_repo.change_status(order_id, DonationStatus.READY, status):
            logger.info(f"후원 결제 종료: order={order_id} status={status.value}")

    async def _get_funding(self, funding_id: str) -> Funding:
        try:
            object_id = PydanticObjectId(funding_id)
        except (InvalidId, TypeError) as e:
            raise BaseResponseException(BaseResponseStatus.BAD_REQUEST) from e
        funding = await self.funding_repo.get(object_id)
        if funding is None:
            raise BaseResponseException(BaseResponseStatus.FUNDING_NOT_FOUND)
        return funding

    async def _notify_owner(self, funding: Funding, donation: Donation, reached: bool) -> None:
        owner = await self.user_repo.get_by_funding_id(funding.id)
        if owner is None:
            logger.warning(f"펀딩 주인을 찾을 수 없어 알림 생략: {funding.id}")
            return
        url = funding_url(funding)
        await self.notification_service.notify(
            owner,
            NotificationType.DONATION,
            f"{donation.sponsor_nickname}님이 '{funding.title}' 펀딩에 {donation.amount:,}원을 후원했어요.",
            url,
        )
        if reached:
            await self.notification_service.notify(
                owner,
                NotificationType.FUNDING_SUCCESS,
                f"'{funding.title}' 펀딩이 목표 금액 {funding.target_amount:,}원을 달성했어요!",
                url,
            )


def get_donation_service(
    donation_repo: DonationRepository = Depends(DonationRepository),
    funding_repo: FundingRepository = Depends(FundingRepository),
    user_repo: UserRepository = Depends(UserRepository),
    notification_service: NotificationService = Depends(get_notification_service),
) -> DonationService:
    return DonationService(donation_repo, funding_repo, user_repo, notification_service)
