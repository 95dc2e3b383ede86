# 펀딩 라우터
# - POST /api/v1/fundings/link/preview : 아이템 링크 미리보기 (로그인 필요)
# - POST /api/v1/fundings : 펀딩 생성
# - GET /api/v1/fundings/me : 내 펀딩 목록
# - GET /api/v1/fundings/{id} : 펀딩 상세 (비회원 가능)
# - GET /api/v1/fundings/{id}/donations : 후원 목록 (비회원 가능)
# - PATCH /api/v1/fundings/{id}, PATCH /api/v1/fundings/{id}/finish, DELETE /api/v1/fundings/{id} : 주인만

from typing import List, Optional

from beanie import PydanticObjectId
from fastapi import APIRouter, Depends

from ...core.response_status import BaseResponseStatus
from ...core.security import get_current_user, get_optional_user
from ...models.user import User
from ...schemas.common import BaseResponse
from ...schemas.donation_schema import DonationResponse
from ...schemas.funding_schema import (
    FundingCreateRequest,
    FundingResponse,
    FundingUpdateRequest,
    ItemLinkRequest,
    ItemPreview,
)
from ...services.donation_service import DonationService, get_donation_service
from ...services.funding_service import FundingService, get_funding_service

router = APIRouter(prefix="/fundings", tags=["fundings"])


@router.post("/link/preview", response_model=BaseResponse[ItemPreview], summary="펀딩 아이템 링크 미리보기")
async def preview_link(
    payload: ItemLinkRequest,
    user: Optional[User] = Depends(get_optional_user),
    service: FundingService = Depends(get_funding_service),
):
    preview = await service.preview_item_link(user, str(payload.item_link))
    return BaseResponse.of(BaseResponseStatus.SUCCESS, preview)


@router.post("", response_model=BaseResponse[FundingResponse], summary="펀딩 생성")
async def create_funding(
    payload: FundingCreateRequest,
    user: User = Depends(get_current_user),
    service: FundingService = Depends(get_funding_service),
):
    funding = await service.create_funding(user, payload)
    return BaseResponse.of(BaseResponseStatus.FUNDING_ITEM_LINK_SUCCESS, FundingResponse.from_funding(funding))


@router.get("/me", response_model=BaseResponse[List[FundingResponse]], summary="내 펀딩 목록")
async def my_fundings(
    user: User = Depends(get_current_user),
    service: FundingService = Depends(get_funding_service),
):
    fundings = await service.get_my_fundings(user)
    return BaseResponse.of(BaseResponseStatus.SUCCESS, [FundingResponse.from_funding(f) for f in fundings])


@router.get("/{funding_id}", response_model=BaseResponse[FundingResponse], summary="펀딩 상세")
async def get_funding(funding_id: PydanticObjectId, service: FundingService = Depends(get_funding_service)):
    funding = await service.get_funding(funding_id)
    return BaseResponse.of(BaseResponseStatus.SUCCESS, FundingResponse.from_funding(funding))


@router.get("/{funding_id}/donations", response_model=BaseResponse[List[DonationResponse]], summary="펀딩 후원 목록")
async def funding_donations(funding_id: PydanticObjectId, service: DonationService = Depends(get_donation_service)):
    donations = await service.get_donations(str(funding_id))
    return BaseResponse.of(BaseResponseStatus.SUCCESS, [DonationResponse.from_donation(d) for d in donations])


@router.patch("/{funding_id}", response_model=BaseResponse[FundingResponse], summary="펀딩 수정")
async def update_funding(
    funding_id: PydanticObjectId,
    payload: FundingUpdateRequest,
    user: User = Depends(get_current_user),
    service: FundingService = Depends(get_funding_service),
):
    funding = await service.update_funding(user, funding_id, payload)
    return BaseResponse.of(BaseResponseStatus.SUCCESS, FundingResponse.from_funding(funding))


@router.patch("/{funding_id}/finish", response_model=BaseResponse[FundingResponse], summary="펀딩 종료")
async def finish_funding(
    funding_id: PydanticObjectId,
    user: User = Depends(get_current_user),
    service: FundingService = Depends(get_funding_service),
):
    funding = await service.finish_funding(user, funding_id)
    return BaseResponse.of(BaseResponseStatus.SUCCESS, FundingResponse.from_funding(funding))


@router.delete("/{funding_id}", response_model=BaseResponse[None], summary="펀딩 삭제")
async def delete_funding(
    funding_id: PydanticObjectId,
    user: User = Depends(get_current_user),
    service: FundingService = Depends(get_funding_service),
):
    await service.delete_funding(user, funding_id)
    return BaseResponse.of(BaseResponseStatus.SUCCESS)
