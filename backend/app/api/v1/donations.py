# 후원 라우터 (비회원도 후원 가능)
# - POST /api/v1/donations/ready : 카카오페이 결제 준비
# - GET /api/v1/donations/approve : 카카오페이 승인 리다이렉트 (order_id, pg_token)
# - GET /api/v1/donations/cancel, /api/v1/donations/fail : 결제 취소 / 실패 리다이렉트

from fastapi import APIRouter, Depends

from ...core.response_status import BaseResponseStatus
from ...schemas.common import BaseResponse
from ...schemas.donation_schema import DonationApproveResponse, DonationReadyRequest, DonationReadyResponse
from ...services.donation_service import DonationService, get_donation_service

router = APIRouter(prefix="/donations", tags=["donations"])


@router.post("/ready", response_model=BaseResponse[DonationReadyResponse], summary="후원 결제 준비")
async def ready(payload: DonationReadyRequest, service: DonationService = Depends(get_donation_service)):
    result = await service.ready(payload)
    return BaseResponse.of(BaseResponseStatus.DONATION_READY_SUCCESS, result)


@router.get("/approve", response_model=BaseResponse[DonationApproveResponse], summary="후원 결제 승인")
async def approve(order_id: str, pg_token: str, service: DonationService = Depends(get_donation_service)):
    donation = await service.approve(order_id, pg_token)
    return BaseResponse.of(BaseResponseStatus.DONATION_APPROVE_SUCCESS, DonationApproveResponse.from_donation(donation))


@router.get("/cancel", response_model=BaseResponse[None], summary="후원 결제 취소")
async def cancel(order_id: str, service: DonationService = Depends(get_donation_service)):
    # 항상 DONATION_CANCEL 예외로 응답
    await service.cancel(order_id)


@router.get("/fail", response_model=BaseResponse[None], summary="후원 결제 실패")
async def fail(order_id: str, service: DonationService = Depends(get_donation_service)):
    await service.fail(order_id)
