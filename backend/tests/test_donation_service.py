# DonationService 테스트 - 카카오페이 호출과 저장소는 모킹
import asyncio
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest
from beanie import PydanticObjectId

from app.core.exceptions import BaseResponseException, ExternalAPIError
from app.core.response_status import BaseResponseStatus
from app.models.donation import Donation, DonationStatus
from app.models.funding import Funding, FundingStatus
from app.models.notification import NotificationType
from app.models.user import User
from app.schemas.donation_schema import DonationApproveResponse, DonationReadyRequest
from app.services.donation_service import DonationService

READY_BODY = {
    "tid": "T1234567890",
    "next_redirect_pc_url": "https://online-pay.kakao.com/mockup/v1/abc/info",
    "next_redirect_mobile_url": "https://online-pay.kakao.com/mockup/v1/abc/mInfo",
}


def _owner():
    return User(id=PydanticObjectId(), email="owner@example.com", nickname="owner")


def _funding(owner, **kwargs):
    values = dict(
        id=PydanticObjectId(),
        user=owner,
        item_link="https://shop.example.com/item/1",
        item_name="무선 이어폰",
        title="생일 선물",
        show_name="앨리스",
        target_amount=100000,
        end_date=datetime.utcnow() + timedelta(days=7),
    )
    values.update(kwargs)
    return Funding(**values)


def _donation(funding, **kwargs):
    values = dict(funding=funding, sponsor_nickname="bob", amount=30000, order_id="order-1", tid="T1")
    values.update(kwargs)
    return Donation(**values)


def _add_amount(funding, amount):
    funding.current_amount += amount
    return funding


def _service():
    donation_repo = AsyncMock()
    donation_repo.create.side_effect = lambda d: d
    donation_repo.change_status.return_value = True
    funding_repo = AsyncMock()
    funding_repo.add_amount.side_effect = _add_amount
    user_repo = AsyncMock()
    notification_service = AsyncMock()
    service = DonationService(donation_repo, funding_repo, user_repo, notification_service)
    return service, donation_repo, funding_repo, user_repo, notification_service


def _status(coro):
    with pytest.raises(BaseResponseException) as exc_info:
        asyncio.run(coro)
    return exc_info.value.status


@patch("app.services.kakaopay_client.ready", return_value=READY_BODY)
def test_ready_creates_pending_donation(mock_ready):
    service, donation_repo, funding_repo, *_ = _service()
    funding = _funding(_owner())
    funding_repo.get.return_value = funding

    request = DonationReadyRequest(funding_id=str(funding.id), amount=30000, sponsor_nickname="bob")
    result = asyncio.run(service.ready(request))
    assert result.tid == "T1234567890"
    assert result.next_redirect_pc_url == READY_BODY["next_redirect_pc_url"]

    donation = donation_repo.create.await_args.args[0]
    assert donation.status == DonationStatus.READY
    assert donation.tid == "T1234567890"
    order_id, partner_user_id, item_name, amount = mock_ready.call_args.args
    assert donation.order_id == order_id
    assert partner_user_id == str(funding.id)
    assert item_name == "무선 이어폰"
    assert amount == 30000


def test_ready_invalid_funding():
    service, _, funding_repo, *_ = _service()
    request = DonationReadyRequest(funding_id="not-an-object-id", amount=1000, sponsor_nickname="bob")
    assert _status(service.ready(request)) == BaseResponseStatus.BAD_REQUEST

    funding_repo.get.return_value = None
    request = DonationReadyRequest(funding_id=str(PydanticObjectId()), amount=1000, sponsor_nickname="bob")
    assert _status(service.ready(request)) == BaseResponseStatus.FUNDING_NOT_FOUND


def test_ready_finished_funding():
    service, _, funding_repo, *_ = _service()
    funding = _funding(_owner(), status=FundingStatus.FINISHED)
    funding_repo.get.return_value = funding
    request = DonationReadyRequest(funding_id=str(funding.id), amount=1000, sponsor_nickname="bob")
    assert _status(service.ready(request)) == BaseResponseStatus.DONATION_FAIL


@patch("app.services.kakaopay_client.ready", side_effect=ExternalAPIError("kakaopay", "bad", 400))
def test_ready_kakaopay_failure(mock_ready):
    service, donation_repo, funding_repo, *_ = _service()
    funding = _funding(_owner())
    funding_repo.get.return_value = funding
    request = DonationReadyRequest(funding_id=str(funding.id), amount=1000, sponsor_nickname="bob")
    assert _status(service.ready(request)) == BaseResponseStatus.DONATION_FAIL
    donation_repo.create.assert_not_awaited()


@patch("app.services.kakaopay_client.approve", return_value={"aid": "A1"})
def test_approve_accumulates_amount_and_notifies(mock_approve):
    service, donation_repo, funding_repo, user_repo, notification_service = _service()
    owner = _owner()
    funding = _funding(owner, current_amount=10000)
    donation = _donation(funding)
    donation_repo.get_by_order_id.return_value = donation
    funding_repo.get.return_value = funding
    user_repo.get_by_funding_id.return_value = owner

    result = asyncio.run(service.approve("order-1", "pg-token"))
    assert result.status == DonationStatus.APPROVED
    assert result.approved_at is not None
    assert funding.current_amount == 40000
    mock_approve.assert_called_once_with("T1", "order-1", str(funding.id), "pg-token")
    funding_repo.get.assert_awaited_once_with(funding.id)
    assert donation_repo.change_status.await_args.args == ("order-1", DonationStatus.READY, DonationStatus.APPROVED)
    assert donation_repo.change_status.await_args.kwargs["approved_at"] == result.approved_at

    notification_service.notify.assert_awaited_once()
    assert notification_service.notify.await_args.args[1] == NotificationType.DONATION
    assert DonationApproveResponse.from_donation(result).funding_id == str(funding.id)


@patch("app.services.kakaopay_client.approve", return_value={"aid": "A1"})
def test_approve_reaching_target_sends_success_notification(mock_approve):
    service, donation_repo, funding_repo, user_repo, notification_service = _service()
    owner = _owner()
    funding = _funding(owner, current_amount=80000)
    funding_repo.get.return_value = funding
    donation_repo.get_by_order_id.return_value = _donation(funding, amount=20000)
    user_repo.get_by_funding_id.return_value = owner

    asyncio.run(service.approve("order-1", "pg-token"))
    types = [c.args[1] for c in notification_service.notify.await_args_list]
    assert types == [NotificationType.DONATION, NotificationType.FUNDING_SUCCESS]


def test_approve_rejects_non_pending_donation():
    service, donation_repo, funding_repo, *_ = _service()
    donation_repo.get_by_order_id.return_value = None
    assert _status(service.approve("missing", "pg")) == BaseResponseStatus.DONATION_FAIL

    done = _donation(_funding(_owner()), status=DonationStatus.APPROVED)
    donation_repo.get_by_order_id.return_value = done
    assert _status(service.approve("order-1", "pg")) == BaseResponseStatus.DONATION_FAIL
    funding_repo.add_amount.assert_not_awaited()


@patch("app.services.kakaopay_client.approve", return_value={"aid": "A1"})
def test_approve_already_handled_by_other_request(mock_approve):
    service, donation_repo, funding_repo, _, notification_service = _service()
    funding = _funding(_owner())
    funding_repo.get.return_value = funding
    donation_repo.get_by_order_id.return_value = _donation(funding)
    # 조회 이후 다른 요청이 먼저 상태를 바꾼 경우
    donation_repo.change_status.return_value = False

    assert _status(service.approve("order-1", "pg")) == BaseResponseStatus.DONATION_FAIL
    funding_repo.add_amount.assert_not_awaited()
    notification_service.notify.assert_not_awaited()


@patch("app.services.kakaopay_client.approve", side_effect=ExternalAPIError("kakaopay", "declined", 400))
def test_approve_kakaopay_failure_marks_failed(mock_approve):
    service, donation_repo, funding_repo, *_ = _service()
    funding = _funding(_owner())
    funding_repo.get.return_value = funding
    donation_repo.get_by_order_id.return_value = _donation(funding)

    assert _status(service.approve("order-1", "pg")) == BaseResponseStatus.DONATION_FAIL
    donation_repo.change_status.assert_awaited_once_with("order-1", DonationStatus.READY, DonationStatus.FAILED)
    funding_repo.add_amount.assert_not_awaited()


def test_cancel_and_fail():
    service, donation_repo, *_ = _service()
    assert _status(service.cancel("order-1")) == BaseResponseStatus.DONATION_CANCEL
    donation_repo.change_status.assert_awaited_with("order-1", DonationStatus.READY, DonationStatus.CANCELED)

    assert _status(service.fail("order-2")) == BaseResponseStatus.DONATION_FAIL
    donation_repo.change_status.assert_awaited_with("order-2", DonationStatus.READY, DonationStatus.FAILED)

    # 이미 처리된 주문이어도 리다이렉트 응답은 같음
    donation_repo.change_status.return_value = False
    assert _status(service.cancel("order-1")) == BaseResponseStatus.DONATION_CANCEL


def test_get_donations():
    service, donation_repo, funding_repo, *_ = _service()
    funding = _funding(_owner())
    funding_repo.get.return_value = funding
    approved = [_donation(funding, status=DonationStatus.APPROVED)]
    donation_repo.find_approved_by_funding.return_value = approved

    assert asyncio.run(service.get_donations(str(funding.id))) == approved
    donation_repo.find_approved_by_funding.assert_awaited_once_with(funding)
