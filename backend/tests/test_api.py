# API 통합 테스트 (TestClient + mongomock)
# - 쿠키는 Secure 속성이므로 https base_url 로 요청합니다.
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from beanie import PydanticObjectId
from fastapi.testclient import TestClient

from app.core.exceptions import BaseResponseException
from app.core.response_status import BaseResponseStatus
from app.core.security import get_current_user
from app.main import app
from app.models.funding import Funding
from app.models.user import User
from app.services.auth_service import get_auth_service
from app.services.donation_service import get_donation_service
from app.services.funding_service import get_funding_service

SIGNUP = {"email": "alice@example.com", "password": "password123", "nickname": "alice"}


@pytest.fixture
def client():
    yield TestClient(app, base_url="https://testserver")
    app.dependency_overrides.clear()


def _assert_error(resp, status):
    assert resp.status_code == status.http_status
    assert resp.json() == {"isSuccess": False, "code": status.code, "message": status.message, "result": None}


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_protected_endpoint_without_token(client):
    _assert_error(client.get("/api/v1/users/me"), BaseResponseStatus.NOT_FOUND_TOKEN)


def test_invalid_token(client):
    resp = client.get("/api/v1/notifications", headers={"Authorization": "Bearer not.a.jwt"})
    _assert_error(resp, BaseResponseStatus.INVALID_TOKEN)


def test_validation_error_uses_common_body(client):
    resp = client.post("/api/v1/auth/register", json={"email": "not-an-email", "password": "x", "nickname": ""})
    _assert_error(resp, BaseResponseStatus.BAD_REQUEST)


def test_register_login_me_logout(client):
    resp = client.post("/api/v1/auth/register", json=SIGNUP)
    assert resp.status_code == 200
    body = resp.json()
    assert body["isSuccess"] is True
    assert body["message"] == BaseResponseStatus.REGISTER_ACCOUNT_SUCCESS.message
    assert body["result"]["email"] == "alice@example.com"
    assert "password" not in body["result"]

    _assert_error(client.post("/api/v1/auth/register", json=SIGNUP), BaseResponseStatus.EMAIL_ALREADY_EXISTS)

    resp = client.post("/api/v1/auth/login", json={"email": SIGNUP["email"], "password": SIGNUP["password"]})
    assert resp.status_code == 200
    assert resp.json()["result"]["refresh_token"]
    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith("Authorization=Bearer%20")
    assert "HttpOnly" in set_cookie

    me = client.get("/api/v1/users/me")
    assert me.status_code == 200
    assert me.json()["result"]["nickname"] == "alice"

    resp = client.post("/api/v1/auth/logout")
    assert resp.json()["message"] == BaseResponseStatus.LOGOUT_SUCCESS.message
    assert "Max-Age=0" in resp.headers["set-cookie"]
    _assert_error(client.get("/api/v1/users/me"), BaseResponseStatus.NOT_FOUND_TOKEN)


def test_login_wrong_password(client):
    client.post("/api/v1/auth/register", json=SIGNUP)
    resp = client.post("/api/v1/auth/login", json={"email": SIGNUP["email"], "password": "wrong-password"})
    _assert_error(resp, BaseResponseStatus.PASSWORD_MISMATCH)


def test_reissue_with_refresh_token(client):
    client.post("/api/v1/auth/register", json=SIGNUP)
    login = client.post("/api/v1/auth/login", json={"email": SIGNUP["email"], "password": SIGNUP["password"]})
    refresh = login.json()["result"]["refresh_token"]

    resp = client.post("/api/v1/auth/token/reissue", json={"refresh_token": refresh})
    assert resp.status_code == 200
    assert resp.json()["result"]["refresh_token"] != refresh

    # 이전 리프레시 토큰은 더 이상 사용할 수 없음
    _assert_error(
        client.post("/api/v1/auth/token/reissue", json={"refresh_token": refresh}),
        BaseResponseStatus.INVALID_TOKEN,
    )


def test_get_funding(client):
    owner = User(id=PydanticObjectId(), email="owner@example.com", nickname="owner")
    funding = Funding(
        id=PydanticObjectId(),
        user=owner,
        item_link="https://shop.example.com/item/1",
        title="생일 선물",
        show_name="앨리스",
        target_amount=100000,
        current_amount=25000,
        end_date=datetime.utcnow() + timedelta(days=3),
    )
    service = AsyncMock()
    service.get_funding.return_value = funding
    app.dependency_overrides[get_funding_service] = lambda: service

    resp = client.get(f"/api/v1/fundings/{funding.id}")
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["id"] == str(funding.id)
    assert result["achievement_rate"] == 25


def test_funding_not_found(client):
    service = AsyncMock()
    service.get_funding.side_effect = BaseResponseException(BaseResponseStatus.FUNDING_NOT_FOUND)
    app.dependency_overrides[get_funding_service] = lambda: service
    _assert_error(client.get(f"/api/v1/fundings/{PydanticObjectId()}"), BaseResponseStatus.FUNDING_NOT_FOUND)


def test_delete_funding_forbidden(client):
    service = AsyncMock()
    service.delete_funding.side_effect = BaseResponseException(BaseResponseStatus.UNAUTHORIZED_DELETE_FUNDING)
    app.dependency_overrides[get_funding_service] = lambda: service
    app.dependency_overrides[get_current_user] = lambda: User(email="other@example.com", nickname="other")

    resp = client.delete(f"/api/v1/fundings/{PydanticObjectId()}")
    _assert_error(resp, BaseResponseStatus.UNAUTHORIZED_DELETE_FUNDING)
    assert resp.status_code == 403


def test_donation_cancel_redirect(client):
    service = AsyncMock()
    service.cancel.side_effect = BaseResponseException(BaseResponseStatus.DONATION_CANCEL)
    app.dependency_overrides[get_donation_service] = lambda: service

    _assert_error(client.get("/api/v1/donations/cancel", params={"order_id": "o-1"}), BaseResponseStatus.DONATION_CANCEL)
    service.cancel.assert_awaited_once_with("o-1")


def test_unexpected_error_is_wrapped():
    service = AsyncMock()
    service.get_funding.side_effect = RuntimeError("boom")
    app.dependency_overrides[get_funding_service] = lambda: service
    try:
        client = TestClient(app, base_url="https://testserver", raise_server_exceptions=False)
        _assert_error(client.get(f"/api/v1/fundings/{PydanticObjectId()}"), BaseResponseStatus.UNEXPECTED_ERROR)
    finally:
        app.dependency_overrides.clear()


def test_withdraw_social_account_without_body(client):
    user = User(email="kakao_1@giftipie.me", nickname="k", kakao_id=1)
    service = AsyncMock()
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_auth_service] = lambda: service

    resp = client.delete("/api/v1/users/me")
    assert resp.status_code == 200
    assert resp.json()["message"] == BaseResponseStatus.DELETE_ACCOUNT_SUCCESS.message
    service.withdraw.assert_awaited_once_with(user, None)

    client.request("DELETE", "/api/v1/users/me", json={"password": "pw"})
    service.withdraw.assert_awaited_with(user, "pw")
