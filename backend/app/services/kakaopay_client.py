# 카카오페이 단건 결제 클라이언트
# - ready: 결제 준비 (tid, 결제 페이지 URL 발급)
# - approve: 사용자가 결제 페이지에서 인증한 뒤 pg_token 으로 승인
# 문서: https://developers.kakaopay.com/docs/payment/online/single-payment

from typing import Any, Dict

from ..core.config import settings
from ..core.http_client import request_json

API_NAME = "kakaopay"


def _headers() -> Dict[str, str]:
    return {
        "Authorization": f"SECRET_KEY {settings.KAKAOPAY_SECRET_KEY}",
        "Content-Type": "application/json",
    }


def ready(partner_order_id: str, partner_user_id: str, item_name: str, amount: int) -> Dict[str, Any]:
    callback_base = f"{settings.BACKEND_URL}/api/v1/donations"
    payload = {
        "cid": settings.KAKAOPAY_CID,
        "partner_order_id": partner_order_id,
        "partner_user_id": partner_user_id,
        "item_name": item_name,
        "quantity": 1,
        "total_amount": amount,
        "tax_free_amount": 0,
        "approval_url": f"{callback_base}/approve?order_id={partner_order_id}",
        "cancel_url": f"{callback_base}/cancel?order_id={partner_order_id}",
        "fail_url": f"{callback_base}/fail?order_id={partner_order_id}",
    }
    return request_json(API_NAME, "POST", f"{settings.KAKAOPAY_API_BASE}/ready", json=payload, headers=_headers())


def approve(tid: str, partner_order_id: str, partner_user_id: str, pg_token: str) -> Dict[str, Any]:
    payload = {
        "cid": settings.KAKAOPAY_CID,
        "tid": tid,
        "partner_order_id": partner_order_id,
        "partner_user_id": partner_user_id,
        "pg_token": pg_token,
    }
    return request_json(API_NAME, "POST", f"{settings.KAKAOPAY_API_BASE}/approve", json=payload, headers=_headers())
