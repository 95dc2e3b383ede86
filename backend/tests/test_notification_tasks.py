# Celery 작업 테스트 (브로커 없이 직접 호출)
import smtplib
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.tasks.notification_tasks import celery_app, finish_expired_fundings_task, send_email_task


@patch("app.tasks.notification_tasks.send_email")
def test_send_email_task(mock_send):
    send_email_task("alice@example.com", "[Giftipie] 제목", "본문")
    mock_send.assert_called_once_with("alice@example.com", "[Giftipie] 제목", "본문")


@patch("app.tasks.notification_tasks.send_email", side_effect=smtplib.SMTPServerDisconnected("closed"))
def test_send_email_task_failure_is_raised(mock_send):
    # 워커 밖에서 직접 호출하면 retry 대신 원래 예외가 올라옵니다
    with pytest.raises(smtplib.SMTPException):
        send_email_task("alice@example.com", "제목", "본문")


@patch("app.tasks.notification_tasks.build_funding_service")
@patch("app.tasks.notification_tasks.init_db", new_callable=AsyncMock)
def test_finish_expired_fundings_task(mock_init_db, mock_build):
    service = MagicMock()
    service.finish_expired_fundings = AsyncMock(return_value=2)
    mock_build.return_value = service

    assert finish_expired_fundings_task() == 2
    mock_init_db.assert_awaited_once()
    service.finish_expired_fundings.assert_awaited_once()


def test_celery_timezone():
    assert celery_app.conf.timezone == "Asia/Seoul"
