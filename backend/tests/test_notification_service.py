# NotificationService 테스트
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from beanie import PydanticObjectId

from app.core.exceptions import BaseResponseException
from app.core.response_status import BaseResponseStatus
from app.models.notification import Notification, NotificationType
from app.models.user import User
from app.services.notification_service import EMAIL_SUBJECTS, NotificationService


def _user(email="alice@example.com", **kwargs):
    return User(id=PydanticObjectId(), email=email, nickname="alice", **kwargs)


def _notification(receiver, **kwargs):
    return Notification(
        id=PydanticObjectId(),
        receiver=receiver,
        notification_type=NotificationType.DONATION,
        content="bob님이 후원했어요.",
        **kwargs,
    )


def _service():
    repo = AsyncMock()
    repo.create.side_effect = lambda n: n
    repo.save.side_effect = lambda n: n
    return NotificationService(repo), repo


def _status(coro):
    with pytest.raises(BaseResponseException) as exc_info:
        asyncio.run(coro)
    return exc_info.value.status


@patch("app.tasks.notification_tasks.send_email_task")
def test_notify_without_email_opt_in(mock_task):
    service, repo = _service()
    notification = asyncio.run(service.notify(_user(), NotificationType.DONATION, "후원 도착", "/fundings/1"))
    assert notification.url == "/fundings/1"
    assert not notification.is_read
    repo.create.assert_awaited_once()
    mock_task.delay.assert_not_called()


@patch("app.tasks.notification_tasks.send_email_task")
def test_notify_queues_email_when_opted_in(mock_task):
    service, _ = _service()
    user = _user(is_email_opt_in=True)
    asyncio.run(service.notify(user, NotificationType.FUNDING_SUCCESS, "목표 달성"))
    mock_task.delay.assert_called_once_with(
        "alice@example.com", EMAIL_SUBJECTS[NotificationType.FUNDING_SUCCESS], "목표 달성"
    )


@patch("app.tasks.notification_tasks.send_email_task")
def test_notify_keeps_notification_when_broker_down(mock_task):
    mock_task.delay.side_effect = ConnectionError("redis down")
    service, repo = _service()
    notification = asyncio.run(service.notify(_user(is_email_opt_in=True), NotificationType.DONATION, "x"))
    assert notification.content == "x"
    repo.create.assert_awaited_once()


def test_read_notification():
    service, repo = _service()
    user = _user()
    notification = _notification(user)
    repo.get.return_value = notification

    assert asyncio.run(service.read_notification(user, notification.id)).is_read
    repo.save.assert_awaited_once()

    # 이미 읽은 알림은 다시 저장하지 않음
    asyncio.run(service.read_notification(user, notification.id))
    repo.save.assert_awaited_once()


def test_read_notification_errors():
    service, repo = _service()
    repo.get.return_value = None
    assert _status(service.read_notification(_user(), PydanticObjectId())) == BaseResponseStatus.NOTIFICATION_NOT_FOUND

    repo.get.return_value = _notification(_user("owner@example.com"))
    status = _status(service.read_notification(_user(), PydanticObjectId()))
    assert status == BaseResponseStatus.UNAUTHORIZED_READ_NOTIFICATION

    user = _user()
    repo.get.return_value = _notification(user)
    repo.save.side_effect = RuntimeError("db down")
    assert _status(service.read_notification(user, PydanticObjectId())) == BaseResponseStatus.NOTIFICATION_NOT_READ


def test_delete_notification():
    service, repo = _service()
    user = _user()

    repo.get.return_value = _notification(user)
    assert _status(service.delete_notification(user, PydanticObjectId())) == BaseResponseStatus.NOTIFICATION_NOT_DELETED
    repo.delete.assert_not_awaited()

    read = _notification(user, is_read=True)
    repo.get.return_value = read
    asyncio.run(service.delete_notification(user, read.id))
    repo.delete.assert_awaited_once_with(read)

    repo.get.return_value = _notification(_user("owner@example.com"), is_read=True)
    status = _status(service.delete_notification(user, PydanticObjectId()))
    assert status == BaseResponseStatus.UNAUTHORIZED_DELETE_NOTIFICATION


def test_delete_read_notifications():
    service, repo = _service()
    repo.delete_read_by_receiver.return_value = 3
    assert asyncio.run(service.delete_read_notifications(_user())) == 3


def test_is_received_by_with_unfetched_link():
    user = _user()
    link = MagicMock()
    link.ref.id = user.id
    notification = Notification.model_construct(receiver=link)
    assert notification.is_received_by(user)
    assert not notification.is_received_by(_user("other@example.com"))
