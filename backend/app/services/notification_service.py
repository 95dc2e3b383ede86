# 알림 서비스 레이어
# - 알림 생성 (이메일 수신 동의 시 Celery로 메일 발송 예약)
# - 내 알림 목록, 읽음 처리, 삭제

import logging
import smtplib
from email.mime.text import MIMEText
from typing import List

from beanie import PydanticObjectId
from fastapi import Depends

from ..core.config import settings
from ..core.exceptions import BaseResponseException
from ..core.response_status import BaseResponseStatus
from ..models.notification import Notification, NotificationType
from ..models.user import User
from ..repositories.notification_repository import NotificationRepository

logger = logging.getLogger(__name__)

EMAIL_SUBJECTS = {
    NotificationType.DONATION: "[Giftipie] 새로운 후원이 도착했어요",
    NotificationType.FUNDING_SUCCESS: "[Giftipie] 펀딩 목표 금액을 달성했어요",
    NotificationType.FUNDING_TIME_OUT: "[Giftipie] 펀딩 기간이 종료되었어요",
}


def send_email(to_email: str, subject: str, body: str) -> None:
    # 간단한 SMTP 발송 (Gmail 등)
    msg = MIMEText(body, "plain", "utf-8")
    msg["Subject"] = subject
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to_email

    server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT)
    try:
        if settings.SMTP_TLS:
            server.starttls()
        if settings.SMTP_USER and settings.SMTP_PASSWORD:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        server.sendmail(settings.SMTP_FROM, [to_email], msg.as_string())
    finally:
        server.quit()


class NotificationService:
    def __init__(self, repo: NotificationRepository):
        self.repo = repo

    async def notify(self, receiver: User, notification_type: NotificationType,
                     content: str, url: str = "") -> Notification:
        notification = Notification(
            receiver=receiver,
            notification_type=notification_type,
            content=content,
            url=url,
        )
        notification = await self.repo.create(notification)
        logger.info(f"알림 생성: {receiver.email} / {notification_type.value}")

        if receiver.is_email_opt_in:
            self._queue_email(receiver.email, EMAIL_SUBJECTS[notification_type], content)
        return notification

    async def get_notifications(self, user: User) -> List[Notification]:
        return await self.repo.find_by_receiver(user)

    async def read_notification(self, user: User, notification_id: PydanticObjectId) -> Notification:
        notification = await self._get_owned(
            user, notification_id, BaseResponseStatus.UNAUTHORIZED_READ_NOTIFICATION
        )
        if not notification.is_read:
            notification.is_read = True
            try:
                await self.repo.save(notification)
            except Exception as e:
                logger.error(f"알림 읽음 처리 실패 ({notification_id}): {e}", exc_info=True)
                raise BaseResponseException(BaseResponseStatus.NOTIFICATION_NOT_READ) from e
        return notification

    async def delete_notification(self, user: User, notification_id: PydanticObjectId) -> None:
        notification = await self._get_owned(
            user, notification_id, BaseResponseStatus.UNAUTHORIZED_DELETE_NOTIFICATION
        )
        # 읽지 않은 알림은 삭제할 수 없습니다
        if not notification.is_read:
            raise BaseResponseException(BaseResponseStatus.NOTIFICATION_NOT_DELETED)
        await self.repo.delete(notification)

    async def delete_read_notifications(self, user: User) -> int:
        return await self.repo.delete_read_by_receiver(user)

    async def _get_owned(self, user: User, notification_id: PydanticObjectId,
                         forbidden: BaseResponseStatus) -> Notification:
        notification = await self.repo.get(notification_id)
        if notification is None:
            raise BaseResponseException(BaseResponseStatus.NOTIFICATION_NOT_FOUND)
        if not notification.is_received_by(user):
            raise BaseResponseException(forbidden)
        return notification

    def _queue_email(self, to_email: str, subject: str, body: str) -> None:
        # tasks 모듈이 이 모듈을 import 하므로 런타임 import
        from ..tasks.notification_tasks import send_email_task

        try:
            send_email_task.delay(to_email, subject, body)
        except Exception as e:
            # 브로커 장애로 메일을 못 보내도 알림 자체는 저장된 상태로 둡니다
            logger.error(f"{BaseResponseStatus.EMAIL_SEND_FAILED.message} ({to_email}): {e}", exc_info=True)


def get_notification_service(
    repo: NotificationRepository = Depends(NotificationRepository),
) -> NotificationService:
    return NotificationService(repo)
