# 요청/응답 스키마 정의 - 알림

from datetime import datetime

from pydantic import BaseModel

from ..models.notification import Notification, NotificationType


class NotificationResponse(BaseModel):
    id: str
    notification_type: NotificationType
    content: str
    url: str
    is_read: bool
    created_at: datetime

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=str(notification.id),
            notification_type=notification.notification_type,
            content=notification.content,
            url=notification.url,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )
