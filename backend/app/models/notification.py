# 알림 모델
# - 특정 사용자(receiver)에게 전달되는 알림 한 건

from datetime import datetime
from enum import Enum

from beanie import Document, Link
from pydantic import Field

from .user import User


class NotificationType(str, Enum):
    DONATION = "DONATION"
    FUNDING_SUCCESS = "FUNDING_SUCCESS"
    FUNDING_TIME_OUT = "FUNDING_TIME_OUT"


class Notification(Document):
    receiver: Link[User]
    notification_type: NotificationType
    content: str
    url: str = ""
    is_read: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "notifications"

    def is_received_by(self, user: User) -> bool:
        receiver = self.receiver
        receiver_id = receiver.id if isinstance(receiver, User) else receiver.ref.id
        return receiver_id == user.id
