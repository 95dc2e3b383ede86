# 알림 저장소 레이어

from typing import List, Optional

from beanie import PydanticObjectId

from ..models.notification import Notification
from ..models.user import User


class NotificationRepository:
    async def get(self, notification_id: PydanticObjectId) -> Optional[Notification]:
        return await Notification.get(notification_id)

    async def create(self, notification: Notification) -> Notification:
        return await notification.insert()

    async def save(self, notification: Notification) -> Notification:
        await notification.save()
        return notification

    async def delete(self, notification: Notification) -> None:
        await notification.delete()

    async def find_by_receiver(self, user: User) -> List[Notification]:
        return await Notification.find(
            Notification.receiver.id == user.id
        ).sort(-Notification.created_at).to_list()

    async def delete_read_by_receiver(self, user: User) -> int:
        result = await Notification.find(
            Notification.receiver.id == user.id,
            Notification.is_read == True,  # noqa: E712
        ).delete()
        return result.deleted_count if result else 0
