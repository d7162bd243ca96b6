# services/notifications.py
from typing import List, Optional
import logging

from core.store import eq
from schemas.notification_schema import NotificationCreate, NotificationRead
from schemas.user_schema import UserProfile
from services.base import EntityService, apply_patch

logger = logging.getLogger(__name__)


class NotificationsService(EntityService[NotificationRead]):
    """The signed-in user's own notifications, newest first."""

    table = "notifications"
    entity = "notifications"
    record = NotificationRead

    def scope(self, user: UserProfile):
        return [eq("user_id", user.id)]

    @property
    def unread(self) -> List[NotificationRead]:
        return [n for n in self.items if not n.read]

    @property
    def unread_count(self) -> int:
        return len(self.unread)

    def send(self, data: NotificationCreate) -> Optional[str]:
        """Send a notification to any user through the store's notification procedure."""
        message = "Failed to send notification"
        self.require_user(message)
        notification_id = self.run(
            message,
            lambda: self.store.rpc(
                "send_notification",
                user_id=data.user_id,
                title=data.title,
                message=data.message,
                type=data.type,
                action_url=data.action_url,
            ),
        )
        logger.info(f"📨 Notification {notification_id} sent to {data.user_id}")

        self.reconcile()
        self.feedback.success("Notification sent")
        return notification_id

    def mark_as_read(self, notification_id: str) -> None:
        message = "Failed to mark notification as read"
        user = self.require_user(message)
        self.scoped_update(user, notification_id, {"read": True}, message)
        self.reconcile()

    def mark_all_as_read(self) -> int:
        message = "Failed to mark notifications as read"
        user = self.require_user(message)
        count = self.run(
            message, lambda: self.store.update(self.table, {"read": True}, [eq("user_id", user.id), eq("read", False)])
        )

        for notification in self.unread:
            self.items = apply_patch(self.items, notification.id, {"read": True})
        self.reconcile()
        return count
