from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..common.ids import new_id
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..users.repository import UserRepository
from .model import Notification
from .repository import NotificationRepository


class NotificationService:
    def __init__(self, notifications: NotificationRepository, users: UserRepository):
        self._notifications = notifications
        self._users = users

    def notify(self, *, user_id: str, title: str, message: str, type: str, now: Optional[datetime] = None) -> Notification:
        return self._notifications.add(
            Notification(
                notification_id=new_id(),
                user_id=str(user_id),
                title=title,
                message=message,
                type=type,
                created_at=now or datetime.now(),
            )
        )

    def notify_role(self, *, role: Role, title: str, message: str, type: str, now: Optional[datetime] = None) -> List[Notification]:
        return [
            self.notify(user_id=u.user_id, title=title, message=message, type=type, now=now)
            for u in self._users.list_by_role(role)
        ]

    def notify_linked(self, *, linked_id: str, title: str, message: str, type: str, now: Optional[datetime] = None) -> Notification:
        """Notify the account linked to a student or teacher, or the raw id when none exists."""
        user = self._users.get_by_linked_id(str(linked_id))
        return self.notify(
            user_id=user.user_id if user else linked_id,
            title=title,
            message=message,
            type=type,
            now=now,
        )

    def list_for_user(self, user_id: str, *, unread_only: bool = False) -> List[Notification]:
        rows = list(self._notifications.list_for_user(str(user_id)))
        if unread_only:
            rows = [n for n in rows if not n.is_read]
        return rows

    def mark_read(self, notification_id: str) -> Notification:
        updated = self._notifications.mark_read(str(notification_id))
        if not updated:
            raise NotFoundError("Notification not found")
        return updated

    def mark_all_read(self, user_id: str) -> int:
        unread = [n for n in self._notifications.list_for_user(str(user_id)) if not n.is_read]
        for n in unread:
            self._notifications.mark_read(n.notification_id)
        return len(unread)
