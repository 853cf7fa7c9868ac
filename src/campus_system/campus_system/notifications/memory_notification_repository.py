from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..database.memory_store import InMemoryStore, db_tables
from .model import Notification
from .repository import NotificationRepository


class InMemoryNotificationRepository(NotificationRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def add(self, notification: Notification) -> Notification:
        with db_tables(self._store) as db:
            db["notifications"][notification.notification_id] = notification
        return notification

    def list_for_user(self, user_id: str) -> Sequence[Notification]:
        with db_tables(self._store) as db:
            rows = [n for n in db["notifications"].values() if n.user_id == user_id]
        rows.sort(key=lambda n: n.created_at, reverse=True)
        return rows

    def mark_read(self, notification_id: str) -> Optional[Notification]:
        with db_tables(self._store) as db:
            current = db["notifications"].get(notification_id)
            if not current:
                return None
            updated = replace(current, is_read=True)
            db["notifications"][notification_id] = updated
            return updated

    def delete_for_user(self, user_id: str) -> int:
        with db_tables(self._store) as db:
            doomed = [k for k, n in db["notifications"].items() if n.user_id == user_id]
            for k in doomed:
                del db["notifications"][k]
        return len(doomed)
