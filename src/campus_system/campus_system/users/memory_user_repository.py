from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.memory_store import InMemoryStore, db_tables
from .model import User
from .repository import UserRepository


class InMemoryUserRepository(UserRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_tables(self._store) as db:
            return db["users"].get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        wanted = email.strip().lower()
        with db_tables(self._store) as db:
            for u in db["users"].values():
                if u.email.lower() == wanted:
                    return u
        return None

    def get_by_linked_id(self, linked_id: str) -> Optional[User]:
        with db_tables(self._store) as db:
            for u in db["users"].values():
                if u.linked_id == linked_id:
                    return u
        return None

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_tables(self._store) as db:
            return [u for u in db["users"].values() if u.role == role]

    def add(self, user: User) -> User:
        with db_tables(self._store) as db:
            db["users"][user.user_id] = user
        return user

    def update(self, user: User) -> User:
        with db_tables(self._store) as db:
            db["users"][user.user_id] = user
        return user

    def delete(self, user_id: str) -> bool:
        with db_tables(self._store) as db:
            return db["users"].pop(user_id, None) is not None
