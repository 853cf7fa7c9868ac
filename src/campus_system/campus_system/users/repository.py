from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_linked_id(self, linked_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError

    def add(self, user: User) -> User:
        raise NotImplementedError

    def update(self, user: User) -> User:
        raise NotImplementedError

    def delete(self, user_id: str) -> bool:
        raise NotImplementedError
