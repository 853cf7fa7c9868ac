from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a login account.

    Note: pure data object (no storage code). ``linked_id`` points at the
    student or teacher record the account belongs to.
    """

    user_id: str
    email: str
    name: str
    password_hash: str
    role: Role
    linked_id: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
