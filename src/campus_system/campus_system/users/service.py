from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we hand back to the client (and the Flask session) after login."""

    user_id: str
    name: str
    email: str
    role: Role
    linked_id: Optional[str]


class AuthService:
    """Use cases: authenticate user (login), change password."""

    def __init__(self, users: UserRepository):
        self._users = users

    @staticmethod
    def _password_matches(password_hash: str, password: str) -> bool:
        try:
            return check_password_hash(password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            return False

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "email")
        password = require_non_empty(password, "password")

        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            logger.warning("Login rejected for %s", email)
            raise AuthenticationError("Invalid email or password")

        if not self._password_matches(user.password_hash, password):
            logger.warning("Login rejected for %s", email)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            linked_id=user.linked_id,
        )

    def change_password(self, user_id: str, *, current_password: str, new_password: str) -> None:
        if not user_id or not current_password or not new_password:
            raise ValidationError("All fields are required")
        if len(str(new_password)) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        user = self._users.get_by_id(str(user_id))
        if not user or not self._password_matches(user.password_hash, str(current_password)):
            logger.warning("Password change rejected for %s", user_id)
            raise AuthenticationError("Current password is incorrect")

        self._users.update(replace(user, password_hash=generate_password_hash(str(new_password))))
        logger.info("Password changed for %s", user.user_id)
