from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role, UserStatus
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        nickname: str,
        password_hash: str,
        role: Role = Role.USER,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> int:
        raise NotImplementedError

    def update_nickname(self, *, user_id: int, nickname: str) -> bool:
        raise NotImplementedError
