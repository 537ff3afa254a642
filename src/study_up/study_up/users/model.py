from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role, UserStatus


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object; no database access code here.
    """

    user_id: int
    email: str
    nickname: str
    password_hash: str
    role: Role = Role.USER
    status: UserStatus = UserStatus.ACTIVE
    gender: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def to_public(self) -> dict:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "nickname": self.nickname,
            "role": self.role.value,
            "status": self.status.value,
        }
