from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.enums import Role, UserStatus
from ..core.exceptions import DuplicateEmailError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_as, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, email, nickname, password_hash, gender, role, status, created_at"


def _row_to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        nickname=row["nickname"],
        password_hash=row["password_hash"],
        role=Role(row.get("role") or Role.USER.value),
        status=UserStatus(row.get("status") or UserStatus.ACTIVE.value),
        gender=row.get("gender"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create_user(
        self,
        *,
        email: str,
        nickname: str,
        password_hash: str,
        role: Role = Role.USER,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> int:
        duplicate = DuplicateEmailError("이미 가입된 이메일입니다.")
        with duplicate_key_as(duplicate), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(email, nickname, password_hash, role, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (email, nickname, password_hash, role.value, status.value),
            )
            return int(cur.lastrowid)

    def update_nickname(self, *, user_id: int, nickname: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET nickname=%s WHERE user_id=%s", (nickname, int(user_id)))
            return cur.rowcount > 0
