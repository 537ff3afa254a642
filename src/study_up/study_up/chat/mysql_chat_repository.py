from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import StudyStatus, TermType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ChatMessage, ChatSummary
from .repository import ChatRepository

_MESSAGE_SELECT = """
    SELECT c.message_id, c.study_id, c.user_id, c.content, c.created_at, u.nickname
    FROM chat_messages c
    LEFT JOIN users u ON u.user_id = c.user_id
"""


def _row_to_message(r: Dict[str, Any]) -> ChatMessage:
    return ChatMessage(
        message_id=int(r["message_id"]),
        study_id=int(r["study_id"]),
        user_id=int(r["user_id"]),
        content=r.get("content") or "",
        created_at=r["created_at"],
        nickname=r.get("nickname"),
    )


class MySQLChatRepository(ChatRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_recent(self, *, study_id: int, limit: int) -> Sequence[ChatMessage]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _MESSAGE_SELECT
                + " WHERE c.study_id=%s ORDER BY c.created_at DESC, c.message_id DESC LIMIT %s",
                (int(study_id), int(limit)),
            )
            rows = fetchall(cur)
        return [_row_to_message(r) for r in reversed(rows)]

    def create_message(self, *, study_id: int, user_id: int, content: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO chat_messages(study_id, user_id, content) VALUES(%s,%s,%s)",
                (int(study_id), int(user_id), content),
            )
            return int(cur.lastrowid)

    def get_message(self, *, message_id: int) -> Optional[ChatMessage]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_MESSAGE_SELECT + " WHERE c.message_id=%s", (int(message_id),))
            row = fetchone(cur)
            return _row_to_message(row) if row else None

    def list_chats_for_user(self, *, user_id: int) -> Sequence[ChatSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.study_id, s.name, s.description, s.status, s.term_type,
                       s.start_date, s.end_date,
                       (SELECT COUNT(*) FROM study_members x WHERE x.study_id = s.study_id) AS member_count,
                       (SELECT MAX(c.created_at) FROM chat_messages c WHERE c.study_id = s.study_id) AS last_message_at
                FROM studies s
                JOIN study_members m ON m.study_id = s.study_id AND m.user_id = %s
                ORDER BY COALESCE(last_message_at, s.created_at) DESC, s.study_id DESC
                """,
                (int(user_id),),
            )
            return [
                ChatSummary(
                    study_id=int(r["study_id"]),
                    name=r.get("name") or "",
                    description=r.get("description") or "",
                    member_count=int(r.get("member_count") or 0),
                    status=StudyStatus(r.get("status") or StudyStatus.OPEN.value),
                    term_type=TermType.LONG if str(r.get("term_type") or "").upper() == "LONG" else TermType.SHORT,
                    last_message_at=r.get("last_message_at"),
                    start_date=r.get("start_date"),
                    end_date=r.get("end_date"),
                )
                for r in fetchall(cur)
            ]
