from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Topic
from .repository import TopicRepository


class MySQLTopicRepository(TopicRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Topic]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT topic_id, code, name_ko, title, body, created_at
                FROM topics
                ORDER BY topic_id
                """
            )
            return [
                Topic(
                    topic_id=int(r["topic_id"]),
                    code=r["code"],
                    name_ko=r["name_ko"],
                    title=r.get("title"),
                    body=r.get("body"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
