from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import FavoriteRepository


class MySQLFavoriteRepository(FavoriteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, *, user_id: int, study_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO favorites(user_id, study_id) VALUES(%s,%s)",
                (int(user_id), int(study_id)),
            )

    def remove(self, *, user_id: int, study_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM favorites WHERE user_id=%s AND study_id=%s",
                (int(user_id), int(study_id)),
            )
            return cur.rowcount > 0

    def list_study_ids(self, *, user_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT study_id FROM favorites WHERE user_id=%s ORDER BY created_at DESC, study_id DESC",
                (int(user_id),),
            )
            return [int(r["study_id"]) for r in fetchall(cur)]
