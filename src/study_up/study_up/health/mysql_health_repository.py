from __future__ import annotations

from typing import Any, Dict, List

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, to_json_row
from .repository import HealthRepository


class MySQLHealthRepository(HealthRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def ping(self) -> List[Dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS ok")
            return [to_json_row(r) for r in fetchall(cur)]

    def list_recipes(self) -> List[Dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT recipe_id, name, created_at FROM recipes ORDER BY recipe_id")
            return [to_json_row(r) for r in fetchall(cur)]
