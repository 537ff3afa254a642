from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_as, fetchall, fetchone
from .model import ProgressSession
from .repository import ProgressRepository

_COLUMNS = """
    progress_id, study_id, session_number, session_date, topic,
    target_progress, actual_progress, notes, is_completed
"""


def _row_to_session(r: Dict[str, Any]) -> ProgressSession:
    actual = r.get("actual_progress")
    return ProgressSession(
        progress_id=int(r["progress_id"]),
        study_id=int(r["study_id"]),
        session_number=int(r["session_number"]),
        session_date=r.get("session_date"),
        topic=r.get("topic") or "",
        target_progress=int(r.get("target_progress") or 0),
        actual_progress=int(actual) if actual is not None else None,
        notes=r.get("notes"),
        is_completed=bool(r.get("is_completed")),
    )


class MySQLProgressRepository(ProgressRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_study(self, *, study_id: int) -> Sequence[ProgressSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM progress_sessions WHERE study_id=%s ORDER BY session_number",
                (int(study_id),),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def get_by_id(self, progress_id: int) -> Optional[ProgressSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM progress_sessions WHERE progress_id=%s", (int(progress_id),))
            row = fetchone(cur)
            return _row_to_session(row) if row else None

    def create_session(
        self,
        *,
        study_id: int,
        session_number: int,
        session_date: Optional[date],
        topic: str,
        target_progress: int,
    ) -> int:
        conflict = ConflictError("같은 회차가 방금 추가되었습니다. 다시 시도해 주세요.")
        with duplicate_key_as(conflict), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO progress_sessions(study_id, session_number, session_date, topic, target_progress, is_completed)
                VALUES(%s,%s,%s,%s,%s,0)
                """,
                (int(study_id), int(session_number), session_date, topic, int(target_progress)),
            )
            return int(cur.lastrowid)

    def record(self, *, progress_id: int, actual_progress: int, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE progress_sessions
                SET actual_progress=%s, notes=%s, is_completed=1
                WHERE progress_id=%s
                """,
                (int(actual_progress), notes, int(progress_id)),
            )
            return cur.rowcount > 0
