from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence, Tuple

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_as, fetchall, fetchone
from .model import AttendanceRecord, AttendanceSession
from .repository import AttendanceRepository

_SESSION_COLUMNS = "session_id, study_id, session_date, code, is_active, created_at, expires_at"


def _row_to_session(r: Dict[str, Any]) -> AttendanceSession:
    return AttendanceSession(
        session_id=int(r["session_id"]),
        study_id=int(r["study_id"]),
        session_date=r["session_date"],
        code=r["code"],
        is_active=bool(r.get("is_active")),
        created_at=r["created_at"],
        expires_at=r["expires_at"],
    )


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        session_id=int(r["session_id"]),
        user_id=int(r["user_id"]),
        checked_at=r["checked_at"],
        nickname=r.get("nickname"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Sessions --------
    def create_session(
        self,
        *,
        study_id: int,
        session_date: date,
        code: str,
        created_at: datetime,
        expires_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(study_id, session_date, code, is_active, created_at, expires_at)
                VALUES(%s,%s,%s,1,%s,%s)
                """,
                (int(study_id), session_date, code, created_at, expires_at),
            )
            return int(cur.lastrowid)

    def get_session(self, *, session_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE session_id=%s",
                (int(session_id),),
            )
            row = fetchone(cur)
            return _row_to_session(row) if row else None

    def get_active_for_study(self, *, study_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS} FROM attendance_sessions
                WHERE study_id=%s AND is_active=1
                ORDER BY session_id DESC LIMIT 1
                """,
                (int(study_id),),
            )
            row = fetchone(cur)
            return _row_to_session(row) if row else None

    def deactivate_for_study(self, *, study_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_sessions SET is_active=0 WHERE study_id=%s AND is_active=1",
                (int(study_id),),
            )
            return int(cur.rowcount or 0)

    # -------- Records --------
    def create_record(self, *, session_id: int, user_id: int, checked_at: datetime) -> int:
        with duplicate_key_as(ConflictError("이미 출석했습니다.")), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance_records(session_id, user_id, checked_at) VALUES(%s,%s,%s)",
                (int(session_id), int(user_id), checked_at),
            )
            return int(cur.lastrowid)

    def get_record(self, *, session_id: int, user_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT r.record_id, r.session_id, r.user_id, r.checked_at, u.nickname
                FROM attendance_records r
                LEFT JOIN users u ON u.user_id = r.user_id
                WHERE r.session_id=%s AND r.user_id=%s
                """,
                (int(session_id), int(user_id)),
            )
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def list_records_for_date(self, *, study_id: int, session_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT r.record_id, r.session_id, r.user_id, r.checked_at, u.nickname
                FROM attendance_records r
                JOIN attendance_sessions s ON s.session_id = r.session_id
                LEFT JOIN users u ON u.user_id = r.user_id
                WHERE s.study_id=%s AND s.session_date=%s
                ORDER BY r.checked_at, r.record_id
                """,
                (int(study_id), session_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_for_user(self, *, user_id: int) -> Tuple[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS held,
                       SUM(CASE WHEN r.record_id IS NULL THEN 0 ELSE 1 END) AS attended
                FROM attendance_sessions s
                JOIN study_members m ON m.study_id = s.study_id AND m.user_id = %s
                LEFT JOIN attendance_records r ON r.session_id = s.session_id AND r.user_id = %s
                """,
                (int(user_id), int(user_id)),
            )
            row = fetchone(cur) or {}
            return int(row.get("held") or 0), int(row.get("attended") or 0)
