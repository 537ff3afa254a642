from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import ApprovalOutcome, JoinRequestStatus, MemberRole, StudyStatus, TermType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import JoinRequest, NewStudy, Study, StudyMember
from .repository import StudyRepository

# Tags are aggregated in a derived table so the TEXT description never ends up in a GROUP BY.
_STUDY_SELECT = """
    SELECT s.study_id, s.name, s.description, s.subject, s.topic_id,
           s.region_code, s.region_path, s.is_online, s.term_type,
           s.start_date, s.end_date, s.max_members, s.status, s.created_by,
           s.progress_pct, s.created_at,
           u.nickname AS owner_nickname,
           st.tag_names,
           (SELECT COUNT(*) FROM study_members m WHERE m.study_id = s.study_id) AS member_count
    FROM studies s
    LEFT JOIN users u ON u.user_id = s.created_by
    LEFT JOIN (
        SELECT x.study_id, GROUP_CONCAT(t.name_ko ORDER BY t.tag_id SEPARATOR ',') AS tag_names
        FROM study_tags x
        JOIN tags t ON t.tag_id = x.tag_id
        GROUP BY x.study_id
    ) st ON st.study_id = s.study_id
"""

_JOIN_REQUEST_SELECT = """
    SELECT r.request_id, r.study_id, r.user_id, r.message, r.status,
           r.created_at, r.decided_by, r.decided_at, u.nickname
    FROM join_requests r
    LEFT JOIN users u ON u.user_id = r.user_id
"""


def _row_to_study(r: Dict[str, Any]) -> Study:
    return Study(
        study_id=int(r["study_id"]),
        name=r.get("name") or "",
        description=r.get("description") or "",
        subject=r.get("subject"),
        topic_id=r.get("topic_id"),
        region_code=r.get("region_code"),
        region_path=r.get("region_path"),
        is_online=str(r.get("is_online") or "").upper() == "Y",
        term_type=TermType.LONG if str(r.get("term_type") or "").upper() == "LONG" else TermType.SHORT,
        start_date=r.get("start_date"),
        end_date=r.get("end_date"),
        max_members=int(r.get("max_members") or 0),
        status=StudyStatus(r.get("status") or StudyStatus.OPEN.value),
        created_by=int(r["created_by"]),
        progress_pct=int(r.get("progress_pct") or 0),
        created_at=r.get("created_at"),
        tags=tuple(t for t in (r.get("tag_names") or "").split(",") if t),
        owner_nickname=r.get("owner_nickname"),
        current_members=int(r.get("member_count") or 0),
    )


def _row_to_request(r: Dict[str, Any]) -> JoinRequest:
    return JoinRequest(
        request_id=int(r["request_id"]),
        study_id=int(r["study_id"]),
        user_id=int(r["user_id"]),
        message=r.get("message"),
        status=JoinRequestStatus(r["status"]),
        created_at=r["created_at"],
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        nickname=r.get("nickname"),
    )


class MySQLStudyRepository(StudyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Studies --------
    def create_study(self, new: NewStudy) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO studies(
                    name, description, subject, region_code, region_path, is_online, term_type,
                    start_date, end_date, max_members, status, created_by, progress_pct
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,0)
                """,
                (
                    new.name,
                    new.description,
                    new.subject,
                    new.region_code,
                    new.region_path,
                    "Y" if new.is_online else "N",
                    new.term_type.value,
                    new.start_date,
                    new.end_date,
                    int(new.max_members),
                    new.status.value,
                    int(new.created_by),
                ),
            )
            study_id = int(cur.lastrowid)

            cur.execute(
                "INSERT INTO study_members(study_id, user_id, member_role) VALUES(%s,%s,%s)",
                (study_id, int(new.created_by), MemberRole.OWNER.value),
            )

            for tag in new.tags:
                cur.execute("INSERT IGNORE INTO tags(name_ko) VALUES(%s)", (tag,))
                cur.execute("SELECT tag_id FROM tags WHERE name_ko=%s", (tag,))
                row = fetchone(cur)
                if row:
                    cur.execute(
                        "INSERT IGNORE INTO study_tags(study_id, tag_id) VALUES(%s,%s)",
                        (study_id, int(row["tag_id"])),
                    )
            return study_id

    def get_by_id(self, study_id: int) -> Optional[Study]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_STUDY_SELECT + " WHERE s.study_id=%s", (int(study_id),))
            row = fetchone(cur)
            return _row_to_study(row) if row else None

    def list_studies(
        self,
        *,
        status: Optional[StudyStatus] = None,
        is_online: Optional[bool] = None,
        query: Optional[str] = None,
    ) -> Sequence[Study]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("s.status=%s")
            params.append(status.value)
        if is_online is not None:
            clauses.append("s.is_online=%s")
            params.append("Y" if is_online else "N")
        if query:
            like = f"%{query}%"
            clauses.append("(s.name LIKE %s OR s.description LIKE %s OR st.tag_names LIKE %s)")
            params.extend([like, like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _STUDY_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY s.study_id DESC",
                tuple(params),
            )
            return [_row_to_study(r) for r in fetchall(cur)]

    def list_for_member(self, *, user_id: int) -> Sequence[Study]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _STUDY_SELECT
                + """
                WHERE s.study_id IN (SELECT study_id FROM study_members WHERE user_id=%s)
                ORDER BY s.study_id DESC
                """,
                (int(user_id),),
            )
            return [_row_to_study(r) for r in fetchall(cur)]

    def update_status(self, *, study_id: int, status: StudyStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE studies SET status=%s WHERE study_id=%s", (status.value, int(study_id)))
            return cur.rowcount > 0

    def update_progress(self, *, study_id: int, progress_pct: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE studies SET progress_pct=%s WHERE study_id=%s",
                (int(progress_pct), int(study_id)),
            )
            return cur.rowcount > 0

    # -------- Members --------
    def list_members(self, *, study_id: int) -> Sequence[StudyMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT m.study_id, m.user_id, m.member_role, m.joined_at, u.nickname
                FROM study_members m
                LEFT JOIN users u ON u.user_id = m.user_id
                WHERE m.study_id=%s
                ORDER BY (m.member_role = 'OWNER') DESC, m.joined_at
                """,
                (int(study_id),),
            )
            return [
                StudyMember(
                    study_id=int(r["study_id"]),
                    user_id=int(r["user_id"]),
                    role=MemberRole(r["member_role"]),
                    nickname=r.get("nickname"),
                    joined_at=r.get("joined_at"),
                )
                for r in fetchall(cur)
            ]

    def get_member(self, *, study_id: int, user_id: int) -> Optional[StudyMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT m.study_id, m.user_id, m.member_role, m.joined_at, u.nickname
                FROM study_members m
                LEFT JOIN users u ON u.user_id = m.user_id
                WHERE m.study_id=%s AND m.user_id=%s
                """,
                (int(study_id), int(user_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return StudyMember(
                study_id=int(r["study_id"]),
                user_id=int(r["user_id"]),
                role=MemberRole(r["member_role"]),
                nickname=r.get("nickname"),
                joined_at=r.get("joined_at"),
            )

    def add_member(self, *, study_id: int, user_id: int, role: MemberRole = MemberRole.MEMBER) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO study_members(study_id, user_id, member_role) VALUES(%s,%s,%s)",
                (int(study_id), int(user_id), role.value),
            )

    # -------- Join requests --------
    def create_join_request(self, *, study_id: int, user_id: int, message: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO join_requests(study_id, user_id, message, status) VALUES(%s,%s,%s,%s)",
                (int(study_id), int(user_id), message, JoinRequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_join_request(self, *, request_id: int) -> Optional[JoinRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_JOIN_REQUEST_SELECT + " WHERE r.request_id=%s", (int(request_id),))
            row = fetchone(cur)
            return _row_to_request(row) if row else None

    def get_pending_request(self, *, study_id: int, user_id: int) -> Optional[JoinRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _JOIN_REQUEST_SELECT
                + " WHERE r.study_id=%s AND r.user_id=%s AND r.status=%s ORDER BY r.request_id DESC LIMIT 1",
                (int(study_id), int(user_id), JoinRequestStatus.PENDING.value),
            )
            row = fetchone(cur)
            return _row_to_request(row) if row else None

    def list_join_requests(
        self,
        *,
        study_id: int,
        status: Optional[JoinRequestStatus] = JoinRequestStatus.PENDING,
    ) -> Sequence[JoinRequest]:
        clauses = ["r.study_id=%s"]
        params: list[object] = [int(study_id)]
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _JOIN_REQUEST_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY r.created_at, r.request_id",
                tuple(params),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def decide_join_request(self, *, request_id: int, status: JoinRequestStatus, decided_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE join_requests
                SET status=%s, decided_by=%s, decided_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), int(request_id), JoinRequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def approve_join_request(self, *, request_id: int, decided_by: int) -> ApprovalOutcome:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT study_id FROM join_requests WHERE request_id=%s", (int(request_id),))
            row = fetchone(cur)
            if not row:
                return ApprovalOutcome.ALREADY_DECIDED
            study_id = int(row["study_id"])

            # Study row first, then the request: every approval for a study queues here.
            cur.execute("SELECT max_members FROM studies WHERE study_id=%s FOR UPDATE", (study_id,))
            study = fetchone(cur)
            cur.execute(
                "SELECT user_id, status FROM join_requests WHERE request_id=%s FOR UPDATE",
                (int(request_id),),
            )
            req = fetchone(cur)
            if not study or not req or req["status"] != JoinRequestStatus.PENDING.value:
                return ApprovalOutcome.ALREADY_DECIDED

            cur.execute("SELECT COUNT(*) AS c FROM study_members WHERE study_id=%s", (study_id,))
            if int(fetchone(cur)["c"]) >= int(study["max_members"]):
                return ApprovalOutcome.FULL

            cur.execute(
                """
                UPDATE join_requests
                SET status=%s, decided_by=%s, decided_at=NOW()
                WHERE request_id=%s
                """,
                (JoinRequestStatus.APPROVED.value, int(decided_by), int(request_id)),
            )
            cur.execute(
                "INSERT IGNORE INTO study_members(study_id, user_id, member_role) VALUES(%s,%s,%s)",
                (study_id, int(req["user_id"]), MemberRole.MEMBER.value),
            )
            return ApprovalOutcome.APPROVED
