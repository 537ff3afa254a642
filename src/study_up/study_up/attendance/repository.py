from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence, Tuple

from .model import AttendanceRecord, AttendanceSession


class AttendanceRepository(Protocol):
    # Sessions
    def create_session(
        self,
        *,
        study_id: int,
        session_date: date,
        code: str,
        created_at: datetime,
        expires_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get_session(self, *, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def get_active_for_study(self, *, study_id: int) -> Optional[AttendanceSession]:
        """Latest session still flagged active; expiry is checked by the caller."""

        raise NotImplementedError

    def deactivate_for_study(self, *, study_id: int) -> int:
        raise NotImplementedError

    # Records
    def create_record(self, *, session_id: int, user_id: int, checked_at: datetime) -> int:
        raise NotImplementedError

    def get_record(self, *, session_id: int, user_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_records_for_date(self, *, study_id: int, session_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_for_user(self, *, user_id: int) -> Tuple[int, int]:
        """(sessions held, sessions attended) over the studies the user belongs to."""

        raise NotImplementedError
