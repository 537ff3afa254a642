from __future__ import annotations

import logging
import secrets
from datetime import date, datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.numbers import percent
from ..core.constants import (
    ATTENDANCE_CODE_ALPHABET,
    ATTENDANCE_CODE_LENGTH,
    DEFAULT_ATTENDANCE_CODE_TTL_SECONDS,
)
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..studies.access import ensure_member, ensure_owner
from ..studies.repository import StudyRepository
from .model import AttendanceRecord, AttendanceSession
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def generate_code(length: int = ATTENDANCE_CODE_LENGTH) -> str:
    return "".join(secrets.choice(ATTENDANCE_CODE_ALPHABET) for _ in range(length))


class AttendanceService:
    """Attendance codes opened by the owner and check-ins by members."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        studies: StudyRepository,
        *,
        code_ttl_seconds: int = DEFAULT_ATTENDANCE_CODE_TTL_SECONDS,
        code_generator: Callable[[], str] = generate_code,
    ):
        self._attendance = attendance
        self._studies = studies
        self._ttl = timedelta(seconds=int(code_ttl_seconds))
        self._generate_code = code_generator

    def open_code(self, *, study_id: int, user_id: int, now: datetime | None = None) -> AttendanceSession:
        now = now or now_local()
        study = ensure_owner(self._studies, study_id, user_id)

        # Only one code per study is live at a time.
        self._attendance.deactivate_for_study(study_id=study.study_id)
        session_id = self._attendance.create_session(
            study_id=study.study_id,
            session_date=now.date(),
            code=self._generate_code(),
            created_at=now,
            expires_at=now + self._ttl,
        )
        session = self._attendance.get_session(session_id=session_id)
        if not session:
            raise NotFoundError("출석 코드를 생성하지 못했습니다.")

        logger.info("attendance code opened study_id=%s session_id=%s", study.study_id, session_id)
        return session

    def close_code(self, *, study_id: int, user_id: int) -> None:
        study = ensure_owner(self._studies, study_id, user_id)
        self._attendance.deactivate_for_study(study_id=study.study_id)

    def current_code(self, *, study_id: int, user_id: int, now: datetime | None = None) -> Optional[AttendanceSession]:
        now = now or now_local()
        study = ensure_owner(self._studies, study_id, user_id)
        session = self._attendance.get_active_for_study(study_id=study.study_id)
        if not session or not session.is_open(now):
            return None
        return session

    def check_in(self, *, study_id: int, user_id: int, code: Any, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        if not isinstance(code, str) or not code.strip():
            raise ValidationError("출석 코드를 입력해 주세요.")

        study = ensure_member(self._studies, study_id, user_id, message="스터디 멤버만 출석할 수 있습니다.")

        session = self._attendance.get_active_for_study(study_id=study.study_id)
        if not session or not session.is_open(now):
            raise ValidationError("진행 중인 출석이 없거나 코드가 만료되었습니다.")
        if session.code.upper() != code.strip().upper():
            raise ValidationError("출석 코드가 올바르지 않습니다.")

        if self._attendance.get_record(session_id=session.session_id, user_id=int(user_id)):
            raise ConflictError("이미 출석했습니다.")

        self._attendance.create_record(session_id=session.session_id, user_id=int(user_id), checked_at=now)
        record = self._attendance.get_record(session_id=session.session_id, user_id=int(user_id))
        if not record:
            raise NotFoundError("출석 기록을 저장하지 못했습니다.")
        return record

    def list_for_date(
        self,
        *,
        study_id: int,
        user_id: int,
        day: Optional[str] = None,
        today: date | None = None,
    ) -> Sequence[AttendanceRecord]:
        study = ensure_member(self._studies, study_id, user_id, message="스터디 멤버만 출석 현황을 볼 수 있습니다.")
        session_date = parse_optional_date(day, "날짜 형식이 올바르지 않습니다. (YYYY-MM-DD)")
        session_date = session_date or today or now_local().date()
        return self._attendance.list_records_for_date(study_id=study.study_id, session_date=session_date)

    def attendance_rate(self, *, user_id: int) -> int:
        held, attended = self._attendance.count_for_user(user_id=int(user_id))
        return percent(attended, held)
