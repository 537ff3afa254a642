from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from ..common.datetime_utils import parse_optional_date
from ..common.numbers import mean_rounded
from ..common.validators import optional_text, require_int_range, require_non_empty
from ..core.exceptions import ConflictError, NotFoundError
from ..studies.access import ensure_member, ensure_owner
from ..studies.repository import StudyRepository
from .model import ProgressSession, ProgressSummary
from .repository import ProgressRepository

PROGRESS_RANGE = "진행률은 0에서 100 사이의 숫자여야 합니다."


def summarize(sessions: Sequence[ProgressSession]) -> ProgressSummary:
    """Aggregate figures shown above the session list.

    Only completed sessions count towards the averages. A session planned with a
    target of 0 counts as fully achieved.
    """
    completed = [s for s in sessions if s.is_completed]
    pending = [s for s in sessions if not s.is_completed]

    def achievement(s: ProgressSession) -> float:
        if s.target_progress <= 0:
            return 100.0
        return (s.actual_progress or 0) * 100 / s.target_progress

    return ProgressSummary(
        total_progress=mean_rounded(s.actual_progress or 0 for s in completed),
        completed_sessions=len(completed),
        total_sessions=len(sessions),
        on_target_sessions=sum(1 for s in completed if s.on_target),
        achievement_rate=mean_rounded(achievement(s) for s in completed),
        next_session=pending[0] if pending else None,
    )


class ProgressService:
    def __init__(self, progress: ProgressRepository, studies: StudyRepository):
        self._progress = progress
        self._studies = studies

    def overview(self, *, study_id: int, user_id: int) -> Tuple[Sequence[ProgressSession], ProgressSummary]:
        ensure_member(self._studies, study_id, user_id, message="스터디 멤버만 진행 상황을 볼 수 있습니다.")
        sessions = self._progress.list_for_study(study_id=int(study_id))
        return sessions, summarize(sessions)

    def plan_session(self, *, study_id: int, user_id: int, payload: dict) -> ProgressSession:
        study = ensure_owner(self._studies, study_id, user_id)

        topic = require_non_empty(payload.get("topic"), "회차 주제를 입력해 주세요.")
        session_date = parse_optional_date(payload.get("date"), "날짜 형식이 올바르지 않습니다. (YYYY-MM-DD)")
        target = require_int_range(payload.get("targetProgress"), PROGRESS_RANGE, low=0, high=100)

        existing = self._progress.list_for_study(study_id=study.study_id)
        number = max((s.session_number for s in existing), default=0) + 1

        progress_id = self._progress.create_session(
            study_id=study.study_id,
            session_number=number,
            session_date=session_date,
            topic=topic,
            target_progress=target,
        )
        session = self._progress.get_by_id(progress_id)
        if not session:
            raise NotFoundError("회차를 저장하지 못했습니다.")
        self._sync_study_progress(study.study_id)
        return session

    def record_next(self, *, study_id: int, user_id: int, progress: Any, notes: Any = None) -> ProgressSession:
        study = ensure_owner(self._studies, study_id, user_id)
        actual = require_int_range(progress, PROGRESS_RANGE, low=0, high=100)

        pending = [s for s in self._progress.list_for_study(study_id=study.study_id) if not s.is_completed]
        if not pending:
            raise ConflictError("기록할 회차가 없습니다. 먼저 회차를 추가해 주세요.")

        return self._record(pending[0], actual, optional_text(notes))

    def update_record(self, *, progress_id: int, user_id: int, progress: Any, notes: Any = None) -> ProgressSession:
        session = self._progress.get_by_id(int(progress_id))
        if not session:
            raise NotFoundError("회차를 찾을 수 없습니다.")
        ensure_owner(self._studies, session.study_id, user_id)
        if not session.is_completed:
            raise ConflictError("아직 기록되지 않은 회차입니다. 진행 기록은 순서대로 입력해 주세요.")
        actual = require_int_range(progress, PROGRESS_RANGE, low=0, high=100)
        return self._record(session, actual, optional_text(notes))

    def _record(self, session: ProgressSession, actual: int, notes: Optional[str]) -> ProgressSession:
        self._progress.record(progress_id=session.progress_id, actual_progress=actual, notes=notes)
        updated = self._progress.get_by_id(session.progress_id)
        if not updated:
            raise NotFoundError("회차를 찾을 수 없습니다.")
        self._sync_study_progress(session.study_id)
        return updated

    def _sync_study_progress(self, study_id: int) -> None:
        summary = summarize(self._progress.list_for_study(study_id=study_id))
        self._studies.update_progress(study_id=study_id, progress_pct=summary.total_progress)
