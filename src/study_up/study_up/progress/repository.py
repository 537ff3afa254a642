from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ProgressSession


class ProgressRepository(Protocol):
    def list_for_study(self, *, study_id: int) -> Sequence[ProgressSession]:
        """Ordered by session number."""

        raise NotImplementedError

    def get_by_id(self, progress_id: int) -> Optional[ProgressSession]:
        raise NotImplementedError

    def create_session(
        self,
        *,
        study_id: int,
        session_number: int,
        session_date: Optional[date],
        topic: str,
        target_progress: int,
    ) -> int:
        raise NotImplementedError

    def record(self, *, progress_id: int, actual_progress: int, notes: Optional[str]) -> bool:
        """Store the actual progress and mark the session completed."""

        raise NotImplementedError
