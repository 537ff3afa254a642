from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..database.mysql_base import to_json_value


@dataclass(frozen=True)
class ProgressSession:
    """A planned study session and, once recorded, how far the group got."""

    progress_id: int
    study_id: int
    session_number: int
    session_date: Optional[date]
    topic: str
    target_progress: int
    actual_progress: Optional[int] = None
    notes: Optional[str] = None
    is_completed: bool = False

    @property
    def on_target(self) -> bool:
        return self.is_completed and (self.actual_progress or 0) >= self.target_progress

    def to_dict(self) -> dict:
        return {
            "id": self.progress_id,
            "studyId": self.study_id,
            "sessionNumber": self.session_number,
            "date": to_json_value(self.session_date),
            "topic": self.topic,
            "targetProgress": self.target_progress,
            "actualProgress": self.actual_progress,
            "notes": self.notes,
            "completed": self.is_completed,
        }


@dataclass(frozen=True)
class ProgressSummary:
    total_progress: int
    completed_sessions: int
    total_sessions: int
    on_target_sessions: int
    achievement_rate: int
    next_session: Optional[ProgressSession] = None

    def to_dict(self) -> dict:
        return {
            "totalProgress": self.total_progress,
            "completedSessions": self.completed_sessions,
            "totalSessions": self.total_sessions,
            "onTargetSessions": self.on_target_sessions,
            "achievementRate": self.achievement_rate,
            "nextSession": self.next_session.to_dict() if self.next_session else None,
        }
