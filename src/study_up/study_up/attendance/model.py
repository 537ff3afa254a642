from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..database.mysql_base import to_json_value


@dataclass(frozen=True)
class AttendanceSession:
    """One attendance code opened by the owner for a study day."""

    session_id: int
    study_id: int
    session_date: date
    code: str
    is_active: bool
    created_at: datetime
    expires_at: datetime

    def is_open(self, now: datetime) -> bool:
        return self.is_active and now < self.expires_at

    def seconds_left(self, now: datetime) -> int:
        return max(0, int((self.expires_at - now).total_seconds()))

    def to_dict(self, now: datetime) -> dict:
        return {
            "active": self.is_open(now),
            "sessionId": self.session_id,
            "code": self.code,
            "sessionDate": to_json_value(self.session_date),
            "expiresAt": to_json_value(self.expires_at),
            "secondsLeft": self.seconds_left(now),
        }


@dataclass(frozen=True)
class AttendanceRecord:
    record_id: int
    session_id: int
    user_id: int
    checked_at: datetime
    nickname: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "recordId": self.record_id,
            "sessionId": self.session_id,
            "userId": self.user_id,
            "nickname": self.nickname,
            "checkedAt": to_json_value(self.checked_at),
        }
