from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import StudyStatus, TermType
from ..database.mysql_base import to_json_value


@dataclass(frozen=True)
class ChatMessage:
    message_id: int
    study_id: int
    user_id: int
    content: str
    created_at: datetime
    nickname: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.message_id,
            "studyId": self.study_id,
            "userId": self.user_id,
            "userNickname": self.nickname,
            "text": self.content,
            "timestamp": to_json_value(self.created_at),
        }


@dataclass(frozen=True)
class ChatSummary:
    """One row of the user's chat list."""

    study_id: int
    name: str
    description: str
    member_count: int
    status: StudyStatus
    term_type: TermType
    last_message_at: Optional[datetime] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "studyId": self.study_id,
            "name": self.name,
            "description": self.description,
            "memberCount": self.member_count,
            "lastMessageAt": to_json_value(self.last_message_at),
            "status": self.status.label,
            "termType": self.term_type.value.lower(),
            "startDate": to_json_value(self.start_date),
            "endDate": to_json_value(self.end_date),
        }
