from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import JoinRequestStatus, MemberRole, StudyStatus, StudyType, TermType
from ..database.mysql_base import to_json_value


@dataclass(frozen=True)
class NewStudy:
    """Validated creation payload, ready to be inserted."""

    name: str
    description: str
    subject: Optional[str]
    is_online: bool
    term_type: TermType
    region_code: Optional[str]
    region_path: Optional[str]
    start_date: Optional[date]
    end_date: Optional[date]
    max_members: int
    created_by: int
    tags: Tuple[str, ...] = ()
    status: StudyStatus = StudyStatus.OPEN


@dataclass(frozen=True)
class Study:
    """Domain entity: Study. `current_members` counts the owner too."""

    study_id: int
    name: str
    description: str
    is_online: bool
    term_type: TermType
    status: StudyStatus
    created_by: int
    max_members: int
    progress_pct: int = 0
    subject: Optional[str] = None
    topic_id: Optional[int] = None
    region_code: Optional[str] = None
    region_path: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
    owner_nickname: Optional[str] = None
    current_members: int = 1

    @property
    def study_type(self) -> StudyType:
        return StudyType.ONLINE if self.is_online else StudyType.OFFLINE

    @property
    def is_full(self) -> bool:
        return self.current_members >= self.max_members

    def to_dict(self) -> dict:
        return {
            "id": self.study_id,
            "name": self.name,
            "subject": self.subject or "기타",
            "topicId": self.topic_id,
            "description": self.description,
            "tags": list(self.tags),
            "type": self.study_type.value,
            "duration": self.term_type.value.lower(),
            "region": self.region_path or self.region_code or "",
            "regionCode": self.region_code,
            "startDate": to_json_value(self.start_date),
            "endDate": to_json_value(self.end_date),
            "maxMembers": self.max_members,
            "currentMembers": self.current_members,
            "ownerId": self.created_by,
            "ownerNickname": self.owner_nickname,
            "status": self.status.label,
            "progress": self.progress_pct,
            "createdAt": to_json_value(self.created_at),
        }


@dataclass(frozen=True)
class StudyMember:
    study_id: int
    user_id: int
    role: MemberRole
    nickname: Optional[str] = None
    joined_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "studyId": self.study_id,
            "userId": self.user_id,
            "nickname": self.nickname,
            "role": self.role.value.lower(),
            "joinedAt": to_json_value(self.joined_at),
        }


@dataclass(frozen=True)
class JoinRequest:
    request_id: int
    study_id: int
    user_id: int
    status: JoinRequestStatus
    created_at: datetime
    message: Optional[str] = None
    nickname: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "requestId": self.request_id,
            "studyId": self.study_id,
            "userId": self.user_id,
            "nickname": self.nickname,
            "message": self.message,
            "status": self.status.value.lower(),
            "requestedAt": to_json_value(self.created_at),
            "decidedBy": self.decided_by,
            "decidedAt": to_json_value(self.decided_at),
        }
