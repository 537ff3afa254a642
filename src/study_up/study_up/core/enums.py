from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for authorization."""

    USER = "USER"
    ADMIN = "ADMIN"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class StudyStatus(str, Enum):
    """Stored value. The API exposes `label` (recruiting/active/completed)."""

    OPEN = "OPEN"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"

    @property
    def label(self) -> str:
        return _STUDY_STATUS_LABELS[self]

    @classmethod
    def from_label(cls, value: str) -> "StudyStatus":
        v = (value or "").strip().lower()
        for status, label in _STUDY_STATUS_LABELS.items():
            if v in {label, status.value.lower()}:
                return status
        raise ValueError(f"Unknown study status: {value!r}")


_STUDY_STATUS_LABELS = {
    StudyStatus.OPEN: "recruiting",
    StudyStatus.ACTIVE: "active",
    StudyStatus.COMPLETED: "completed",
}


class StudyType(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class TermType(str, Enum):
    SHORT = "SHORT"
    LONG = "LONG"


class MemberRole(str, Enum):
    OWNER = "OWNER"
    MEMBER = "MEMBER"


class MembershipStatus(str, Enum):
    NONE = "none"
    PENDING = "pending"
    MEMBER = "member"
    OWNER = "owner"


class JoinRequestStatus(str, Enum):
    """Join request approval flow."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class ApprovalOutcome(str, Enum):
    """Result of approving a join request in one transaction."""

    APPROVED = "approved"
    FULL = "full"
    ALREADY_DECIDED = "already_decided"
