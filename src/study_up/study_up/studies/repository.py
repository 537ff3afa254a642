from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalOutcome, JoinRequestStatus, MemberRole, StudyStatus
from .model import JoinRequest, NewStudy, Study, StudyMember


class StudyRepository(Protocol):
    # Studies
    def create_study(self, new: NewStudy) -> int:
        """Insert the study, its tags and the owner membership in one transaction."""

        raise NotImplementedError

    def get_by_id(self, study_id: int) -> Optional[Study]:
        raise NotImplementedError

    def list_studies(
        self,
        *,
        status: Optional[StudyStatus] = None,
        is_online: Optional[bool] = None,
        query: Optional[str] = None,
    ) -> Sequence[Study]:
        """Newest first."""

        raise NotImplementedError

    def list_for_member(self, *, user_id: int) -> Sequence[Study]:
        raise NotImplementedError

    def update_status(self, *, study_id: int, status: StudyStatus) -> bool:
        raise NotImplementedError

    def update_progress(self, *, study_id: int, progress_pct: int) -> bool:
        raise NotImplementedError

    # Members
    def list_members(self, *, study_id: int) -> Sequence[StudyMember]:
        raise NotImplementedError

    def get_member(self, *, study_id: int, user_id: int) -> Optional[StudyMember]:
        raise NotImplementedError

    def add_member(self, *, study_id: int, user_id: int, role: MemberRole = MemberRole.MEMBER) -> None:
        raise NotImplementedError

    # Join requests
    def create_join_request(self, *, study_id: int, user_id: int, message: Optional[str]) -> int:
        raise NotImplementedError

    def get_join_request(self, *, request_id: int) -> Optional[JoinRequest]:
        raise NotImplementedError

    def get_pending_request(self, *, study_id: int, user_id: int) -> Optional[JoinRequest]:
        raise NotImplementedError

    def list_join_requests(
        self,
        *,
        study_id: int,
        status: Optional[JoinRequestStatus] = JoinRequestStatus.PENDING,
    ) -> Sequence[JoinRequest]:
        raise NotImplementedError

    def decide_join_request(self, *, request_id: int, status: JoinRequestStatus, decided_by: int) -> bool:
        """Only a PENDING request can change; returns False otherwise."""

        raise NotImplementedError

    def approve_join_request(self, *, request_id: int, decided_by: int) -> ApprovalOutcome:
        """Approve a PENDING request and add its user as a member in one transaction."""

        raise NotImplementedError
