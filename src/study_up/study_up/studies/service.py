from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_optional_date
from ..common.validators import optional_text, require_int_range
from ..core.constants import (
    DEFAULT_MAX_MEMBERS,
    MAX_MAX_MEMBERS,
    MAX_TAGS,
    MIN_MAX_MEMBERS,
    REGION_CODE_MAX_LEN,
    REGION_PATH_MAX_LEN,
)
from ..core.enums import (
    ApprovalOutcome,
    JoinRequestStatus,
    MemberRole,
    MembershipStatus,
    StudyStatus,
    StudyType,
    TermType,
)
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .access import ensure_owner, load_study
from .model import JoinRequest, NewStudy, Study, StudyMember
from .repository import StudyRepository

logger = logging.getLogger(__name__)

MISSING_FIELDS = "필수 항목 누락"
DECISIONS = {"approve": JoinRequestStatus.APPROVED, "reject": JoinRequestStatus.REJECTED}


def region_fields(region_detail: Optional[Mapping[str, Any]]) -> tuple[Optional[str], Optional[str]]:
    """REGION_CODE is `SIDO-SIGUNGU`, REGION_PATH is `sido sigungu dongEupMyeon`."""
    if not region_detail:
        return None, None

    sido = str(region_detail.get("sido") or "").strip()
    sigungu = str(region_detail.get("sigungu") or "").strip()
    dong = str(region_detail.get("dongEupMyeon") or "").strip()

    code = "-".join(p for p in (sido, sigungu) if p).upper()[:REGION_CODE_MAX_LEN]
    path = " ".join(p for p in (sido, sigungu, dong) if p).strip()[:REGION_PATH_MAX_LEN]
    return code or None, path or None


def normalize_tags(raw: Any) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("태그 형식이 올바르지 않습니다.")

    out: list[str] = []
    for item in raw:
        tag = str(item or "").strip().lstrip("#").strip()
        if tag and tag not in out:
            out.append(tag[:50])
    return tuple(out[:MAX_TAGS])


class StudyService:
    def __init__(self, studies: StudyRepository):
        self._studies = studies

    # -------- Studies --------
    def build_new_study(self, *, owner_id: int, payload: Mapping[str, Any]) -> NewStudy:
        name = optional_text(payload.get("name"))
        description = optional_text(payload.get("description"))
        study_type = optional_text(payload.get("type"))
        duration = optional_text(payload.get("duration"))
        if not name or not description or not study_type or not duration or not owner_id:
            raise ValidationError(MISSING_FIELDS)

        try:
            study_type_e = StudyType(study_type.lower())
        except ValueError:
            raise ValidationError("스터디 유형이 올바르지 않습니다.")
        try:
            term_type = TermType(duration.upper())
        except ValueError:
            raise ValidationError("스터디 기간 유형이 올바르지 않습니다.")

        is_online = study_type_e == StudyType.ONLINE
        region_code, region_path = (None, None)
        if not is_online:
            region_detail = payload.get("regionDetail")
            if region_detail is not None and not isinstance(region_detail, Mapping):
                raise ValidationError("지역 정보가 올바르지 않습니다.")
            region_code, region_path = region_fields(region_detail)

        start_date = parse_optional_date(payload.get("startDate"), "시작일 형식이 올바르지 않습니다.")
        end_date = parse_optional_date(payload.get("endDate"), "종료일 형식이 올바르지 않습니다.")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("종료일은 시작일 이후여야 합니다.")

        max_members_raw = payload.get("maxMembers")
        if max_members_raw in (None, ""):
            max_members = DEFAULT_MAX_MEMBERS
        else:
            max_members = require_int_range(
                max_members_raw,
                f"최대 인원은 {MIN_MAX_MEMBERS}~{MAX_MAX_MEMBERS}명이어야 합니다.",
                low=MIN_MAX_MEMBERS,
                high=MAX_MAX_MEMBERS,
            )

        return NewStudy(
            name=name[:200],
            description=description,
            subject=optional_text(payload.get("subject")),
            is_online=is_online,
            term_type=term_type,
            region_code=region_code,
            region_path=region_path,
            start_date=start_date,
            end_date=end_date,
            max_members=max_members,
            created_by=int(owner_id),
            tags=normalize_tags(payload.get("tags")),
        )

    def create_study(self, *, owner_id: int, payload: Mapping[str, Any]) -> Study:
        new = self.build_new_study(owner_id=owner_id, payload=payload)
        study_id = self._studies.create_study(new)
        logger.info("study created study_id=%s owner=%s", study_id, owner_id)
        return load_study(self._studies, study_id)

    def list_studies(
        self,
        *,
        status: Optional[str] = None,
        study_type: Optional[str] = None,
        query: Optional[str] = None,
    ) -> Sequence[Study]:
        status_e = None
        if status:
            try:
                status_e = StudyStatus.from_label(status)
            except ValueError:
                raise ValidationError("스터디 상태 값이 올바르지 않습니다.")

        is_online = None
        if study_type:
            try:
                is_online = StudyType(study_type.strip().lower()) == StudyType.ONLINE
            except ValueError:
                raise ValidationError("스터디 유형이 올바르지 않습니다.")

        return self._studies.list_studies(status=status_e, is_online=is_online, query=optional_text(query))

    def get_study(self, study_id: int) -> Study:
        return load_study(self._studies, study_id)

    def change_status(self, *, study_id: int, user_id: int, status: Optional[str]) -> Study:
        ensure_owner(self._studies, study_id, user_id)
        try:
            status_e = StudyStatus.from_label(status or "")
        except ValueError:
            raise ValidationError("스터디 상태 값이 올바르지 않습니다.")
        self._studies.update_status(study_id=int(study_id), status=status_e)
        return load_study(self._studies, study_id)

    # -------- Members --------
    def list_members(self, study_id: int) -> Sequence[StudyMember]:
        load_study(self._studies, study_id)
        return self._studies.list_members(study_id=int(study_id))

    def membership_status(self, *, study_id: int, user_id: Optional[int]) -> MembershipStatus:
        study = load_study(self._studies, study_id)
        if user_id is None:
            return MembershipStatus.NONE
        if study.created_by == int(user_id):
            return MembershipStatus.OWNER

        member = self._studies.get_member(study_id=study.study_id, user_id=int(user_id))
        if member:
            return MembershipStatus.OWNER if member.role == MemberRole.OWNER else MembershipStatus.MEMBER
        if self._studies.get_pending_request(study_id=study.study_id, user_id=int(user_id)):
            return MembershipStatus.PENDING
        return MembershipStatus.NONE

    # -------- Join requests --------
    def request_join(self, *, study_id: int, user_id: int, message: Optional[str] = None) -> JoinRequest:
        study = load_study(self._studies, study_id)
        if study.created_by == int(user_id) or self._studies.get_member(study_id=study.study_id, user_id=int(user_id)):
            raise ConflictError("이미 참여 중인 스터디입니다.")

        existing = self._studies.get_pending_request(study_id=study.study_id, user_id=int(user_id))
        if existing:
            return existing

        if study.status != StudyStatus.OPEN:
            raise ConflictError("모집 중인 스터디가 아닙니다.")
        if study.is_full:
            raise ConflictError("모집 인원이 가득 찼습니다.")

        request_id = self._studies.create_join_request(
            study_id=study.study_id,
            user_id=int(user_id),
            message=optional_text(message),
        )
        created = self._studies.get_join_request(request_id=request_id)
        if not created:
            raise NotFoundError("요청을 찾을 수 없습니다.")
        return created

    def cancel_join(self, *, study_id: int, user_id: int) -> bool:
        load_study(self._studies, study_id)
        pending = self._studies.get_pending_request(study_id=int(study_id), user_id=int(user_id))
        if not pending:
            return False
        return self._studies.decide_join_request(
            request_id=pending.request_id,
            status=JoinRequestStatus.CANCELLED,
            decided_by=int(user_id),
        )

    def list_join_requests(self, *, study_id: int, user_id: int) -> Sequence[JoinRequest]:
        ensure_owner(self._studies, study_id, user_id)
        return self._studies.list_join_requests(study_id=int(study_id), status=JoinRequestStatus.PENDING)

    def decide_join_request(self, *, request_id: int, decision: Optional[str], decided_by: int) -> JoinRequest:
        status = DECISIONS.get((decision or "").strip().lower())
        if status is None:
            raise ValidationError("decision 값이 올바르지 않습니다.")

        req = self._studies.get_join_request(request_id=int(request_id))
        if not req:
            raise NotFoundError("요청을 찾을 수 없습니다.")

        study = ensure_owner(self._studies, req.study_id, decided_by)
        if req.status != JoinRequestStatus.PENDING:
            raise ConflictError("이미 처리된 요청입니다.")

        if status == JoinRequestStatus.APPROVED:
            outcome = self._studies.approve_join_request(request_id=req.request_id, decided_by=int(decided_by))
            if outcome == ApprovalOutcome.FULL:
                raise ConflictError("모집 인원이 가득 찼습니다.")
            if outcome != ApprovalOutcome.APPROVED:
                raise ConflictError("이미 처리된 요청입니다.")
            logger.info("join request approved request_id=%s study_id=%s", req.request_id, study.study_id)
        elif not self._studies.decide_join_request(request_id=req.request_id, status=status, decided_by=int(decided_by)):
            raise ConflictError("이미 처리된 요청입니다.")

        decided = self._studies.get_join_request(request_id=req.request_id)
        if not decided:
            raise NotFoundError("요청을 찾을 수 없습니다.")
        return decided
