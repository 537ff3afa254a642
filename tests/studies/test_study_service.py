from __future__ import annotations

import threading
import time
from datetime import date

import pytest

from src.study_up.study_up.core.enums import JoinRequestStatus, MemberRole, MembershipStatus, StudyStatus, TermType
from src.study_up.study_up.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.study_up.study_up.studies.service import StudyService, normalize_tags, region_fields
from tests.fakes import InMemoryStudies, InMemoryUsers

OWNER = 1


def _service():
    users = InMemoryUsers()
    for uid in (1, 2, 3, 4):
        users.create_user(email=f"u{uid}@study.up", nickname=f"u{uid}", password_hash="x")
    studies = InMemoryStudies(users)
    return studies, StudyService(studies)


def _payload(**overrides):
    payload = {"name": "토익 스터디", "description": "900점 목표", "type": "online", "duration": "long"}
    payload.update(overrides)
    return payload


def test_create_study_defaults_and_owner_membership():
    studies, service = _service()

    study = service.create_study(owner_id=OWNER, payload=_payload(tags=["영어", " 영어", "#토익"]))

    assert study.is_online is True
    assert study.term_type == TermType.LONG
    assert study.status == StudyStatus.OPEN
    assert study.max_members == 10
    assert study.progress_pct == 0
    assert study.current_members == 1
    assert study.tags == ("영어", "토익")
    assert studies.get_member(study_id=study.study_id, user_id=OWNER).role == MemberRole.OWNER


def test_create_study_missing_required_fields():
    _, service = _service()
    with pytest.raises(ValidationError):
        service.create_study(owner_id=OWNER, payload=_payload(name=""))
    with pytest.raises(ValidationError):
        service.create_study(owner_id=OWNER, payload=_payload(duration=None))


def test_offline_study_region_fields():
    _, service = _service()
    study = service.create_study(
        owner_id=OWNER,
        payload=_payload(
            type="offline",
            regionDetail={"sido": "seoul", "sigungu": "gangnam-gu", "dongEupMyeon": "역삼동"},
        ),
    )
    assert study.is_online is False
    assert study.region_code == "SEOUL-GANGNAM-GU"
    assert study.region_path == "seoul gangnam-gu 역삼동"


def test_region_code_is_cut_to_twenty_chars():
    code, path = region_fields({"sido": "a" * 15, "sigungu": "b" * 15, "dongEupMyeon": "c"})
    assert len(code) == 20
    assert path.endswith(" c")


def test_region_fields_empty_detail():
    assert region_fields(None) == (None, None)


def test_dates_empty_become_none_and_end_before_start_rejected():
    _, service = _service()
    study = service.create_study(owner_id=OWNER, payload=_payload(startDate="", endDate="2024-05-01"))
    assert study.start_date is None
    assert study.end_date == date(2024, 5, 1)

    with pytest.raises(ValidationError):
        service.create_study(owner_id=OWNER, payload=_payload(startDate="2024-05-02", endDate="2024-05-01"))


@pytest.mark.parametrize("value", [1, 101, "many"])
def test_max_members_bounds(value):
    _, service = _service()
    with pytest.raises(ValidationError):
        service.create_study(owner_id=OWNER, payload=_payload(maxMembers=value))


def test_tags_limited_to_ten():
    assert len(normalize_tags([f"t{i}" for i in range(15)])) == 10
    assert normalize_tags("a, b,,a") == ("a", "b")


def test_list_studies_filters():
    _, service = _service()
    service.create_study(owner_id=OWNER, payload=_payload(name="파이썬", type="online"))
    service.create_study(owner_id=OWNER, payload=_payload(name="영어 회화", type="offline"))

    assert [s.name for s in service.list_studies()] == ["영어 회화", "파이썬"]
    assert [s.name for s in service.list_studies(study_type="online")] == ["파이썬"]
    assert [s.name for s in service.list_studies(query="회화")] == ["영어 회화"]
    assert len(service.list_studies(status="recruiting")) == 2
    assert service.list_studies(status="completed") == []

    with pytest.raises(ValidationError):
        service.list_studies(status="bogus")


def test_get_unknown_study_is_not_found():
    _, service = _service()
    with pytest.raises(NotFoundError):
        service.get_study(99)


def test_join_request_flow_and_membership_status():
    _, service = _service()
    study = service.create_study(owner_id=OWNER, payload=_payload())

    assert service.membership_status(study_id=study.study_id, user_id=None) == MembershipStatus.NONE
    assert service.membership_status(study_id=study.study_id, user_id=OWNER) == MembershipStatus.OWNER

    req = service.request_join(study_id=study.study_id, user_id=2, message="열심히 할게요")
    assert req.status == JoinRequestStatus.PENDING
    assert service.membership_status(study_id=study.study_id, user_id=2) == MembershipStatus.PENDING

    # Asking twice returns the same pending request.
    assert service.request_join(study_id=study.study_id, user_id=2).request_id == req.request_id

    decided = service.decide_join_request(request_id=req.request_id, decision="approve", decided_by=OWNER)
    assert decided.status == JoinRequestStatus.APPROVED
    assert service.membership_status(study_id=study.study_id, user_id=2) == MembershipStatus.MEMBER
    assert service.get_study(study.study_id).current_members == 2

    with pytest.raises(ConflictError):
        service.request_join(study_id=study.study_id, user_id=2)


def test_owner_cannot_request_to_join():
    _, service = _service()
    study = service.create_study(owner_id=OWNER, payload=_payload())
    with pytest.raises(ConflictError):
        service.request_join(study_id=study.study_id, user_id=OWNER)


def test_decide_twice_is_conflict_and_bad_decision_is_invalid():
    _, service = _service()
    study = service.create_study(owner_id=OWNER, payload=_payload())
    req = service.request_join(study_id=study.study_id, user_id=2)

    with pytest.raises(ValidationError):
        service.decide_join_request(request_id=req.request_id, decision="maybe", decided_by=OWNER)

    service.decide_join_request(request_id=req.request_id, decision="reject", decided_by=OWNER)
    with pytest.raises(ConflictError):
        service.decide_join_request(request_id=req.request_id, decision="approve", decided_by=OWNER)

    with pytest.raises(NotFoundError):
        service.decide_join_request(request_id=999, decision="approve", decided_by=OWNER)


def test_only_owner_decides_or_lists_requests():
    _, service = _service()
    study = service.create_study(owner_id=OWNER, payload=_payload())
    req = service.request_join(study_id=study.study_id, user_id=2)

    with pytest.raises(AuthorizationError):
        service.decide_join_request(request_id=req.request_id, decision="approve", decided_by=3)
    with pytest.raises(AuthorizationError):
        service.list_join_requests(study_id=study.study_id, user_id=3)

    assert [r.user_id for r in service.list_join_requests(study_id=study.study_id, user_id=OWNER)] == [2]


def test_approve_never_exceeds_max_members():
    _, service = _service()
    study = service.create_study(owner_id=OWNER, payload=_payload(maxMembers=2))

    first = service.request_join(study_id=study.study_id, user_id=2)
    second = service.request_join(study_id=study.study_id, user_id=3)
    service.decide_join_request(request_id=first.request_id, decision="approve", decided_by=OWNER)

    with pytest.raises(ConflictError):
        service.decide_join_request(request_id=second.request_id, decision="approve", decided_by=OWNER)
    assert service.get_study(study.study_id).current_members == 2

    # A full study takes no new requests either.
    with pytest.raises(ConflictError):
        service.request_join(study_id=study.study_id, user_id=4)


def test_cancel_pending_request():
    studies, service = _service()
    study = service.create_study(owner_id=OWNER, payload=_payload())
    req = service.request_join(study_id=study.study_id, user_id=2)

    assert service.cancel_join(study_id=study.study_id, user_id=2) is True
    assert studies.get_join_request(request_id=req.request_id).status == JoinRequestStatus.CANCELLED
    assert service.cancel_join(study_id=study.study_id, user_id=2) is False


def test_change_status_owner_only_and_closed_study_rejects_requests():
    _, service = _service()
    study = service.create_study(owner_id=OWNER, payload=_payload())

    with pytest.raises(AuthorizationError):
        service.change_status(study_id=study.study_id, user_id=2, status="active")

    updated = service.change_status(study_id=study.study_id, user_id=OWNER, status="active")
    assert updated.status == StudyStatus.ACTIVE
    assert updated.to_dict()["status"] == "active"

    with pytest.raises(ConflictError):
        service.request_join(study_id=study.study_id, user_id=2)


class _SlowCountStudies(InMemoryStudies):
    def count_members(self, *, study_id: int) -> int:
        count = super().count_members(study_id=study_id)
        time.sleep(0.05)
        return count


def test_concurrent_approvals_respect_max_members():
    users = InMemoryUsers()
    for uid in (1, 2, 3):
        users.create_user(email=f"u{uid}@study.up", nickname=f"u{uid}", password_hash="x")
    studies = _SlowCountStudies(users)
    service = StudyService(studies)

    study = service.create_study(owner_id=OWNER, payload=_payload(maxMembers=2))
    requests = [service.request_join(study_id=study.study_id, user_id=uid) for uid in (2, 3)]

    barrier = threading.Barrier(len(requests))
    outcomes = []

    def approve(request_id):
        barrier.wait()
        try:
            service.decide_join_request(request_id=request_id, decision="approve", decided_by=OWNER)
            outcomes.append("approved")
        except ConflictError:
            outcomes.append("full")

    threads = [threading.Thread(target=approve, args=(r.request_id,)) for r in requests]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["approved", "full"]
    assert service.get_study(study.study_id).current_members == 2
    assert [r.status for r in studies.list_join_requests(study_id=study.study_id, status=None)].count(
        JoinRequestStatus.APPROVED
    ) == 1
