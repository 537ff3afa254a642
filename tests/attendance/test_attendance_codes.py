from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.study_up.study_up.attendance.service import AttendanceService, generate_code
from src.study_up.study_up.core.constants import ATTENDANCE_CODE_ALPHABET
from src.study_up.study_up.core.enums import TermType
from src.study_up.study_up.core.exceptions import AuthorizationError, ConflictError, ValidationError
from src.study_up.study_up.studies.model import NewStudy
from tests.fakes import InMemoryAttendance, InMemoryStudies, InMemoryUsers

OWNER, MEMBER, OUTSIDER = 1, 2, 3
NOW = datetime(2024, 3, 4, 19, 0, 0)


def _setup(code: str = "AB12CD"):
    users = InMemoryUsers()
    for uid in (OWNER, MEMBER, OUTSIDER):
        users.create_user(email=f"u{uid}@study.up", nickname=f"u{uid}", password_hash="x")
    studies = InMemoryStudies(users)
    study_id = studies.create_study(
        NewStudy(
            name="s",
            description="d",
            subject=None,
            is_online=True,
            term_type=TermType.SHORT,
            region_code=None,
            region_path=None,
            start_date=None,
            end_date=None,
            max_members=5,
            created_by=OWNER,
        )
    )
    studies.add_member(study_id=study_id, user_id=MEMBER)
    attendance = InMemoryAttendance(studies, users)
    service = AttendanceService(attendance, studies, code_ttl_seconds=300, code_generator=lambda: code)
    return attendance, service, study_id


def test_generate_code_shape():
    code = generate_code()
    assert len(code) == 6
    assert all(ch in ATTENDANCE_CODE_ALPHABET for ch in code)


def test_open_code_expires_after_ttl():
    _, service, study_id = _setup()
    session = service.open_code(study_id=study_id, user_id=OWNER, now=NOW)

    assert session.code == "AB12CD"
    assert session.expires_at == NOW + timedelta(seconds=300)
    assert session.to_dict(NOW)["secondsLeft"] == 300
    assert session.to_dict(NOW)["active"] is True


def test_only_owner_opens_code():
    _, service, study_id = _setup()
    with pytest.raises(AuthorizationError):
        service.open_code(study_id=study_id, user_id=MEMBER, now=NOW)


def test_opening_a_new_code_deactivates_previous():
    attendance, service, study_id = _setup()
    first = service.open_code(study_id=study_id, user_id=OWNER, now=NOW)
    second = service.open_code(study_id=study_id, user_id=OWNER, now=NOW + timedelta(seconds=10))

    assert attendance.get_session(session_id=first.session_id).is_active is False
    assert attendance.get_active_for_study(study_id=study_id).session_id == second.session_id


def test_check_in_is_case_insensitive_and_once_per_session():
    _, service, study_id = _setup()
    service.open_code(study_id=study_id, user_id=OWNER, now=NOW)

    record = service.check_in(study_id=study_id, user_id=MEMBER, code=" ab12cd ", now=NOW + timedelta(seconds=30))
    assert record.user_id == MEMBER
    assert record.nickname == "u2"

    with pytest.raises(ConflictError):
        service.check_in(study_id=study_id, user_id=MEMBER, code="AB12CD", now=NOW + timedelta(seconds=40))


def test_check_in_wrong_or_expired_code():
    _, service, study_id = _setup()

    with pytest.raises(ValidationError):
        service.check_in(study_id=study_id, user_id=MEMBER, code="AB12CD", now=NOW)

    service.open_code(study_id=study_id, user_id=OWNER, now=NOW)
    with pytest.raises(ValidationError):
        service.check_in(study_id=study_id, user_id=MEMBER, code="ZZZZZZ", now=NOW)
    with pytest.raises(ValidationError):
        service.check_in(study_id=study_id, user_id=MEMBER, code="AB12CD", now=NOW + timedelta(seconds=301))


def test_closed_code_rejects_check_in():
    _, service, study_id = _setup()
    service.open_code(study_id=study_id, user_id=OWNER, now=NOW)
    service.close_code(study_id=study_id, user_id=OWNER)

    assert service.current_code(study_id=study_id, user_id=OWNER, now=NOW) is None
    with pytest.raises(ValidationError):
        service.check_in(study_id=study_id, user_id=MEMBER, code="AB12CD", now=NOW)


def test_non_member_cannot_check_in():
    _, service, study_id = _setup()
    service.open_code(study_id=study_id, user_id=OWNER, now=NOW)
    with pytest.raises(AuthorizationError):
        service.check_in(study_id=study_id, user_id=OUTSIDER, code="AB12CD", now=NOW)


def test_records_by_date_and_attendance_rate():
    _, service, study_id = _setup()

    service.open_code(study_id=study_id, user_id=OWNER, now=NOW)
    service.check_in(study_id=study_id, user_id=MEMBER, code="AB12CD", now=NOW)

    next_week = NOW + timedelta(days=7)
    service.open_code(study_id=study_id, user_id=OWNER, now=next_week)

    day_one = service.list_for_date(study_id=study_id, user_id=OWNER, day="2024-03-04")
    assert [r.user_id for r in day_one] == [MEMBER]
    assert service.list_for_date(study_id=study_id, user_id=MEMBER, day="", today=date(2024, 3, 11)) == []

    # 1 of 2 sessions attended.
    assert service.attendance_rate(user_id=MEMBER) == 50
    assert service.attendance_rate(user_id=OUTSIDER) == 0

    with pytest.raises(ValidationError):
        service.list_for_date(study_id=study_id, user_id=OWNER, day="03/04/2024")
