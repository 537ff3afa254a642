from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash, generate_password_hash

from src.study_up.study_up.core.enums import Role, UserStatus
from src.study_up.study_up.core.exceptions import (
    AuthenticationError,
    DuplicateEmailError,
    InactiveAccountError,
    NotFoundError,
    ValidationError,
)
from src.study_up.study_up.sessions.store import SessionStore
from src.study_up.study_up.users.model import User
from src.study_up.study_up.users.service import AuthService, ProfileService
from tests.fakes import InMemoryUsers


def _auth():
    users = InMemoryUsers()
    sessions = SessionStore()
    return users, sessions, AuthService(users, sessions)


def test_signup_hashes_password_and_issues_token():
    users, sessions, auth = _auth()

    result = auth.signup(email="kim@study.up", password="secret", nickname="  김  ")

    stored = users.get_by_email("kim@study.up")
    assert stored is not None
    assert stored.password_hash != "secret"
    assert check_password_hash(stored.password_hash, "secret")
    assert stored.role == Role.USER
    assert stored.status == UserStatus.ACTIVE
    assert result.user.nickname == "김"
    assert sessions.get_user(result.token).user_id == stored.user_id


def test_signup_defaults_nickname_to_email_local_part():
    _, _, auth = _auth()
    result = auth.signup(email="lee@study.up", password="pw")
    assert result.user.nickname == "lee"


def test_signup_accepts_any_non_empty_email():
    _, _, auth = _auth()
    result = auth.signup(email="guest", password="pw")
    assert result.user.email == "guest"
    assert result.user.nickname == "guest"


def test_signup_requires_email_and_password():
    _, _, auth = _auth()
    with pytest.raises(ValidationError):
        auth.signup(email="", password="pw")
    with pytest.raises(ValidationError):
        auth.signup(email="a@b.c", password=None)


def test_signup_rejects_duplicate_email():
    _, _, auth = _auth()
    auth.signup(email="dup@study.up", password="pw")
    with pytest.raises(DuplicateEmailError):
        auth.signup(email="dup@study.up", password="other")


def test_login_wrong_password_and_unknown_email_are_bad_credentials():
    _, _, auth = _auth()
    auth.signup(email="park@study.up", password="right")

    with pytest.raises(AuthenticationError):
        auth.login(email="park@study.up", password="wrong")
    with pytest.raises(AuthenticationError):
        auth.login(email="ghost@study.up", password="right")


def test_login_placeholder_hash_is_rejected_not_crashing():
    users, _, auth = _auth()
    users.add(User(user_id=5, email="old@study.up", nickname="old", password_hash="CHANGE_ME"))
    with pytest.raises(AuthenticationError):
        auth.login(email="old@study.up", password="CHANGE_ME")


def test_login_inactive_account_is_forbidden():
    users, _, auth = _auth()
    users.add(
        User(
            user_id=9,
            email="off@study.up",
            nickname="off",
            password_hash=generate_password_hash("pw"),
            status=UserStatus.INACTIVE,
        )
    )
    with pytest.raises(InactiveAccountError):
        auth.login(email="off@study.up", password="pw")


def test_login_issues_a_fresh_token_each_time():
    _, sessions, auth = _auth()
    auth.signup(email="choi@study.up", password="pw")

    first = auth.login(email="choi@study.up", password="pw").token
    second = auth.login(email="choi@study.up", password="pw").token

    assert first != second
    assert sessions.get_user(first) is not None
    assert sessions.get_user(second) is not None


def test_update_nickname_revokes_old_token_and_issues_new_one():
    users, sessions, auth = _auth()
    signed = auth.signup(email="jung@study.up", password="pw")
    profiles = ProfileService(users, sessions)

    result = profiles.update_nickname(user_id=signed.user.user_id, nickname=" 새이름 ", old_token=signed.token)

    assert result.user.nickname == "새이름"
    assert result.token != signed.token
    assert sessions.get_user(signed.token) is None
    assert sessions.get_user(result.token).nickname == "새이름"


def test_update_nickname_validation_and_missing_user():
    users, sessions, _ = _auth()
    profiles = ProfileService(users, sessions)

    with pytest.raises(ValidationError):
        profiles.update_nickname(user_id=1, nickname="   ", old_token=None)
    with pytest.raises(NotFoundError):
        profiles.update_nickname(user_id=404, nickname="x", old_token=None)


def test_logout_revokes_token():
    _, sessions, auth = _auth()
    token = auth.signup(email="han@study.up", password="pw").token
    auth.logout(token)
    assert sessions.get_user(token) is None
