from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..attendance.service import AttendanceService
from ..common.numbers import mean_rounded
from ..common.validators import require_non_empty
from ..core.enums import Role, UserStatus
from ..core.exceptions import (
    AuthenticationError,
    DuplicateEmailError,
    InactiveAccountError,
    NotFoundError,
    ValidationError,
)
from ..sessions.store import SessionStore
from ..studies.repository import StudyRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "email과 password는 필수입니다."
BAD_CREDENTIALS = "이메일 또는 비밀번호가 올바르지 않습니다."


@dataclass(frozen=True)
class AuthResult:
    """What signup/login/nickname update hand back to the client."""

    user: User
    token: str

    def to_dict(self) -> dict:
        return {"user": self.user.to_public(), "token": self.token}


def _issue(sessions: SessionStore, user: User) -> str:
    return sessions.issue_token(
        user_id=user.user_id,
        email=user.email,
        nickname=user.nickname,
        role=user.role.value,
        status=user.status.value,
    )


class AuthService:
    """Use cases: signup, login, logout."""

    def __init__(self, users: UserRepository, sessions: SessionStore):
        self._users = users
        self._sessions = sessions

    def signup(self, *, email: Optional[str], password: Optional[str], nickname: Optional[str] = None) -> AuthResult:
        email = require_non_empty(email, MISSING_CREDENTIALS)
        if not password:
            raise ValidationError(MISSING_CREDENTIALS)

        if self._users.get_by_email(email):
            raise DuplicateEmailError("이미 가입된 이메일입니다.")

        final_nickname = (nickname or "").strip() or email.split("@")[0]

        user_id = self._users.create_user(
            email=email,
            nickname=final_nickname,
            password_hash=generate_password_hash(password),
            role=Role.USER,
            status=UserStatus.ACTIVE,
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("사용자를 찾을 수 없습니다.")

        logger.info("user signed up user_id=%s", user.user_id)
        return AuthResult(user=user, token=_issue(self._sessions, user))

    def login(self, *, email: Optional[str], password: Optional[str]) -> AuthResult:
        email = require_non_empty(email, MISSING_CREDENTIALS)
        if not password:
            raise ValidationError(MISSING_CREDENTIALS)

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError(BAD_CREDENTIALS)

        try:
            ok = check_password_hash(user.password_hash, password)
        except (TypeError, ValueError):
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False
        if not ok:
            raise AuthenticationError(BAD_CREDENTIALS)

        if not user.is_active:
            raise InactiveAccountError("비활성화된 계정입니다.")

        return AuthResult(user=user, token=_issue(self._sessions, user))

    def logout(self, token: Optional[str]) -> None:
        self._sessions.revoke(token)


class ProfileService:
    """Use cases: read the own profile, change nickname."""

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionStore,
        studies: Optional[StudyRepository] = None,
        attendance: Optional[AttendanceService] = None,
    ):
        self._users = users
        self._sessions = sessions
        self._studies = studies
        self._attendance = attendance

    def update_nickname(self, *, user_id: int, nickname: Optional[str], old_token: Optional[str]) -> AuthResult:
        trimmed = require_non_empty(nickname, "닉네임을 입력해 주세요.")

        if not self._users.get_by_id(user_id):
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        self._users.update_nickname(user_id=int(user_id), nickname=trimmed)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("프로필 정보를 불러올 수 없습니다.")

        # The old token carries the old nickname snapshot.
        self._sessions.revoke(old_token)
        return AuthResult(user=user, token=_issue(self._sessions, user))

    def get_profile(self, *, user_id: int) -> dict:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("사용자를 찾을 수 없습니다.")

        profile = user.to_public()
        profile["gender"] = user.gender

        attendance_rate = 0
        if self._attendance:
            attendance_rate = self._attendance.attendance_rate(user_id=int(user_id))

        avg_progress = 0
        study_count = 0
        if self._studies:
            studies = self._studies.list_for_member(user_id=int(user_id))
            study_count = len(studies)
            if studies:
                avg_progress = mean_rounded(s.progress_pct for s in studies)

        profile["attendanceRate"] = attendance_rate
        profile["avgProgressRate"] = avg_progress
        profile["studyCount"] = study_count
        return profile
