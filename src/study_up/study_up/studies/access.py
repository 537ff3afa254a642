from __future__ import annotations

from ..core.exceptions import AuthorizationError, NotFoundError
from .model import Study
from .repository import StudyRepository

STUDY_NOT_FOUND = "스터디를 찾을 수 없습니다."
OWNER_ONLY = "방장만 접근할 수 있습니다."


def load_study(studies: StudyRepository, study_id: int) -> Study:
    study = studies.get_by_id(int(study_id))
    if not study:
        raise NotFoundError(STUDY_NOT_FOUND)
    return study


def ensure_owner(studies: StudyRepository, study_id: int, user_id: int) -> Study:
    study = load_study(studies, study_id)
    if study.created_by != int(user_id):
        raise AuthorizationError(OWNER_ONLY)
    return study


def ensure_member(studies: StudyRepository, study_id: int, user_id: int, *, message: str) -> Study:
    study = load_study(studies, study_id)
    if study.created_by == int(user_id):
        return study
    member = studies.get_member(study_id=study.study_id, user_id=int(user_id))
    if not member:
        raise AuthorizationError(message)
    return study
