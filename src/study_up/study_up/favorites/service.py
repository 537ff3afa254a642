from __future__ import annotations

from typing import Sequence

from ..studies.access import load_study
from ..studies.model import Study
from ..studies.repository import StudyRepository
from .repository import FavoriteRepository


class FavoriteService:
    """Add/remove are idempotent."""

    def __init__(self, favorites: FavoriteRepository, studies: StudyRepository):
        self._favorites = favorites
        self._studies = studies

    def add(self, *, user_id: int, study_id: int) -> None:
        load_study(self._studies, study_id)
        self._favorites.add(user_id=int(user_id), study_id=int(study_id))

    def remove(self, *, user_id: int, study_id: int) -> None:
        self._favorites.remove(user_id=int(user_id), study_id=int(study_id))

    def list_favorites(self, *, user_id: int) -> Sequence[Study]:
        out: list[Study] = []
        for study_id in self._favorites.list_study_ids(user_id=int(user_id)):
            study = self._studies.get_by_id(study_id)
            if study:
                out.append(study)
        return out
