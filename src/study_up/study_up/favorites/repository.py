from __future__ import annotations

from typing import Protocol, Sequence


class FavoriteRepository(Protocol):
    def add(self, *, user_id: int, study_id: int) -> None:
        raise NotImplementedError

    def remove(self, *, user_id: int, study_id: int) -> bool:
        raise NotImplementedError

    def list_study_ids(self, *, user_id: int) -> Sequence[int]:
        """Most recently favorited first."""

        raise NotImplementedError
