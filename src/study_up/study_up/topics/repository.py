from __future__ import annotations

from typing import Protocol, Sequence

from .model import Topic


class TopicRepository(Protocol):
    def list_all(self) -> Sequence[Topic]:
        """Ordered by topic id."""

        raise NotImplementedError
