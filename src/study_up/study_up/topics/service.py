from __future__ import annotations

import logging
from typing import Sequence

from ..core.constants import FALLBACK_SUBJECTS
from .model import Topic
from .repository import TopicRepository

logger = logging.getLogger(__name__)


class TopicService:
    def __init__(self, topics: TopicRepository):
        self._topics = topics

    def list_topics(self) -> Sequence[Topic]:
        return self._topics.list_all()

    def list_options(self) -> list[dict]:
        """Dropdown options `{label, value}`; falls back to the built-in subject list when the DB fails."""
        try:
            topics = self._topics.list_all()
        except Exception:
            logger.exception("loading topic options failed, using fallback subjects")
            return [{"label": s, "value": s} for s in FALLBACK_SUBJECTS]
        return [{"label": t.label, "value": t.label} for t in topics]
