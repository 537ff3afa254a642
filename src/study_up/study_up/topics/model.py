from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..database.mysql_base import to_json_value


@dataclass(frozen=True)
class Topic:
    topic_id: int
    code: str
    name_ko: str
    title: Optional[str] = None
    body: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def label(self) -> str:
        return self.title or self.name_ko

    def to_dict(self) -> dict:
        return {
            "topicId": self.topic_id,
            "code": self.code,
            "nameKo": self.name_ko,
            "title": self.title,
            "body": self.body,
            "createdAt": to_json_value(self.created_at),
        }
