from __future__ import annotations

from typing import Any, Sequence

from ..core.constants import DEFAULT_CHAT_LIMIT, MAX_CHAT_LIMIT
from ..core.exceptions import NotFoundError, ValidationError
from ..studies.access import ensure_member
from ..studies.repository import StudyRepository
from .model import ChatMessage, ChatSummary
from .repository import ChatRepository


def resolve_limit(raw: Any, *, default: int = DEFAULT_CHAT_LIMIT) -> int:
    """Missing, non-numeric or non-positive limits fall back to the default."""
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return default
    if limit <= 0:
        return default
    return min(limit, MAX_CHAT_LIMIT)


class ChatService:
    def __init__(self, chat: ChatRepository, studies: StudyRepository, *, default_limit: int = DEFAULT_CHAT_LIMIT):
        self._chat = chat
        self._studies = studies
        self._default_limit = int(default_limit)

    def list_messages(self, *, study_id: int, user_id: int, limit: Any = None) -> Sequence[ChatMessage]:
        ensure_member(self._studies, study_id, user_id, message="스터디 멤버만 채팅을 볼 수 있습니다.")
        return self._chat.list_recent(
            study_id=int(study_id),
            limit=resolve_limit(limit, default=self._default_limit),
        )

    def post_message(self, *, study_id: int, user_id: int, text: Any) -> ChatMessage:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("메시지를 입력해 주세요.")
        ensure_member(self._studies, study_id, user_id, message="스터디 멤버만 메시지를 보낼 수 있습니다.")

        message_id = self._chat.create_message(study_id=int(study_id), user_id=int(user_id), content=text.strip())
        message = self._chat.get_message(message_id=message_id)
        if not message:
            raise NotFoundError("메시지를 저장하지 못했습니다.")
        return message

    def list_my_chats(self, *, user_id: int) -> Sequence[ChatSummary]:
        return self._chat.list_chats_for_user(user_id=int(user_id))
