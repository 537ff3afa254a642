from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ChatMessage, ChatSummary


class ChatRepository(Protocol):
    def list_recent(self, *, study_id: int, limit: int) -> Sequence[ChatMessage]:
        """The last `limit` messages, oldest first."""

        raise NotImplementedError

    def create_message(self, *, study_id: int, user_id: int, content: str) -> int:
        raise NotImplementedError

    def get_message(self, *, message_id: int) -> Optional[ChatMessage]:
        raise NotImplementedError

    def list_chats_for_user(self, *, user_id: int) -> Sequence[ChatSummary]:
        """Studies the user belongs to, most recent activity first."""

        raise NotImplementedError
