"""In-memory bearer token store.

Tokens look like ``base64url(user-json).hex(random16)``. The payload segment is
informational only: a token is valid exactly while it is present in the map.
Decoding a token that the map does not know never authenticates anyone, so a
revoked token (or any token after a restart) stays invalid.
"""
from __future__ import annotations

import base64
import json
import logging
import secrets
import threading
import time
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """Plain user snapshot kept per token."""

    user_id: int
    email: str
    nickname: str
    role: str
    status: str
    issued_at: float

    def to_public(self) -> dict:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "nickname": self.nickname,
            "role": self.role,
            "status": self.status,
        }


def _b64url_encode(payload: dict) -> str:
    raw = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


class SessionStore:
    def __init__(self, *, ttl_seconds: int = 0, clock: Callable[[], float] = time.time):
        self._ttl = max(int(ttl_seconds), 0)
        self._clock = clock
        self._sessions: Dict[str, SessionUser] = {}
        self._lock = threading.Lock()

    def issue_token(self, *, user_id: int, email: str, nickname: str, role: str, status: str) -> str:
        snapshot = SessionUser(
            user_id=int(user_id),
            email=email,
            nickname=nickname,
            role=str(role),
            status=str(status),
            issued_at=self._clock(),
        )
        token = f"{_b64url_encode(asdict(snapshot))}.{secrets.token_hex(16)}"
        with self._lock:
            self._sessions[token] = snapshot
        return token

    def get_user(self, token: Optional[str]) -> Optional[SessionUser]:
        if not token:
            return None
        with self._lock:
            snapshot = self._sessions.get(token)
            if snapshot is None:
                return None
            if self._ttl and self._clock() - snapshot.issued_at > self._ttl:
                del self._sessions[token]
                logger.info("session expired for user_id=%s", snapshot.user_id)
                return None
            return snapshot

    def revoke(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
