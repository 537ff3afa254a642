from __future__ import annotations

import base64
import json

from src.study_up.study_up.sessions.middleware import bearer_token
from src.study_up.study_up.sessions.store import SessionStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _issue(store: SessionStore, user_id: int = 1) -> str:
    return store.issue_token(user_id=user_id, email="a@b.c", nickname="a", role="USER", status="ACTIVE")


def test_token_has_payload_and_random_suffix():
    store = SessionStore()
    token = _issue(store, user_id=7)

    payload, suffix = token.rsplit(".", 1)
    assert len(suffix) == 32
    int(suffix, 16)

    decoded = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
    assert decoded["user_id"] == 7
    assert decoded["nickname"] == "a"


def test_get_user_returns_snapshot():
    store = SessionStore()
    token = _issue(store, user_id=3)

    user = store.get_user(token)
    assert user is not None
    assert user.user_id == 3
    assert user.to_public() == {"user_id": 3, "email": "a@b.c", "nickname": "a", "role": "USER", "status": "ACTIVE"}


def test_revoked_token_never_validates_again():
    store = SessionStore()
    token = _issue(store)
    store.revoke(token)

    assert store.get_user(token) is None
    assert store.get_user(token) is None
    assert len(store) == 0


def test_unknown_token_with_valid_payload_is_rejected():
    store = SessionStore()
    token = _issue(store)
    other = SessionStore()

    # Same payload format, but the store never issued it.
    assert other.get_user(token) is None


def test_revoke_unknown_token_is_ignored():
    store = SessionStore()
    store.revoke("nope")
    store.revoke(None)
    assert len(store) == 0


def test_tokens_expire_after_ttl():
    clock = FakeClock()
    store = SessionStore(ttl_seconds=60, clock=clock)
    token = _issue(store)

    clock.now += 60
    assert store.get_user(token) is not None

    clock.now += 1
    assert store.get_user(token) is None
    assert len(store) == 0


def test_zero_ttl_never_expires():
    clock = FakeClock()
    store = SessionStore(ttl_seconds=0, clock=clock)
    token = _issue(store)

    clock.now += 10 ** 9
    assert store.get_user(token) is not None


def test_bearer_token_accepts_scheme_and_bare_token():
    assert bearer_token("Bearer abc.def") == "abc.def"
    assert bearer_token("abc.def") == "abc.def"
    assert bearer_token("  Bearer   xyz ") == "xyz"
    assert bearer_token(None) == ""
    assert bearer_token("") == ""
