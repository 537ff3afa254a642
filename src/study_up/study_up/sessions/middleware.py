from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import Flask, g, request

from ..common.http import json_error
from .store import SessionStore, SessionUser

logger = logging.getLogger(__name__)

LOGIN_REQUIRED_MESSAGE = "로그인이 필요합니다."


def bearer_token(header_value: Optional[str]) -> str:
    """Token from an Authorization header; a bare token without the scheme is accepted too."""
    header = (header_value or "").strip()
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return header


def install(app: Flask, store: SessionStore) -> None:
    @app.before_request
    def _attach_user_from_token():
        g.current_user = None
        g.token = None

        token = bearer_token(request.headers.get("Authorization"))
        if not token:
            return None

        user = store.get_user(token)
        if user is None:
            logger.warning("invalid token received %s", token[:12])
            return None

        g.current_user = user
        g.token = token
        return None


def current_user() -> Optional[SessionUser]:
    return g.get("current_user")


def current_token() -> Optional[str]:
    return g.get("token")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return json_error(LOGIN_REQUIRED_MESSAGE, 401)
        return view(*args, **kwargs)

    return wrapper
