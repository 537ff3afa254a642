from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify, request

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def json_error(message: str, status: int):
    return jsonify({"error": message}), status


def json_body() -> dict:
    """Request JSON as a dict; anything else (missing, invalid, a list) becomes {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def api_errors(fallback_message: str):
    """Map DomainError to its status and anything unexpected to a logged 500."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return json_error(str(e) or fallback_message, e.http_status)
            except Exception as e:
                logger.exception("%s %s failed", request.method, request.path)
                if current_app.config.get("DEBUG"):
                    return json_error(str(e) or fallback_message, 500)
                return json_error(fallback_message, 500)

        return wrapper

    return decorator
