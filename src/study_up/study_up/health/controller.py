from __future__ import annotations

import logging

from flask import Flask, current_app, jsonify

from ..common.http import api_errors
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    repo = container.health_repo

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"ok": True})

    @app.route("/api/health/db", methods=["GET"], endpoint="health_db")
    def health_db():
        try:
            rows = repo.ping()
        except Exception as e:
            logger.exception("database health check failed")
            message = str(e) if current_app.config.get("DEBUG") else "데이터베이스 연결에 실패했습니다."
            return jsonify({"ok": False, "error": message}), 500
        return jsonify({"ok": True, "rows": rows})

    if not app.config.get("ENABLE_DEMO_ROUTES"):
        return

    @app.route("/api/recipes", methods=["GET"], endpoint="list_recipes")
    @api_errors("레시피 목록을 불러오지 못했습니다.")
    def list_recipes():
        return jsonify(repo.list_recipes())
