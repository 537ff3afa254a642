from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_errors
from ..container import Container
from ..sessions.middleware import current_user, login_required


def register(app: Flask, container: Container) -> None:
    service = container.favorite_service

    @app.route("/api/studies/<int:study_id>/favorite", methods=["POST"], endpoint="add_favorite")
    @login_required
    @api_errors("관심 스터디 등록에 실패했습니다.")
    def add_favorite(study_id: int):
        service.add(user_id=current_user().user_id, study_id=study_id)
        return jsonify({"studyId": study_id, "isFavorite": True})

    @app.route("/api/studies/<int:study_id>/favorite", methods=["DELETE"], endpoint="remove_favorite")
    @login_required
    @api_errors("관심 스터디 해제에 실패했습니다.")
    def remove_favorite(study_id: int):
        service.remove(user_id=current_user().user_id, study_id=study_id)
        return jsonify({"studyId": study_id, "isFavorite": False})

    @app.route("/api/me/favorites", methods=["GET"], endpoint="my_favorites")
    @login_required
    @api_errors("관심 스터디 조회에 실패했습니다.")
    def my_favorites():
        studies = service.list_favorites(user_id=current_user().user_id)
        return jsonify([{**s.to_dict(), "isFavorite": True} for s in studies])
