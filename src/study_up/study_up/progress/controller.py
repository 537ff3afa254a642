from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_errors, json_body
from ..container import Container
from ..sessions.middleware import current_user, login_required


def register(app: Flask, container: Container) -> None:
    service = container.progress_service

    @app.route("/api/studies/<int:study_id>/progress", methods=["GET"], endpoint="study_progress")
    @login_required
    @api_errors("진행 상황을 불러오지 못했습니다.")
    def study_progress(study_id: int):
        sessions, summary = service.overview(study_id=study_id, user_id=current_user().user_id)
        return jsonify({"sessions": [s.to_dict() for s in sessions], "summary": summary.to_dict()})

    @app.route("/api/studies/<int:study_id>/progress/sessions", methods=["POST"], endpoint="plan_progress_session")
    @login_required
    @api_errors("회차 추가에 실패했습니다.")
    def plan_progress_session(study_id: int):
        session = service.plan_session(study_id=study_id, user_id=current_user().user_id, payload=json_body())
        return jsonify(session.to_dict()), 201

    @app.route("/api/studies/<int:study_id>/progress/record", methods=["POST"], endpoint="record_progress")
    @login_required
    @api_errors("진행 기록에 실패했습니다.")
    def record_progress(study_id: int):
        body = json_body()
        session = service.record_next(
            study_id=study_id,
            user_id=current_user().user_id,
            progress=body.get("progress"),
            notes=body.get("notes"),
        )
        return jsonify(session.to_dict())

    @app.route("/api/progress/<int:progress_id>", methods=["PATCH"], endpoint="update_progress")
    @login_required
    @api_errors("진행 기록 수정에 실패했습니다.")
    def update_progress(progress_id: int):
        body = json_body()
        session = service.update_record(
            progress_id=progress_id,
            user_id=current_user().user_id,
            progress=body.get("progress"),
            notes=body.get("notes"),
        )
        return jsonify(session.to_dict())
