from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import api_errors, json_body
from ..container import Container
from ..sessions.middleware import current_user, login_required


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/studies/<int:study_id>/attendance/code", methods=["POST"], endpoint="open_attendance_code")
    @login_required
    @api_errors("출석 코드 생성에 실패했습니다.")
    def open_attendance_code(study_id: int):
        now = now_local()
        session = service.open_code(study_id=study_id, user_id=current_user().user_id, now=now)
        return jsonify(session.to_dict(now)), 201

    @app.route("/api/studies/<int:study_id>/attendance/code", methods=["DELETE"], endpoint="close_attendance_code")
    @login_required
    @api_errors("출석 종료에 실패했습니다.")
    def close_attendance_code(study_id: int):
        service.close_code(study_id=study_id, user_id=current_user().user_id)
        return "", 204

    @app.route("/api/studies/<int:study_id>/attendance/code", methods=["GET"], endpoint="current_attendance_code")
    @login_required
    @api_errors("출석 코드 조회에 실패했습니다.")
    def current_attendance_code(study_id: int):
        now = now_local()
        session = service.current_code(study_id=study_id, user_id=current_user().user_id, now=now)
        if not session:
            return jsonify({"active": False})
        return jsonify(session.to_dict(now))

    @app.route("/api/studies/<int:study_id>/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    @api_errors("출석 처리에 실패했습니다.")
    def attendance_check_in(study_id: int):
        record = service.check_in(
            study_id=study_id,
            user_id=current_user().user_id,
            code=json_body().get("code"),
        )
        return jsonify(record.to_dict()), 201

    @app.route("/api/studies/<int:study_id>/attendance", methods=["GET"], endpoint="attendance_by_date")
    @login_required
    @api_errors("출석 현황 조회에 실패했습니다.")
    def attendance_by_date(study_id: int):
        records = service.list_for_date(
            study_id=study_id,
            user_id=current_user().user_id,
            day=request.args.get("date"),
        )
        return jsonify([r.to_dict() for r in records])
