from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import api_errors, json_body, json_error, parse_int
from ..container import Container
from ..sessions.middleware import current_user, login_required


def register(app: Flask, container: Container) -> None:
    service = container.study_service

    @app.route("/api/studies", methods=["GET"], endpoint="list_studies")
    @api_errors("스터디 목록 조회에 실패했습니다.")
    def list_studies():
        studies = service.list_studies(
            status=request.args.get("status"),
            study_type=request.args.get("type"),
            query=request.args.get("q"),
        )
        return jsonify([s.to_dict() for s in studies])

    @app.route("/api/studies", methods=["POST"], endpoint="create_study")
    @api_errors("스터디 생성에 실패했습니다.")
    def create_study():
        body = json_body()
        user = current_user()
        owner_id = user.user_id if user else parse_int(body.get("createdByUserId"))
        if not owner_id:
            return json_error("인증 토큰이 유효하지 않습니다.", 401)

        study = service.create_study(owner_id=owner_id, payload=body)
        return jsonify(study.to_dict()), 201

    @app.route("/api/studies/<int:study_id>", methods=["GET"], endpoint="get_study")
    @api_errors("스터디 조회에 실패했습니다.")
    def get_study(study_id: int):
        return jsonify(service.get_study(study_id).to_dict())

    @app.route("/api/studies/<int:study_id>/status", methods=["PATCH"], endpoint="change_study_status")
    @login_required
    @api_errors("스터디 상태 변경에 실패했습니다.")
    def change_study_status(study_id: int):
        study = service.change_status(
            study_id=study_id,
            user_id=current_user().user_id,
            status=json_body().get("status"),
        )
        return jsonify(study.to_dict())

    @app.route("/api/studies/<int:study_id>/members", methods=["GET"], endpoint="study_members")
    @api_errors("스터디 멤버 조회에 실패했습니다.")
    def study_members(study_id: int):
        return jsonify([m.to_dict() for m in service.list_members(study_id)])

    @app.route("/api/studies/<int:study_id>/membership", methods=["GET"], endpoint="study_membership")
    @api_errors("멤버 상태 조회에 실패했습니다.")
    def study_membership(study_id: int):
        user = current_user()
        status = service.membership_status(study_id=study_id, user_id=user.user_id if user else None)
        return jsonify({"status": status.value})

    @app.route("/api/studies/<int:study_id>/join-requests", methods=["POST"], endpoint="create_join_request")
    @login_required
    @api_errors("참여 요청에 실패했습니다.")
    def create_join_request(study_id: int):
        req = service.request_join(
            study_id=study_id,
            user_id=current_user().user_id,
            message=json_body().get("message"),
        )
        return jsonify(req.to_dict())

    @app.route("/api/studies/<int:study_id>/join-requests", methods=["DELETE"], endpoint="cancel_join_request")
    @login_required
    @api_errors("참여 요청 취소에 실패했습니다.")
    def cancel_join_request(study_id: int):
        cancelled = service.cancel_join(study_id=study_id, user_id=current_user().user_id)
        return jsonify({"cancelled": cancelled})

    @app.route("/api/studies/<int:study_id>/join-requests", methods=["GET"], endpoint="list_join_requests")
    @login_required
    @api_errors("참여 요청 조회에 실패했습니다.")
    def list_join_requests(study_id: int):
        requests = service.list_join_requests(study_id=study_id, user_id=current_user().user_id)
        return jsonify([r.to_dict() for r in requests])

    @app.route("/api/join-requests/<int:request_id>", methods=["PATCH"], endpoint="decide_join_request")
    @login_required
    @api_errors("참여 요청 처리에 실패했습니다.")
    def decide_join_request(request_id: int):
        req = service.decide_join_request(
            request_id=request_id,
            decision=json_body().get("decision"),
            decided_by=current_user().user_id,
        )
        return jsonify(req.to_dict())
