from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import api_errors, json_body
from ..container import Container
from ..sessions.middleware import current_user, login_required


def register(app: Flask, container: Container) -> None:
    service = container.chat_service

    @app.route("/api/studies/<int:study_id>/messages", methods=["GET"], endpoint="study_messages")
    @login_required
    @api_errors("채팅 메시지를 불러오는데 실패했습니다.")
    def study_messages(study_id: int):
        limit = request.args.get("limit", request.args.get("max"))
        messages = service.list_messages(study_id=study_id, user_id=current_user().user_id, limit=limit)
        return jsonify([m.to_dict() for m in messages])

    @app.route("/api/studies/<int:study_id>/messages", methods=["POST"], endpoint="post_study_message")
    @login_required
    @api_errors("메시지를 저장하지 못했습니다.")
    def post_study_message(study_id: int):
        message = service.post_message(
            study_id=study_id,
            user_id=current_user().user_id,
            text=json_body().get("text"),
        )
        return jsonify(message.to_dict()), 201

    @app.route("/api/studies/me/chats", methods=["GET"], endpoint="my_chats")
    @login_required
    @api_errors("채팅 목록을 불러오지 못했습니다.")
    def my_chats():
        return jsonify([c.to_dict() for c in service.list_my_chats(user_id=current_user().user_id)])
