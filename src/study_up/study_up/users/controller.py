from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_errors, json_body
from ..container import Container
from ..sessions.middleware import current_token, current_user, login_required


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    profiles = container.profile_service

    @app.route("/api/signup", methods=["POST"], endpoint="signup")
    @api_errors("회원가입 중 오류가 발생했습니다.")
    def signup():
        body = json_body()
        result = auth.signup(
            email=body.get("email"),
            password=body.get("password"),
            nickname=body.get("nickname"),
        )
        return jsonify(result.to_dict()), 201

    @app.route("/api/login", methods=["POST"], endpoint="login")
    @api_errors("로그인 중 오류가 발생했습니다.")
    def login():
        body = json_body()
        result = auth.login(email=body.get("email"), password=body.get("password"))
        return jsonify(result.to_dict())

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    @login_required
    @api_errors("로그아웃 중 오류가 발생했습니다.")
    def logout():
        auth.logout(current_token())
        return "", 204

    @app.route("/api/profile/nickname", methods=["PATCH"], endpoint="update_nickname")
    @login_required
    @api_errors("닉네임 변경 중 오류가 발생했습니다.")
    def update_nickname():
        result = profiles.update_nickname(
            user_id=current_user().user_id,
            nickname=json_body().get("nickname"),
            old_token=current_token(),
        )
        return jsonify(result.to_dict())

    @app.route("/api/users/me", methods=["GET"], endpoint="my_profile")
    @login_required
    @api_errors("프로필 정보를 불러올 수 없습니다.")
    def my_profile():
        return jsonify(profiles.get_profile(user_id=current_user().user_id))
