from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_errors
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.topic_service

    @app.route("/api/topics", methods=["GET"], endpoint="list_topics")
    @api_errors("Failed to load topics")
    def list_topics():
        return jsonify([t.to_dict() for t in service.list_topics()])

    @app.route("/api/topics/options", methods=["GET"], endpoint="topic_options")
    @api_errors("Failed to load topic options")
    def topic_options():
        return jsonify(service.list_options())
