from __future__ import annotations

import pytest

from src.study_up.study_up.main import create_app
from tests.fakes import auth, make_container, make_repos


@pytest.fixture
def repos():
    return make_repos()


@pytest.fixture
def container(repos):
    return make_container(repos)


@pytest.fixture
def app(container):
    app = create_app(container=container, settings_module="config.testing")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signup(client):
    """Sign up through the API and return (user payload, token)."""

    def _signup(email: str, password: str = "pw1234", nickname: str | None = None):
        body = {"email": email, "password": password}
        if nickname is not None:
            body["nickname"] = nickname
        res = client.post("/api/signup", json=body)
        assert res.status_code == 201, res.get_json()
        data = res.get_json()
        return data["user"], data["token"]

    return _signup


@pytest.fixture
def make_study(client):
    def _make_study(token: str, **overrides):
        body = {
            "name": "알고리즘 스터디",
            "description": "매주 두 문제",
            "type": "online",
            "duration": "short",
            "maxMembers": 3,
        }
        body.update(overrides)
        res = client.post("/api/studies", json=body, headers=auth(token))
        assert res.status_code == 201, res.get_json()
        return res.get_json()

    return _make_study
