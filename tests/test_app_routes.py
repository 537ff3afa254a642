from __future__ import annotations

from src.study_up.study_up.core.constants import FALLBACK_SUBJECTS
from src.study_up.study_up.main import create_app
from tests.fakes import auth, make_container, make_repos


def test_health(client):
    assert client.get("/api/health").get_json() == {"ok": True}
    assert client.get("/api/health/db").get_json() == {"ok": True, "rows": [{"ok": 1}]}


def test_health_db_failure_is_500(client, repos):
    repos.health.fail = True
    res = client.get("/api/health/db")
    assert res.status_code == 500
    assert res.get_json()["ok"] is False


def test_demo_routes_follow_setting(client, monkeypatch):
    assert client.get("/api/recipes").status_code == 200

    monkeypatch.setattr("config.testing.ENABLE_DEMO_ROUTES", False)
    app = create_app(container=make_container(make_repos()), settings_module="config.testing")
    assert app.test_client().get("/api/recipes").status_code == 404


def test_cors_headers_on_api(client):
    res = client.get("/api/health", headers={"Origin": "http://localhost:5173"})
    assert res.headers["Access-Control-Allow-Origin"] == "*"
    assert "Authorization" in res.headers["Access-Control-Allow-Headers"]


def test_topics_and_options(client, repos):
    topics = client.get("/api/topics").get_json()
    assert [t["code"] for t in topics] == ["LANG", "IT"]
    assert topics[0]["nameKo"] == "어학"

    options = client.get("/api/topics/options").get_json()
    assert options == [{"label": "어학", "value": "어학"}, {"label": "IT/프로그래밍", "value": "IT/프로그래밍"}]

    repos.topics.fail = True
    fallback = client.get("/api/topics/options").get_json()
    assert [o["value"] for o in fallback] == list(FALLBACK_SUBJECTS)


def test_favorites_are_idempotent(client, signup, make_study):
    _, token = signup("fan@study.up")
    sid = make_study(token)["id"]

    for _ in range(2):
        assert client.post(f"/api/studies/{sid}/favorite", headers=auth(token)).status_code == 200
    favorites = client.get("/api/me/favorites", headers=auth(token)).get_json()
    assert [s["id"] for s in favorites] == [sid]

    for _ in range(2):
        assert client.delete(f"/api/studies/{sid}/favorite", headers=auth(token)).status_code == 200
    assert client.get("/api/me/favorites", headers=auth(token)).get_json() == []

    assert client.post("/api/studies/999/favorite", headers=auth(token)).status_code == 404
    assert client.get("/api/me/favorites").status_code == 401


def test_unexpected_error_is_generic_500(client, repos, monkeypatch):
    def boom(**kwargs):
        raise RuntimeError("ORA-00942 secret detail")

    monkeypatch.setattr(repos.chat, "list_chats_for_user", boom)
    token = client.post("/api/signup", json={"email": "e@study.up", "password": "pw"}).get_json()["token"]

    res = client.get("/api/studies/me/chats", headers=auth(token))
    assert res.status_code == 500
    assert "secret" not in res.get_json()["error"]
