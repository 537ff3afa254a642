from __future__ import annotations

from src.study_up.study_up import __main__ as entrypoint
from src.study_up.study_up.core.constants import DEFAULT_SESSION_TTL_SECONDS
from src.study_up.study_up.main import create_app
from tests.fakes import make_container, make_repos


def test_main_runs_on_configured_port(monkeypatch):
    app = create_app(container=make_container(make_repos()), settings_module="config.testing")
    app.config["PORT"] = 9191
    calls = []
    monkeypatch.setattr(app, "run", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setattr(entrypoint, "create_app", lambda: app)

    entrypoint.main()

    assert calls == [{"host": "0.0.0.0", "port": 9191, "debug": False, "use_reloader": False}]


def test_missing_settings_fall_back_to_constants(monkeypatch):
    monkeypatch.delattr("config.testing.SESSION_TTL_SECONDS")
    app = create_app(container=make_container(make_repos()), settings_module="config.testing")
    assert app.config["SESSION_TTL_SECONDS"] == DEFAULT_SESSION_TTL_SECONDS
