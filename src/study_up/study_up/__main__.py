from __future__ import annotations

from .main import create_app


def main() -> None:
    app = create_app()
    # werkzeug exits with status 1 when the port is already taken.
    app.run(
        host="0.0.0.0",
        port=int(app.config["PORT"]),
        debug=bool(app.config["DEBUG"]),
        use_reloader=False,
    )


if __name__ == "__main__":
    main()
