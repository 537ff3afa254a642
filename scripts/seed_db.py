from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.study_up.study_up.database.bootstrap import apply_seed_sql, ensure_demo_user
from src.study_up.study_up.logging_config import configure_root

logger = logging.getLogger("study_up.scripts.seed_db")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed topics and the demo account.")
    parser.add_argument("--demo-email", default="demo@studyup.dev")
    parser.add_argument("--demo-password", default="demo1234")
    args = parser.parse_args()

    load_dotenv(override=False)
    configure_root()
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_user(db_config, email=args.demo_email, password=args.demo_password)

    logger.info(
        "seeded database -> %s@%s:%s/%s (demo account %s)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        args.demo_email,
    )


if __name__ == "__main__":
    main()
