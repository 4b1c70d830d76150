"""Load demo students and (re)set the demo login accounts."""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.proof_of_presence.proof_of_presence.database.bootstrap import (
    DEMO_ACCOUNTS,
    apply_seed_sql,
    ensure_demo_users,
)


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_users(db_config)

    for display_name, email, password, role in DEMO_ACCOUNTS:
        logging.info("%s (%s): %s / %s", display_name, role, email, password)


if __name__ == "__main__":
    main()
