from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

from .container import Container, build_container
from .ledger.client import ContractHandle, ContractLedgerClient
from .attendance.controller import register as register_attendance
from .sessions.controller import register as register_sessions
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(
    container: Optional[Container] = None,
    *,
    ledger_contract: Optional[ContractHandle] = None,
    connected_wallet: Optional[str] = None,
) -> Flask:
    """Build the Flask app.

    Passing a ready ``container`` skips every database step (tests use this).
    A ledger is only wired when a contract handle is supplied.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")

        ledger = None
        if ledger_contract is not None:
            ledger = ContractLedgerClient(
                ledger_contract,
                connected_address=connected_wallet,
                expected_address=getattr(settings, "LEDGER_EXPECTED_WALLET", None),
            )

        container = build_container(
            db_config=db_config,
            vision_config={
                "api_key": getattr(settings, "VISION_API_KEY", None),
                "url": getattr(settings, "VISION_API_URL", None),
                "timeout": getattr(settings, "VISION_TIMEOUT_SECONDS", 10.0),
            },
            ledger=ledger,
        )

    register_users(app, container)
    register_students(app, container)
    register_sessions(app, container)
    register_attendance(app, container)

    return app
