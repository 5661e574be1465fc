from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_HOURS_LIMIT, DEFAULT_TIMEZONE
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_profiles, list_tables
from .employees.controller import register as register_employees
from .reports.controller import register as register_reports
from .requests.controller import register as register_requests
from .time_entries.controller import register as register_time_entries

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["TIMEZONE"] = getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)
    app.config["ALARM_HOURS_LIMIT"] = float(getattr(settings, "ALARM_HOURS_LIMIT", DEFAULT_HOURS_LIMIT))

    logging.basicConfig(level=logging.DEBUG if app.config["DEBUG"] else logging.INFO)

    if container is None:
        # Helpful startup info to avoid "connected but no tables" confusion.
        logger.debug(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.debug("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_profiles(db_config)
            logger.debug("demo seed ready")

        container = build_container(
            db_config=db_config,
            timezone=app.config["TIMEZONE"],
            hours_limit=app.config["ALARM_HOURS_LIMIT"],
        )

    register_employees(app, container)
    register_time_entries(app, container)
    register_reports(app, container)
    register_requests(app, container)

    return app
