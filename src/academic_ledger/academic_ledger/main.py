from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .cohort.controller import register as register_cohort
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .settings import LedgerSettings
from .store.memory_store import InMemoryStore

logger = logging.getLogger(__name__)


def create_app(*, store: Optional[InMemoryStore] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper())

    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    backend = str(getattr(settings, "STORE_BACKEND", "memory"))
    db_config = getattr(settings, "DB_CONFIG", {})
    logger.info("settings=%s backend=%s", settings_module, backend)

    if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        settings=LedgerSettings.from_settings(settings),
        backend=backend,
        db_config=db_config,
        store=store,
    )
    app.extensions["academic_ledger"] = container

    register_cohort(app, container)

    return app
