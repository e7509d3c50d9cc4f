"""Create (or verify) the ledger tables in the configured MySQL database.

    python scripts/init_db.py                  # apply database/schema.sql
    python scripts/init_db.py --check          # only report missing tables
    APP_ENV=production python scripts/init_db.py --schema path/to/schema.sql
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module  # noqa: E402

from src.academic_ledger.academic_ledger.database.bootstrap import apply_schema, list_tables  # noqa: E402

logger = logging.getLogger("init_db")

LEDGER_TABLES = ("persons", "attendance_punches", "fee_transactions", "mark_entries")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the academic ledger tables.")
    parser.add_argument("--schema", type=Path, default=REPO_ROOT / "database" / "schema.sql")
    parser.add_argument("--check", action="store_true", help="do not apply; only report missing tables")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    args = _parse_args(argv)

    settings_module = get_settings_module()
    db_config = dict(importlib.import_module(settings_module).DB_CONFIG)
    target = f"{db_config.get('database')} on {db_config.get('host')}:{db_config.get('port', 3306)}"

    if not args.check:
        if not args.schema.is_file():
            logger.error("schema file not found: %s", args.schema)
            return 2
        logger.info("applying %s to %s (%s)", args.schema.name, target, settings_module)
        apply_schema(db_config, schema_path=args.schema)

    present = {t.lower() for t in list_tables(db_config)}
    missing = [t for t in LEDGER_TABLES if t not in present]
    if missing:
        logger.error("%s is missing ledger tables: %s", target, ", ".join(missing))
        return 1
    logger.info("%s has all ledger tables: %s", target, ", ".join(LEDGER_TABLES))
    return 0


if __name__ == "__main__":
    sys.exit(main())
