"""Create the governance schema and optionally load seed data.

    python scripts/manage_db.py            # schema only
    python scripts/manage_db.py --seed     # schema + organizations + demo accounts
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

from config import get_settings_module

from src.governance_system.governance_system.common.logging_config import setup_logging
from src.governance_system.governance_system.database.bootstrap import (
    apply_schema,
    apply_seed_sql,
    ensure_demo_accounts,
    list_tables,
)

logger = logging.getLogger("manage_db")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", action="store_true", help="also load database/seed.sql")
    parser.add_argument("--demo-accounts", action="store_true", help="upsert the demo login accounts (implied by --seed)")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    logger.info("Schema applied to %s (tables=%d)", target, len(list_tables(db_config)))

    if args.seed:
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    if args.seed or args.demo_accounts:
        ensure_demo_accounts(db_config)
        logger.info("Seed data loaded into %s", target)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
