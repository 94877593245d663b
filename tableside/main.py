"""Command line entry point for the tableside dashboards."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tableside.config import DB_PATH, DEBUG_LOG_PATH
from tableside.dashboard_app import ROLES, TablesideApp
from tableside.errors import PersistenceError, TablesideError
from tableside.menu import MenuCatalog
from tableside.orders import OrderStore
from tableside.persistence import LocalStore
from tableside.tables import TableRegistry

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tableside", description="Restaurant ordering dashboards.")
    parser.add_argument("--role", choices=ROLES, default="customer", help="which dashboard to open")
    parser.add_argument("--table", type=int, default=1, help="table number for the customer view")
    parser.add_argument("--db", default=DB_PATH, help="sqlite file holding orders, tables, menu and carts")
    parser.add_argument("--reset", action="store_true", help="discard all stored data before starting")
    return parser


def configure_logging(path: str = DEBUG_LOG_PATH) -> None:
    """Send log records to a file; the terminal belongs to the dashboard."""
    log_file = Path(path)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(handler)


def reset_store(store: LocalStore) -> int:
    keys = store.keys()
    for key in keys:
        store.delete(key)
    logger.info("store_reset keys=%d", len(keys))
    return len(keys)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(DEBUG_LOG_PATH)

    store = LocalStore(args.db)
    try:
        store.bootstrap_schema()
        if args.reset:
            reset_store(store)
    except PersistenceError as exc:
        print(f"tableside: {exc}", file=sys.stderr)
        return 1

    tables = TableRegistry(store=store)
    catalog = MenuCatalog(store=store)
    orders = OrderStore(tables, store=store)

    table_id = None
    if args.role == "customer":
        table = tables.get_table_by_number(args.table)
        if table is None:
            print(f"tableside: no table numbered {args.table}", file=sys.stderr)
            return 2
        table_id = table.table_id

    try:
        app = TablesideApp(orders, catalog, role=args.role, table_id=table_id, store=store)
    except TablesideError as exc:
        print(f"tableside: {exc}", file=sys.stderr)
        return 2
    app.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
