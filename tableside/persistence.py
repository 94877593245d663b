"""SQLite-backed key-value store for the order, table, menu and cart collections."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

from tableside.config import DB_PATH
from tableside.errors import PersistenceError
from tableside.records import Record

logger = logging.getLogger(__name__)

T = TypeVar("T")

ORDERS_KEY = "orders"
TABLES_KEY = "tables"
MENU_ITEMS_KEY = "menu_items"
MENU_CATEGORIES_KEY = "menu_categories"
CART_KEY_PREFIX = "cart:"


def cart_key(table_id: str) -> str:
    return f"{CART_KEY_PREFIX}{table_id}"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class LocalStore:
    """JSON documents keyed by name in a single sqlite table."""

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def bootstrap_schema(self) -> None:
        """Create the key-value table if it does not already exist."""
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"cannot bootstrap {self.db_path}: {exc}") from exc

    def read(self, key: str) -> Any | None:
        """Return the decoded document for key, or None when absent."""
        try:
            with closing(self._connect()) as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"cannot read {key!r}: {exc}") from exc
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"corrupt value for {key!r}: {exc}") from exc

    def write(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, payload, _utc_now_iso()),
                )
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"cannot write {key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"cannot delete {key!r}: {exc}") from exc

    def keys(self) -> list[str]:
        try:
            with closing(self._connect()) as conn:
                return [row[0] for row in conn.execute("SELECT key FROM kv_store ORDER BY key")]
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"cannot list keys: {exc}") from exc


def load_collection(
    store: LocalStore | None,
    key: str,
    decode: Callable[[Record], T],
    default_factory: Callable[[], list[T]],
) -> list[T]:
    """Load a persisted list, falling back to defaults when it is missing or unreadable."""
    if store is None:
        return default_factory()
    try:
        raw = store.read(key)
    except PersistenceError as exc:
        logger.warning("load_fallback key=%s reason=%s", key, exc)
        return default_factory()
    if raw is None:
        return default_factory()
    try:
        if not isinstance(raw, list):
            raise TypeError(f"expected a list, got {type(raw).__name__}")
        return [decode(record) for record in raw]
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("load_fallback key=%s reason=%r", key, exc)
        return default_factory()


def save_collection(
    store: LocalStore | None,
    key: str,
    items: Iterable[T],
    encode: Callable[[T], Record],
) -> bool:
    """Persist a list best-effort. Returns False when the write was dropped."""
    if store is None:
        return False
    try:
        store.write(key, [encode(item) for item in items])
    except PersistenceError as exc:
        logger.warning("save_dropped key=%s reason=%s", key, exc)
        return False
    return True


def discard(store: LocalStore | None, key: str) -> None:
    if store is None:
        return
    try:
        store.delete(key)
    except PersistenceError as exc:
        logger.warning("delete_dropped key=%s reason=%s", key, exc)
