"""Table registry: the floor plan and each table's occupancy status."""

from __future__ import annotations

import logging
from typing import Callable

from tableside.data import generate_tables
from tableside.errors import NotFoundError, ValidationError
from tableside.models import TABLE_STATUSES, Table, TableStatus
from tableside.persistence import TABLES_KEY, LocalStore, load_collection, save_collection
from tableside.records import table_from_record, table_to_record

logger = logging.getLogger(__name__)

# Staff actions from the admin table grid.
TABLE_ACTIONS: dict[str, TableStatus] = {
    "occupy": "occupied",
    "reserve": "reserved",
    "clear": "available",
}


class TableRegistry:
    """Holds table records. Status is changed only through update_table_status."""

    def __init__(self, tables: list[Table] | None = None, store: LocalStore | None = None) -> None:
        self._store = store
        if tables is None:
            tables = load_collection(store, TABLES_KEY, table_from_record, generate_tables)
        self._tables: dict[str, Table] = {table.table_id: table for table in tables}
        self._listeners: list[Callable[[], None]] = []
        self._persist()

    @property
    def tables(self) -> list[Table]:
        return sorted(self._tables.values(), key=lambda table: table.number)

    def get_table(self, table_id: str) -> Table | None:
        return self._tables.get(table_id)

    def get_table_by_number(self, number: int) -> Table | None:
        for table in self._tables.values():
            if table.number == number:
                return table
        return None

    def require_table(self, table_id: str) -> Table:
        table = self._tables.get(table_id)
        if table is None:
            raise NotFoundError("table", table_id)
        return table

    def update_table_status(self, table_id: str, status: TableStatus) -> Table:
        """Set a table's status unconditionally."""
        if status not in TABLE_STATUSES:
            raise ValidationError(f"unknown table status: {status!r}")
        table = self.require_table(table_id)
        previous = table.status
        table.status = status
        logger.info("table_status table=%s %s->%s", table.number, previous, status)
        self._persist()
        self._notify()
        return table

    def apply_action(self, table_id: str, action: str) -> Table:
        status = TABLE_ACTIONS.get(action)
        if status is None:
            raise ValidationError(f"unknown table action: {action!r}")
        return self.update_table_status(table_id, status)

    def add_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _persist(self) -> None:
        save_collection(self._store, TABLES_KEY, self.tables, table_to_record)
