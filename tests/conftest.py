from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from tableside.menu import MenuCatalog
from tableside.models import OrderItemDraft, Table
from tableside.orders import OrderStore
from tableside.persistence import LocalStore
from tableside.tables import TableRegistry


class FakeClock:
    """Deterministic clock; each call advances one second."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2025, 3, 14, 18, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "tableside.db"


@pytest.fixture()
def local_store(db_path: Path) -> LocalStore:
    store = LocalStore(db_path)
    store.bootstrap_schema()
    return store


@pytest.fixture()
def tables() -> TableRegistry:
    return TableRegistry(
        tables=[
            Table(table_id="t1", number=1, capacity=2),
            Table(table_id="t2", number=2, capacity=4),
            Table(table_id="t3", number=3, capacity=6, status="reserved"),
        ]
    )


@pytest.fixture()
def catalog() -> MenuCatalog:
    return MenuCatalog()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def orders(tables: TableRegistry, clock: FakeClock) -> OrderStore:
    return OrderStore(tables, clock=clock)


@pytest.fixture()
def pizza(catalog: MenuCatalog) -> OrderItemDraft:
    return catalog.draft_item("margherita_pizza", 1, {"size": ["size.regular"]})


@pytest.fixture()
def cola(catalog: MenuCatalog) -> OrderItemDraft:
    return catalog.draft_item("coca_cola")
