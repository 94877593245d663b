"""Main Textual app class."""

from __future__ import annotations

import logging

from textual.app import App

from tableside.cart import Cart
from tableside.config import POLL_INTERVAL_SECONDS
from tableside.errors import ValidationError
from tableside.menu import MenuCatalog
from tableside.models import Snapshot
from tableside.orders import OrderStore
from tableside.persistence import LocalStore
from tableside.screens import AdminScreen, CustomerScreen, KitchenScreen, RoleScreen, WaiterScreen

logger = logging.getLogger(__name__)

ROLES = ("customer", "kitchen", "waiter", "admin")


class TablesideApp(App):
    """One dashboard per role, all driven by order store snapshots."""

    TITLE = "Tableside"

    CSS = """
    Screen {
        layout: vertical;
    }

    Horizontal {
        height: 1fr;
    }

    #waiter-tables-pane, #menu-pane {
        width: 2fr;
    }

    #waiter-orders-pane, #side-pane {
        width: 3fr;
    }
    """

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        orders: OrderStore,
        catalog: MenuCatalog,
        role: str,
        table_id: str | None = None,
        store: LocalStore | None = None,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ) -> None:
        super().__init__()
        if role not in ROLES:
            raise ValidationError(f"unknown role: {role!r}")
        if role == "customer" and table_id is None:
            raise ValidationError("the customer view needs a table")
        self.orders = orders
        self.catalog = catalog
        self.store = store
        self.role = role
        self.table_id = table_id
        self.poll_interval = poll_interval
        self._unsubscribe = None
        logger.info("app_init role=%s table=%s", role, table_id)

    def _build_screen(self) -> RoleScreen:
        if self.role == "kitchen":
            return KitchenScreen()
        if self.role == "waiter":
            return WaiterScreen()
        if self.role == "admin":
            return AdminScreen()
        assert self.table_id is not None
        return CustomerScreen(Cart(self.table_id, self.catalog, self.store))

    def on_mount(self) -> None:
        table = self.orders.tables.get_table(self.table_id) if self.table_id else None
        self.sub_title = f"{self.role.title()} - Table {table.number}" if table else self.role.title()
        self.push_screen(self._build_screen())
        self._unsubscribe = self.orders.subscribe(self._on_snapshot)
        # Periodic redraw for elapsed-time labels and timers.
        self.set_interval(self.poll_interval, self._poll)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        logger.info("app_exit role=%s", self.role)

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        logger.debug("snapshot version=%s orders=%d", snapshot.version, len(snapshot.orders))
        self._show(snapshot)

    def _poll(self) -> None:
        self._show(self.orders.snapshot())

    def _show(self, snapshot: Snapshot) -> None:
        # The role screen may sit under a modal; it still gets the update.
        for screen in self.screen_stack:
            if isinstance(screen, RoleScreen):
                screen.refresh_view(snapshot)
