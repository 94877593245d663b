"""Role dashboards: kitchen, waiter, admin and customer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from tableside.analytics import (
    category_revenue,
    daily_sales,
    filter_by_timeframe,
    hourly_sales,
    popular_items,
    summarize,
)
from tableside.cart import Cart
from tableside.errors import TablesideError
from tableside.modals import (
    FeedbackChoice,
    FeedbackModal,
    ModifierChoice,
    ModifierModal,
    PaymentChoice,
    PaymentModal,
)
from tableside.models import MenuItem, Order, OrderItem, Snapshot
from tableside.notifications import Notification, diff_snapshots, format_remaining, order_timer_message
from tableside.rendering import (
    format_cart_line,
    format_item_line,
    format_money,
    format_order_header,
    minutes_ago,
    status_badge,
    table_badge,
)

if TYPE_CHECKING:
    from tableside.dashboard_app import TablesideApp

logger = logging.getLogger(__name__)

PANE_CSS = """
.pane {
    border: round $primary;
    padding: 1;
}

.pane-title {
    text-style: bold;
    margin-bottom: 1;
}

#status-line {
    height: 1;
    padding: 0 1;
    background: $panel;
}
"""


def _window_bounds(total: int, rows: int, selected: int | None) -> tuple[int, int]:
    if total <= 0:
        return (0, 0)

    rows = max(1, rows)
    if total <= rows:
        return (0, total)

    if selected is None:
        start = 0
    else:
        start = max(0, selected - rows // 2)
        start = min(start, total - rows)

    return (start, start + rows)


class RoleScreen(Screen):
    """Shared cursor, status line and refresh plumbing for the role dashboards."""

    CSS = PANE_CSS

    def __init__(self) -> None:
        super().__init__()
        self.cursor = 0
        self.status_message = ""

    @property
    def tableside(self) -> "TablesideApp":
        return self.app  # type: ignore[return-value]

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def on_mount(self) -> None:
        self.refresh_view(self.tableside.orders.snapshot())

    def refresh_view(self, snapshot: Snapshot) -> None:
        raise NotImplementedError

    def row_count(self) -> int:
        return 0

    def action_move_cursor(self, delta: int) -> None:
        total = self.row_count()
        if total == 0:
            self.cursor = 0
        else:
            self.cursor = (self.cursor + delta) % total
        self.refresh_view(self.tableside.orders.snapshot())

    def run_intent(self, description: str, func, *args) -> bool:
        """Call a store operation, turning store errors into a status message."""
        try:
            func(*args)
        except TablesideError as exc:
            logger.info("intent_rejected %s reason=%s", description, exc)
            self.set_status(str(exc))
            return False
        self.set_status(description)
        return True

    def set_status(self, message: str) -> None:
        self.status_message = message
        try:
            self.query_one("#status-line", Static).update(message)
        except NoMatches:
            return

    def _update(self, widget_id: str, content: Text | str) -> None:
        try:
            self.query_one(f"#{widget_id}", Static).update(content)
        except NoMatches:
            return


# -------------------- kitchen --------------------


@dataclass(frozen=True)
class _KitchenRow:
    order: Order
    item: OrderItem


class KitchenScreen(RoleScreen):
    """Item-level preparation queue."""

    BINDINGS = [
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("up", "move_cursor(-1)", "Previous"),
        ("1", "set_filter('pending')", "New"),
        ("2", "set_filter('preparing')", "Preparing"),
        ("3", "set_filter('ready')", "Ready"),
        ("4", "set_filter('all')", "All"),
        ("p", "advance('preparing')", "Start preparing"),
        ("r", "advance('ready')", "Mark ready"),
        ("x", "advance('cancelled')", "Cancel item"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.filter = "pending"
        self.rows: list[_KitchenRow] = []

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(classes="pane"):
            yield Static(id="kitchen-title", classes="pane-title")
            yield Static(id="kitchen-orders")
        yield Static(id="status-line")
        yield Footer()

    def row_count(self) -> int:
        return len(self.rows)

    def action_set_filter(self, status: str) -> None:
        self.filter = status
        self.cursor = 0
        self.refresh_view(self.tableside.orders.snapshot())

    def action_advance(self, status: str) -> None:
        if not self.rows:
            return
        row = self.rows[min(self.cursor, len(self.rows) - 1)]
        self.run_intent(
            f"{row.item.name} (table {row.order.table_number}) -> {status}",
            self.tableside.orders.update_order_item_status,
            row.order.order_id,
            row.item.item_id,
            status,
        )

    def _visible_orders(self, snapshot: Snapshot) -> list[Order]:
        # An order is listed when any of its items has the filtered status.
        if self.filter == "all":
            return [order for order in snapshot.orders if order.is_active]
        return [order for order in snapshot.orders if any(item.status == self.filter for item in order.items)]

    def refresh_view(self, snapshot: Snapshot) -> None:
        orders = self._visible_orders(snapshot)
        self.rows = [_KitchenRow(order, item) for order in orders for item in order.items]
        if self.cursor >= len(self.rows):
            self.cursor = max(0, len(self.rows) - 1)

        labels = {"pending": "New Orders", "preparing": "Preparing", "ready": "Ready", "all": "All"}
        self._update("kitchen-title", f"Kitchen: {labels[self.filter]}  (1 New, 2 Preparing, 3 Ready, 4 All)")
        if not self.rows:
            self._update("kitchen-orders", "No orders to show")
            return

        now = self.now()
        lines = Text()
        row_index = 0
        for order in orders:
            if row_index:
                lines.append("\n\n")
            lines.append_text(format_order_header(order, now))
            for item in order.items:
                pointer = "➤ " if row_index == self.cursor else "  "
                lines.append(f"\n{pointer}")
                lines.append_text(format_item_line(item))
                row_index += 1
        self._update("kitchen-orders", lines)


# -------------------- waiter --------------------


class WaiterScreen(RoleScreen):
    """Tables on the left; the selected table's active orders on the right."""

    BINDINGS = [
        ("j", "move_cursor(1)", "Next item"),
        ("k", "move_cursor(-1)", "Previous item"),
        ("down", "move_cursor(1)", "Next item"),
        ("up", "move_cursor(-1)", "Previous item"),
        ("left_square_bracket", "move_table(-1)", "Prev table"),
        ("right_square_bracket", "move_table(1)", "Next table"),
        ("s", "serve_item", "Serve item"),
        ("c", "complete_order", "Complete order"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.table_index = 0
        self.rows: list[tuple[Order, OrderItem]] = []

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with Vertical(classes="pane", id="waiter-tables-pane"):
                yield Static("Tables", classes="pane-title")
                yield Static(id="waiter-tables")
            with Vertical(classes="pane", id="waiter-orders-pane"):
                yield Static(id="waiter-orders-title", classes="pane-title")
                yield Static(id="waiter-orders")
        yield Static(id="status-line")
        yield Footer()

    def row_count(self) -> int:
        return len(self.rows)

    def action_move_table(self, delta: int) -> None:
        count = len(self.tableside.orders.tables.tables)
        if count:
            self.table_index = (self.table_index + delta) % count
        self.cursor = 0
        self.refresh_view(self.tableside.orders.snapshot())

    def _selected_row(self) -> tuple[Order, OrderItem] | None:
        if not self.rows:
            return None
        return self.rows[min(self.cursor, len(self.rows) - 1)]

    def action_serve_item(self) -> None:
        row = self._selected_row()
        if row is None:
            return
        order, item = row
        self.run_intent(
            f"Served {item.name} to table {order.table_number}",
            self.tableside.orders.update_order_item_status,
            order.order_id,
            item.item_id,
            "served",
        )

    def action_complete_order(self) -> None:
        row = self._selected_row()
        if row is None:
            return
        order, _ = row
        self.run_intent(
            f"Completed order #{order.order_id[:8]}",
            self.tableside.orders.update_order_status,
            order.order_id,
            "completed",
        )

    def refresh_view(self, snapshot: Snapshot) -> None:
        tables = sorted(snapshot.tables, key=lambda table: table.number)
        if not tables:
            self._update("waiter-tables", "(no tables)")
            return
        self.table_index = min(self.table_index, len(tables) - 1)
        selected = tables[self.table_index]

        listing = Text()
        for idx, table in enumerate(tables):
            active = [o for o in snapshot.orders if o.table_id == table.table_id and o.is_active]
            has_ready = any(item.status == "ready" for o in active for item in o.items)
            if idx:
                listing.append("\n")
            listing.append("➤ " if idx == self.table_index else "  ")
            listing.append_text(table_badge(table))
            if active:
                noun = "order" if len(active) == 1 else "orders"
                listing.append(f"  {len(active)} {noun}", style="bold #f2b632" if has_ready else "dim")
        self._update("waiter-tables", listing)

        orders = [o for o in snapshot.orders if o.table_id == selected.table_id and o.is_active]
        self.rows = [(order, item) for order in orders for item in order.items]
        if self.cursor >= len(self.rows):
            self.cursor = max(0, len(self.rows) - 1)
        self._update("waiter-orders-title", f"Table {selected.number} ({selected.status})  [ ] switch table")
        if not orders:
            self._update("waiter-orders", "No active orders")
            return

        now = self.now()
        lines = Text()
        row_index = 0
        for order in orders:
            if row_index:
                lines.append("\n\n")
            lines.append_text(format_order_header(order, now))
            for item in order.items:
                lines.append("\n➤ " if row_index == self.cursor else "\n  ")
                lines.append_text(format_item_line(item))
                row_index += 1
        self._update("waiter-orders", lines)


# -------------------- admin --------------------


class AdminScreen(RoleScreen):
    """Tables, order feed, analytics and notifications."""

    BINDINGS = [
        ("t", "set_tab('tables')", "Tables"),
        ("o", "set_tab('orders')", "Orders"),
        ("a", "set_tab('analytics')", "Analytics"),
        ("n", "set_tab('notifications')", "Notifications"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("up", "move_cursor(-1)", "Previous"),
        ("1", "table_action('occupy')", "Occupy"),
        ("2", "table_action('reserve')", "Reserve"),
        ("3", "table_action('clear')", "Clear"),
        ("y", "order_action('preparing')", "Accept"),
        ("x", "order_action('cancelled')", "Reject"),
        ("c", "order_action('completed')", "Complete"),
        ("d", "cycle_timeframe", "Timeframe"),
        ("z", "clear_notifications", "Clear notifications"),
    ]

    TIMEFRAMES = ("today", "week", "month")

    def __init__(self) -> None:
        super().__init__()
        self.tab = "tables"
        self.timeframe = "today"
        self.notifications: list[Notification] = []
        self._previous: Snapshot | None = None
        self._row_ids: list[str] = []

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(classes="pane"):
            yield Static(id="admin-title", classes="pane-title")
            yield Static(id="admin-body")
        yield Static(id="status-line")
        yield Footer()

    def row_count(self) -> int:
        return len(self._row_ids)

    def action_set_tab(self, tab: str) -> None:
        self.tab = tab
        self.cursor = 0
        self.refresh_view(self.tableside.orders.snapshot())

    def action_cycle_timeframe(self) -> None:
        idx = self.TIMEFRAMES.index(self.timeframe)
        self.timeframe = self.TIMEFRAMES[(idx + 1) % len(self.TIMEFRAMES)]
        self.refresh_view(self.tableside.orders.snapshot())

    def action_clear_notifications(self) -> None:
        self.notifications.clear()
        self.refresh_view(self.tableside.orders.snapshot())

    def action_table_action(self, action: str) -> None:
        if self.tab != "tables" or not self._row_ids:
            return
        table_id = self._row_ids[min(self.cursor, len(self._row_ids) - 1)]
        self.run_intent(f"Table {action}", self.tableside.orders.tables.apply_action, table_id, action)

    def action_order_action(self, status: str) -> None:
        if self.tab != "orders" or not self._row_ids:
            return
        order_id = self._row_ids[min(self.cursor, len(self._row_ids) - 1)]
        self.run_intent(
            f"Order #{order_id[:6]} -> {status}",
            self.tableside.orders.update_order_status,
            order_id,
            status,
        )

    def refresh_view(self, snapshot: Snapshot) -> None:
        new_notes = diff_snapshots(self._previous, snapshot)
        self.notifications[:0] = reversed(new_notes)
        self._previous = snapshot

        title = Text()
        for tab in ("tables", "orders", "analytics", "notifications"):
            label = tab.title()
            if tab == "notifications" and self.notifications:
                label = f"{label} ({len(self.notifications)})"
            title.append(f" {label} ", style="reverse bold" if tab == self.tab else "")
        self._update("admin-title", title)

        render = {
            "tables": self._render_tables,
            "orders": self._render_orders,
            "analytics": self._render_analytics,
            "notifications": self._render_notifications,
        }[self.tab]
        self._update("admin-body", render(snapshot))

    def _render_tables(self, snapshot: Snapshot) -> Text:
        tables = sorted(snapshot.tables, key=lambda table: table.number)
        self._row_ids = [table.table_id for table in tables]
        self.cursor = min(self.cursor, max(0, len(tables) - 1))
        now = self.now()
        text = Text()
        for idx, table in enumerate(tables):
            active = [o for o in snapshot.orders if o.table_id == table.table_id and o.is_active]
            if idx:
                text.append("\n")
            text.append("➤ " if idx == self.cursor else "  ")
            text.append_text(table_badge(table))
            if table.status != "available" and active:
                tab_amount = sum(order.total_amount for order in active)
                earliest = min(order.created_at for order in active)
                text.append(
                    f"  {len(active)} active  tab {format_money(tab_amount)}  seated {minutes_ago(earliest, now)}",
                    style="dim",
                )
        text.append("\n\n1 occupy  2 reserve  3 clear", style="dim")
        return text

    def _render_orders(self, snapshot: Snapshot) -> Text:
        orders = sorted(snapshot.orders, key=lambda order: order.created_at, reverse=True)
        self._row_ids = [order.order_id for order in orders]
        self.cursor = min(self.cursor, max(0, len(orders) - 1))
        if not orders:
            return Text("No orders yet")
        now = self.now()
        start, end = _window_bounds(len(orders), 20, self.cursor)
        text = Text()
        for idx in range(start, end):
            if idx > start:
                text.append("\n")
            text.append("➤ " if idx == self.cursor else "  ")
            text.append_text(format_order_header(orders[idx], now))
        text.append("\n\ny accept  x reject  c complete", style="dim")
        return text

    def _render_analytics(self, snapshot: Snapshot) -> Text:
        self._row_ids = []
        catalog = self.tableside.catalog
        orders = filter_by_timeframe(snapshot.orders, self.timeframe, self.now())  # type: ignore[arg-type]
        summary = summarize(orders)
        text = Text()
        text.append(f"Timeframe: {self.timeframe}  (d to change)\n\n", style="bold")
        text.append(f"Revenue: {format_money(summary.total_revenue)}\n")
        text.append(f"Orders: {summary.total_orders}\n")
        text.append(f"Average order: {format_money(summary.average_order_value)}\n\n")

        text.append("Popular items\n", style="bold")
        for entry in popular_items(orders)[:10]:
            text.append(f"  {entry.name:<22} {entry.count:>4}  {format_money(entry.revenue)}\n")

        text.append("\nBusy hours\n", style="bold")
        for bucket in hourly_sales(orders):
            if bucket.orders:
                text.append(f"  {bucket.label:>5}  {bucket.orders:>3} orders  {format_money(bucket.sales)}\n")

        text.append("\nBy weekday\n", style="bold")
        for bucket in daily_sales(orders):
            text.append(f"  {bucket.label:<9} {bucket.orders:>3} orders  {format_money(bucket.sales)}\n")

        text.append("\nBy category\n", style="bold")
        for name, value in category_revenue(orders, catalog).items():
            text.append(f"  {name:<10} {format_money(value)}\n")
        return text

    def _render_notifications(self, snapshot: Snapshot) -> Text:
        self._row_ids = []
        if not self.notifications:
            return Text("No notifications at this time")
        text = Text()
        for idx, note in enumerate(self.notifications[:50]):
            if idx:
                text.append("\n")
            text.append(f"{note.time.astimezone():%H:%M}  ", style="dim")
            text.append(note.message)
        text.append("\n\nz clear all", style="dim")
        return text


# -------------------- customer --------------------


class CustomerScreen(RoleScreen):
    """Menu, cart and order tracking for one table."""

    BINDINGS = [
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("up", "move_cursor(-1)", "Previous"),
        ("h", "move_category(-1)", "Prev category"),
        ("l", "move_category(1)", "Next category"),
        ("tab", "toggle_focus", "Menu/Cart"),
        ("enter", "activate", "Add"),
        ("plus", "change_quantity(1)", "More"),
        ("minus", "change_quantity(-1)", "Less"),
        ("x", "remove_line", "Remove"),
        Binding("ctrl+s", "place_order", "Place order", priority=True),
        ("p", "pay", "Pay"),
        ("f", "feedback", "Feedback"),
    ]

    def __init__(self, cart: Cart) -> None:
        super().__init__()
        self.table_id = cart.table_id
        self.category_index = 0
        self.focus_area = "menu"
        self.cart = cart
        self._previous: Snapshot | None = None
        self._menu_rows: list[MenuItem] = []

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with Vertical(classes="pane", id="menu-pane"):
                yield Static(id="menu-title", classes="pane-title")
                yield Static(id="menu-items")
            with Vertical(classes="pane", id="side-pane"):
                yield Static(id="cart-title", classes="pane-title")
                yield Static(id="cart-lines")
                yield Static("Your Orders", classes="pane-title")
                yield Static(id="customer-orders")
        yield Static(id="status-line")
        yield Footer()

    def row_count(self) -> int:
        if self.focus_area == "cart":
            return len(self.cart)
        return len(self._menu_rows)

    def action_toggle_focus(self) -> None:
        self.focus_area = "cart" if self.focus_area == "menu" else "menu"
        self.cursor = 0
        self.refresh_view(self.tableside.orders.snapshot())

    def action_move_category(self, delta: int) -> None:
        categories = self.tableside.catalog.categories
        if categories:
            self.category_index = (self.category_index + delta) % len(categories)
        self.focus_area = "menu"
        self.cursor = 0
        self.refresh_view(self.tableside.orders.snapshot())

    def action_activate(self) -> None:
        if self.focus_area != "menu" or not self._menu_rows:
            return
        item = self._menu_rows[min(self.cursor, len(self._menu_rows) - 1)]
        if not item.available:
            self.set_status(f"{item.name} is currently unavailable")
            return
        if item.customizable:
            self.app.push_screen(ModifierModal(item, self.tableside.catalog), self._add_customized(item))
            return
        self._add_to_cart(item, ModifierChoice(quantity=1, selections={}))

    def _add_customized(self, item: MenuItem):
        def done(choice: ModifierChoice | None) -> None:
            if choice is not None:
                self._add_to_cart(item, choice)

        return done

    def _add_to_cart(self, item: MenuItem, choice: ModifierChoice) -> None:
        self.run_intent(f"Added {item.name}", self.cart.add, item.item_id, choice.quantity, choice.selections)
        self.refresh_view(self.tableside.orders.snapshot())

    def action_change_quantity(self, delta: int) -> None:
        if self.focus_area != "cart":
            return
        lines = self.cart.items
        if not lines:
            return
        idx = min(self.cursor, len(lines) - 1)
        self.cart.set_quantity(idx, lines[idx].quantity + delta)
        self.refresh_view(self.tableside.orders.snapshot())

    def action_remove_line(self) -> None:
        if self.focus_area != "cart":
            return
        self.cart.remove(self.cursor)
        self.refresh_view(self.tableside.orders.snapshot())

    def action_place_order(self) -> None:
        if self.run_intent(
            "Order placed! You can track your food preparation status.",
            self.cart.place_order,
            self.tableside.orders,
        ):
            self.focus_area = "menu"
            self.cursor = 0
            self.refresh_view(self.tableside.orders.snapshot())

    def _payable_order(self) -> Order | None:
        active = self.tableside.orders.active_orders_for_table(self.table_id)
        return active[0] if active else None

    def action_pay(self) -> None:
        order = self._payable_order()
        if order is None:
            self.set_status("No open order to pay")
            return

        def done(choice: PaymentChoice | None) -> None:
            if choice is None:
                return
            self.run_intent(
                "Payment completed",
                self.tableside.orders.complete_order,
                order.order_id,
                choice.amount,
                choice.split_bill,
            )

        self.app.push_screen(PaymentModal(order), done)

    def action_feedback(self) -> None:
        completed = [
            order
            for order in self.tableside.orders.get_orders_by_table(self.table_id)
            if order.status == "completed" and order.feedback is None
        ]
        if not completed:
            self.set_status("No completed order awaiting feedback")
            return
        order = completed[-1]

        def done(choice: FeedbackChoice | None) -> None:
            if choice is None:
                return
            self.run_intent(
                "Thank you for your feedback!",
                self.tableside.orders.provide_feedback,
                order.order_id,
                choice.rating,
                choice.comment,
            )

        self.app.push_screen(FeedbackModal(), done)

    def refresh_view(self, snapshot: Snapshot) -> None:
        for note in diff_snapshots(self._previous, snapshot, table_id=self.table_id, audience="customer"):
            self.app.notify(note.message, timeout=4)
        self._previous = snapshot

        self._render_menu()
        self._render_cart()
        self._render_orders(snapshot)

    def _render_menu(self) -> None:
        catalog = self.tableside.catalog
        categories = catalog.categories
        if not categories:
            self._menu_rows = []
            self._update("menu-items", "(menu unavailable)")
            return
        category = categories[self.category_index % len(categories)]
        self._menu_rows = catalog.items_in_category(category.slug)

        title = Text()
        for idx, cat in enumerate(categories):
            title.append(f" {cat.name} ", style="reverse bold" if idx == self.category_index else "")
        self._update("menu-title", title)

        lines = Text()
        for idx, item in enumerate(self._menu_rows):
            if idx:
                lines.append("\n")
            selected = self.focus_area == "menu" and idx == self.cursor
            style = "dim strike" if not item.available else ""
            lines.append("➤ " if selected else "  ")
            lines.append(f"{item.name}  {format_money(item.price)}", style=style)
            if not item.available:
                lines.append("  unavailable", style="dim")
            lines.append(f"\n    {item.description}", style="dim")
        self._update("menu-items", lines)

    def _render_cart(self) -> None:
        cart = self.cart
        self._update("cart-title", f"Cart: {cart.item_count} items  {format_money(cart.total)}  (Ctrl+S order)")
        if not len(cart):
            self._update("cart-lines", "(cart is empty)")
            return
        lines = Text()
        for idx, item in enumerate(cart.items):
            if idx:
                lines.append("\n")
            lines.append_text(format_cart_line(idx, item, self.focus_area == "cart" and idx == self.cursor))
        self._update("cart-lines", lines)

    def _render_orders(self, snapshot: Snapshot) -> None:
        mine = [order for order in snapshot.orders if order.table_id == self.table_id]
        if not mine:
            self._update("customer-orders", "No orders yet")
            return
        now = self.now()
        lines = Text()
        for idx, order in enumerate(reversed(mine)):
            if idx:
                lines.append("\n\n")
            lines.append(f"Order #{order.order_id[:6]}  ")
            lines.append_text(status_badge(order.status))
            lines.append(f"  {format_money(order.total_amount)}")
            message, remaining = order_timer_message(order, self.tableside.catalog, now)
            lines.append(f"\n  {message}", style="italic")
            if remaining:
                lines.append(f"  Estimated time: {format_remaining(remaining)}", style="dim")
            if order.loyalty_points_earned:
                lines.append(f"\n  +{order.loyalty_points_earned} loyalty points", style="#5fbf72")
            for item in order.items:
                lines.append("\n    ")
                lines.append_text(format_item_line(item))
        self._update("customer-orders", lines)
