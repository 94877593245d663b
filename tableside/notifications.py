"""Turn consecutive snapshots into user-facing messages.

The order store never produces message text; dashboards keep the previous
snapshot and ask this module what changed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from tableside.config import DEFAULT_PREPARATION_MINUTES
from tableside.constant import STATUS_MESSAGES, TIMER_MESSAGES
from tableside.menu import MenuCatalog
from tableside.models import Order, Snapshot


@dataclass(frozen=True)
class Notification:
    order_id: str
    table_number: int
    status: str
    message: str
    time: datetime


def _short_id(order_id: str) -> str:
    return order_id[:6]


def diff_snapshots(
    previous: Snapshot | None,
    current: Snapshot,
    table_id: str | None = None,
    audience: str = "staff",
) -> list[Notification]:
    """Messages for orders that appeared or changed status between two snapshots.

    With audience="customer" only preparing/ready/served changes are reported,
    worded for the diner. table_id restricts the diff to one table.
    """
    if previous is None:
        return []
    before = {order.order_id: order for order in previous.orders}
    notes: list[Notification] = []
    for order in current.orders:
        if table_id is not None and order.table_id != table_id:
            continue
        old = before.get(order.order_id)
        if old is None:
            if audience == "staff":
                notes.append(
                    Notification(
                        order_id=order.order_id,
                        table_number=order.table_number,
                        status=order.status,
                        message=f"New order placed at Table {order.table_number}",
                        time=current.taken_at,
                    )
                )
            continue
        if old.status == order.status:
            continue
        if audience == "customer":
            message = STATUS_MESSAGES.get(order.status)
            if message is None:
                continue
        else:
            message = f"Table {order.table_number}: order #{_short_id(order.order_id)} is now {order.status}"
        notes.append(
            Notification(
                order_id=order.order_id,
                table_number=order.table_number,
                status=order.status,
                message=message,
                time=current.taken_at,
            )
        )
    return notes


def estimated_minutes(order: Order, catalog: MenuCatalog) -> int:
    """Longest preparation time among the order's items; the default when none are on the menu."""
    minutes = [
        menu_item.preparation_minutes
        for menu_item in (catalog.get_menu_item(item.menu_item_id) for item in order.items)
        if menu_item is not None
    ]
    if not minutes:
        return DEFAULT_PREPARATION_MINUTES
    return max(minutes)


def estimate_ready_at(order: Order, catalog: MenuCatalog) -> datetime:
    return order.created_at + timedelta(minutes=estimated_minutes(order, catalog))


def order_timer_message(order: Order, catalog: MenuCatalog, now: datetime) -> tuple[str, int | None]:
    """Progress text for a customer, and whole seconds remaining while the kitchen is working."""
    if order.status not in ("pending", "preparing"):
        return TIMER_MESSAGES[order.status], None
    remaining = math.floor((estimate_ready_at(order, catalog) - now).total_seconds())
    if remaining <= 0:
        return TIMER_MESSAGES["overdue"], 0
    return TIMER_MESSAGES[order.status], remaining


def format_remaining(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"
