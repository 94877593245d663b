"""Order store: the order lifecycle state machine.

The store is the only writer of orders and order items. Every operation
validates first and mutates second, so a raised error never leaves a partial
change behind. After a successful mutation the orders collection is persisted
and one full snapshot is published to subscribers.

Status rules:

- ``update_order_status`` moves the order and every item that is not
  already completed or cancelled.
- ``update_order_item_status`` moves one item; the order follows only when
  all of its items now share that status, otherwise it keeps its previous
  aggregate status.
- An order reaching ``completed`` or ``cancelled`` frees its table when no
  other order for that table is still active.
- ``complete_order`` records payment and completes the order without
  touching item statuses.
"""

from __future__ import annotations

import copy
import logging
import math
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, Sequence
from uuid import uuid4

from tableside.config import FEEDBACK_RATING_RANGE, LOYALTY_POINT_DIVISOR
from tableside.errors import InvalidTransitionError, NotFoundError, ValidationError
from tableside.events import SnapshotBus, SnapshotCallback, Unsubscribe
from tableside.models import (
    CANCELLABLE_STATUSES,
    ORDER_STATUSES,
    Feedback,
    Order,
    OrderItem,
    OrderItemDraft,
    OrderStatus,
    Snapshot,
    calculate_total,
    is_terminal,
)
from tableside.persistence import ORDERS_KEY, LocalStore, load_collection, save_collection
from tableside.records import order_from_record, order_to_record
from tableside.tables import TableRegistry

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _check_status(status: str) -> None:
    if status not in ORDER_STATUSES:
        raise ValidationError(f"unknown order status: {status!r}")


def _check_transition(current: str, new: str, what: str) -> None:
    if is_terminal(current):
        raise InvalidTransitionError(f"{what} is already {current}")
    if new == "cancelled" and current not in CANCELLABLE_STATUSES:
        raise InvalidTransitionError(f"{what} cannot be cancelled once {current}")


def _check_draft(draft: OrderItemDraft) -> None:
    if draft.quantity < 1:
        raise ValidationError(f"{draft.name}: quantity must be at least 1")


def _new_item(draft: OrderItemDraft) -> OrderItem:
    return OrderItem(
        item_id=uuid4().hex,
        menu_item_id=draft.menu_item_id,
        name=draft.name,
        price=draft.price,
        quantity=draft.quantity,
        modifiers=tuple(draft.modifiers),
        notes=draft.notes,
        status="pending",
    )


class OrderStore:
    """Owns the order collection and every lifecycle operation on it."""

    def __init__(
        self,
        tables: TableRegistry,
        store: LocalStore | None = None,
        orders: list[Order] | None = None,
        clock: Clock = _utc_now,
    ) -> None:
        self._tables = tables
        self._store = store
        self._clock = clock
        if orders is None:
            orders = load_collection(store, ORDERS_KEY, order_from_record, list)
        self._orders: list[Order] = list(orders)
        self._bus = SnapshotBus()
        self._lock = threading.RLock()
        self._mutating = False
        self._version = 0
        tables.add_listener(self._on_tables_changed)

    # -------------------- lookups --------------------

    @property
    def orders(self) -> list[Order]:
        return list(self._orders)

    @property
    def tables(self) -> TableRegistry:
        return self._tables

    def get_order_by_id(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.order_id == order_id:
                return order
        return None

    def get_orders_by_table(self, table_id: str) -> list[Order]:
        return [order for order in self._orders if order.table_id == table_id]

    def active_orders_for_table(self, table_id: str) -> list[Order]:
        return [order for order in self._orders if order.table_id == table_id and order.is_active]

    def _require_order(self, order_id: str) -> Order:
        order = self.get_order_by_id(order_id)
        if order is None:
            raise NotFoundError("order", order_id)
        return order

    def _require_item(self, order: Order, item_id: str) -> OrderItem:
        item = order.find_item(item_id)
        if item is None:
            raise NotFoundError("order item", item_id)
        return item

    # -------------------- lifecycle --------------------

    def create_order(self, table_id: str, items: Sequence[OrderItemDraft]) -> Order:
        """Place a new pending order and mark its table occupied."""
        if not items:
            raise ValidationError("an order needs at least one item")
        for draft in items:
            _check_draft(draft)
        with self._mutation():
            table = self._tables.require_table(table_id)
            now = self._clock()
            order_items = [_new_item(draft) for draft in items]
            order = Order(
                order_id=uuid4().hex,
                table_id=table.table_id,
                table_number=table.number,
                items=order_items,
                status="pending",
                created_at=now,
                updated_at=now,
                total_amount=calculate_total(order_items),
            )
            self._orders.append(order)
            self._tables.update_table_status(table.table_id, "occupied")
            logger.info(
                "order_created order=%s table=%s items=%d total=%.2f",
                order.order_id,
                order.table_number,
                len(order_items),
                order.total_amount,
            )
            return order

    def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        """Move an order and its unfinished items to status; completed or cancelled items stay put."""
        _check_status(status)
        with self._mutation():
            order = self._require_order(order_id)
            _check_transition(order.status, status, f"order {order_id}")
            previous = order.status
            order.status = status
            for item in order.items:
                if not is_terminal(item.status):
                    item.status = status
            order.updated_at = self._clock()
            logger.info("order_status order=%s %s->%s", order_id, previous, status)
            if is_terminal(status):
                self._release_table_if_idle(order)
            return order

    def update_order_item_status(self, order_id: str, item_id: str, status: OrderStatus) -> Order:
        """Move one item; the order follows only when every item now agrees."""
        _check_status(status)
        with self._mutation():
            order = self._require_order(order_id)
            item = self._require_item(order, item_id)
            if is_terminal(order.status):
                raise InvalidTransitionError(f"order {order_id} is already {order.status}")
            _check_transition(item.status, status, f"item {item.name}")
            item.status = status
            if all(other.status == status for other in order.items):
                if order.status != status:
                    logger.info("order_status order=%s %s->%s (items agree)", order_id, order.status, status)
                order.status = status
            order.updated_at = self._clock()
            return order

    def add_item_to_order(self, order_id: str, draft: OrderItemDraft) -> OrderItem:
        """Append a pending item. The aggregate order status is left as it was."""
        _check_draft(draft)
        with self._mutation():
            order = self._require_order(order_id)
            if is_terminal(order.status):
                raise InvalidTransitionError(f"order {order_id} is already {order.status}")
            item = _new_item(draft)
            order.items.append(item)
            order.total_amount = calculate_total(order.items)
            order.updated_at = self._clock()
            return item

    def remove_item_from_order(self, order_id: str, item_id: str) -> Order:
        with self._mutation():
            order = self._require_order(order_id)
            self._require_item(order, item_id)
            if is_terminal(order.status):
                raise InvalidTransitionError(f"order {order_id} is already {order.status}")
            order.items = [item for item in order.items if item.item_id != item_id]
            order.total_amount = calculate_total(order.items)
            order.updated_at = self._clock()
            return order

    def complete_order(self, order_id: str, amount: float, split_bill: bool = False) -> Order:
        """Record payment and complete the order. Item statuses are not touched."""
        if amount < 0:
            raise ValidationError("paid amount cannot be negative")
        with self._mutation():
            order = self._require_order(order_id)
            _check_transition(order.status, "completed", f"order {order_id}")
            order.status = "completed"
            order.paid_amount = amount
            order.split_bill = bool(split_bill)
            order.loyalty_points_earned = math.floor(amount / LOYALTY_POINT_DIVISOR)
            order.updated_at = self._clock()
            logger.info(
                "order_paid order=%s amount=%.2f split=%s points=%d",
                order_id,
                amount,
                order.split_bill,
                order.loyalty_points_earned,
            )
            self._release_table_if_idle(order)
            return order

    def provide_feedback(self, order_id: str, rating: int, comment: str | None = None) -> Order:
        low, high = FEEDBACK_RATING_RANGE
        if isinstance(rating, bool) or not isinstance(rating, int) or not low <= rating <= high:
            raise ValidationError(f"rating must be a whole number from {low} to {high}")
        with self._mutation():
            order = self._require_order(order_id)
            comment = comment.strip() if comment else None
            order.feedback = Feedback(rating=rating, comment=comment or None)
            return order

    def _release_table_if_idle(self, order: Order) -> None:
        others = [
            other
            for other in self._orders
            if other.table_id == order.table_id and other.order_id != order.order_id and other.is_active
        ]
        if others:
            logger.info("table_kept table=%s active_orders=%d", order.table_number, len(others))
            return
        if self._tables.get_table(order.table_id) is None:
            logger.warning("table_missing table=%s order=%s", order.table_id, order.order_id)
            return
        self._tables.update_table_status(order.table_id, "available")

    # -------------------- snapshots --------------------

    def subscribe(self, callback: SnapshotCallback) -> Unsubscribe:
        """Register callback for full snapshots after each change. Returns an unsubscribe function."""
        return self._bus.subscribe(callback)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(
                orders=tuple(copy.deepcopy(self._orders)),
                tables=tuple(copy.deepcopy(self._tables.tables)),
                taken_at=self._clock(),
                version=self._version,
            )

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        with self._lock:
            outer = not self._mutating
            self._mutating = True
            try:
                yield
            finally:
                if outer:
                    self._mutating = False
            if outer:
                self._version += 1
                save_collection(self._store, ORDERS_KEY, self._orders, order_to_record)
                snapshot = self.snapshot()
        if outer:
            self._bus.publish(snapshot)

    def _on_tables_changed(self) -> None:
        # Staff table actions outside an order operation still reach subscribers.
        if self._mutating:
            return
        with self._lock:
            self._version += 1
            snapshot = self.snapshot()
        self._bus.publish(snapshot)
