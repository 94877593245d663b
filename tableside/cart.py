"""Per-table cart: the customer's staging list before an order is placed."""

from __future__ import annotations

import logging

from tableside.errors import ValidationError
from tableside.menu import MenuCatalog, Selections
from tableside.models import CartItem, Order
from tableside.orders import OrderStore
from tableside.persistence import LocalStore, cart_key, discard, load_collection, save_collection
from tableside.records import cart_item_from_record, cart_item_to_record

logger = logging.getLogger(__name__)


class Cart:
    """Pending lines for one table, persisted after every change."""

    def __init__(self, table_id: str, catalog: MenuCatalog, store: LocalStore | None = None) -> None:
        self.table_id = table_id
        self._catalog = catalog
        self._store = store
        self._key = cart_key(table_id)
        self._items: list[CartItem] = load_collection(store, self._key, cart_item_from_record, list)

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def total(self) -> float:
        return sum(item.line_total for item in self._items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def add(
        self,
        menu_item_id: str,
        quantity: int = 1,
        selections: Selections | None = None,
        notes: str | None = None,
    ) -> CartItem:
        """Add a menu item; an identical line (same item, modifiers and note) just grows."""
        draft = self._catalog.draft_item(menu_item_id, quantity, selections, notes)
        for existing in self._items:
            if (
                existing.menu_item_id == draft.menu_item_id
                and existing.modifiers == draft.modifiers
                and existing.notes == draft.notes
            ):
                existing.quantity += draft.quantity
                self._persist()
                return existing
        line = CartItem(
            menu_item_id=draft.menu_item_id,
            name=draft.name,
            price=draft.price,
            quantity=draft.quantity,
            modifiers=draft.modifiers,
            notes=draft.notes,
        )
        self._items.append(line)
        self._persist()
        return line

    def remove(self, index: int) -> None:
        if not 0 <= index < len(self._items):
            return
        del self._items[index]
        self._persist()

    def set_quantity(self, index: int, quantity: int) -> None:
        if quantity < 1 or not 0 <= index < len(self._items):
            return
        self._items[index].quantity = quantity
        self._persist()

    def clear(self) -> None:
        self._items.clear()
        discard(self._store, self._key)

    def place_order(self, orders: OrderStore) -> Order:
        """Create an order from the cart and clear it."""
        if not self._items:
            raise ValidationError("cart is empty")
        order = orders.create_order(self.table_id, [item.to_draft() for item in self._items])
        logger.info("cart_checkout table=%s order=%s lines=%d", self.table_id, order.order_id, len(self._items))
        self.clear()
        return order

    def _persist(self) -> None:
        save_collection(self._store, self._key, self._items, cart_item_to_record)
