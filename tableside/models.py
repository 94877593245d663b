"""Domain models for tableside ordering."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

TableStatus = Literal["available", "reserved", "occupied"]
OrderStatus = Literal["pending", "preparing", "ready", "served", "completed", "cancelled"]

TABLE_STATUSES: tuple[str, ...] = ("available", "reserved", "occupied")
ORDER_STATUSES: tuple[str, ...] = ("pending", "preparing", "ready", "served", "completed", "cancelled")
TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "cancelled"})
CANCELLABLE_STATUSES: frozenset[str] = frozenset({"pending", "preparing"})


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


@dataclass
class Table:
    """A physical table and its occupancy."""

    table_id: str
    number: int
    capacity: int
    status: TableStatus = "available"


@dataclass(frozen=True)
class ModifierOption:
    """One selectable choice; price may be negative for a discount."""

    option_id: str
    name: str
    price: float


@dataclass(frozen=True)
class ModifierGroup:
    """A named customization axis for a menu item."""

    group_id: str
    name: str
    options: tuple[ModifierOption, ...]
    required: bool = False
    multi_select: bool = False


@dataclass(frozen=True)
class MenuItem:
    """A menu entry. Read-only input to ordering."""

    item_id: str
    name: str
    description: str
    price: float
    category: str
    available: bool = True
    preparation_minutes: int = 0
    customizable: bool = False
    modifiers: tuple[ModifierGroup, ...] = ()


@dataclass(frozen=True)
class MenuCategory:
    """A menu section; its items are the menu items whose category equals slug."""

    category_id: str
    name: str
    slug: str


@dataclass(frozen=True)
class SelectedOption:
    name: str
    price: float


@dataclass(frozen=True)
class SelectedModifier:
    """Modifier choices captured on an order line."""

    name: str
    options: tuple[SelectedOption, ...] = ()


@dataclass
class OrderItemDraft:
    """An order line before the store assigns it an id and status."""

    menu_item_id: str
    name: str
    price: float
    quantity: int = 1
    modifiers: tuple[SelectedModifier, ...] = ()
    notes: str | None = None


@dataclass
class OrderItem:
    """A placed order line with a name/price snapshot."""

    item_id: str
    menu_item_id: str
    name: str
    price: float
    quantity: int
    modifiers: tuple[SelectedModifier, ...] = ()
    notes: str | None = None
    status: OrderStatus = "pending"

    @property
    def unit_total(self) -> float:
        return self.price + sum(option.price for modifier in self.modifiers for option in modifier.options)

    @property
    def line_total(self) -> float:
        return self.unit_total * self.quantity


@dataclass(frozen=True)
class Feedback:
    rating: int
    comment: str | None = None


@dataclass
class Order:
    """A table's order and its lifecycle bookkeeping."""

    order_id: str
    table_id: str
    table_number: int
    items: list[OrderItem]
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    total_amount: float = 0.0
    paid_amount: float | None = None
    split_bill: bool | None = None
    loyalty_points_earned: int | None = None
    feedback: Feedback | None = None

    @property
    def is_active(self) -> bool:
        return not is_terminal(self.status)

    def find_item(self, item_id: str) -> OrderItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None


@dataclass
class CartItem:
    """A staged line in a table's cart."""

    menu_item_id: str
    name: str
    price: float
    quantity: int = 1
    modifiers: tuple[SelectedModifier, ...] = ()
    notes: str | None = None

    @property
    def line_total(self) -> float:
        extras = sum(option.price for modifier in self.modifiers for option in modifier.options)
        return (self.price + extras) * self.quantity

    def to_draft(self) -> OrderItemDraft:
        return OrderItemDraft(
            menu_item_id=self.menu_item_id,
            name=self.name,
            price=self.price,
            quantity=self.quantity,
            modifiers=self.modifiers,
            notes=self.notes,
        )


def calculate_total(items: list[OrderItem]) -> float:
    """Sum of line totals: (unit price + option deltas) x quantity."""
    return sum(item.line_total for item in items)


@dataclass(frozen=True)
class Snapshot:
    """Full copy of orders and tables handed to subscribers."""

    orders: tuple[Order, ...]
    tables: tuple[Table, ...]
    taken_at: datetime
    version: int = 0
