"""Flat-record (JSON-ready dict) conversion for every persisted entity.

Decoders raise KeyError, TypeError or ValueError on malformed input; the
collection loader in tableside.persistence treats any of those as corrupt
data and falls back to defaults.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from tableside.models import (
    ORDER_STATUSES,
    TABLE_STATUSES,
    CartItem,
    Feedback,
    MenuCategory,
    MenuItem,
    ModifierGroup,
    ModifierOption,
    Order,
    OrderItem,
    SelectedModifier,
    SelectedOption,
    Table,
)

Record = dict[str, Any]


def encode_datetime(value: datetime) -> str:
    return value.isoformat()


def decode_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _checked_status(value: str, allowed: tuple[str, ...]) -> str:
    if value not in allowed:
        raise ValueError(f"unknown status: {value!r}")
    return value


# -------------------- tables --------------------


def table_to_record(table: Table) -> Record:
    return {"id": table.table_id, "number": table.number, "capacity": table.capacity, "status": table.status}


def table_from_record(record: Record) -> Table:
    return Table(
        table_id=str(record["id"]),
        number=int(record["number"]),
        capacity=int(record["capacity"]),
        status=_checked_status(record["status"], TABLE_STATUSES),  # type: ignore[arg-type]
    )


# -------------------- menu --------------------


def menu_item_to_record(item: MenuItem) -> Record:
    return {
        "id": item.item_id,
        "name": item.name,
        "description": item.description,
        "price": item.price,
        "category": item.category,
        "available": item.available,
        "preparationTime": item.preparation_minutes,
        "customizable": item.customizable,
        "modifiers": [
            {
                "id": group.group_id,
                "name": group.name,
                "required": group.required,
                "multiSelect": group.multi_select,
                "options": [{"id": o.option_id, "name": o.name, "price": o.price} for o in group.options],
            }
            for group in item.modifiers
        ],
    }


def menu_item_from_record(record: Record) -> MenuItem:
    groups = tuple(
        ModifierGroup(
            group_id=str(group["id"]),
            name=str(group["name"]),
            required=bool(group["required"]),
            multi_select=bool(group["multiSelect"]),
            options=tuple(
                ModifierOption(option_id=str(o["id"]), name=str(o["name"]), price=float(o["price"]))
                for o in group["options"]
            ),
        )
        for group in record.get("modifiers") or []
    )
    return MenuItem(
        item_id=str(record["id"]),
        name=str(record["name"]),
        description=str(record.get("description", "")),
        price=float(record["price"]),
        category=str(record["category"]),
        available=bool(record.get("available", True)),
        preparation_minutes=int(record.get("preparationTime", 0)),
        customizable=bool(record.get("customizable", bool(groups))),
        modifiers=groups,
    )


def category_to_record(category: MenuCategory) -> Record:
    return {"id": category.category_id, "name": category.name, "slug": category.slug}


def category_from_record(record: Record) -> MenuCategory:
    return MenuCategory(category_id=str(record["id"]), name=str(record["name"]), slug=str(record["slug"]))


# -------------------- order lines --------------------


def _modifiers_to_record(modifiers: tuple[SelectedModifier, ...]) -> list[Record]:
    return [
        {"name": modifier.name, "options": [{"name": o.name, "price": o.price} for o in modifier.options]}
        for modifier in modifiers
    ]


def _modifiers_from_record(raw: list[Record] | None) -> tuple[SelectedModifier, ...]:
    return tuple(
        SelectedModifier(
            name=str(modifier["name"]),
            options=tuple(SelectedOption(name=str(o["name"]), price=float(o["price"])) for o in modifier["options"]),
        )
        for modifier in raw or []
    )


def order_item_to_record(item: OrderItem) -> Record:
    return {
        "id": item.item_id,
        "menuItemId": item.menu_item_id,
        "name": item.name,
        "price": item.price,
        "quantity": item.quantity,
        "modifiers": _modifiers_to_record(item.modifiers),
        "notes": item.notes,
        "status": item.status,
    }


def order_item_from_record(record: Record) -> OrderItem:
    return OrderItem(
        item_id=str(record["id"]),
        menu_item_id=str(record["menuItemId"]),
        name=str(record["name"]),
        price=float(record["price"]),
        quantity=int(record["quantity"]),
        modifiers=_modifiers_from_record(record.get("modifiers")),
        notes=record.get("notes"),
        status=_checked_status(record["status"], ORDER_STATUSES),  # type: ignore[arg-type]
    )


def cart_item_to_record(item: CartItem) -> Record:
    return {
        "menuItemId": item.menu_item_id,
        "name": item.name,
        "price": item.price,
        "quantity": item.quantity,
        "modifiers": _modifiers_to_record(item.modifiers),
        "notes": item.notes,
    }


def cart_item_from_record(record: Record) -> CartItem:
    return CartItem(
        menu_item_id=str(record["menuItemId"]),
        name=str(record["name"]),
        price=float(record["price"]),
        quantity=int(record["quantity"]),
        modifiers=_modifiers_from_record(record.get("modifiers")),
        notes=record.get("notes"),
    )


# -------------------- orders --------------------


def order_to_record(order: Order) -> Record:
    return {
        "id": order.order_id,
        "tableId": order.table_id,
        "tableNumber": order.table_number,
        "items": [order_item_to_record(item) for item in order.items],
        "status": order.status,
        "createdAt": encode_datetime(order.created_at),
        "updatedAt": encode_datetime(order.updated_at),
        "totalAmount": order.total_amount,
        "paidAmount": order.paid_amount,
        "splitBill": order.split_bill,
        "loyaltyPointsEarned": order.loyalty_points_earned,
        "feedback": (
            None
            if order.feedback is None
            else {"rating": order.feedback.rating, "comment": order.feedback.comment}
        ),
    }


def order_from_record(record: Record) -> Order:
    feedback_raw = record.get("feedback")
    paid_raw = record.get("paidAmount")
    points_raw = record.get("loyaltyPointsEarned")
    split_raw = record.get("splitBill")
    return Order(
        order_id=str(record["id"]),
        table_id=str(record["tableId"]),
        table_number=int(record["tableNumber"]),
        items=[order_item_from_record(item) for item in record["items"]],
        status=_checked_status(record["status"], ORDER_STATUSES),  # type: ignore[arg-type]
        created_at=decode_datetime(record["createdAt"]),
        updated_at=decode_datetime(record["updatedAt"]),
        total_amount=float(record["totalAmount"]),
        paid_amount=None if paid_raw is None else float(paid_raw),
        split_bill=None if split_raw is None else bool(split_raw),
        loyalty_points_earned=None if points_raw is None else int(points_raw),
        feedback=(
            None
            if feedback_raw is None
            else Feedback(rating=int(feedback_raw["rating"]), comment=feedback_raw.get("comment"))
        ),
    )
