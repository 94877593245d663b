"""Rendering helpers shared by the dashboards."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

from tableside.models import CartItem, Order, OrderItem, Table

_STATUS_STYLES: dict[str, str] = {
    "pending": "bold #1f1300 on #f2b632",
    "preparing": "bold #ffffff on #2f6db5",
    "ready": "bold #0b1f0f on #5fbf72",
    "served": "bold #ffffff on #7b4fb5",
    "completed": "bold #ffffff on #4a4a4a",
    "cancelled": "bold #ffffff on #b23a48",
}

_TABLE_STYLES: dict[str, str] = {
    "available": "bold #0b1f0f on #5fbf72",
    "reserved": "bold #1f1300 on #f2b632",
    "occupied": "bold #ffffff on #b23a48",
}


def badge_style(status: str) -> str:
    """Return a consistent badge style for an order or item status."""
    return _STATUS_STYLES.get(status, "bold white on #333333")


def status_badge(status: str) -> Text:
    return Text(f" {status.upper()} ", style=badge_style(status))


def table_badge(table: Table) -> Text:
    text = Text()
    text.append(f" {table.number:>2} ", style=_TABLE_STYLES.get(table.status, "bold white"))
    text.append(f" {table.status} ({table.capacity} seats)")
    return text


def format_money(amount: float) -> str:
    return f"${amount:,.2f}"


def minutes_ago(then: datetime, now: datetime) -> str:
    elapsed = int((now - then).total_seconds() // 60)
    if elapsed <= 0:
        return "Just now"
    return f"{elapsed} min ago"


def format_modifiers(item: OrderItem | CartItem) -> str:
    """One "Group: option, option" segment per group that has a choice."""
    parts = [
        f"{modifier.name}: {', '.join(option.name for option in modifier.options)}"
        for modifier in item.modifiers
        if modifier.options
    ]
    return "; ".join(parts)


def format_item_line(item: OrderItem, show_status: bool = True) -> Text:
    """Render "2x Name  [STATUS]" with modifiers and notes on follow-up lines."""
    text = Text()
    text.append(f"{item.quantity}x ", style="bold")
    text.append(item.name)
    text.append(f"  {format_money(item.line_total)}", style="dim")
    if show_status:
        text.append("  ")
        text.append_text(status_badge(item.status))
    modifiers = format_modifiers(item)
    if modifiers:
        text.append(f"\n      {modifiers}", style="italic")
    if item.notes:
        text.append(f"\n      Note: {item.notes}", style="italic dim")
    return text


def format_order_header(order: Order, now: datetime) -> Text:
    text = Text()
    text.append(f"Table {order.table_number}", style="bold")
    text.append(f"  Order #{order.order_id[:6]}  ")
    text.append_text(status_badge(order.status))
    text.append(f"  {format_money(order.total_amount)}  {minutes_ago(order.created_at, now)}", style="dim")
    return text


def format_cart_line(index: int, item: CartItem, selected: bool) -> Text:
    pointer = "➤ " if selected else "  "
    text = Text()
    text.append(f"{pointer}{index + 1}. {item.quantity}x {item.name}")
    text.append(f"  {format_money(item.line_total)}", style="dim")
    modifiers = format_modifiers(item)
    if modifiers:
        text.append(f"\n      {modifiers}", style="italic")
    return text
