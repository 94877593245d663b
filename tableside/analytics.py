"""Read-only reporting over the order collection."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Literal

from tableside.menu import MenuCatalog
from tableside.models import Order

Timeframe = Literal["today", "week", "month", "all"]
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


@dataclass(frozen=True)
class ItemSales:
    name: str
    count: int
    revenue: float


@dataclass(frozen=True)
class BucketSales:
    label: str
    sales: float
    orders: int


@dataclass(frozen=True)
class SalesSummary:
    total_revenue: float
    average_order_value: float
    total_orders: int
    completed_orders: int


def _local(value: datetime, tz: tzinfo | None) -> datetime:
    return value.astimezone(tz)


def _one_month_before(day: datetime) -> datetime:
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    for candidate in (day.day, 30, 29, 28):
        try:
            return day.replace(year=year, month=month, day=candidate)
        except ValueError:
            continue
    raise ValueError(f"no month before {day!r}")


def timeframe_start(timeframe: Timeframe, now: datetime, tz: tzinfo | None = None) -> datetime | None:
    """Start of the reporting window; None means no lower bound."""
    if timeframe == "all":
        return None
    today = _local(now, tz).replace(hour=0, minute=0, second=0, microsecond=0)
    if timeframe == "today":
        return today
    if timeframe == "week":
        return today - timedelta(days=7)
    if timeframe == "month":
        return _one_month_before(today)
    raise ValueError(f"unknown timeframe: {timeframe!r}")


def filter_by_timeframe(
    orders: Iterable[Order],
    timeframe: Timeframe,
    now: datetime,
    tz: tzinfo | None = None,
) -> list[Order]:
    start = timeframe_start(timeframe, now, tz)
    if start is None:
        return list(orders)
    return [order for order in orders if order.created_at >= start]


def summarize(orders: Iterable[Order]) -> SalesSummary:
    """Revenue counts completed orders only; the order count includes every order."""
    orders = list(orders)
    completed = [order for order in orders if order.status == "completed"]
    revenue = sum(order.total_amount for order in completed)
    return SalesSummary(
        total_revenue=revenue,
        average_order_value=revenue / len(completed) if completed else 0.0,
        total_orders=len(orders),
        completed_orders=len(completed),
    )


def popular_items(orders: Iterable[Order]) -> list[ItemSales]:
    counts: dict[str, int] = defaultdict(int)
    revenue: dict[str, float] = defaultdict(float)
    for order in orders:
        for item in order.items:
            counts[item.name] += item.quantity
            revenue[item.name] += item.price * item.quantity
    ranked = [ItemSales(name=name, count=counts[name], revenue=revenue[name]) for name in counts]
    # sorted() is stable, so ties keep first-seen order.
    return sorted(ranked, key=lambda entry: entry.count, reverse=True)


def hourly_sales(orders: Iterable[Order], tz: tzinfo | None = None) -> list[BucketSales]:
    sales = [0.0] * 24
    counts = [0] * 24
    for order in orders:
        hour = _local(order.created_at, tz).hour
        sales[hour] += order.total_amount
        counts[hour] += 1
    return [BucketSales(label=f"{hour}:00", sales=sales[hour], orders=counts[hour]) for hour in range(24)]


def daily_sales(orders: Iterable[Order], tz: tzinfo | None = None) -> list[BucketSales]:
    sales = {day: 0.0 for day in DAY_NAMES}
    counts = {day: 0 for day in DAY_NAMES}
    for order in orders:
        # isoweekday: Monday=1 .. Sunday=7
        day = DAY_NAMES[_local(order.created_at, tz).isoweekday() % 7]
        sales[day] += order.total_amount
        counts[day] += 1
    return [BucketSales(label=day, sales=sales[day], orders=counts[day]) for day in DAY_NAMES]


def category_revenue(orders: Iterable[Order], catalog: MenuCatalog) -> dict[str, float]:
    """Revenue per menu category name, in menu order; categories without sales are omitted."""
    totals: dict[str, float] = {category.name: 0.0 for category in catalog.categories}
    for order in orders:
        for item in order.items:
            menu_item = catalog.get_menu_item(item.menu_item_id)
            name = catalog.category_name(menu_item.category) if menu_item is not None else "Other"
            totals[name] = totals.get(name, 0.0) + item.price * item.quantity
    return {name: value for name, value in totals.items() if value > 0}
