from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tableside.analytics import (
    category_revenue,
    daily_sales,
    filter_by_timeframe,
    hourly_sales,
    popular_items,
    summarize,
    timeframe_start,
)
from tableside.menu import MenuCatalog
from tableside.models import Order, OrderItem

NOW = datetime(2025, 3, 14, 18, 30, tzinfo=timezone.utc)  # a Friday


def _order(order_id: str, created_at: datetime, status: str, lines: list[tuple[str, str, float, int]]) -> Order:
    items = [
        OrderItem(item_id=f"{order_id}-{idx}", menu_item_id=menu_id, name=name, price=price, quantity=quantity)
        for idx, (menu_id, name, price, quantity) in enumerate(lines)
    ]
    return Order(
        order_id=order_id,
        table_id="t1",
        table_number=1,
        items=items,
        status=status,  # type: ignore[arg-type]
        created_at=created_at,
        updated_at=created_at,
        total_amount=sum(item.line_total for item in items),
    )


@pytest.fixture()
def history() -> list[Order]:
    return [
        _order("a", NOW - timedelta(hours=1), "completed", [("margherita_pizza", "Margherita Pizza", 12.99, 2)]),
        _order("b", NOW - timedelta(hours=2), "completed", [("coca_cola", "Coca-Cola", 2.99, 3)]),
        _order("c", NOW - timedelta(days=3), "pending", [("tiramisu", "Tiramisu", 7.99, 1)]),
        _order("d", NOW - timedelta(days=40), "completed", [("coca_cola", "Coca-Cola", 2.99, 1)]),
    ]


class TestTimeframes:
    def test_window_starts(self):
        assert timeframe_start("today", NOW, timezone.utc) == datetime(2025, 3, 14, tzinfo=timezone.utc)
        assert timeframe_start("week", NOW, timezone.utc) == datetime(2025, 3, 7, tzinfo=timezone.utc)
        assert timeframe_start("month", NOW, timezone.utc) == datetime(2025, 2, 14, tzinfo=timezone.utc)
        assert timeframe_start("all", NOW, timezone.utc) is None

    def test_month_window_clamps_short_months(self):
        march_31 = datetime(2025, 3, 31, 12, tzinfo=timezone.utc)
        assert timeframe_start("month", march_31, timezone.utc) == datetime(2025, 2, 28, tzinfo=timezone.utc)

    def test_filter(self, history: list[Order]):
        assert [o.order_id for o in filter_by_timeframe(history, "today", NOW, timezone.utc)] == ["a", "b"]
        assert [o.order_id for o in filter_by_timeframe(history, "week", NOW, timezone.utc)] == ["a", "b", "c"]
        assert len(filter_by_timeframe(history, "all", NOW, timezone.utc)) == 4


class TestSalesFigures:
    def test_revenue_counts_completed_orders_only(self, history: list[Order]):
        summary = summarize(history[:3])
        assert summary.total_revenue == pytest.approx(25.98 + 8.97)
        assert summary.total_orders == 3
        assert summary.completed_orders == 2
        assert summary.average_order_value == pytest.approx((25.98 + 8.97) / 2)

    def test_empty_summary(self):
        summary = summarize([])
        assert summary.total_revenue == 0
        assert summary.average_order_value == 0

    def test_popular_items_sorted_by_count(self, history: list[Order]):
        ranked = popular_items(history)
        assert [(entry.name, entry.count) for entry in ranked] == [
            ("Coca-Cola", 4),
            ("Margherita Pizza", 2),
            ("Tiramisu", 1),
        ]
        assert ranked[0].revenue == pytest.approx(11.96)

    def test_hourly_buckets(self, history: list[Order]):
        buckets = hourly_sales(history[:2], timezone.utc)
        assert len(buckets) == 24
        assert buckets[17].label == "17:00"
        assert buckets[17].orders == 1
        assert buckets[16].sales == pytest.approx(8.97)

    def test_daily_buckets_start_on_sunday(self, history: list[Order]):
        buckets = daily_sales(history[:3], timezone.utc)
        assert [bucket.label for bucket in buckets][0] == "Sunday"
        by_day = {bucket.label: bucket for bucket in buckets}
        assert by_day["Friday"].orders == 2
        assert by_day["Tuesday"].orders == 1

    def test_category_revenue(self, history: list[Order], catalog: MenuCatalog):
        orders = history + [_order("e", NOW, "pending", [("mystery", "Chef Special", 20.0, 1)])]
        revenue = category_revenue(orders, catalog)
        assert list(revenue) == ["Pizza", "Dessert", "Drinks", "Other"]
        assert revenue["Drinks"] == pytest.approx(11.96)
        assert revenue["Other"] == pytest.approx(20.0)
