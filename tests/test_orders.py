"""
Order Store Tests

Lifecycle operations, table side effects, payment and feedback, and the
status transition guard.
"""

from __future__ import annotations

import pytest

from tableside.errors import InvalidTransitionError, NotFoundError, ValidationError
from tableside.menu import MenuCatalog
from tableside.models import OrderItemDraft, Snapshot
from tableside.orders import OrderStore
from tableside.persistence import LocalStore
from tableside.tables import TableRegistry


class TestCreateOrder:
    """create_order places a pending order and occupies the table"""

    def test_new_order_is_pending_with_pending_items(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza, cola])

        assert order.status == "pending"
        assert [item.status for item in order.items] == ["pending", "pending"]
        assert order.table_number == 1
        assert order.created_at == order.updated_at
        assert order.total_amount == pytest.approx(12.99 + 2.99)

    def test_table_becomes_occupied(self, orders: OrderStore, tables: TableRegistry, pizza):
        orders.create_order("t3", [pizza])
        assert tables.get_table("t3").status == "occupied"

    def test_ids_are_unique(self, orders: OrderStore, pizza, cola):
        first = orders.create_order("t1", [pizza, cola])
        second = orders.create_order("t1", [pizza])

        assert first.order_id != second.order_id
        item_ids = [item.item_id for item in first.items + second.items]
        assert len(set(item_ids)) == 3

    def test_total_includes_modifier_prices(self, orders: OrderStore, catalog: MenuCatalog):
        draft = catalog.draft_item(
            "margherita_pizza",
            2,
            {"size": ["size.large"], "toppings": ["toppings.cheese", "toppings.mushrooms"]},
        )
        order = orders.create_order("t1", [draft])

        # (12.99 + 3.00 + 1.00 + 1.50) x 2
        assert order.total_amount == pytest.approx(36.98)

    def test_empty_item_list_is_rejected(self, orders: OrderStore, tables: TableRegistry):
        with pytest.raises(ValidationError):
            orders.create_order("t1", [])
        assert orders.orders == []
        assert tables.get_table("t1").status == "available"

    def test_zero_quantity_is_rejected(self, orders: OrderStore):
        draft = OrderItemDraft(menu_item_id="coca_cola", name="Coca-Cola", price=2.99, quantity=0)
        with pytest.raises(ValidationError):
            orders.create_order("t1", [draft])
        assert orders.orders == []

    def test_unknown_table_raises_not_found(self, orders: OrderStore, pizza):
        with pytest.raises(NotFoundError):
            orders.create_order("missing", [pizza])
        assert orders.orders == []


class TestUpdateOrderStatus:
    """update_order_status moves the order and all of its items"""

    def test_items_follow_order(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza, cola])
        orders.update_order_status(order.order_id, "preparing")

        stored = orders.get_order_by_id(order.order_id)
        assert stored.status == "preparing"
        assert {item.status for item in stored.items} == {"preparing"}
        assert stored.updated_at > stored.created_at

    def test_cancel_frees_table(self, orders: OrderStore, tables: TableRegistry, pizza):
        order = orders.create_order("t1", [pizza])
        orders.update_order_status(order.order_id, "cancelled")
        assert tables.get_table("t1").status == "available"

    def test_non_terminal_status_keeps_table(self, orders: OrderStore, tables: TableRegistry, pizza):
        order = orders.create_order("t1", [pizza])
        orders.update_order_status(order.order_id, "served")
        assert tables.get_table("t1").status == "occupied"

    def test_unknown_status_is_rejected(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        with pytest.raises(ValidationError):
            orders.update_order_status(order.order_id, "delivered")  # type: ignore[arg-type]
        assert orders.get_order_by_id(order.order_id).status == "pending"

    def test_unknown_order_raises_not_found(self, orders: OrderStore):
        with pytest.raises(NotFoundError):
            orders.update_order_status("nope", "preparing")


class TestTwoOrdersOnOneTable:
    """A table is freed only when its last active order finishes"""

    def test_completing_orders_frees_table_after_the_last(
        self, orders: OrderStore, tables: TableRegistry, pizza, cola
    ):
        order_a = orders.create_order("t1", [pizza])
        order_b = orders.create_order("t1", [cola])
        orders.update_order_status(order_a.order_id, "preparing")
        orders.update_order_status(order_b.order_id, "preparing")

        assert order_a.total_amount == pytest.approx(12.99)
        assert order_b.total_amount == pytest.approx(2.99)

        orders.update_order_status(order_a.order_id, "completed")
        assert tables.get_table("t1").status == "occupied"

        orders.update_order_status(order_b.order_id, "completed")
        assert tables.get_table("t1").status == "available"

    def test_other_tables_do_not_hold_a_table(self, orders: OrderStore, tables: TableRegistry, pizza, cola):
        order_a = orders.create_order("t1", [pizza])
        orders.create_order("t2", [cola])

        orders.complete_order(order_a.order_id, 12.99)
        assert tables.get_table("t1").status == "available"
        assert tables.get_table("t2").status == "occupied"


class TestUpdateOrderItemStatus:
    """Item moves change the aggregate only when every item agrees"""

    def test_mixed_items_keep_previous_aggregate(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza, cola])
        first, _second = order.items

        orders.update_order_item_status(order.order_id, first.item_id, "ready")

        stored = orders.get_order_by_id(order.order_id)
        assert stored.status == "pending"
        assert [item.status for item in stored.items] == ["ready", "pending"]

    def test_aggregate_follows_when_all_items_agree(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza, cola])
        orders.update_order_status(order.order_id, "preparing")
        for item in order.items:
            orders.update_order_item_status(order.order_id, item.item_id, "ready")

        assert orders.get_order_by_id(order.order_id).status == "ready"

    def test_stale_aggregate_survives_later_disagreement(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza, cola])
        first, second = order.items
        orders.update_order_item_status(order.order_id, first.item_id, "preparing")
        orders.update_order_item_status(order.order_id, second.item_id, "preparing")
        orders.update_order_item_status(order.order_id, first.item_id, "ready")

        assert orders.get_order_by_id(order.order_id).status == "preparing"

    def test_item_change_has_no_table_effect(self, orders: OrderStore, tables: TableRegistry, pizza):
        order = orders.create_order("t1", [pizza])
        orders.update_order_item_status(order.order_id, order.items[0].item_id, "cancelled")

        assert orders.get_order_by_id(order.order_id).status == "cancelled"
        assert tables.get_table("t1").status == "occupied"

    def test_unknown_item_raises_not_found(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        with pytest.raises(NotFoundError):
            orders.update_order_item_status(order.order_id, "missing", "ready")


class TestTransitionGuard:
    """Terminal orders and items accept no further changes"""

    def test_completed_order_cannot_change(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        orders.update_order_status(order.order_id, "completed")

        with pytest.raises(InvalidTransitionError):
            orders.update_order_status(order.order_id, "preparing")
        assert orders.get_order_by_id(order.order_id).status == "completed"

    def test_cancelled_order_cannot_be_completed(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        orders.update_order_status(order.order_id, "cancelled")

        with pytest.raises(InvalidTransitionError):
            orders.complete_order(order.order_id, 12.99)
        assert orders.get_order_by_id(order.order_id).paid_amount is None

    def test_ready_order_cannot_be_cancelled(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        orders.update_order_status(order.order_id, "ready")

        with pytest.raises(InvalidTransitionError):
            orders.update_order_status(order.order_id, "cancelled")

    def test_cancelled_item_cannot_be_revived(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza, cola])
        item = order.items[0]
        orders.update_order_item_status(order.order_id, item.item_id, "cancelled")

        with pytest.raises(InvalidTransitionError):
            orders.update_order_item_status(order.order_id, item.item_id, "preparing")

    def test_order_move_leaves_cancelled_item_alone(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza, cola])
        drink = order.items[1]
        orders.update_order_item_status(order.order_id, drink.item_id, "cancelled")

        orders.update_order_status(order.order_id, "preparing")
        orders.update_order_status(order.order_id, "completed")

        stored = orders.get_order_by_id(order.order_id)
        assert stored.status == "completed"
        assert [item.status for item in stored.items] == ["completed", "cancelled"]

    def test_forward_steps_may_be_skipped(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        orders.update_order_status(order.order_id, "served")
        assert orders.get_order_by_id(order.order_id).status == "served"

    def test_items_of_terminal_order_are_frozen(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza])
        orders.update_order_status(order.order_id, "completed")

        with pytest.raises(InvalidTransitionError):
            orders.add_item_to_order(order.order_id, cola)
        with pytest.raises(InvalidTransitionError):
            orders.remove_item_from_order(order.order_id, order.items[0].item_id)
        assert len(orders.get_order_by_id(order.order_id).items) == 1


class TestAddAndRemoveItems:
    """Item edits keep total_amount consistent"""

    def test_add_item_recomputes_total_and_keeps_status(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza])
        orders.update_order_status(order.order_id, "ready")

        added = orders.add_item_to_order(order.order_id, cola)

        stored = orders.get_order_by_id(order.order_id)
        assert added.status == "pending"
        assert stored.status == "ready"
        assert stored.total_amount == pytest.approx(12.99 + 2.99)

    def test_remove_item_recomputes_total(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza, cola])
        orders.remove_item_from_order(order.order_id, order.items[0].item_id)

        stored = orders.get_order_by_id(order.order_id)
        assert [item.name for item in stored.items] == ["Coca-Cola"]
        assert stored.total_amount == pytest.approx(2.99)

    def test_remove_unknown_item_raises_not_found(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        with pytest.raises(NotFoundError):
            orders.remove_item_from_order(order.order_id, "missing")


class TestCompleteOrder:
    """complete_order records payment and loyalty points"""

    def test_payment_fields_and_loyalty(self, orders: OrderStore, tables: TableRegistry, pizza, cola):
        order = orders.create_order("t1", [pizza, cola])
        orders.complete_order(order.order_id, 15.98, split_bill=True)

        stored = orders.get_order_by_id(order.order_id)
        assert stored.status == "completed"
        assert stored.paid_amount == pytest.approx(15.98)
        assert stored.split_bill is True
        assert stored.loyalty_points_earned == 1
        assert tables.get_table("t1").status == "available"

    @pytest.mark.parametrize(("amount", "points"), [(0.0, 0), (9.99, 0), (10.0, 1), (47.5, 4), (100.0, 10)])
    def test_loyalty_is_floor_of_tenth(self, orders: OrderStore, pizza, amount: float, points: int):
        order = orders.create_order("t1", [pizza])
        orders.complete_order(order.order_id, amount)
        assert orders.get_order_by_id(order.order_id).loyalty_points_earned == points

    def test_item_statuses_are_untouched(self, orders: OrderStore, pizza, cola):
        order = orders.create_order("t1", [pizza, cola])
        orders.update_order_item_status(order.order_id, order.items[0].item_id, "served")

        orders.complete_order(order.order_id, 15.98)

        stored = orders.get_order_by_id(order.order_id)
        assert [item.status for item in stored.items] == ["served", "pending"]

    def test_negative_amount_is_rejected(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        with pytest.raises(ValidationError):
            orders.complete_order(order.order_id, -1.0)
        assert orders.get_order_by_id(order.order_id).status == "pending"


class TestProvideFeedback:
    """Ratings are whole numbers from 1 to 5"""

    @pytest.mark.parametrize("rating", [0, 6, -1, True, 4.5])
    def test_out_of_range_rating_is_rejected(self, orders: OrderStore, pizza, rating):
        order = orders.create_order("t1", [pizza])
        orders.complete_order(order.order_id, 12.99)

        with pytest.raises(ValidationError):
            orders.provide_feedback(order.order_id, rating)
        assert orders.get_order_by_id(order.order_id).feedback is None

    def test_feedback_is_stored(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        orders.complete_order(order.order_id, 12.99)

        orders.provide_feedback(order.order_id, 5, "  Lovely crust  ")

        feedback = orders.get_order_by_id(order.order_id).feedback
        assert feedback.rating == 5
        assert feedback.comment == "Lovely crust"

    def test_blank_comment_becomes_none(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        orders.provide_feedback(order.order_id, 3, "   ")
        assert orders.get_order_by_id(order.order_id).feedback.comment is None

    def test_unknown_order_raises_not_found(self, orders: OrderStore):
        with pytest.raises(NotFoundError):
            orders.provide_feedback("missing", 4)


class TestLookups:
    def test_get_order_by_id_returns_none_when_absent(self, orders: OrderStore):
        assert orders.get_order_by_id("missing") is None

    def test_orders_by_table(self, orders: OrderStore, pizza, cola):
        first = orders.create_order("t1", [pizza])
        orders.create_order("t2", [cola])
        second = orders.create_order("t1", [cola])
        orders.update_order_status(first.order_id, "completed")

        assert [o.order_id for o in orders.get_orders_by_table("t1")] == [first.order_id, second.order_id]
        assert [o.order_id for o in orders.active_orders_for_table("t1")] == [second.order_id]


class TestSnapshots:
    """Subscribers receive one full, detached snapshot per change"""

    def test_one_snapshot_per_mutation(self, orders: OrderStore, pizza):
        received: list[Snapshot] = []
        orders.subscribe(received.append)

        order = orders.create_order("t1", [pizza])
        orders.update_order_status(order.order_id, "completed")

        # create_order and completion both touch the table, yet publish once each.
        assert len(received) == 2
        assert [snapshot.version for snapshot in received] == [1, 2]
        assert received[0].orders[0].status == "pending"
        assert received[1].orders[0].status == "completed"

    def test_snapshot_is_detached_from_store(self, orders: OrderStore, pizza):
        order = orders.create_order("t1", [pizza])
        snapshot = orders.snapshot()

        orders.update_order_status(order.order_id, "preparing")

        assert snapshot.orders[0].status == "pending"
        table = next(t for t in snapshot.tables if t.table_id == "t1")
        assert table.status == "occupied"

    def test_failed_operation_publishes_nothing(self, orders: OrderStore):
        received: list[Snapshot] = []
        orders.subscribe(received.append)

        with pytest.raises(NotFoundError):
            orders.update_order_status("missing", "preparing")
        assert received == []

    def test_table_action_publishes(self, orders: OrderStore, tables: TableRegistry):
        received: list[Snapshot] = []
        orders.subscribe(received.append)

        tables.apply_action("t2", "reserve")

        assert len(received) == 1
        assert next(t for t in received[0].tables if t.table_id == "t2").status == "reserved"

    def test_unsubscribe_stops_delivery(self, orders: OrderStore, pizza):
        received: list[Snapshot] = []
        unsubscribe = orders.subscribe(received.append)
        unsubscribe()

        orders.create_order("t1", [pizza])
        assert received == []


class TestPersistence:
    """Orders survive a restart through the local store"""

    def test_round_trip_preserves_fields(self, local_store: LocalStore, pizza, cola, clock):
        tables = TableRegistry(store=local_store)
        table = tables.get_table_by_number(1)
        store = OrderStore(tables, store=local_store, clock=clock)
        order = store.create_order(table.table_id, [pizza, cola])
        store.update_order_item_status(order.order_id, order.items[0].item_id, "ready")
        store.complete_order(order.order_id, 20.0, split_bill=True)
        store.provide_feedback(order.order_id, 4, "Good")

        reloaded = OrderStore(TableRegistry(store=local_store), store=local_store)
        restored = reloaded.get_order_by_id(order.order_id)

        assert restored == store.get_order_by_id(order.order_id)
        assert restored.created_at.tzinfo is not None
        assert restored.items[0].modifiers == pizza.modifiers

    def test_tables_reload_with_status(self, local_store: LocalStore, pizza):
        tables = TableRegistry(store=local_store)
        table = tables.get_table_by_number(2)
        OrderStore(tables, store=local_store).create_order(table.table_id, [pizza])

        reloaded = TableRegistry(store=local_store)
        assert reloaded.get_table(table.table_id).status == "occupied"
