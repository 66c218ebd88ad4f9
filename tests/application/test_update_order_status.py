"""Integration tests for the UpdateOrderStatus use case."""

from decimal import Decimal

import pytest

from kitstock.application.create_order import CreateOrderHandler
from kitstock.application.dto import CustomerInfo, OrderItemSpec
from kitstock.application.update_order_status import UpdateOrderStatusHandler
from kitstock.domain.exceptions import EntityNotFoundError, ValidationError
from kitstock.domain.model.kit_set import BomEntry, KitSet
from kitstock.domain.model.ledger import ReferenceType, net_movement
from kitstock.domain.model.part import Part
from tests.fakes import (
    FakeInventoryLedger,
    FakeOrderRepository,
    FakePartRepository,
    FakeSetRepository,
)


def _setup():
    parts = FakePartRepository([Part.register(1, "LED", opening_stock=10)])
    sets = FakeSetRepository([KitSet(1, "Blinky", [BomEntry(1, Decimal("3"))])])
    orders = FakeOrderRepository()
    ledger = FakeInventoryLedger(parts)
    create = CreateOrderHandler(orders, sets, ledger)
    update = UpdateOrderStatusHandler(orders, sets, ledger)
    return create, update, orders, parts, ledger


def _place(create, status="pending") -> int:
    return create.handle(CustomerInfo("Bob"), [OrderItemSpec(1, 2, "15")], status=status).order_id


class TestCancelRoundTrip:

    def test_cancel_restores_allocated_stock(self):
        create, update, _, parts, ledger = _setup()
        order_id = _place(create)
        assert parts.get_by_id(1).stock_quantity == 4

        dto = update.handle(order_id, "cancelled")

        assert dto.stock_restored
        assert dto.units_restored == 6
        assert parts.get_by_id(1).stock_quantity == 10
        assert net_movement(ledger.list_for_part(1)) == 0
        assert len(ledger.list_for_reference(order_id, ReferenceType.ORDER_CANCELLATION)) == 1

    @pytest.mark.parametrize("target", ["failed", "payment_failed", "refunded"])
    def test_other_cancelled_statuses_restore(self, target):
        create, update, _, parts, _ = _setup()
        order_id = _place(create, status="payment_received")
        update.handle(order_id, target)
        assert parts.get_by_id(1).stock_quantity == 10

    def test_shipped_then_cancelled_restores_nothing(self):
        create, update, _, parts, _ = _setup()
        order_id = _place(create)
        update.handle(order_id, "shipped")
        dto = update.handle(order_id, "cancelled")

        assert not dto.stock_restored
        assert parts.get_by_id(1).stock_quantity == 4

    def test_second_cancel_is_a_no_op(self):
        create, update, _, parts, _ = _setup()
        order_id = _place(create)
        update.handle(order_id, "cancelled")
        dto = update.handle(order_id, "cancelled")
        assert not dto.stock_restored
        assert parts.get_by_id(1).stock_quantity == 10


class TestStatusUpdate:

    def test_persists_status_and_notes(self):
        create, update, orders, _, _ = _setup()
        order_id = _place(create)
        dto = update.handle(order_id, "processing", notes="picked")

        assert dto.previous_status == "pending"
        assert dto.status == "processing"
        saved = orders.get_by_id(order_id)
        assert saved.status.value == "processing"
        assert saved.notes == "picked"

    def test_response_shape(self):
        create, update, _, _, _ = _setup()
        order_id = _place(create)
        assert update.handle(order_id, "shipped").to_dict() == {
            "message": "Order status updated successfully",
            "order_id": order_id,
            "status": "shipped",
        }

    def test_unknown_order(self):
        _, update, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Order #42 not found"):
            update.handle(42, "cancelled")

    def test_unknown_status(self):
        create, update, _, _, _ = _setup()
        order_id = _place(create)
        with pytest.raises(ValidationError, match="Unknown order status"):
            update.handle(order_id, "teleported")
