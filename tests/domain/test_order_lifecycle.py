"""Unit tests for the order lifecycle transition table and controller."""

from decimal import Decimal

import pytest

from kitstock.domain.model.kit_set import BomEntry, KitSet
from kitstock.domain.model.ledger import ReferenceType
from kitstock.domain.model.order import Order, OrderLineItem, OrderStatus
from kitstock.domain.model.part import Part
from kitstock.domain.model.value_objects import Money, Quantity
from kitstock.domain.service.order_lifecycle import (
    CANCELLED_STATUSES,
    RESERVED_STATUSES,
    OrderLifecycleController,
    StockAction,
    allocates_on_creation,
    stock_action_for,
)
from tests.fakes import FakeInventoryLedger, FakePartRepository, FakeSetRepository

S = OrderStatus


class TestTransitionTable:

    @pytest.mark.parametrize("previous", sorted(RESERVED_STATUSES, key=lambda s: s.value))
    @pytest.mark.parametrize("new", sorted(CANCELLED_STATUSES, key=lambda s: s.value))
    def test_reserved_to_cancelled_restores(self, previous, new):
        assert stock_action_for(previous, new) is StockAction.RESTORE

    @pytest.mark.parametrize(
        "previous, new",
        [
            (S.PENDING, S.PROCESSING),
            (S.PENDING, S.PAYMENT_RECEIVED),
            (S.SHIPPED, S.CANCELLED),
            (S.PROCESSING, S.REFUNDED),
            (S.CANCELLED, S.FAILED),
            (S.CANCELLED, S.PENDING),
        ],
    )
    def test_other_edges_do_nothing(self, previous, new):
        assert stock_action_for(previous, new) is StockAction.NONE

    def test_allocates_only_for_reserved_initial_status(self):
        assert allocates_on_creation(S.PENDING)
        assert allocates_on_creation(S.PAYMENT_RECEIVED)
        assert not allocates_on_creation(S.PROCESSING)


def _setup(status=S.PENDING):
    parts = FakePartRepository([Part.register(1, "Motor", opening_stock=10)])
    sets = FakeSetRepository([KitSet(1, "Rover", [BomEntry(1, Decimal("2"))])])
    ledger = FakeInventoryLedger(parts)
    order = Order.create("Alice", [OrderLineItem(1, Quantity(2), Money.of("5"))], status=status)
    order.id = 1
    return parts, ledger, OrderLifecycleController.build(sets, ledger), order


class TestController:

    def test_created_pending_allocates(self):
        parts, _, controller, order = _setup()
        report = controller.order_created(order)
        assert report is not None
        assert parts.get_by_id(1).stock_quantity == 6

    def test_created_processing_allocates_nothing(self):
        parts, ledger, controller, order = _setup(status=S.PROCESSING)
        assert controller.order_created(order) is None
        assert parts.get_by_id(1).stock_quantity == 10
        assert ledger.entries == []

    def test_cancel_after_reserve_restores(self):
        parts, ledger, controller, order = _setup()
        controller.order_created(order)
        previous = order.change_status(S.CANCELLED)
        report = controller.status_changed(order, previous)

        assert report is not None and report.units_moved == 4
        assert parts.get_by_id(1).stock_quantity == 10
        assert len(ledger.list_for_reference(1, ReferenceType.ORDER_CANCELLATION)) == 1

    def test_cancel_after_shipping_restores_nothing(self):
        parts, _, controller, order = _setup()
        controller.order_created(order)
        controller.status_changed(order, order.change_status(S.SHIPPED))
        report = controller.status_changed(order, order.change_status(S.CANCELLED))

        assert report is None
        assert parts.get_by_id(1).stock_quantity == 6

    def test_repeated_cancel_restores_once(self):
        parts, _, controller, order = _setup()
        controller.order_created(order)
        controller.status_changed(order, order.change_status(S.CANCELLED))
        assert controller.status_changed(order, order.change_status(S.CANCELLED)) is None
        assert parts.get_by_id(1).stock_quantity == 10
