"""Unit tests for the Order aggregate."""

import re

import pytest

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.order import (
    MAX_LINE_ITEMS,
    Order,
    OrderLineItem,
    OrderStatus,
    generate_order_number,
)
from kitstock.domain.model.value_objects import Money, Quantity


def _line(set_id=1, qty=1, price="10.00", currency="EUR") -> OrderLineItem:
    return OrderLineItem(set_id, Quantity(qty), Money.of(price, currency))


class TestOrderCreate:

    def test_defaults_to_pending(self):
        order = Order.create("Alice", [_line()])
        assert order.status is OrderStatus.PENDING
        assert order.id is None

    def test_total_includes_fee_lines(self):
        order = Order.create("Alice", [_line(1, 2, "49.90"), _line(None, 1, "4.99")])
        assert str(order.total) == "104.79 EUR"

    def test_order_number_format(self):
        order = Order.create("Alice", [_line()])
        assert re.fullmatch(r"ORD-\d+-[A-Z0-9]{5}", order.order_number)

    def test_order_number_uses_clock(self):
        assert generate_order_number(now=1700000000.123).startswith("ORD-1700000000123-")

    def test_customer_name_required(self):
        with pytest.raises(ValidationError, match="Customer name is required"):
            Order.create("  ", [_line()])

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create("Alice", [])

    def test_too_many_items_rejected(self):
        with pytest.raises(ValidationError, match="Maximum"):
            Order.create("Alice", [_line(i) for i in range(MAX_LINE_ITEMS + 1)])

    def test_mixed_currency_rejected(self):
        with pytest.raises(ValidationError, match="same currency"):
            Order.create("Alice", [_line(1), _line(2, currency="USD")])


class TestOrderStatus:

    def test_parse_is_case_insensitive(self):
        assert OrderStatus.parse(" Cancelled ") is OrderStatus.CANCELLED

    def test_parse_unknown_rejected(self):
        with pytest.raises(ValidationError, match="Unknown order status 'lost'"):
            OrderStatus.parse("lost")

    def test_change_status_returns_previous(self):
        order = Order.create("Alice", [_line()])
        previous = order.change_status(OrderStatus.SHIPPED, notes="tracking 123")
        assert previous is OrderStatus.PENDING
        assert order.status is OrderStatus.SHIPPED
        assert order.notes == "tracking 123"
        assert order.updated_at is not None

    def test_any_status_may_follow_any_status(self):
        order = Order.create("Alice", [_line()], status=OrderStatus.DELIVERED)
        order.change_status(OrderStatus.PENDING)
        assert order.status is OrderStatus.PENDING
