"""Tests for the JSON-file repositories and ledger (real files under tmp_path)."""

import threading
from decimal import Decimal

import pytest

from kitstock.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from kitstock.domain.model.kit_set import BomEntry, KitSet
from kitstock.domain.model.ledger import ReferenceType, TransactionType, net_movement
from kitstock.domain.model.order import Order, OrderLineItem, OrderStatus
from kitstock.domain.model.part import Part
from kitstock.domain.model.value_objects import Money, Quantity
from kitstock.infrastructure.persistence.json_file import JsonFile
from kitstock.infrastructure.persistence.json_inventory_ledger import JsonInventoryLedger
from kitstock.infrastructure.persistence.json_order_repository import JsonOrderRepository
from kitstock.infrastructure.persistence.json_part_repository import JsonPartRepository
from kitstock.infrastructure.persistence.json_set_repository import JsonSetRepository


@pytest.fixture
def parts(tmp_path):
    repo = JsonPartRepository(tmp_path / "parts.json")
    repo.add(Part.register(1, "Gear", opening_stock=10, part_number="G-1"))
    return repo


@pytest.fixture
def ledger(tmp_path, parts):
    return JsonInventoryLedger(tmp_path / "parts.json", tmp_path / "inventory_transactions.json")


class TestJsonRepositories:

    def test_part_round_trip(self, parts):
        part = parts.get_by_id(1)
        assert (part.name, part.part_number, part.baseline_quantity) == ("Gear", "G-1", 10)
        assert parts.next_id() == 2

    def test_set_keeps_decimal_quantities(self, tmp_path):
        repo = JsonSetRepository(tmp_path / "sets.json")
        repo.save(KitSet(1, "Clock", [BomEntry(1, Decimal("0.25"), is_optional=True)]))

        [entry] = repo.get_by_id(1).bom
        assert entry.quantity == Decimal("0.25")
        assert entry.is_optional

    def test_order_upsert(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = Order.create("Alice", [
            OrderLineItem(1, Quantity(2), Money.of("9.99")),
            OrderLineItem(None, Quantity(1), Money.of("1.50")),
        ])
        repo.save(order)
        order.change_status(OrderStatus.CANCELLED, notes="customer request")
        repo.save(order)

        loaded = repo.get_by_id(order.id)
        assert loaded.status is OrderStatus.CANCELLED
        assert loaded.notes == "customer request"
        assert loaded.order_number == order.order_number
        assert [i.set_id for i in loaded.items] == [1, None]
        assert loaded.total == order.total


class TestJsonInventoryLedger:

    def test_out_movement_updates_stock_and_appends(self, ledger, parts):
        txn = ledger.apply_movement(1, TransactionType.OUT, 4, "Order X", 3, ReferenceType.ORDER)

        assert (txn.transaction_id, txn.previous_stock, txn.new_stock) == (1, 10, 6)
        assert parts.get_by_id(1).stock_quantity == 6
        assert ledger.list_for_reference(3, ReferenceType.ORDER) == [txn]

    def test_entries_survive_reload(self, tmp_path, ledger):
        ledger.apply_movement(1, TransactionType.OUT, 2, "a", 1, ReferenceType.ORDER)
        ledger.apply_movement(1, TransactionType.IN, 2, "b", 1, ReferenceType.ORDER_CANCELLATION)

        reopened = JsonInventoryLedger(tmp_path / "parts.json", tmp_path / "inventory_transactions.json")
        entries = reopened.list_for_part(1)
        assert [e.reason for e in entries] == ["a", "b"]
        assert entries[0].created_at.tzinfo is not None

    def test_clamped_out_records_actual_units(self, ledger, parts):
        txn = ledger.apply_movement(1, TransactionType.OUT, 15, "big", 1, ReferenceType.ORDER)
        assert txn.quantity == 10
        assert parts.get_by_id(1).stock_quantity == 0
        assert ledger.apply_movement(1, TransactionType.OUT, 1, "more", 1, ReferenceType.ORDER) is None
        assert len(ledger.list_for_part(1)) == 1

    def test_strict_out_leaves_files_untouched(self, ledger, parts):
        with pytest.raises(InsufficientStockError):
            ledger.apply_movement(1, TransactionType.OUT, 15, "big", 1, ReferenceType.ORDER, clamp=False)
        assert parts.get_by_id(1).stock_quantity == 10
        assert ledger.list_for_part(1) == []

    def test_unknown_part(self, ledger):
        with pytest.raises(EntityNotFoundError):
            ledger.apply_movement(9, TransactionType.IN, 1, "x", None, ReferenceType.MANUAL_ADJUSTMENT)

    def test_concurrent_withdrawals_never_lose_updates(self, ledger, parts):
        results = []

        def withdraw():
            results.append(
                ledger.apply_movement(1, TransactionType.OUT, 1, "race", 1, ReferenceType.ORDER)
            )

        threads = [threading.Thread(target=withdraw) for _ in range(15)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        part = parts.get_by_id(1)
        assert part.stock_quantity == 0
        assert sum(1 for r in results if r is not None) == 10
        assert part.baseline_quantity + net_movement(ledger.list_for_part(1)) == 0

    def test_failed_append_puts_stock_back(self, ledger, parts, monkeypatch):
        real_persist = JsonFile.persist

        def persist(self, records):
            if self.path.name == "inventory_transactions.json":
                raise OSError("disk full")
            real_persist(self, records)

        monkeypatch.setattr(JsonFile, "persist", persist)

        with pytest.raises(OSError, match="disk full"):
            ledger.apply_movement(1, TransactionType.OUT, 4, "Order X", 3, ReferenceType.ORDER)
        monkeypatch.undo()

        part = parts.get_by_id(1)
        assert part.stock_quantity == 10
        assert ledger.list_for_part(1) == []
        assert part.baseline_quantity + net_movement(ledger.list_for_part(1)) == part.stock_quantity

    def test_set_stock_level(self, ledger, parts):
        txn = ledger.set_stock_level(1, 4, "Stock count", None, ReferenceType.MANUAL_ADJUSTMENT)
        assert (txn.transaction_type, txn.quantity, txn.new_stock) == (TransactionType.OUT, 6, 4)
        assert ledger.set_stock_level(1, 4, "again", None, ReferenceType.MANUAL_ADJUSTMENT) is None
        assert parts.get_by_id(1).stock_quantity == 4
        assert len(ledger.list_for_part(1)) == 1

    def test_set_stock_level_negative_rejected(self, ledger):
        with pytest.raises(ValidationError, match="cannot be negative"):
            ledger.set_stock_level(1, -1, "x", None, ReferenceType.MANUAL_ADJUSTMENT)
