"""Integration tests for the ValidateStock use case."""

from decimal import Decimal

from kitstock.application.validate_stock import ValidateStockHandler
from kitstock.domain.model.kit_set import BomEntry, KitSet
from kitstock.domain.model.part import Part
from kitstock.domain.model.stock_check import CartLine
from tests.fakes import FakePartRepository, FakeSetRepository


def _handler(fee_set_id=-1) -> ValidateStockHandler:
    parts = FakePartRepository([Part(1, "Sensor", stock_quantity=5)])
    sets = FakeSetRepository([KitSet(1, "Weather Station", [BomEntry(1, Decimal("2"))])])
    return ValidateStockHandler(sets, parts, fee_set_id=fee_set_id)


class TestValidateStockHandler:

    def test_mixed_cart(self):
        report = _handler().handle([CartLine(1, 2), CartLine(1, 3), CartLine(-1, 1)])
        assert [r.valid for r in report.results] == [True, False, True]
        assert report.to_dict()["summary"]["invalid_items"] == 1

    def test_configured_fee_id(self):
        report = _handler(fee_set_id=0).handle([CartLine(0, 1), CartLine(-1, 1)])
        assert report.results[0].valid
        assert not report.results[1].valid
