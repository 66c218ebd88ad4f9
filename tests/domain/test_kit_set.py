"""Unit tests for KitSet and BomEntry."""

from decimal import Decimal

import pytest

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.kit_set import BomEntry, KitSet


class TestBomEntry:

    def test_coerces_quantity_to_decimal(self):
        assert BomEntry(1, "0.5").quantity == Decimal("0.5")

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            BomEntry(1, Decimal("-1"))

    def test_more_than_four_decimal_places_rejected(self):
        with pytest.raises(ValidationError, match="at most 4 decimal places"):
            BomEntry(1, Decimal("0.33334"))

    def test_four_decimal_places_accepted(self):
        assert BomEntry(1, Decimal("0.3334")).quantity == Decimal("0.3334")
        assert BomEntry(1, Decimal("0.50000")).quantity == Decimal("0.5")

    def test_optional_and_zero_entries_are_not_mandatory(self):
        assert BomEntry(1, 2).is_mandatory
        assert not BomEntry(1, 2, is_optional=True).is_mandatory
        assert not BomEntry(1, 0).is_mandatory


class TestKitSet:

    def test_define(self):
        kit = KitSet.define(1, " Robot Arm ", [BomEntry(1, 2), BomEntry(2, 1, True)])
        assert kit.name == "Robot Arm"
        assert kit.has_parts_configured
        assert [e.part_id for e in kit.mandatory_entries] == [1]

    def test_duplicate_part_rejected(self):
        with pytest.raises(ValidationError, match="more than once"):
            KitSet.define(1, "Robot Arm", [BomEntry(1, 2), BomEntry(1, 1)])

    def test_empty_bom_is_not_configured(self):
        assert not KitSet.define(1, "Empty", []).has_parts_configured
