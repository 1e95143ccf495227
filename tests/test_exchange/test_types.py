"""Tests for atomic-unit conversions."""

from decimal import Decimal

import pytest

from meanrev.exchange.types import from_atomic_units, to_atomic_units


class TestToAtomicUnits:

    @pytest.mark.parametrize(
        "amount,decimals,expected",
        [
            (Decimal("0.01"), 9, 10_000_000),
            (Decimal("1"), 6, 1_000_000),
            (Decimal("0.0000019"), 6, 1),  # rounds down, never up
            (Decimal("0.0000001"), 6, 0),
            (Decimal("5"), 0, 5),
        ],
    )
    def test_scales_and_rounds_down(self, amount: Decimal, decimals: int, expected: int) -> None:
        assert to_atomic_units(amount, decimals) == expected

    def test_negative_decimals_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_atomic_units(Decimal("1"), -1)


class TestFromAtomicUnits:

    def test_exact_decimal_result(self) -> None:
        assert from_atomic_units(187_654_321, 6) == Decimal("187.654321")

    def test_zero_decimals(self) -> None:
        assert from_atomic_units(42, 0) == Decimal("42")
