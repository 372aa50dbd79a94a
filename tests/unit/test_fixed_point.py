"""Unit tests for fixed-point USD helpers."""
from __future__ import annotations

from decimal import Decimal

import pytest

from vaultlens.engine.fixed_point import (
    resolve_int,
    resolve_number,
    to_float,
    to_scaled,
)


class TestToFloat:
    def test_converts_scaled_value(self) -> None:
        assert to_float(1_000_000) == 1
        assert to_float(1_500_000) == 1.5
        assert to_float(123_456_789) == 123.456789

    def test_zero_and_missing(self) -> None:
        assert to_float(0) == 0
        assert to_float(None) == 0

    def test_malformed_is_zero(self) -> None:
        assert to_float("not a number") == 0
        assert to_float(float("nan")) == 0
        assert to_float(object()) == 0

    def test_numeric_string(self) -> None:
        assert to_float("5000000") == 5


class TestToScaled:
    def test_converts_dollars(self) -> None:
        assert to_scaled(1) == 1_000_000
        assert to_scaled(1.5) == 1_500_000
        assert to_scaled(0.000001) == 1

    def test_floors_never_rounds_up(self) -> None:
        assert to_scaled(1.0000001) == 1_000_000
        assert to_scaled(1.9999999) == 1_999_999

    def test_typed_prices_are_exact(self) -> None:
        assert to_scaled(1.005) == 1_005_000
        assert to_scaled(0.000249) == 249
        assert to_scaled(1234.567891) == 1_234_567_891

    def test_returns_int(self) -> None:
        assert isinstance(to_scaled(2.5), int)

    def test_malformed_is_zero(self) -> None:
        assert to_scaled(None) == 0
        assert to_scaled("abc") == 0
        assert to_scaled(float("inf")) == 0


class TestRoundTrip:
    @pytest.mark.parametrize(
        "value",
        [0, 1, 249, 251, 489, 999_999, 1_000_000, 1_005_000, 1_234_567, 98_765_432_100],
    )
    def test_whole_micro_dollars_survive(self, value: int) -> None:
        assert to_scaled(to_float(value)) == value

    def test_every_micro_dollar_below_two_cents_survives(self) -> None:
        failures = [v for v in range(20_000) if to_scaled(to_float(v)) != v]
        assert failures == []

    @pytest.mark.parametrize("value", [0.0, 0.5, 3.14159265, 1999.99, 123456.789012])
    def test_float_within_one_micro_dollar(self, value: float) -> None:
        assert to_float(to_scaled(value)) == pytest.approx(value, abs=1e-6)


class TestResolve:
    def test_resolve_number_defaults(self) -> None:
        assert resolve_number(None) == 0.0
        assert resolve_number(True) == 0.0
        assert resolve_number("x", default=7.0) == 7.0

    def test_resolve_number_accepts_decimal(self) -> None:
        assert resolve_number(Decimal("2.5")) == 2.5

    def test_resolve_int_keeps_big_integers(self) -> None:
        assert resolve_int(10**30) == 10**30
        assert resolve_int(str(10**30)) == 10**30

    def test_resolve_int_defaults(self) -> None:
        assert resolve_int(None) == 0
        assert resolve_int("nope", default=18) == 18
        assert resolve_int(float("nan"), default=3) == 3
