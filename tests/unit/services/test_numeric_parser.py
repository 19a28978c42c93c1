"""Tests for locale-aware quantity parsing."""

import math
from decimal import Decimal

import pytest

from stockledger.core.exceptions import InvalidQuantityError
from stockledger.core.services.numeric_parser import parse_quantity, require_quantity


class TestParseQuantity:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("", 0.0),
            ("   ", 0.0),
            (None, 0.0),
            ("6,50", 6.5),
            ("1.000", 1000.0),
            ("6.5", 6.5),
            ("6.50", 6.5),
            ("1.234,56", 1234.56),
            ("1.234", 1234.0),
            ("1.000.000", 1_000_000.0),
            ("0.125", 0.125),
            ("12.3456", 12.3456),
            ("100", 100.0),
            (" 42 ", 42.0),
            ("0,5", 0.5),
        ],
    )
    def test_text(self, raw, expected):
        assert parse_quantity(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [7, 7.25, Decimal("7.25")])
    def test_numbers_pass_through(self, value):
        assert parse_quantity(value) == float(value)

    @pytest.mark.parametrize("raw", ["abc", "12abc", "1,2,3", ",", "--1"])
    def test_garbage_is_nan(self, raw):
        assert math.isnan(parse_quantity(raw))

    def test_bool_is_nan(self):
        assert math.isnan(parse_quantity(True))

    def test_signed_dotted_value_is_thousands_grouped(self):
        # Only unsigned values take the bare-decimal path
        assert parse_quantity("-6.5") == -65.0


class TestRequireQuantity:
    def test_positive_value(self):
        assert require_quantity("2,5") == 2.5

    @pytest.mark.parametrize("raw", ["0", "", "-1", "abc", "inf"])
    def test_positive_required(self, raw):
        with pytest.raises(InvalidQuantityError):
            require_quantity(raw)

    def test_zero_allowed_when_not_positive(self):
        assert require_quantity("0", positive=False) == 0.0

    def test_negative_rejected_when_not_positive(self):
        with pytest.raises(InvalidQuantityError) as exc_info:
            require_quantity(-1, field="target", positive=False)
        assert exc_info.value.details["field"] == "target"

    def test_nan_rejected(self):
        with pytest.raises(InvalidQuantityError):
            require_quantity(float("nan"), positive=False)
