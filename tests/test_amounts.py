import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amounts import InvalidAmountError, format_amount, parse_amount


class TestParseAmount:
    def test_four_decimal_places_kept_exactly(self):
        assert str(parse_amount("1.1234")) == "1.1234"
        assert str(parse_amount("10.5")) == "10.5000"
        assert parse_amount("  100 ") == Decimal("100")

    def test_extra_decimal_places_truncated(self):
        for text in ["5.7245462362", "5.72459", "5.72451"]:
            assert parse_amount(text) == Decimal("5.7245")

    def test_largest_amount(self):
        assert parse_amount("99999999999999.9999") == Decimal("99999999999999.9999")

    @pytest.mark.parametrize("text", ["100000000000000", "1000000000000000000000000000", "1E+30", "1e999999999"])
    def test_rejects_too_large(self, text):
        with pytest.raises(InvalidAmountError):
            parse_amount(text)

    def test_tiny_exponent_truncates_to_zero(self):
        assert parse_amount("1E-30") == Decimal("0")

    def test_exact_sum(self):
        # 0.1 + 0.2 drifts as a binary float
        assert parse_amount("0.1") + parse_amount("0.2") == Decimal("0.3")

    @pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "NaN", "Infinity", "-1", "-0.0001"])
    def test_rejects_invalid(self, text):
        with pytest.raises(InvalidAmountError):
            parse_amount(text)

    def test_invalid_amount_is_value_error(self):
        with pytest.raises(ValueError):
            parse_amount("potato")


class TestFormatAmount:
    def test_four_decimal_places(self):
        assert format_amount(Decimal("1.5")) == "1.5000"
        assert format_amount(Decimal("0")) == "0.0000"
        assert format_amount(Decimal("900.5678")) == "900.5678"

    def test_no_exponent(self):
        assert format_amount(Decimal("1E+3")) == "1000.0000"
        assert format_amount(Decimal("1E-8")) == "0.0000"

    def test_rounds_half_even(self):
        assert format_amount(Decimal("0.00005")) == "0.0000"
        assert format_amount(Decimal("0.00015")) == "0.0002"

    def test_negative(self):
        assert format_amount(Decimal("-30")) == "-30.0000"
