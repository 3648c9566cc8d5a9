from decimal import Decimal

import pytest

from budget_api.core.money import cents_to_amount, to_cents


class TestToCents:
    """Amount normalization into integer cents."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("$1,234.5", 123450),
            ("1234.50", 123450),
            ("", 0),
            (None, 0),
        ],
    )
    def test_documented_examples(self, value, expected):
        assert to_cents(value) == expected

    def test_numbers(self):
        assert to_cents(100) == 10000
        assert to_cents(50.25) == 5025
        assert to_cents(Decimal("7.1")) == 710

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0.00001, 0),
            (1e-7, 0),
            (1e16, 10**18),
            (1e21, 10**23),
            (Decimal("1E+2"), 10000),
            (Decimal("5E-3"), 0),
            (-2.5e-5, 0),
        ],
    )
    def test_numbers_read_in_fixed_point(self, value, expected):
        assert to_cents(value) == expected

    def test_booleans_are_not_amounts(self):
        assert to_cents(True) == 0

    def test_fraction_truncated_not_rounded(self):
        assert to_cents("9.999") == 999

    def test_float_artifacts_truncated(self):
        assert to_cents(0.1 + 0.2) == 30

    def test_non_numeric_parts_count_as_zero(self):
        assert to_cents("abc") == 0
        assert to_cents("abc.50") == 50
        assert to_cents("12.xx") == 1200

    def test_leading_digits_parsed(self):
        assert to_cents("12 USD") == 1200

    def test_leading_fraction_only(self):
        assert to_cents(".5") == 50

    def test_negative_amounts(self):
        assert to_cents("-12.34") == -1234
        assert to_cents("-$0.50") == -50
        assert to_cents(-3.5) == -350

    def test_summing_many_small_values_is_exact(self):
        total = sum(to_cents("0.10") for _ in range(1000))
        assert total == 10000


class TestCentsToAmount:
    """Boundary conversion to two-decimal values."""

    def test_two_decimals(self):
        assert cents_to_amount(15025) == 150.25
        assert cents_to_amount(10000) == 100.0
        assert cents_to_amount(0) == 0.0

    def test_negative(self):
        assert cents_to_amount(-1234) == -12.34
