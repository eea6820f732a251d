"""Tests for bk_common.cents — integer arithmetic utilities."""

import pytest

from src.bk_common.cents import (
    MAX_CENTS,
    cents_to_display,
    cents_to_plain,
    validate_credit,
    validate_opening_balance,
    validate_positive_amount,
)


class TestValidatePositiveAmount:
    def test_valid_amounts(self) -> None:
        for amount in [1, 50, 10**12]:
            validate_positive_amount(amount)  # Should not raise

    def test_zero_raises(self) -> None:
        with pytest.raises(ValueError, match="greater than 0"):
            validate_positive_amount(0)

    def test_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="greater than 0"):
            validate_positive_amount(-5)

    def test_float_raises(self) -> None:
        with pytest.raises(ValueError, match="integer"):
            validate_positive_amount(1.5)  # type: ignore[arg-type]

    def test_bool_raises(self) -> None:
        with pytest.raises(ValueError, match="integer"):
            validate_positive_amount(True)

    def test_bigint_ceiling_is_inclusive(self) -> None:
        validate_positive_amount(MAX_CENTS)
        with pytest.raises(ValueError, match="exceed"):
            validate_positive_amount(MAX_CENTS + 1)


class TestValidateOpeningBalance:
    def test_zero_allowed(self) -> None:
        validate_opening_balance(0)

    def test_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            validate_opening_balance(-1)

    def test_above_bigint_ceiling_raises(self) -> None:
        with pytest.raises(ValueError, match="exceed"):
            validate_opening_balance(10**19)


class TestValidateCredit:
    def test_reaching_ceiling_allowed(self) -> None:
        validate_credit(MAX_CENTS - 5, 5)

    def test_passing_ceiling_raises(self) -> None:
        with pytest.raises(ValueError, match="exceed"):
            validate_credit(MAX_CENTS, 1)


class TestCentsToDisplay:
    def test_basic(self) -> None:
        assert cents_to_display(6500) == "$65.00"

    def test_zero(self) -> None:
        assert cents_to_display(0) == "$0.00"

    def test_one_cent(self) -> None:
        assert cents_to_display(1) == "$0.01"

    def test_large(self) -> None:
        assert cents_to_display(150000) == "$1,500.00"

    def test_negative(self) -> None:
        assert cents_to_display(-1200) == "-$12.00"


class TestCentsToPlain:
    def test_basic(self) -> None:
        assert cents_to_plain(5000) == "50.00"

    def test_no_grouping(self) -> None:
        assert cents_to_plain(150000) == "1500.00"

    def test_sub_dollar(self) -> None:
        assert cents_to_plain(7) == "0.07"
