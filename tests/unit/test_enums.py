"""Tests for bk_common.enums — values must match DB CHECK constraints."""

from src.bk_common.enums import TransactionType, UserRole


class TestTransactionType:
    def test_is_str(self) -> None:
        assert isinstance(TransactionType.DEPOSIT, str)
        assert TransactionType.DEPOSIT == "DEPOSIT"

    def test_all_values(self) -> None:
        assert {t.value for t in TransactionType} == {"DEPOSIT", "WITHDRAW", "TRANSFER"}


class TestUserRole:
    def test_single_role(self) -> None:
        assert {r.value for r in UserRole} == {"USER"}
