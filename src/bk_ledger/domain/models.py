"""Domain models for bk_ledger — pure dataclasses, no SQLAlchemy dependency.

Transactions reference accounts by id only; balances are always re-read from
the store, never from an object captured earlier.
"""

from dataclasses import dataclass
from datetime import datetime

from src.bk_common.enums import TransactionType


@dataclass(frozen=True)
class NewTransaction:
    """A transaction about to be appended (no id / timestamp yet)."""

    type: TransactionType
    amount: int                              # cents, > 0
    source_account_id: str | None = None
    dest_account_id: str | None = None
    source_balance_after: int | None = None  # cents snapshot at append time
    dest_balance_after: int | None = None


@dataclass(frozen=True)
class Transaction:
    id: int                                  # BIGSERIAL, increases with commit order
    type: TransactionType
    amount: int                              # cents, > 0
    created_at: datetime | None
    source_account_id: str | None = None
    dest_account_id: str | None = None
    source_balance_after: int | None = None
    dest_balance_after: int | None = None


@dataclass(frozen=True)
class LedgerResult:
    """Outcome of one committed deposit / withdraw / transfer."""

    transaction: Transaction
    source_balance: int   # cents, 0 when no source account is involved
    dest_balance: int     # cents, 0 when no destination account is involved


@dataclass(frozen=True)
class HistoryEntry:
    transaction: Transaction
    source_account_number: str | None
    dest_account_number: str | None
    source_current_balance: int   # cents, 0 when absent
    dest_current_balance: int     # cents, 0 when absent
