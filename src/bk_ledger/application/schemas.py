"""Pydantic schemas for bk_ledger API."""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from src.bk_common.cents import MAX_CENTS, cents_to_display, cents_to_plain
from src.bk_common.datetime_utils import to_iso
from src.bk_common.enums import TransactionType
from src.bk_common.id_generator import is_valid_account_number
from src.bk_ledger.domain.models import HistoryEntry, LedgerResult

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


def _check_account_number(v: str) -> str:
    if not is_valid_account_number(v):
        raise ValueError("Account number must be exactly 12 digits")
    return v


AccountNumber = Annotated[str, AfterValidator(_check_account_number)]


class DepositRequest(BaseModel):
    account_number: AccountNumber
    amount_cents: int = Field(
        ..., gt=0, le=MAX_CENTS, description="Deposit amount in cents (must be > 0)"
    )


class WithdrawRequest(BaseModel):
    account_number: AccountNumber
    amount_cents: int = Field(
        ..., gt=0, le=MAX_CENTS, description="Withdrawal amount in cents (must be > 0)"
    )


class TransferRequest(BaseModel):
    account_from: AccountNumber
    account_to: AccountNumber
    amount_cents: int = Field(
        ..., gt=0, le=MAX_CENTS, description="Transfer amount in cents (must be > 0)"
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TransactionResponse(BaseModel):
    message: str
    transaction_id: int
    source_balance_cents: int
    source_balance_display: str
    dest_balance_cents: int
    dest_balance_display: str

    @classmethod
    def from_result(cls, message: str, result: LedgerResult) -> "TransactionResponse":
        return cls(
            message=message,
            transaction_id=result.transaction.id,
            source_balance_cents=result.source_balance,
            source_balance_display=cents_to_display(result.source_balance),
            dest_balance_cents=result.dest_balance,
            dest_balance_display=cents_to_display(result.dest_balance),
        )


def format_history_message(txn_type: TransactionType, amount: int) -> str:
    """'DEPOSIT - Amount: $50.00' (two decimals, no thousands separator)."""
    return f"{txn_type.value} - Amount: ${cents_to_plain(amount)}"


class HistoryItem(BaseModel):
    message: str
    source_balance_cents: int   # current balance of the source account
    dest_balance_cents: int     # current balance of the destination account
    transaction_id: int
    type: TransactionType
    amount_cents: int
    amount_display: str
    created_at: str
    source_account_number: str | None
    dest_account_number: str | None
    source_balance_after_cents: int | None   # snapshot at the time of the transaction
    dest_balance_after_cents: int | None

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryItem":
        txn = entry.transaction
        return cls(
            message=format_history_message(txn.type, txn.amount),
            source_balance_cents=entry.source_current_balance,
            dest_balance_cents=entry.dest_current_balance,
            transaction_id=txn.id,
            type=txn.type,
            amount_cents=txn.amount,
            amount_display=cents_to_display(txn.amount),
            created_at=to_iso(txn.created_at),
            source_account_number=entry.source_account_number,
            dest_account_number=entry.dest_account_number,
            source_balance_after_cents=txn.source_balance_after,
            dest_balance_after_cents=txn.dest_balance_after,
        )
