"""LedgerRepository — concrete implementation of LedgerStoreProtocol.

Row locks are taken with SELECT ... FOR UPDATE ordered by id, matching the
in-process lock order. Balance writes carry an optimistic version check as a
second guard against a concurrent writer outside this process.

Transaction ownership: the CALLER (LedgerEngine) commits or rolls back.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import Account
from src.bk_account.infrastructure.persistence import ACCOUNT_COLUMNS, row_to_account
from src.bk_common.enums import TransactionType
from src.bk_common.errors import InternalError
from src.bk_ledger.domain.models import NewTransaction, Transaction

logger = logging.getLogger(__name__)

TRANSACTION_COLUMNS = (
    "id, type, amount, created_at, source_account_id, dest_account_id, "
    "source_balance_after, dest_balance_after"
)

# ---------------------------------------------------------------------------
# SQL: accounts
# ---------------------------------------------------------------------------

_GET_BY_NUMBER_SQL = text(f"""
    SELECT {ACCOUNT_COLUMNS}
    FROM accounts
    WHERE account_number = :account_number
""")

_LIST_BY_OWNER_SQL = text(f"""
    SELECT {ACCOUNT_COLUMNS}
    FROM accounts
    WHERE user_id = CAST(:user_id AS UUID)
    ORDER BY created_at ASC, id ASC
""")

_GET_BY_IDS_SQL = text(f"""
    SELECT {ACCOUNT_COLUMNS}
    FROM accounts
    WHERE id = ANY(CAST(:ids AS UUID[]))
""")

_LOCK_SQL = text(f"""
    SELECT {ACCOUNT_COLUMNS}
    FROM accounts
    WHERE id = ANY(CAST(:ids AS UUID[]))
    ORDER BY id ASC
    FOR UPDATE
""")

_SAVE_BALANCE_SQL = text("""
    UPDATE accounts
    SET balance = :balance,
        version = version + 1,
        updated_at = NOW()
    WHERE id = CAST(:id AS UUID) AND version = :version
    RETURNING version
""")

# ---------------------------------------------------------------------------
# SQL: transactions
# ---------------------------------------------------------------------------

_INSERT_TRANSACTION_SQL = text(f"""
    INSERT INTO transactions
        (type, amount, source_account_id, dest_account_id,
         source_balance_after, dest_balance_after)
    VALUES
        (:type, :amount, CAST(:source_account_id AS UUID), CAST(:dest_account_id AS UUID),
         :source_balance_after, :dest_balance_after)
    RETURNING {TRANSACTION_COLUMNS}
""")

_LIST_INVOLVING_SQL = text(f"""
    SELECT {TRANSACTION_COLUMNS}
    FROM transactions
    WHERE source_account_id = ANY(CAST(:ids AS UUID[]))
       OR dest_account_id   = ANY(CAST(:ids AS UUID[]))
    ORDER BY id ASC
""")


def _optional_str(value: object) -> str | None:
    return str(value) if value is not None else None


def row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        type=TransactionType(row.type),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        source_account_id=_optional_str(row.source_account_id),  # type: ignore[attr-defined]
        dest_account_id=_optional_str(row.dest_account_id),  # type: ignore[attr-defined]
        source_balance_after=row.source_balance_after,  # type: ignore[attr-defined]
        dest_balance_after=row.dest_balance_after,  # type: ignore[attr-defined]
    )


class LedgerRepository:
    """Concrete ledger store backed by PostgreSQL."""

    async def get_account_by_number(
        self, db: AsyncSession, account_number: str
    ) -> Account | None:
        result = await db.execute(_GET_BY_NUMBER_SQL, {"account_number": account_number})
        row = result.fetchone()
        return row_to_account(row) if row else None

    async def get_accounts_by_owner(
        self, db: AsyncSession, user_id: str
    ) -> list[Account]:
        result = await db.execute(_LIST_BY_OWNER_SQL, {"user_id": user_id})
        return [row_to_account(row) for row in result.fetchall()]

    async def get_accounts_by_ids(
        self, db: AsyncSession, account_ids: list[str]
    ) -> dict[str, Account]:
        result = await db.execute(_GET_BY_IDS_SQL, {"ids": list(account_ids)})
        accounts = [row_to_account(row) for row in result.fetchall()]
        return {a.id: a for a in accounts}

    async def lock_accounts(
        self, db: AsyncSession, account_ids: list[str]
    ) -> dict[str, Account]:
        wanted = sorted(set(account_ids))
        result = await db.execute(_LOCK_SQL, {"ids": wanted})
        locked = {a.id: a for a in (row_to_account(row) for row in result.fetchall())}
        missing = [account_id for account_id in wanted if account_id not in locked]
        if missing:
            logger.error("Accounts vanished while locking: %s", ", ".join(missing))
            raise InternalError("Account vanished while locking")
        return locked

    async def save_accounts(self, db: AsyncSession, accounts: list[Account]) -> None:
        for account in sorted(accounts, key=lambda a: a.id):
            result = await db.execute(
                _SAVE_BALANCE_SQL,
                {"id": account.id, "balance": account.balance, "version": account.version},
            )
            row = result.fetchone()
            if row is None:
                raise InternalError(f"Concurrent modification of account {account.account_number}")
            account.version = row.version

    async def append_transaction(
        self, db: AsyncSession, txn: NewTransaction
    ) -> Transaction:
        result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "type": txn.type.value,
                "amount": txn.amount,
                "source_account_id": txn.source_account_id,
                "dest_account_id": txn.dest_account_id,
                "source_balance_after": txn.source_balance_after,
                "dest_balance_after": txn.dest_balance_after,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows — this should never happen")
        return row_to_transaction(row)

    async def list_transactions_involving(
        self, db: AsyncSession, account_ids: list[str]
    ) -> list[Transaction]:
        result = await db.execute(_LIST_INVOLVING_SQL, {"ids": list(account_ids)})
        return [row_to_transaction(row) for row in result.fetchall()]
