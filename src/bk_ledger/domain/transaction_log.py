"""Transaction Log — append-only record of committed ledger operations.

No update or delete exists here; the `transactions` table also rejects
both with a trigger.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import Account
from src.bk_common.cents import validate_positive_amount
from src.bk_common.enums import TransactionType
from src.bk_ledger.domain.models import NewTransaction, Transaction
from src.bk_ledger.domain.repository import LedgerStoreProtocol


def check_shape(
    txn_type: TransactionType, source: Account | None, dest: Account | None
) -> None:
    """DEPOSIT: destination only. WITHDRAW: source only. TRANSFER: both, distinct."""
    if txn_type is TransactionType.DEPOSIT:
        ok = source is None and dest is not None
    elif txn_type is TransactionType.WITHDRAW:
        ok = source is not None and dest is None
    else:
        ok = source is not None and dest is not None and source.id != dest.id
    if not ok:
        raise ValueError(f"Malformed {txn_type.value} transaction: wrong account references")


class TransactionLog:
    def __init__(self, store: LedgerStoreProtocol) -> None:
        self._store = store

    async def append(
        self,
        db: AsyncSession,
        txn_type: TransactionType,
        amount: int,
        source: Account | None = None,
        dest: Account | None = None,
    ) -> Transaction:
        """Insert one transaction, snapshotting the post-operation balances.

        Must be called after the accounts were mutated and inside the same DB
        transaction; created_at is stamped by the DB at insert.
        """
        validate_positive_amount(amount)
        check_shape(txn_type, source, dest)
        return await self._store.append_transaction(
            db,
            NewTransaction(
                type=txn_type,
                amount=amount,
                source_account_id=source.id if source else None,
                dest_account_id=dest.id if dest else None,
                source_balance_after=source.balance if source else None,
                dest_balance_after=dest.balance if dest else None,
            ),
        )

    async def list_involving(
        self, db: AsyncSession, account_ids: list[str]
    ) -> list[Transaction]:
        if not account_ids:
            return []
        return await self._store.list_transactions_involving(db, account_ids)
