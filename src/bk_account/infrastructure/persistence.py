"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

Raw SQL against the `accounts` / `users` tables created by Alembic migrations.

Transaction ownership: the CALLER (application service) is responsible for
committing or rolling back the session.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import Account
from src.bk_common.errors import InternalError

ACCOUNT_COLUMNS = "id, account_number, user_id, balance, version, created_at, updated_at"

_GET_USERNAME_SQL = text("""
    SELECT username FROM users WHERE id = CAST(:user_id AS UUID)
""")

_LIST_BY_OWNER_SQL = text(f"""
    SELECT {ACCOUNT_COLUMNS}
    FROM accounts
    WHERE user_id = CAST(:user_id AS UUID)
    ORDER BY created_at ASC, id ASC
""")

_GET_BY_NUMBER_SQL = text(f"""
    SELECT {ACCOUNT_COLUMNS}
    FROM accounts
    WHERE account_number = :account_number
""")

_EXISTS_SQL = text("""
    SELECT 1 FROM accounts WHERE account_number = :account_number
""")

_INSERT_ACCOUNT_SQL = text(f"""
    INSERT INTO accounts (account_number, user_id, balance, version)
    VALUES (:account_number, CAST(:user_id AS UUID), :balance, 0)
    RETURNING {ACCOUNT_COLUMNS}
""")


def row_to_account(row: object) -> Account:
    return Account(
        id=str(row.id),  # type: ignore[attr-defined]
        account_number=row.account_number,  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository for the account registry."""

    async def get_username(self, db: AsyncSession, user_id: str) -> str | None:
        result = await db.execute(_GET_USERNAME_SQL, {"user_id": user_id})
        row = result.fetchone()
        return row.username if row else None

    async def list_accounts_by_owner(
        self, db: AsyncSession, user_id: str
    ) -> list[Account]:
        result = await db.execute(_LIST_BY_OWNER_SQL, {"user_id": user_id})
        return [row_to_account(row) for row in result.fetchall()]

    async def get_account_by_number(
        self, db: AsyncSession, account_number: str
    ) -> Account | None:
        result = await db.execute(_GET_BY_NUMBER_SQL, {"account_number": account_number})
        row = result.fetchone()
        return row_to_account(row) if row else None

    async def account_number_exists(
        self, db: AsyncSession, account_number: str
    ) -> bool:
        result = await db.execute(_EXISTS_SQL, {"account_number": account_number})
        return result.fetchone() is not None

    async def create_account(
        self, db: AsyncSession, account_number: str, user_id: str, balance: int
    ) -> Account:
        result = await db.execute(
            _INSERT_ACCOUNT_SQL,
            {"account_number": account_number, "user_id": user_id, "balance": balance},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Account insert returned no rows — this should never happen")
        return row_to_account(row)
