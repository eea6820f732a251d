"""004: create transactions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id                    BIGSERIAL   PRIMARY KEY,
            type                  VARCHAR(16) NOT NULL,
            amount                BIGINT      NOT NULL,
            source_account_id     UUID        REFERENCES accounts (id),
            dest_account_id       UUID        REFERENCES accounts (id),
            source_balance_after  BIGINT,
            dest_balance_after    BIGINT,
            created_at            TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_type CHECK (type IN ('DEPOSIT', 'WITHDRAW', 'TRANSFER')),
            CONSTRAINT ck_transactions_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_transactions_shape CHECK (
                (type = 'DEPOSIT'  AND source_account_id IS NULL     AND dest_account_id IS NOT NULL)
             OR (type = 'WITHDRAW' AND source_account_id IS NOT NULL AND dest_account_id IS NULL)
             OR (type = 'TRANSFER' AND source_account_id IS NOT NULL AND dest_account_id IS NOT NULL
                                   AND source_account_id <> dest_account_id)
            ),
            CONSTRAINT ck_transactions_snapshots CHECK (
                (source_account_id IS NULL) = (source_balance_after IS NULL)
                AND (dest_account_id IS NULL) = (dest_balance_after IS NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_transactions_source ON transactions (source_account_id, id);")
    op.execute("CREATE INDEX idx_transactions_dest ON transactions (dest_account_id, id);")
    op.execute("""
        CREATE TRIGGER trg_transactions_append_only
            BEFORE UPDATE OR DELETE ON transactions
            FOR EACH ROW EXECUTE FUNCTION fn_reject_mutation();
    """)
    op.execute("COMMENT ON TABLE transactions IS 'Ledger transactions, append-only, amounts in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
