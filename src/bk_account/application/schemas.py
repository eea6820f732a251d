"""Pydantic schemas for bk_account API."""

from pydantic import BaseModel, Field

from src.bk_common.cents import MAX_CENTS, cents_to_display

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateAccountRequest(BaseModel):
    initial_balance_cents: int = Field(
        0, ge=0, le=MAX_CENTS, description="Opening balance in cents (zero or more)"
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AccountView(BaseModel):
    account_number: str
    balance_cents: int
    balance_display: str
    username: str

    @classmethod
    def from_cents(cls, account_number: str, balance: int, username: str) -> "AccountView":
        return cls(
            account_number=account_number,
            balance_cents=balance,
            balance_display=cents_to_display(balance),
            username=username,
        )
