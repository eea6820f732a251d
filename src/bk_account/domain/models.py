"""Domain models for bk_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Account:
    id: str                  # UUID, internal only
    account_number: str      # 12-digit public token
    user_id: str             # owner, immutable after creation
    balance: int             # cents, never negative
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
