"""Public account number generator.

Account numbers are 12 random decimal digits drawn from the OS CSPRNG.
With 10**12 possible values a collision is negligible; callers still
re-draw on collision and the DB UNIQUE constraint is the final guard.
"""

import secrets

ACCOUNT_NUMBER_LENGTH = 12


def generate_account_number() -> str:
    """Return a fresh 12-digit account number (leading zeros allowed)."""
    return "".join(secrets.choice("0123456789") for _ in range(ACCOUNT_NUMBER_LENGTH))


def is_valid_account_number(value: str) -> bool:
    return len(value) == ACCOUNT_NUMBER_LENGTH and value.isdigit()
