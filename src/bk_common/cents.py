"""Integer arithmetic utilities for cents-based balances.

All amounts and balances use int (cents). No float, no Decimal on the hot path.
Every stored amount and balance is a BIGINT column, so MAX_CENTS caps both.
"""

MAX_CENTS = 2**63 - 1


def validate_positive_amount(amount: int) -> None:
    """Ledger movements must be strictly positive whole cents."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Amount must be an integer number of cents, got {amount!r}")
    if amount <= 0:
        raise ValueError(f"Amount must be greater than 0 cents, got {amount}")
    if amount > MAX_CENTS:
        raise ValueError(f"Amount must not exceed {MAX_CENTS} cents, got {amount}")


def validate_opening_balance(amount: int) -> None:
    """Opening balances may be zero but never negative."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Balance must be an integer number of cents, got {amount!r}")
    if amount < 0:
        raise ValueError(f"Balance must not be negative, got {amount}")
    if amount > MAX_CENTS:
        raise ValueError(f"Balance must not exceed {MAX_CENTS} cents, got {amount}")


def validate_credit(balance: int, amount: int) -> None:
    """Crediting amount onto balance must keep the result within MAX_CENTS."""
    if balance > MAX_CENTS - amount:
        raise ValueError(f"Resulting balance would exceed {MAX_CENTS} cents")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 650000 -> '$6,500.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def cents_to_plain(cents: int) -> str:
    """Two-decimal amount without currency sign or grouping: 5000 -> '50.00'."""
    sign = "-" if cents < 0 else ""
    abs_cents = abs(cents)
    return f"{sign}{abs_cents // 100}.{abs_cents % 100:02d}"
