"""Token and quote type definitions plus atomic-unit conversions.

Token amounts on-chain are integers in atomic units (``10**decimals`` atomic
units per whole token). All human-facing amounts use Decimal.
"""

from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal
from typing import Any


@dataclass(frozen=True)
class TokenInfo:
    """Token metadata from the token lookup endpoint."""

    address: str
    symbol: str
    name: str
    decimals: int


@dataclass(frozen=True)
class Quote:
    """A swap quote.

    ``raw`` is the untouched response body, which must be sent back verbatim
    when building the swap transaction.
    """

    input_mint: str
    output_mint: str
    in_amount: int  # Atomic units of input_mint
    out_amount: int  # Atomic units of output_mint
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


def to_atomic_units(amount: Decimal, decimals: int) -> int:
    """Convert a human token amount to atomic units, rounding DOWN.

    Rounding down never spends more than the configured amount.

    Args:
        amount: Human-readable amount (e.g. Decimal("0.01") SOL).
        decimals: Token decimals (e.g. 9 for SOL).

    Returns:
        Integer amount in atomic units.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    scaled = amount * (Decimal(10) ** decimals)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def from_atomic_units(amount: int, decimals: int) -> Decimal:
    """Convert an atomic-unit integer amount to a human Decimal amount."""
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    return Decimal(amount) / (Decimal(10) ** decimals)
