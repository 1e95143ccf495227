"""Trade request and outcome models."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from meanrev.signals.models import Signal


class TradeStatus(str, Enum):
    """What happened to a trade attempt."""

    EXECUTED = "executed"
    SKIPPED = "skipped"  # Another trade was already in flight
    FAILED = "failed"


@dataclass(frozen=True)
class SwapRequest:
    """A fully resolved swap: which mint to spend, which to receive, how much."""

    input_mint: str
    output_mint: str
    amount: int  # Atomic units of input_mint
    ui_amount: Decimal  # Human units of input_mint (trade size)
    signal: Signal


@dataclass(frozen=True)
class TradeOutcome:
    """Result of one call to TradeCoordinator.execute()."""

    status: TradeStatus
    signal: Signal
    request: SwapRequest | None = None
    tx_reference: str | None = None
    error: str | None = None
