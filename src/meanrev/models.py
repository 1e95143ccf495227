"""Shared data models for the mean-reversion swap bot.

CRITICAL: Prices, thresholds and trade sizes use Decimal. Never use float
for values that end up in a statistic or a swap amount.
"""

import time
from dataclasses import dataclass
from decimal import Decimal


def now_ms() -> int:
    """Current wall-clock time in unix milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class PriceSample:
    """A single observed price for one instrument."""

    timestamp: int  # Unix milliseconds
    price: Decimal  # Quote units per one base unit
    instrument_id: str  # Mint address of the priced (base) token
    symbol: str = ""  # Display symbol, e.g. "SOL"


@dataclass(frozen=True)
class StrategyConfig:
    """Immutable strategy parameters, fixed for the lifetime of an engine."""

    mean_period: int
    deviation_threshold: Decimal
    trade_size: Decimal

    def __post_init__(self) -> None:
        if isinstance(self.mean_period, bool) or not isinstance(self.mean_period, int):
            raise ValueError(f"mean_period must be an integer, got {self.mean_period!r}")
        if self.mean_period < 2:
            raise ValueError(f"mean_period must be >= 2, got {self.mean_period}")
        if not self.deviation_threshold > 0:
            raise ValueError(
                f"deviation_threshold must be positive, got {self.deviation_threshold}"
            )
        if not self.trade_size > 0:
            raise ValueError(f"trade_size must be positive, got {self.trade_size}")


@dataclass(frozen=True)
class TradingPair:
    """The configured base/quote pair the bot trades.

    ``base_mint`` is the priced token (sold on SELL), ``quote_mint`` the token
    prices are denominated in (spent on BUY).
    """

    base_mint: str
    quote_mint: str
    symbol: str
