"""Signal data models for the mean-reversion strategy."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class Signal(str, Enum):
    """Trading decision produced by the signal generator."""

    BUY = "BUY"
    SELL = "SELL"
    NONE = "NONE"


@dataclass(frozen=True)
class ZScoreStats:
    """Statistics over the most recent ``mean_period`` prices.

    ``z_score`` is None when ``std_dev`` is zero (flat window).
    """

    mean: Decimal
    std_dev: Decimal
    z_score: Decimal | None
    last_price: Decimal
    sample_count: int
