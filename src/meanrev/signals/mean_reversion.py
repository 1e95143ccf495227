"""Mean-reversion signal generation from a rolling price window.

Takes the most recent ``mean_period`` prices, computes their mean and
population standard deviation, and measures how far the latest price sits
from the mean in standard deviations (z-score). A price abnormally far
below the mean is a BUY (buy the dip), abnormally far above is a SELL.

Pure functions: no I/O, no state, identical inputs give identical output.

CRITICAL: All computations use Decimal. Never use float.
"""

from collections.abc import Sequence
from decimal import Decimal

from meanrev.models import PriceSample, StrategyConfig
from meanrev.signals.models import Signal, ZScoreStats


def compute_zscore(prices: Sequence[Decimal], mean_period: int) -> ZScoreStats | None:
    """Compute mean, population standard deviation and z-score of the last price.

    Args:
        prices: Prices ordered oldest-first.
        mean_period: Number of most recent prices in the statistical window.

    Returns:
        ZScoreStats over ``prices[-mean_period:]``, or None if fewer than
        ``mean_period`` prices are available. ``z_score`` is None when every
        price in the slice is identical (zero standard deviation).
    """
    if mean_period < 1 or len(prices) < mean_period:
        return None

    window = list(prices[-mean_period:])
    last_price = window[-1]

    # Checked exactly: a rounded sum can leave a non-zero std dev on a flat window
    if min(window) == max(window):
        return ZScoreStats(
            mean=last_price,
            std_dev=Decimal("0"),
            z_score=None,
            last_price=last_price,
            sample_count=mean_period,
        )

    count = Decimal(mean_period)
    mean = sum(window, Decimal("0")) / count
    # Population variance: divide by N, not N - 1
    variance = sum(((p - mean) ** 2 for p in window), Decimal("0")) / count
    std_dev = variance.sqrt()

    z_score = None if std_dev == 0 else (last_price - mean) / std_dev

    return ZScoreStats(
        mean=mean,
        std_dev=std_dev,
        z_score=z_score,
        last_price=last_price,
        sample_count=mean_period,
    )


def classify_zscore(z_score: Decimal | None, deviation_threshold: Decimal) -> Signal:
    """Map a z-score onto a signal using a symmetric threshold.

    First match wins: below ``-threshold`` is BUY, above ``+threshold`` is
    SELL. A z-score exactly on the threshold, or an undefined z-score, is NONE.
    """
    if z_score is None:
        return Signal.NONE
    if z_score < -deviation_threshold:
        return Signal.BUY
    if z_score > deviation_threshold:
        return Signal.SELL
    return Signal.NONE


def evaluate(window: Sequence[PriceSample], config: StrategyConfig) -> Signal:
    """Evaluate a price window and return a BUY, SELL, or NONE signal.

    Fails closed: insufficient data (fewer than ``config.mean_period``
    samples) and a flat window both yield NONE.

    Args:
        window: Price samples ordered oldest-first.
        config: Strategy parameters (mean period and deviation threshold).

    Returns:
        The trading signal for the most recent sample.
    """
    if len(window) < config.mean_period:
        return Signal.NONE

    stats = compute_zscore([s.price for s in window], config.mean_period)
    if stats is None:
        return Signal.NONE
    return classify_zscore(stats.z_score, config.deviation_threshold)
