"""Signal analysis for the mean-reversion strategy.

Provides the signal data models and the pure z-score signal generator
that turns a rolling price window into a BUY, SELL, or NONE decision.
"""

from meanrev.signals.mean_reversion import classify_zscore, compute_zscore, evaluate
from meanrev.signals.models import Signal, ZScoreStats

__all__ = [
    "Signal",
    "ZScoreStats",
    "classify_zscore",
    "compute_zscore",
    "evaluate",
]
