"""Shared test fixtures for the mean-reversion swap bot."""

from decimal import Decimal

import pytest

from meanrev.config import SOL_MINT, USDC_MINT, AppSettings, StrategySettings, TradingSettings
from meanrev.models import PriceSample, StrategyConfig, TradingPair


def make_sample(price: str | int | Decimal, timestamp: int = 0, mint: str = SOL_MINT) -> PriceSample:
    """Create a PriceSample with a Decimal price."""
    return PriceSample(
        timestamp=timestamp,
        price=Decimal(str(price)),
        instrument_id=mint,
        symbol="SOL",
    )


def make_window(prices: list, mint: str = SOL_MINT) -> list[PriceSample]:
    """Create samples with increasing timestamps from a list of prices."""
    return [make_sample(p, timestamp=1000 + i, mint=mint) for i, p in enumerate(prices)]


@pytest.fixture
def pair() -> TradingPair:
    return TradingPair(base_mint=SOL_MINT, quote_mint=USDC_MINT, symbol="SOL")


@pytest.fixture
def strategy_config() -> StrategyConfig:
    return StrategyConfig(
        mean_period=5,
        deviation_threshold=Decimal("1.5"),
        trade_size=Decimal("0.01"),
    )


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (paper mode, no file logging)."""
    return AppSettings(
        log_level="DEBUG",
        log_dir=None,
        strategy=StrategySettings(mean_period=5, poll_interval=0.01),
        trading=TradingSettings(mode="paper"),
    )
