"""Market data layer -- price lookup and token decimals cache."""

from meanrev.market_data.price_source import PriceSource, TokenDecimalsCache

__all__ = ["PriceSource", "TokenDecimalsCache"]
