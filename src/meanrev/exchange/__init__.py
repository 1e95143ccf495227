"""Swap aggregator client layer -- Jupiter API integration via httpx."""

from meanrev.exchange.client import QuoteClient
from meanrev.exchange.jupiter_client import JupiterClient
from meanrev.exchange.types import Quote, TokenInfo, from_atomic_units, to_atomic_units

__all__ = [
    "JupiterClient",
    "Quote",
    "QuoteClient",
    "TokenInfo",
    "from_atomic_units",
    "to_atomic_units",
]
