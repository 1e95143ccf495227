"""Current-price lookup for the traded pair.

Token decimals are fetched once at startup and cached for the lifetime of
the bot; prices are then derived from a quote for exactly one whole base
token.
"""

from decimal import Decimal

from meanrev.exceptions import QuoteError, StartupError
from meanrev.exchange.client import QuoteClient
from meanrev.exchange.types import from_atomic_units
from meanrev.logging import LogCategory, get_logger
from meanrev.models import TradingPair

logger = get_logger(__name__)


class TokenDecimalsCache:
    """Startup-loaded cache of token decimals.

    Args:
        quote_client: Client used for the one-time token lookups.
    """

    def __init__(self, quote_client: QuoteClient) -> None:
        self._quote_client = quote_client
        self._decimals: dict[str, int] = {}

    async def load(self, mints: list[str]) -> dict[str, int]:
        """Fetch decimals for every mint.

        Raises:
            StartupError: If any lookup fails. Trade amounts cannot be scaled
                safely without decimals, so this is fatal.
        """
        for mint in mints:
            if mint in self._decimals:
                continue
            try:
                decimals = await self._quote_client.get_decimals(mint)
            except QuoteError as e:
                raise StartupError(f"Failed to get token decimals for {mint}: {e}") from e
            if decimals < 0:
                raise StartupError(f"Invalid decimals for {mint}: {decimals}")
            self._decimals[mint] = decimals
            logger.info(
                "token_decimals_loaded",
                category=LogCategory.SYSTEM,
                mint=mint,
                decimals=decimals,
            )
        return dict(self._decimals)

    def get(self, mint: str) -> int:
        """Return cached decimals. Raises KeyError if ``load`` never covered ``mint``."""
        return self._decimals[mint]

    def __contains__(self, mint: object) -> bool:
        return mint in self._decimals


class PriceSource:
    """Prices the base token in quote-token units via swap quotes.

    Args:
        quote_client: Client used to request quotes.
        decimals: Startup-loaded decimals for both mints of every priced pair.
    """

    def __init__(self, quote_client: QuoteClient, decimals: TokenDecimalsCache) -> None:
        self._quote_client = quote_client
        self._decimals = decimals

    async def get_current_price(self, pair: TradingPair) -> Decimal:
        """Return the price of one whole base token in quote tokens.

        Raises:
            QuoteError: If the quote fails or yields a non-positive price.
        """
        base_decimals = self._decimals.get(pair.base_mint)
        quote_decimals = self._decimals.get(pair.quote_mint)

        quote = await self._quote_client.get_quote(
            pair.base_mint, pair.quote_mint, 10**base_decimals
        )
        price = from_atomic_units(quote.out_amount, quote_decimals)
        if price <= 0:
            raise QuoteError(f"Non-positive price for {pair.symbol}: {price}")
        return price
