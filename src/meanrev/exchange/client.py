"""Abstract quote client interface.

Defines the contract for swap-aggregator clients. Pricing and execution
code depends only on this interface, keeping Jupiter-specific details
isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod

from meanrev.exchange.types import Quote, TokenInfo


class QuoteClient(ABC):
    """Abstract base class for swap quote API clients."""

    @abstractmethod
    async def close(self) -> None:
        """Clean up HTTP resources."""
        ...

    @abstractmethod
    async def get_token_info(self, mint: str) -> TokenInfo:
        """Fetch token metadata (symbol, decimals) for a mint."""
        ...

    async def get_decimals(self, mint: str) -> int:
        """Return the number of decimals of a mint."""
        info = await self.get_token_info(mint)
        return info.decimals

    @abstractmethod
    async def get_quote(self, input_mint: str, output_mint: str, amount: int) -> Quote:
        """Quote swapping ``amount`` atomic units of input_mint into output_mint."""
        ...

    @abstractmethod
    async def build_swap(self, user_public_key: str, quote: Quote) -> str:
        """Build an unsigned swap transaction for a quote.

        Returns:
            The serialized transaction, base64-encoded.
        """
        ...
