"""Paper trading executor with simulated fills.

Requests a real quote so the simulated fill reflects the market, but never
builds, signs or sends a transaction.
"""

import time
from dataclasses import dataclass
from uuid import uuid4

from meanrev.exceptions import QuoteError, SwapError
from meanrev.exchange.client import QuoteClient
from meanrev.execution.executor import SwapExecutor
from meanrev.execution.wallet import Wallet
from meanrev.logging import LogCategory, get_logger
from meanrev.trading.models import SwapRequest

logger = get_logger(__name__)


@dataclass(frozen=True)
class PaperFill:
    """A simulated swap fill."""

    tx_reference: str
    request: SwapRequest
    out_amount: int  # Atomic units of request.output_mint
    timestamp: float


class PaperSwapExecutor(SwapExecutor):
    """Simulated swap executor for paper trading.

    Args:
        quote_client: Client used to price the simulated fill.
    """

    def __init__(self, quote_client: QuoteClient) -> None:
        self._quote_client = quote_client
        self._fills: list[PaperFill] = []

    def get_fills(self) -> list[PaperFill]:
        return list(self._fills)

    async def execute_trade(self, request: SwapRequest, wallet: Wallet) -> str:
        try:
            quote = await self._quote_client.get_quote(
                request.input_mint, request.output_mint, request.amount
            )
        except QuoteError as e:
            raise SwapError(f"Paper swap quote failed: {e}") from e

        fill = PaperFill(
            tx_reference=f"paper-{uuid4().hex}",
            request=request,
            out_amount=quote.out_amount,
            timestamp=time.time(),
        )
        self._fills.append(fill)

        logger.info(
            "paper_swap_filled",
            category=LogCategory.TRADE,
            tx_reference=fill.tx_reference,
            input_mint=request.input_mint,
            output_mint=request.output_mint,
            in_amount=request.amount,
            out_amount=fill.out_amount,
        )
        return fill.tx_reference
