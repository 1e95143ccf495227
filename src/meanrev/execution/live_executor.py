"""Live swap executor: Jupiter quote and build, solders signing, RPC broadcast.

1. Quote the swap.
2. Build the unsigned transaction for the wallet.
3. Sign it with the wallet keypair.
4. Broadcast (skip preflight, 2 RPC retries) and wait for finalization.
"""

import base64

from solders.transaction import VersionedTransaction

from meanrev.exceptions import QuoteError, SwapError
from meanrev.exchange.client import QuoteClient
from meanrev.execution.executor import SwapExecutor
from meanrev.execution.rpc import SolanaRpcClient
from meanrev.execution.wallet import Wallet
from meanrev.logging import LogCategory, get_logger
from meanrev.trading.models import SwapRequest

logger = get_logger(__name__)


class LiveSwapExecutor(SwapExecutor):
    """Real swap executor.

    Args:
        quote_client: Client used to quote and build swaps.
        rpc_client: Solana RPC client used to broadcast and confirm.
        confirm_timeout: Seconds to wait for finalization before failing.
    """

    def __init__(
        self,
        quote_client: QuoteClient,
        rpc_client: SolanaRpcClient,
        confirm_timeout: float = 60.0,
    ) -> None:
        self._quote_client = quote_client
        self._rpc_client = rpc_client
        self._confirm_timeout = confirm_timeout

    async def execute_trade(self, request: SwapRequest, wallet: Wallet) -> str:
        if not wallet.can_sign:
            raise SwapError("Live trading requires a wallet with a private key")

        try:
            quote = await self._quote_client.get_quote(
                request.input_mint, request.output_mint, request.amount
            )
            encoded = await self._quote_client.build_swap(wallet.public_key, quote)
        except QuoteError as e:
            raise SwapError(f"Swap preparation failed: {e}") from e

        try:
            unsigned = VersionedTransaction.from_bytes(base64.b64decode(encoded))
        except ValueError as e:
            raise SwapError(f"Cannot decode swap transaction: {e}") from e

        signed = wallet.sign(unsigned)
        signature = await self._rpc_client.send_raw_transaction(bytes(signed))
        logger.info(
            "swap_transaction_sent",
            category=LogCategory.TRADE,
            signature=signature,
            input_mint=request.input_mint,
            output_mint=request.output_mint,
            in_amount=request.amount,
        )

        await self._rpc_client.confirm_transaction(
            signature, commitment="finalized", timeout=self._confirm_timeout
        )
        logger.info(
            "swap_transaction_finalized",
            category=LogCategory.TRADE,
            signature=signature,
            explorer_url=f"https://solana.fm/tx/{signature}",
        )
        return signature
