"""Minimal Solana JSON-RPC client for broadcasting and confirming transactions.

Only the two calls the bot needs: sendTransaction and getSignatureStatuses.
Every failure surfaces as SwapError so the trade coordinator handles it
like any other failed swap.
"""

import asyncio
import base64
import itertools
from typing import Any

import httpx

from meanrev.exceptions import SwapError
from meanrev.logging import LogCategory, get_logger

logger = get_logger(__name__)

#: Commitment levels ordered weakest to strongest.
_COMMITMENT_ORDER = {"processed": 0, "confirmed": 1, "finalized": 2}


class SolanaRpcClient:
    """JSON-RPC client over httpx.

    Args:
        rpc_url: Solana RPC endpoint.
        timeout: Per-request timeout in seconds.
        http_client: Optional pre-built httpx client (tests inject one).
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._rpc_url = rpc_url
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _rpc(self, method: str, params: list[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        try:
            response = await self._client.post(self._rpc_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise SwapError(f"RPC {method} failed: {e}") from e

        if not isinstance(body, dict):
            raise SwapError(f"RPC {method} returned non-object body")
        if body.get("error"):
            raise SwapError(f"RPC {method} error: {body['error']}")
        return body.get("result")

    async def send_raw_transaction(
        self,
        transaction: bytes,
        skip_preflight: bool = True,
        max_retries: int = 2,
    ) -> str:
        """Broadcast a signed, serialized transaction.

        Returns:
            The transaction signature (base58).
        """
        encoded = base64.b64encode(transaction).decode("ascii")
        signature = await self._rpc(
            "sendTransaction",
            [
                encoded,
                {
                    "encoding": "base64",
                    "skipPreflight": skip_preflight,
                    "maxRetries": max_retries,
                },
            ],
        )
        if not isinstance(signature, str) or not signature:
            raise SwapError("sendTransaction returned no signature")
        return signature

    async def confirm_transaction(
        self,
        signature: str,
        commitment: str = "finalized",
        timeout: float = 60.0,
        poll_interval: float = 2.0,
    ) -> None:
        """Poll signature status until ``commitment`` is reached.

        Raises:
            SwapError: If the transaction failed on-chain or was not confirmed
                within ``timeout`` seconds.
        """
        target = _COMMITMENT_ORDER[commitment]
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        while True:
            result = await self._rpc(
                "getSignatureStatuses",
                [[signature], {"searchTransactionHistory": False}],
            )
            statuses = (result or {}).get("value") or [None]
            status = statuses[0]

            if status is not None:
                if status.get("err"):
                    raise SwapError(f"Transaction {signature} failed: {status['err']}")
                level = _COMMITMENT_ORDER.get(status.get("confirmationStatus") or "", -1)
                if level >= target:
                    return

            if loop.time() >= deadline:
                raise SwapError(
                    f"Transaction {signature} not {commitment} after {timeout:.0f}s"
                )
            logger.debug(
                "awaiting_confirmation",
                category=LogCategory.TRADE,
                signature=signature,
                status=(status or {}).get("confirmationStatus"),
            )
            await asyncio.sleep(poll_interval)
