"""Jupiter swap aggregator client via httpx async.

Wraps the Jupiter token, quote and swap-build endpoints. Transient transport
failures are retried with exponential backoff; anything that still fails,
including HTTP error statuses and malformed bodies, surfaces as QuoteError.
"""

from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from meanrev.config import JupiterSettings
from meanrev.exceptions import QuoteError
from meanrev.exchange.client import QuoteClient
from meanrev.exchange.types import Quote, TokenInfo
from meanrev.logging import LogCategory, get_logger

logger = get_logger(__name__)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "jupiter_request_retry",
        category=LogCategory.ERROR,
        attempt=retry_state.attempt_number,
        error=str(error),
    )


class JupiterClient(QuoteClient):
    """Concrete Jupiter API client.

    Args:
        settings: Jupiter base URL, optional API key and request timeout.
        slippage_bps: Slippage tolerance sent with every quote request.
        http_client: Optional pre-built httpx client (tests inject a
            MockTransport-backed client here).
    """

    def __init__(
        self,
        settings: JupiterSettings,
        slippage_bps: int = 50,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._slippage_bps = slippage_bps

        headers: dict[str, str] = {"Accept": "application/json"}
        api_key = settings.api_key.get_secret_value()
        if api_key:
            headers["x-api-key"] = api_key

        self._client = http_client or httpx.AsyncClient(
            base_url=settings.base_url.rstrip("/"),
            timeout=settings.timeout,
            headers=headers,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        before_sleep=_log_retry,
        reraise=True,
    )
    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, **kwargs)
        response.raise_for_status()
        return response.json()

    async def _call(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            body = await self._request(method, path, **kwargs)
        except httpx.HTTPStatusError as e:
            raise QuoteError(
                f"Jupiter {method} {path} returned {e.response.status_code}: "
                f"{e.response.text[:200]}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise QuoteError(f"Jupiter {method} {path} failed: {e}") from e

        if not isinstance(body, dict):
            raise QuoteError(f"Jupiter {method} {path} returned non-object body")
        return body

    async def get_token_info(self, mint: str) -> TokenInfo:
        body = await self._call("GET", f"/tokens/v1/token/{mint}")
        try:
            return TokenInfo(
                address=str(body.get("address", mint)),
                symbol=str(body.get("symbol", "")),
                name=str(body.get("name", "")),
                decimals=int(body["decimals"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise QuoteError(f"Malformed token info for {mint}: {e}") from e

    async def get_quote(self, input_mint: str, output_mint: str, amount: int) -> Quote:
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": str(self._slippage_bps),
        }
        body = await self._call("GET", "/swap/v1/quote", params=params)
        try:
            quote = Quote(
                input_mint=input_mint,
                output_mint=output_mint,
                in_amount=int(body["inAmount"]),
                out_amount=int(body["outAmount"]),
                raw=body,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise QuoteError(f"Malformed quote for {input_mint}->{output_mint}: {e}") from e

        logger.debug(
            "jupiter_quote",
            input_mint=input_mint,
            output_mint=output_mint,
            in_amount=quote.in_amount,
            out_amount=quote.out_amount,
        )
        return quote

    async def build_swap(self, user_public_key: str, quote: Quote) -> str:
        payload = {
            "userPublicKey": user_public_key,
            "quoteResponse": quote.raw,
            "wrapAndUnwrapSol": True,
            "dynamicComputeUnitLimit": True,
        }
        body = await self._call("POST", "/swap/v1/swap", json=payload)
        transaction = body.get("swapTransaction")
        if not isinstance(transaction, str) or not transaction:
            raise QuoteError("Swap build response has no swapTransaction")
        return transaction
