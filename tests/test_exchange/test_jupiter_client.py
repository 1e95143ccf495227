"""Tests for JupiterClient against respx-mocked Jupiter endpoints.

Verifies:
- Request paths, query parameters and JSON payloads sent to Jupiter
- Response parsing into TokenInfo / Quote / base64 transaction
- HTTP errors, malformed bodies and exhausted retries surface as QuoteError
"""

import json

import httpx
import pytest
import respx
from httpx import Response

from meanrev.config import SOL_MINT, USDC_MINT, JupiterSettings
from meanrev.exceptions import QuoteError
from meanrev.exchange.jupiter_client import JupiterClient
from meanrev.exchange.types import Quote

BASE_URL = "https://jup.test"

QUOTE_BODY = {
    "inputMint": SOL_MINT,
    "outputMint": USDC_MINT,
    "inAmount": "1000000000",
    "outAmount": "187654321",
    "slippageBps": 50,
    "routePlan": [],
}


@pytest.fixture
def settings() -> JupiterSettings:
    return JupiterSettings(base_url=BASE_URL)


class TestGetTokenInfo:

    @pytest.mark.asyncio
    @respx.mock
    async def test_parses_decimals(self, settings: JupiterSettings) -> None:
        route = respx.get(f"{BASE_URL}/tokens/v1/token/{USDC_MINT}").mock(
            return_value=Response(
                200,
                json={"address": USDC_MINT, "symbol": "USDC", "name": "USD Coin", "decimals": 6},
            )
        )
        client = JupiterClient(settings)

        info = await client.get_token_info(USDC_MINT)
        decimals = await client.get_decimals(USDC_MINT)
        await client.close()

        assert info.decimals == 6
        assert info.symbol == "USDC"
        assert decimals == 6
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_decimals_is_quote_error(self, settings: JupiterSettings) -> None:
        respx.get(f"{BASE_URL}/tokens/v1/token/{SOL_MINT}").mock(
            return_value=Response(200, json={"symbol": "X"})
        )

        with pytest.raises(QuoteError, match="Malformed token info"):
            await JupiterClient(settings).get_token_info(SOL_MINT)

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found_is_quote_error(self, settings: JupiterSettings) -> None:
        route = respx.get(f"{BASE_URL}/tokens/v1/token/bogus").mock(
            return_value=Response(404, text="not found")
        )

        with pytest.raises(QuoteError, match="404"):
            await JupiterClient(settings).get_token_info("bogus")

        assert route.call_count == 1


class TestGetQuote:

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_params_and_parses_amounts(self, settings: JupiterSettings) -> None:
        route = respx.get(path="/swap/v1/quote").mock(return_value=Response(200, json=QUOTE_BODY))
        client = JupiterClient(settings, slippage_bps=75)

        quote = await client.get_quote(SOL_MINT, USDC_MINT, 1_000_000_000)

        params = route.calls.last.request.url.params
        assert params["inputMint"] == SOL_MINT
        assert params["outputMint"] == USDC_MINT
        assert params["amount"] == "1000000000"
        assert params["slippageBps"] == "75"
        assert quote.in_amount == 1_000_000_000
        assert quote.out_amount == 187_654_321
        assert quote.raw == QUOTE_BODY

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_is_quote_error(self, settings: JupiterSettings) -> None:
        route = respx.get(path="/swap/v1/quote").mock(return_value=Response(500, text="internal"))

        with pytest.raises(QuoteError, match="500"):
            await JupiterClient(settings).get_quote(SOL_MINT, USDC_MINT, 1)

        # HTTP status errors are not retried
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_body_is_quote_error(self, settings: JupiterSettings) -> None:
        respx.get(path="/swap/v1/quote").mock(return_value=Response(200, text="<html>"))

        with pytest.raises(QuoteError):
            await JupiterClient(settings).get_quote(SOL_MINT, USDC_MINT, 1)

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_body_is_quote_error(self, settings: JupiterSettings) -> None:
        respx.get(path="/swap/v1/quote").mock(return_value=Response(200, json=[1, 2]))

        with pytest.raises(QuoteError, match="non-object"):
            await JupiterClient(settings).get_quote(SOL_MINT, USDC_MINT, 1)

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_out_amount_is_quote_error(self, settings: JupiterSettings) -> None:
        respx.get(path="/swap/v1/quote").mock(return_value=Response(200, json={"inAmount": "1"}))

        with pytest.raises(QuoteError, match="Malformed quote"):
            await JupiterClient(settings).get_quote(SOL_MINT, USDC_MINT, 1)

    @pytest.mark.asyncio
    @respx.mock
    async def test_connect_error_retried_then_succeeds(self, settings: JupiterSettings) -> None:
        request = httpx.Request("GET", f"{BASE_URL}/swap/v1/quote")
        route = respx.get(path="/swap/v1/quote").mock(
            side_effect=[
                httpx.ConnectError("boom", request=request),
                Response(200, json=QUOTE_BODY),
            ]
        )

        quote = await JupiterClient(settings).get_quote(SOL_MINT, USDC_MINT, 1_000_000_000)

        assert quote.out_amount == 187_654_321
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_exhausted_is_quote_error(self, settings: JupiterSettings) -> None:
        route = respx.get(path="/swap/v1/quote").mock(side_effect=httpx.ConnectError)

        with pytest.raises(QuoteError, match="failed"):
            await JupiterClient(settings).get_quote(SOL_MINT, USDC_MINT, 1)

        assert route.call_count == 3


class TestBuildSwap:

    @pytest.mark.asyncio
    @respx.mock
    async def test_posts_quote_verbatim(self, settings: JupiterSettings) -> None:
        route = respx.post(f"{BASE_URL}/swap/v1/swap").mock(
            return_value=Response(200, json={"swapTransaction": "AQID"})
        )
        quote = Quote(SOL_MINT, USDC_MINT, 1_000_000_000, 187_654_321, raw=QUOTE_BODY)

        tx = await JupiterClient(settings).build_swap("WalletPubkey111", quote)

        payload = json.loads(route.calls.last.request.content)
        assert tx == "AQID"
        assert payload["userPublicKey"] == "WalletPubkey111"
        assert payload["quoteResponse"] == QUOTE_BODY
        assert payload["wrapAndUnwrapSol"] is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_transaction_is_quote_error(self, settings: JupiterSettings) -> None:
        respx.post(f"{BASE_URL}/swap/v1/swap").mock(
            return_value=Response(200, json={"error": "no route"})
        )
        quote = Quote(SOL_MINT, USDC_MINT, 1, 1, raw=QUOTE_BODY)

        with pytest.raises(QuoteError, match="swapTransaction"):
            await JupiterClient(settings).build_swap("WalletPubkey111", quote)


class TestHeaders:

    @pytest.mark.asyncio
    @respx.mock
    async def test_api_key_header_sent_when_configured(self) -> None:
        route = respx.get(path="/swap/v1/quote").mock(return_value=Response(200, json=QUOTE_BODY))
        client = JupiterClient(JupiterSettings(base_url=BASE_URL, api_key="secret-key"))

        await client.get_quote(SOL_MINT, USDC_MINT, 1)

        assert route.calls.last.request.headers["x-api-key"] == "secret-key"

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_api_key_header_by_default(self, settings: JupiterSettings) -> None:
        route = respx.get(path="/swap/v1/quote").mock(return_value=Response(200, json=QUOTE_BODY))

        await JupiterClient(settings).get_quote(SOL_MINT, USDC_MINT, 1)

        assert "x-api-key" not in route.calls.last.request.headers
