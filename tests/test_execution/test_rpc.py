"""Tests for SolanaRpcClient broadcast and confirmation."""

import base64
import json

import pytest
import respx
from httpx import Response

from meanrev.exceptions import SwapError
from meanrev.execution.rpc import SolanaRpcClient

RPC_URL = "https://rpc.test/"


def _status(confirmation: str | None, err: object = None) -> Response:
    value = None if confirmation is None else {"confirmationStatus": confirmation, "err": err}
    return Response(
        200,
        json={"jsonrpc": "2.0", "id": 1, "result": {"context": {"slot": 1}, "value": [value]}},
    )


class TestSendRawTransaction:

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_base64_with_skip_preflight(self) -> None:
        route = respx.post(RPC_URL).mock(
            return_value=Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "5igSig"})
        )

        signature = await SolanaRpcClient(RPC_URL).send_raw_transaction(b"\x01\x02\x03")

        body = json.loads(route.calls.last.request.content)
        assert signature == "5igSig"
        assert body["method"] == "sendTransaction"
        assert body["params"][0] == base64.b64encode(b"\x01\x02\x03").decode()
        assert body["params"][1] == {
            "encoding": "base64",
            "skipPreflight": True,
            "maxRetries": 2,
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_rpc_error_is_swap_error(self) -> None:
        respx.post(RPC_URL).mock(
            return_value=Response(
                200,
                json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32002, "message": "blockhash"}},
            )
        )

        with pytest.raises(SwapError, match="sendTransaction"):
            await SolanaRpcClient(RPC_URL).send_raw_transaction(b"\x00")

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_is_swap_error(self) -> None:
        respx.post(RPC_URL).mock(return_value=Response(503))

        with pytest.raises(SwapError):
            await SolanaRpcClient(RPC_URL).send_raw_transaction(b"\x00")


class TestConfirmTransaction:

    @pytest.mark.asyncio
    @respx.mock
    async def test_polls_until_finalized(self) -> None:
        route = respx.post(RPC_URL).mock(
            side_effect=[_status(None), _status("confirmed"), _status("finalized")]
        )

        await SolanaRpcClient(RPC_URL).confirm_transaction("sig", timeout=10, poll_interval=0)

        assert route.call_count == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_confirmed_commitment_accepts_confirmed(self) -> None:
        route = respx.post(RPC_URL).mock(return_value=_status("confirmed"))

        await SolanaRpcClient(RPC_URL).confirm_transaction(
            "sig", commitment="confirmed", poll_interval=0
        )

        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_onchain_error_is_swap_error(self) -> None:
        respx.post(RPC_URL).mock(
            return_value=_status("confirmed", err={"InstructionError": [0, "Custom"]})
        )

        with pytest.raises(SwapError, match="failed"):
            await SolanaRpcClient(RPC_URL).confirm_transaction("sig", poll_interval=0)

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_is_swap_error(self) -> None:
        respx.post(RPC_URL).mock(return_value=_status("processed"))

        with pytest.raises(SwapError, match="not finalized"):
            await SolanaRpcClient(RPC_URL).confirm_transaction("sig", timeout=0, poll_interval=0)
