"""Tests for the JSON-RPC endpoint client."""

from __future__ import annotations

import json

import httpx
import pytest

from registrum.chain.rpc import EndpointError, JsonRpcEndpoint, ReceiptTimeout, RpcError

from fakechain import CHAIN_ID, GAS_PRICE


def _endpoint(handler) -> JsonRpcEndpoint:
    return JsonRpcEndpoint("http://rpc.test", transport=httpx.MockTransport(handler))


class TestRequest:
    def test_payload_shape(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            seen.append(body)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": "0x1"})

        with _endpoint(handler) as ep:
            ep.request("eth_blockNumber", [])
            ep.request("eth_blockNumber", [])

        assert seen[0]["jsonrpc"] == "2.0"
        assert seen[0]["method"] == "eth_blockNumber"
        assert seen[0]["params"] == []
        assert seen[1]["id"] == seen[0]["id"] + 1

    def test_rpc_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "method not found"}},
            )

        with _endpoint(handler) as ep, pytest.raises(RpcError) as excinfo:
            ep.request("eth_foo", [])

        err = excinfo.value
        assert isinstance(err, EndpointError)
        assert err.code == -32601
        assert err.method == "eth_foo"
        assert not err.is_revert

    @pytest.mark.parametrize(
        "code, message, expected",
        [
            (3, "execution reverted", True),
            (-32000, "execution reverted: AgentRegistry: agent already exists", True),
            (-32000, "VM Exception while processing transaction: revert", True),
            (-32000, "insufficient funds", False),
        ],
    )
    def test_is_revert(self, code: int, message: str, expected: bool) -> None:
        assert RpcError("eth_estimateGas", code, message).is_revert is expected

    def test_http_error(self) -> None:
        with _endpoint(lambda request: httpx.Response(502, text="bad gateway")) as ep:
            with pytest.raises(EndpointError, match="eth_chainId failed"):
                ep.chain_id()

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _endpoint(handler) as ep, pytest.raises(EndpointError) as excinfo:
            ep.gas_price()
        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)

    def test_non_json_body(self) -> None:
        with _endpoint(lambda request: httpx.Response(200, text="<html>")) as ep:
            with pytest.raises(EndpointError, match="non-JSON"):
                ep.gas_price()


class TestHelpers:
    def test_quantities_decode_from_hex(self, node, endpoint) -> None:
        assert endpoint.chain_id() == CHAIN_ID
        assert endpoint.gas_price() == GAS_PRICE
        assert endpoint.transaction_count("0x" + "11" * 20) == 0

    def test_receipt_missing_is_none(self, endpoint) -> None:
        assert endpoint.get_transaction_receipt("0x" + "00" * 32) is None


class TestWaitForReceipt:
    def test_polls_until_available(self, node, endpoint, contract, orchestrator, signer) -> None:
        intent = contract.intent(signer, "createAgent", 1, signer.address, "ipfs://x", [1])
        tx_hash = orchestrator.execute(intent)

        node.receipt_delay = 2
        node.calls.clear()
        receipt = endpoint.wait_for_receipt(tx_hash, poll_interval=0)
        assert receipt["transactionHash"] == tx_hash
        assert node.calls["eth_getTransactionReceipt"] == 3

    def test_timeout(self, node, endpoint) -> None:
        node.withhold_receipts = True
        with pytest.raises(ReceiptTimeout, match="not mined within"):
            endpoint.wait_for_receipt("0x" + "00" * 32, timeout=0.03, poll_interval=0.01)
