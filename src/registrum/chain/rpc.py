"""
JSON-RPC endpoint client.

Lightweight alternative to web3.py: httpx for HTTP, plain dicts for
requests and receipts. One pooled ``httpx.Client`` per endpoint, safe to
share between threads issuing independent calls.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class EndpointError(RuntimeError):
    """The endpoint could not be reached or rejected the request."""


class RpcError(EndpointError):
    """The endpoint answered with a JSON-RPC ``error`` member."""

    def __init__(self, method: str, code: Optional[int], message: str, data: Any = None) -> None:
        super().__init__(f"RPC error from {method}: [{code}] {message}")
        self.method = method
        self.code = code
        self.message = message
        self.data = data

    @property
    def is_revert(self) -> bool:
        # geth/anvil report reverts as code 3, others only in the message
        return self.code == 3 or "revert" in self.message.lower()


class ReceiptTimeout(EndpointError):
    """No receipt appeared before the caller-supplied timeout elapsed."""


def _to_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    return int(value, 16)


class JsonRpcEndpoint:
    def __init__(
        self,
        url: str,
        timeout: float = 30,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self._ids = itertools.count(1)
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "JsonRpcEndpoint":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def request(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the endpoint returns an error object
            EndpointError: On transport or HTTP failure
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }

        try:
            response = self._client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise EndpointError(f"{method} failed against {self.url}: {exc}") from exc
        except ValueError as exc:
            raise EndpointError(f"{method} returned a non-JSON response") from exc

        if "error" in data:
            error = data["error"] or {}
            raise RpcError(
                method,
                error.get("code"),
                error.get("message", ""),
                error.get("data"),
            )

        return data.get("result")

    def call(self, tx: dict, block: str = "latest") -> str:
        return self.request("eth_call", [tx, block])

    def estimate_gas(self, tx: dict) -> int:
        return _to_int(self.request("eth_estimateGas", [tx]))

    def gas_price(self) -> int:
        return _to_int(self.request("eth_gasPrice", []))

    def chain_id(self) -> int:
        return _to_int(self.request("eth_chainId", []))

    def transaction_count(self, address: str, block: str = "pending") -> int:
        return _to_int(self.request("eth_getTransactionCount", [address, block]))

    def send_raw_transaction(self, raw_tx: str) -> str:
        """Broadcast a signed transaction; returns its 0x-prefixed hash."""
        return self.request("eth_sendRawTransaction", [raw_tx])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return self.request("eth_getTransactionReceipt", [tx_hash])

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: Optional[float] = None,
        poll_interval: float = 2.0,
    ) -> dict:
        """
        Poll until the transaction is mined.

        Args:
            tx_hash: Transaction hash
            timeout: Maximum wait time in seconds, None waits forever
            poll_interval: Polling interval in seconds

        Returns:
            Transaction receipt dict

        Raises:
            ReceiptTimeout: If a timeout was given and elapsed
            EndpointError: If the endpoint fails while polling
        """
        start = time.monotonic()
        while True:
            receipt = self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if timeout is not None and time.monotonic() - start >= timeout:
                raise ReceiptTimeout(f"Transaction {tx_hash} not mined within {timeout}s")
            logger.debug("Receipt for %s not available yet", tx_hash)
            time.sleep(poll_interval)
