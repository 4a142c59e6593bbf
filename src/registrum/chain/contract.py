"""
Contract Binding for the AgentRegistry.

Reads go through ``eth_call`` on the shared endpoint. Writes are not sent
from here: they are turned into ``TransactionIntent`` values for the
orchestrator, after the signer has been checked.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from eth_abi.exceptions import DecodingError

from ..models import AgentRecord
from ..utils import normalize_agent_id
from .abi import check_interface, decode_result, encode_call, load_abi
from .intent import TransactionIntent, require_signer
from .rpc import EndpointError, JsonRpcEndpoint

logger = logging.getLogger(__name__)

WRITE_METHODS = frozenset({"createAgent", "updateAgent", "enableAgent", "disableAgent"})


class RegistryContract:
    def __init__(
        self,
        endpoint: JsonRpcEndpoint,
        address: str,
        abi: Optional[list[dict[str, Any]]] = None,
    ) -> None:
        self.endpoint = endpoint
        self.address = address
        self.abi = abi if abi is not None else load_abi()
        check_interface(self.abi)

    def _read(self, function_name: str, args: list) -> Any:
        calldata = encode_call(self.abi, function_name, args)
        result = self.endpoint.call({"to": self.address, "data": calldata})
        if not result or result == "0x":
            # a deployed registry always returns encoded data, even for unknown ids
            raise EndpointError(f"{function_name} returned no data: no contract at {self.address}?")
        try:
            return decode_result(self.abi, function_name, result)
        except (DecodingError, ValueError) as exc:
            raise EndpointError(f"{function_name} returned undecodable data: {exc}") from exc

    def get_agent(self, agent_id: str | int) -> AgentRecord:
        """
        Read one registry entry.

        A never-created id decodes to the zero-value record (created False),
        which is a result, not an error.

        Raises:
            EndpointError: If the endpoint is unreachable, the call fails, or
                the answer is not a registry response
        """
        key = normalize_agent_id(agent_id)
        result = self._read("getAgent", [key])
        return AgentRecord.from_call_result(key, result)

    def is_enabled(self, agent_id: str | int) -> bool:
        key = normalize_agent_id(agent_id)
        return bool(self._read("isEnabled", [key]))

    def intent(self, signer: Any, method: str, *args: Any) -> TransactionIntent:
        """
        Prepare a write for the orchestrator.

        Raises:
            MissingSignerError: If ``signer`` is absent or unusable
        """
        if method not in WRITE_METHODS:
            raise ValueError(f"{method} is not a registry write method")
        signer = require_signer(signer, method)
        calldata = encode_call(self.abi, method, list(args))
        logger.debug("Prepared %s from %s", method, signer.address)
        return TransactionIntent(
            contract_address=self.address,
            method=method,
            args=tuple(args),
            signer=signer,
            calldata=calldata,
        )
