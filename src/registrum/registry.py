"""
AgentRegistry - the public surface over the on-chain agent registry.

Reads delegate to the contract binding; writes become intents that the
orchestrator estimates, submits and waits on, returning the confirmed
transaction hash. Independent calls may run concurrently from separate
threads: each write gets its own ``IntentRun`` and nothing here is mutated
after construction.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from .chain.contract import RegistryContract
from .chain.rpc import JsonRpcEndpoint
from .chain.tx import TransactionOrchestrator
from .config import RegistryConfig
from .models import AgentRecord, Permission
from .utils import normalize_agent_id

logger = logging.getLogger(__name__)


def _check_reference(reference: str) -> None:
    if not isinstance(reference, str) or not reference:
        raise ValueError("reference must be non-empty string")


def _check_chain_ids(chain_ids: Sequence[int]) -> list[int]:
    if isinstance(chain_ids, (str, bytes)) or not chain_ids:
        raise ValueError("chain_ids must be a non-empty sequence of chain ids")
    checked = []
    for chain_id in chain_ids:
        if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id <= 0:
            raise ValueError(f"invalid chain id: {chain_id!r}")
        checked.append(chain_id)
    return checked


class AgentRegistry:
    def __init__(self, contract: RegistryContract, orchestrator: TransactionOrchestrator) -> None:
        self.contract = contract
        self.orchestrator = orchestrator

    @classmethod
    def connect(
        cls,
        config: RegistryConfig,
        endpoint: Optional[JsonRpcEndpoint] = None,
    ) -> "AgentRegistry":
        """
        Build a registry client from ``config``.

        The chain id is resolved exactly once here: the configured value if
        present, otherwise one ``eth_chainId`` query. The binding checks the
        registry interface before anything is returned.
        """
        endpoint = endpoint or JsonRpcEndpoint(config.rpc_url)
        contract = RegistryContract(endpoint, config.registry_address)

        chain_id = config.chain_id
        if chain_id is None:
            chain_id = endpoint.chain_id()
            logger.debug("Resolved chain id %d from %s", chain_id, endpoint.url)

        orchestrator = TransactionOrchestrator(
            endpoint,
            chain_id,
            confirmation_timeout=config.confirmation_timeout,
            poll_interval=config.poll_interval,
        )
        return cls(contract, orchestrator)

    @property
    def chain_id(self) -> int:
        return self.orchestrator.chain_id

    # ---- reads ----

    def get_agent(self, agent_id: str | int) -> AgentRecord:
        return self.contract.get_agent(agent_id)

    def agent_exists(self, agent_id: str | int) -> bool:
        return self.get_agent(agent_id).created

    def is_enabled(self, agent_id: str | int) -> bool:
        return self.contract.is_enabled(agent_id)

    # ---- writes ----

    def _write(self, signer: Any, method: str, *args: Any) -> str:
        intent = self.contract.intent(signer, method, *args)
        return self.orchestrator.execute(intent)

    def create_agent(
        self,
        signer: Any,
        agent_id: str | int,
        reference: str,
        chain_ids: Sequence[int],
    ) -> str:
        """Register a new agent owned by ``signer.address``; returns the tx hash."""
        key = normalize_agent_id(agent_id)
        _check_reference(reference)
        chains = _check_chain_ids(chain_ids)
        owner = getattr(signer, "address", None)
        return self._write(signer, "createAgent", key, owner, reference, chains)

    def update_agent(
        self,
        signer: Any,
        agent_id: str | int,
        reference: str,
        chain_ids: Sequence[int],
    ) -> str:
        key = normalize_agent_id(agent_id)
        _check_reference(reference)
        chains = _check_chain_ids(chain_ids)
        return self._write(signer, "updateAgent", key, reference, chains)

    def enable_agent(self, signer: Any, agent_id: str | int) -> str:
        return self._write(signer, "enableAgent", normalize_agent_id(agent_id), int(Permission.OWNER))

    def disable_agent(self, signer: Any, agent_id: str | int) -> str:
        return self._write(signer, "disableAgent", normalize_agent_id(agent_id), int(Permission.OWNER))
