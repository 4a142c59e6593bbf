from __future__ import annotations

import pytest
from eth_account import Account
from eth_account.signers.local import LocalAccount

from registrum.chain.contract import RegistryContract
from registrum.chain.rpc import JsonRpcEndpoint
from registrum.chain.tx import TransactionOrchestrator
from registrum.config import RegistryConfig
from registrum.registry import AgentRegistry
from registrum.wallet import generate_eoa

from fakechain import CHAIN_ID, FAKE_RPC_URL, FakeRegistryNode


@pytest.fixture()
def node() -> FakeRegistryNode:
    return FakeRegistryNode()


@pytest.fixture()
def endpoint(node: FakeRegistryNode):
    with JsonRpcEndpoint(FAKE_RPC_URL, transport=node.transport()) as ep:
        yield ep


@pytest.fixture()
def signer() -> LocalAccount:
    private_key, _ = generate_eoa()
    return Account.from_key(private_key)


@pytest.fixture()
def other_signer() -> LocalAccount:
    private_key, _ = generate_eoa()
    return Account.from_key(private_key)


@pytest.fixture()
def contract(node: FakeRegistryNode, endpoint: JsonRpcEndpoint) -> RegistryContract:
    return RegistryContract(endpoint, node.registry_address)


@pytest.fixture()
def orchestrator(endpoint: JsonRpcEndpoint) -> TransactionOrchestrator:
    return TransactionOrchestrator(endpoint, CHAIN_ID, poll_interval=0)


@pytest.fixture()
def registry(node: FakeRegistryNode, endpoint: JsonRpcEndpoint) -> AgentRegistry:
    config = RegistryConfig(
        rpc_url=FAKE_RPC_URL,
        registry_address=node.registry_address,
        poll_interval=0.001,
    )
    return AgentRegistry.connect(config, endpoint=endpoint)
