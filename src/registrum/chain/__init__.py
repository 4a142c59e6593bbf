"""
Chain - on-chain interaction layer for the agent registry.

JSON-RPC endpoint client, registry interface description, contract binding,
fee estimation and the transaction orchestrator.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
