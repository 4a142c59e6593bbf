from __future__ import annotations

import sys
from dataclasses import replace
from typing import NoReturn, Optional

import click
from eth_account.signers.local import LocalAccount

from ..chain.abi import AbiError
from ..chain.rpc import EndpointError
from ..config import ConfigError, RegistryConfig
from ..registry import AgentRegistry
from ..wallet import get_signer, load_private_key

rpc_url_option = click.option(
    "--rpc-url",
    default=None,
    help="JSON-RPC endpoint URL, overriding JSON_RPC_HOST and REGISTRY_RPC_URL",
)


def fail(message: str) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red", err=True)
    sys.exit(1)


def open_registry(rpc_url: Optional[str]) -> AgentRegistry:
    """Build a registry client or exit with a readable error."""
    try:
        config = RegistryConfig.from_env()
        if rpc_url:
            if not rpc_url.startswith("http"):
                raise ConfigError("--rpc-url must begin with http(s)")
            config = replace(config, rpc_url=rpc_url)
        return AgentRegistry.connect(config)
    except (ConfigError, AbiError, EndpointError) as exc:
        fail(str(exc))


def load_signer() -> LocalAccount:
    try:
        return get_signer(load_private_key())
    except ValueError as exc:
        fail(str(exc))
