"""
Query commands - read registry state without a signer.
"""

from __future__ import annotations

import json
from typing import Optional

import click

from ..chain.rpc import EndpointError
from ._session import fail, open_registry, rpc_url_option


@click.command("get")
@click.argument("agent_id")
@rpc_url_option
def get_agent(agent_id: str, rpc_url: Optional[str]) -> None:
    """Show the registry entry for AGENT_ID as JSON."""
    registry = open_registry(rpc_url)
    try:
        record = registry.get_agent(agent_id)
    except (EndpointError, ValueError) as exc:
        fail(f"Failed to read agent: {exc}")

    click.echo(json.dumps(record.to_dict(), indent=2))


@click.command("exists")
@click.argument("agent_id")
@rpc_url_option
def agent_exists(agent_id: str, rpc_url: Optional[str]) -> None:
    """Print whether AGENT_ID has been created."""
    registry = open_registry(rpc_url)
    try:
        exists = registry.agent_exists(agent_id)
    except (EndpointError, ValueError) as exc:
        fail(f"Failed to read agent: {exc}")

    click.echo("true" if exists else "false")


@click.command("is-enabled")
@click.argument("agent_id")
@rpc_url_option
def is_enabled(agent_id: str, rpc_url: Optional[str]) -> None:
    """Print whether AGENT_ID is enabled."""
    registry = open_registry(rpc_url)
    try:
        enabled = registry.is_enabled(agent_id)
    except (EndpointError, ValueError) as exc:
        fail(f"Failed to read agent: {exc}")

    click.echo("true" if enabled else "false")
