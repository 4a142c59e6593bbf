"""
Write commands - create, update, enable and disable an agent.

Each command signs with the local key, pays gas, and blocks until the
transaction is mined. Nothing is retried: on failure, re-run the command.
"""

from __future__ import annotations

from typing import Callable, Optional

import click

from ..chain.fees import EstimationError
from ..chain.tx import ConfirmationError, SubmissionError
from ._session import fail, load_signer, open_registry, rpc_url_option


def _run_write(action: str, send: Callable[[], str]) -> None:
    try:
        tx_hash = send()
    except EstimationError as exc:
        if exc.reverted:
            fail(f"{action} would revert on-chain, nothing was sent: {exc.cause}")
        fail(f"{action} could not be estimated, nothing was sent: {exc}")
    except SubmissionError as exc:
        fail(f"{action} was not submitted: {exc}")
    except ConfirmationError as exc:
        if exc.tx_hash:
            click.echo(f"  TX: {exc.tx_hash}", err=True)
        fail(f"{action} was not confirmed: {exc}")
    except ValueError as exc:
        fail(str(exc))

    click.secho(f"SUCCESS: {action} confirmed", fg="green")
    click.echo(f"  TX: {tx_hash}")


reference_option = click.option(
    "--reference", required=True, help="Metadata reference (e.g. ipfs://...)"
)
chain_id_option = click.option(
    "--chain-id",
    "chain_ids",
    required=True,
    multiple=True,
    type=int,
    help="Chain the agent runs on (repeatable)",
)


@click.command("create")
@click.argument("agent_id")
@reference_option
@chain_id_option
@rpc_url_option
def create_agent(
    agent_id: str, reference: str, chain_ids: tuple[int, ...], rpc_url: Optional[str]
) -> None:
    """Register AGENT_ID, owned by your address."""
    registry = open_registry(rpc_url)
    signer = load_signer()

    click.echo(f"  Owner: {signer.address}")
    click.echo(f"  Agent: {agent_id}")
    click.echo(f"  Reference: {reference}")
    click.echo(f"  Chains: {', '.join(str(c) for c in chain_ids)}")
    click.echo("")

    _run_write(
        "createAgent",
        lambda: registry.create_agent(signer, agent_id, reference, list(chain_ids)),
    )


@click.command("update")
@click.argument("agent_id")
@reference_option
@chain_id_option
@rpc_url_option
def update_agent(
    agent_id: str, reference: str, chain_ids: tuple[int, ...], rpc_url: Optional[str]
) -> None:
    """Replace the reference and chains of AGENT_ID."""
    registry = open_registry(rpc_url)
    signer = load_signer()

    click.echo(f"  Agent: {agent_id}")
    click.echo(f"  Reference: {reference}")
    click.echo("")

    _run_write(
        "updateAgent",
        lambda: registry.update_agent(signer, agent_id, reference, list(chain_ids)),
    )


@click.command("enable")
@click.argument("agent_id")
@rpc_url_option
def enable_agent(agent_id: str, rpc_url: Optional[str]) -> None:
    """Enable AGENT_ID with owner permission."""
    registry = open_registry(rpc_url)
    signer = load_signer()
    _run_write("enableAgent", lambda: registry.enable_agent(signer, agent_id))


@click.command("disable")
@click.argument("agent_id")
@rpc_url_option
def disable_agent(agent_id: str, rpc_url: Optional[str]) -> None:
    """Disable AGENT_ID with owner permission."""
    registry = open_registry(rpc_url)
    signer = load_signer()
    _run_write("disableAgent", lambda: registry.disable_agent(signer, agent_id))
