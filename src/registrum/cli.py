"""
Registrum CLI

Command-line interface for the on-chain agent registry.

Commands:
  init        - Create a local signing wallet
  whoami      - Show current wallet address
  id          - Derive an agent id from a name
  info        - Show resolved configuration
  get         - Show an agent's registry entry
  exists      - Check whether an agent has been created
  is-enabled  - Check whether an agent is enabled
  create      - Register a new agent
  update      - Replace an agent's reference and chains
  enable      - Enable an agent
  disable     - Disable an agent
"""

from __future__ import annotations

import logging
import sys

import click

from .config import REGISTRUM_ENV, ConfigError, RegistryConfig
from .utils import keccak256
from .wallet import generate_eoa, get_signer, load_private_key, save_private_key

VERSION = "0.1.0"


@click.group()
@click.version_option(version=VERSION, prog_name="registrum")
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level")
def cli(verbose: bool) -> None:
    """Registrum - create and manage agents in the on-chain registry."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


from .commands.query import agent_exists, get_agent, is_enabled
from .commands.write import create_agent, disable_agent, enable_agent, update_agent

cli.add_command(get_agent)
cli.add_command(agent_exists)
cli.add_command(is_enabled)
cli.add_command(create_agent)
cli.add_command(update_agent)
cli.add_command(enable_agent)
cli.add_command(disable_agent)


# ============ Identity ============


@cli.command()
def init() -> None:
    """Create a signing wallet in ~/.registrum/.env if none exists."""
    try:
        address = get_signer(load_private_key()).address
        click.echo(f"Wallet already configured: {address}")
        return
    except ValueError:
        pass

    private_key, address = generate_eoa()
    path = save_private_key(private_key)
    click.secho("Wallet created", fg="green")
    click.echo(f"  Address: {address}")
    click.echo(f"  Key file: {path}")


@cli.command()
def whoami() -> None:
    """Show current wallet address."""
    try:
        address = get_signer(load_private_key()).address
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(1)
    click.echo(address)


@cli.command("id")
@click.argument("name")
def agent_id(name: str) -> None:
    """Derive an agent id as keccak256(NAME)."""
    click.echo(keccak256(name))


@cli.command()
def info() -> None:
    """Show resolved configuration."""
    try:
        config = RegistryConfig.from_env()
    except ConfigError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(1)

    timeout = config.confirmation_timeout
    click.echo(f"Registrum v{VERSION}")
    click.echo(f"  RPC URL:              {config.rpc_url}")
    click.echo(f"  Registry:             {config.registry_address}")
    click.echo(f"  Chain ID:             {config.chain_id if config.chain_id is not None else '(from endpoint)'}")
    click.echo(f"  Confirmation timeout: {f'{timeout}s' if timeout else 'none'}")
    click.echo(f"  Poll interval:        {config.poll_interval}s")
    click.echo(f"  Env file:             {REGISTRUM_ENV}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
