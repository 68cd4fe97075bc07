"""Click CLI: networks, transport, contracts, decode, encode."""

from __future__ import annotations

import logging

import click

from precog.config import get_settings
from precog.errors import PrecisionLossError, UnknownChainError


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Precog - chain data access for prediction markets."""
    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
def networks():
    """List the target network set (first entry is the default chain)."""
    from precog.chain.registry import CHAINS

    for i, chain_id in enumerate(get_settings().target_network_set):
        chain = CHAINS.get(chain_id)
        name = chain.name if chain else "unknown"
        marker = "*" if i == 0 else " "
        click.echo(f"{marker} {chain_id:<10} {name}")


@cli.command()
@click.option("--chain", default=None, help="Chain name or ID (defaults to the first target network)")
def transport(chain: str | None):
    """Show the RPC transport and polling policy for a chain."""
    from precog.chain.registry import resolve_chain
    from precog.chain.transport import TransportResolver

    try:
        chain_id = resolve_chain(chain).chain_id if chain else get_settings().default_chain_id
        config = TransportResolver.from_settings().build_client_config(chain_id)
    except UnknownChainError as e:
        raise click.ClickException(str(e)) from e

    polling = f"{config.polling_interval_ms} ms" if config.polling_enabled else "disabled"
    click.echo(f"chain_id:  {config.chain_id}")
    click.echo(f"transport: {config.transport_url}")
    click.echo(f"polling:   {polling}")
    for url in config.fallback_urls:
        click.echo(f"  fallback: {url}")


@cli.command()
@click.option("--chain", default=None, help="Chain name or ID (defaults to the first target network)")
@click.option("--all", "show_all", is_flag=True, help="Include deprecated contract versions")
def contracts(chain: str | None, show_all: bool):
    """List deployed contracts for a chain."""
    from precog.chain.registry import resolve_chain
    from precog.contracts.registry import get_registry

    try:
        chain_id = resolve_chain(chain).chain_id if chain else get_settings().default_chain_id
    except UnknownChainError as e:
        raise click.ClickException(str(e)) from e

    registry = get_registry()
    found = registry.get_all_contracts(chain_id) if show_all else registry.get_latest_contracts(chain_id)
    if not found:
        click.echo(f"No contracts deployed on chain_id={chain_id}.")
        return
    for name, descriptor in found.items():
        click.echo(f"{name:<24} {descriptor.address}  ({len(descriptor.abi)} abi entries)")


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("raw")
def decode(raw: str):
    """Decode a 64.64 fixed-point integer (decimal or 0x hex)."""
    from precog.codec import fixed_point

    try:
        value = int(raw, 0)
    except ValueError as e:
        raise click.BadParameter(f"not an integer: {raw}") from e
    click.echo(repr(fixed_point.decode(value)))


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("value")
@click.option("--lenient", is_flag=True, help="Truncate silently instead of rejecting lossy input")
def encode(value: str, lenient: bool):
    """Encode a number as 64.64 fixed point."""
    from precog.codec import fixed_point

    try:
        number = int(value)
    except ValueError:
        try:
            number = float(value)
        except ValueError as e:
            raise click.BadParameter(f"not a number: {value}") from e

    try:
        click.echo(str(fixed_point.encode(number, strict=not lenient)))
    except PrecisionLossError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()
