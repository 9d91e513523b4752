"""CLI handling for xdndpeer.

This module provides the command-line interface for xdndpeer, handling
argument parsing via click, logging configuration, and dispatching to a
single peer or to the demo pair based on user-specified options.

Usage:
    xdndpeer --name NAME [--slot N] [--visible] [--offer TYPE]... [--watchdog SECONDS] [--verbose]
    xdndpeer --pair [--offer TYPE]... [--watchdog SECONDS] [--verbose]
"""

import click
import sys

from xdndpeer.atoms import ACCEPTED_TYPE_NAMES, URI_LIST_TYPE_NAME
from xdndpeer.main_logging import configure_logging
from xdndpeer.peer_constants import DEFAULT_WATCHDOG_TIMEOUT


@click.command()
@click.option(
    "--name",
    help="Run a single peer with this window title",
)
@click.option(
    "--pair",
    is_flag=True,
    help="Run the two demo peers side by side",
)
@click.option(
    "--slot",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Horizontal window slot of a single peer",
)
@click.option(
    "--visible",
    is_flag=True,
    help="Start a single peer holding the square",
)
@click.option(
    "--offer",
    "offer",
    multiple=True,
    type=click.Choice(ACCEPTED_TYPE_NAMES),
    help="Type advertised when dragging out (repeatable, default text/uri-list)",
)
@click.option(
    "--watchdog",
    type=click.FloatRange(min=0),
    default=DEFAULT_WATCHDOG_TIMEOUT,
    show_default=True,
    help="Abandon an exchange after this many idle seconds (0 disables)",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
def main(
    name: str | None,
    pair: bool,
    slot: int,
    visible: bool,
    offer: tuple[str, ...],
    watchdog: float,
    verbose: bool,
) -> None:
    """Drag a square between X11 windows using the XDND protocol."""
    if pair and name:
        raise click.UsageError("Options --name and --pair are mutually exclusive")
    if not pair and not name:
        raise click.UsageError("Either --name or --pair must be specified")
    if pair and (slot or visible):
        raise click.UsageError("--slot and --visible apply to a single peer, not --pair")

    offered_types = offer or (URI_LIST_TYPE_NAME,)
    if pair:
        _run_pair(offered_types, watchdog, verbose)
    else:
        configure_logging(verbose, name)
        _run_single(name, slot, visible, offered_types, watchdog)


def _run_single(
    name: str, slot: int, visible: bool, offered_types: tuple[str, ...], watchdog: float
) -> None:
    """Run one peer in this process.

    Args:
        name: Window title and log prefix.
        slot: Horizontal window slot.
        visible: True if the peer starts holding the square.
        offered_types: Format names advertised when acting as source.
        watchdog: Inactivity timeout in seconds, 0 to disable.
    """
    import asyncio
    from xdndpeer.channel import ChannelError
    from xdndpeer.peer import DisplayUnavailableError, PeerOptions, run_peer

    options = PeerOptions(
        name=name,
        slot=slot,
        visible=visible,
        offered_types=offered_types,
        watchdog=watchdog,
    )
    try:
        asyncio.run(run_peer(options))
    except (DisplayUnavailableError, ChannelError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _run_pair(offered_types: tuple[str, ...], watchdog: float, verbose: bool) -> None:
    """Run the demo pair and exit with the first failing peer's code.

    Args:
        offered_types: Format names advertised when acting as source.
        watchdog: Inactivity timeout in seconds, 0 to disable.
        verbose: Enable DEBUG logging in both peers.
    """
    from xdndpeer.pair import run_pair

    exit_code = run_pair(offered_types, watchdog, verbose)
    if exit_code:
        sys.exit(exit_code)
