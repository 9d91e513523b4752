#!/usr/bin/env python3
"""Demo pair of peers.

Starts two peer processes side by side, the first holding a red square,
so the square can be dragged from one window to the other and back.
Each process opens its own display connection and shares nothing with
the other except the X server.
"""

from __future__ import annotations

import asyncio
import logging
import multiprocessing
import sys

from xdndpeer.channel import ChannelError
from xdndpeer.main_logging import configure_logging
from xdndpeer.peer import DisplayUnavailableError, PeerOptions, run_peer
from xdndpeer.peer_constants import PAIR_NAMES

logger = logging.getLogger(__name__)


def pair_options(
    offered_types: tuple[str, ...], watchdog: float
) -> list[PeerOptions]:
    """Return the options for both demo peers; only slot 0 starts visible."""
    return [
        PeerOptions(
            name=name,
            slot=slot,
            visible=slot == 0,
            offered_types=offered_types,
            watchdog=watchdog,
        )
        for slot, name in enumerate(PAIR_NAMES)
    ]


def peer_process_main(options: PeerOptions, verbose: bool) -> None:
    """Body of one peer process; exits 1 on display or channel failure."""
    configure_logging(verbose, options.name)
    try:
        asyncio.run(run_peer(options))
    except (DisplayUnavailableError, ChannelError) as e:
        print(f"{options.name}: Error: {e}", file=sys.stderr)
        sys.exit(1)


def run_pair(offered_types: tuple[str, ...], watchdog: float, verbose: bool) -> int:
    """Run both demo peers and wait for them to exit.

    Args:
        offered_types: Format names advertised when acting as source.
        watchdog: Inactivity timeout in seconds, 0 to disable.
        verbose: Enable DEBUG logging in both peers.

    Returns:
        0 if both peers exited cleanly, otherwise the first non-zero code.
    """
    processes = [
        multiprocessing.Process(
            target=peer_process_main, args=(options, verbose), name=options.name,
        )
        for options in pair_options(offered_types, watchdog)
    ]
    for process in processes:
        process.start()
    exit_code = 0
    for process in processes:
        process.join()
        logger.debug("%s exited with code %s", process.name, process.exitcode)
        if process.exitcode and not exit_code:
            exit_code = process.exitcode
    return exit_code
