#!/usr/bin/env python3
"""Peer process entry point.

A peer opens the X display, creates its XDND-aware window and runs the
event loop until the window manager closes it. The display connection is
retried with tenacity exponential backoff so a peer started together with
its X server (for example under Xvfb) does not fail on the first attempt.

Usage:
    xdndpeer --name Phil --slot 0 --visible
"""

from __future__ import annotations

import logging
import os
from contextlib import suppress
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential
from Xlib.error import ConnectionClosedError, DisplayConnectionError, DisplayError

from xdndpeer.atoms import URI_LIST_TYPE_NAME, intern_atoms, resolve_type_names
from xdndpeer.channel import XdndChannel
from xdndpeer.peer_constants import (
    DEFAULT_WATCHDOG_TIMEOUT,
    DISPLAY_ATTEMPTS,
    DISPLAY_INITIAL_WAIT,
    DISPLAY_MAX_WAIT,
)
from xdndpeer.peer_loop import run_peer_loop
from xdndpeer.peer_state import PeerState
from xdndpeer.peer_window import create_peer_window

if TYPE_CHECKING:
    from Xlib.display import Display

logger = logging.getLogger(__name__)


class DisplayUnavailableError(Exception):
    """
    Exception raised when no X11 display can be opened.

    Raised when DISPLAY is unset, names an invalid display, or the server
    keeps refusing connections after every retry.
    """

    pass


@dataclass(frozen=True)
class PeerOptions:
    """Options for one peer process.

    Attributes:
        name: Window title and log prefix.
        slot: Horizontal slot of the window.
        visible: True if the peer starts holding the square.
        offered_types: Format names advertised when acting as source.
        watchdog: Inactivity timeout in seconds, 0 to disable.
    """

    name: str
    slot: int = 0
    visible: bool = False
    offered_types: tuple[str, ...] = (URI_LIST_TYPE_NAME,)
    watchdog: float = DEFAULT_WATCHDOG_TIMEOUT


@retry(
    wait=wait_exponential(min=DISPLAY_INITIAL_WAIT, max=DISPLAY_MAX_WAIT),
    retry=retry_if_exception_type(DisplayConnectionError),
    stop=stop_after_attempt(DISPLAY_ATTEMPTS),
    reraise=True,
)
def connect_display(display_name: str) -> Display:
    """Connect to the named X display, retrying refused connections."""
    from Xlib.display import Display as XDisplay

    logger.debug("Connecting to X display %s", display_name)
    return XDisplay(display_name)


def open_display() -> Display:
    """Open the display named by the DISPLAY environment variable.

    Returns:
        Display object for X11 operations.

    Raises:
        DisplayUnavailableError: If DISPLAY is unset or the connection
            fails after all retries.
    """
    display_name = os.environ.get("DISPLAY")
    if not display_name:
        raise DisplayUnavailableError("DISPLAY environment variable is not set")
    try:
        return connect_display(display_name)
    except (DisplayError, ConnectionClosedError) as e:
        raise DisplayUnavailableError(
            f"Failed to connect to X11 display {display_name}: {e}"
        ) from e


async def run_peer(options: PeerOptions) -> None:
    """Run one peer until its window is closed.

    Args:
        options: The peer options.

    Raises:
        DisplayUnavailableError: If the display cannot be opened.
        ChannelError: If the X11 connection fails while running.
    """
    display = open_display()
    atoms = intern_atoms(display)
    window, gc = create_peer_window(display, atoms, options.name, options.slot)

    state = PeerState(
        name=options.name,
        display=display,
        window=window,
        channel=XdndChannel(display, window, atoms),
        atoms=atoms,
        offered_types=resolve_type_names(display, options.offered_types),
        gc=gc,
    )
    state.square.visible = options.visible
    logger.info("window 0x%x ready in slot %d", window.id, options.slot)

    try:
        await run_peer_loop(state, options.watchdog)
    finally:
        with suppress(ConnectionClosedError):
            gc.free()
            window.destroy()
            display.close()
