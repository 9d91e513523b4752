#!/usr/bin/env python3
"""Peer event loop.

This module provides run_peer_loop, which integrates the X11 display file
descriptor into asyncio and hands every X event to the peer's handlers
until the window is closed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from Xlib.error import ConnectionClosedError

from xdndpeer.channel import ChannelError
from xdndpeer.peer_events import handle_x_event, process_pending_events
from xdndpeer.source_handlers import abandon_exchange
from xdndpeer.watchdog import SessionWatchdog

if TYPE_CHECKING:
    from xdndpeer.peer_state import PeerState

logger = logging.getLogger(__name__)


async def run_peer_loop(state: PeerState, watchdog_timeout: float = 0.0) -> None:
    """Run the peer until the window manager closes its window.

    Registers the display file descriptor with add_reader() and drains
    pending events whenever it becomes readable.

    Args:
        state: The peer state.
        watchdog_timeout: Seconds of inactivity after which an exchange is
            abandoned; 0 disables the watchdog.

    Raises:
        ChannelError: If the X11 connection fails.
    """
    loop = asyncio.get_running_loop()
    x11_event = asyncio.Event()
    expired = False

    def on_x11_readable() -> None:
        """Signal that X11 events are ready to be processed."""
        x11_event.set()

    def on_watchdog_expired() -> None:
        """Defer the abandonment to the loop so channel errors propagate."""
        nonlocal expired
        expired = True
        x11_event.set()

    if watchdog_timeout > 0:
        state.watchdog = SessionWatchdog(loop, watchdog_timeout, on_watchdog_expired)

    display_fd = state.display.fileno()
    loop.add_reader(display_fd, on_x11_readable)
    try:
        # Events may already be queued before the reader fires
        x11_event.set()
        while state.running:
            await x11_event.wait()
            x11_event.clear()
            if expired:
                expired = False
                expire_session(state)
            process_x11_events(state)
    finally:
        loop.remove_reader(display_fd)
        if state.watchdog is not None:
            state.watchdog.cancel()


def process_x11_events(state: PeerState) -> None:
    """Handle every queued X event, stopping early once the peer is closed.

    Handlers talk to the display directly (drawing, hit testing), so a
    connection lost in the middle of one is reported the same way as one
    lost while reading the queue.

    Raises:
        ChannelError: If the X11 connection is closed.
    """
    try:
        for event in process_pending_events(state.display):
            handle_x_event(state, event)
            if not state.running:
                break
    except ConnectionClosedError as e:
        raise ChannelError(f"X11 connection closed: {e}") from e


def expire_session(state: PeerState) -> None:
    """Abandon a stale exchange when the watchdog fires."""
    if not state.session.active:
        return
    if state.session.is_source:
        abandon_exchange(state, "watchdog expired")
    else:
        state.reset_session()
