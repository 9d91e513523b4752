#!/usr/bin/env python3
"""Peer state.

This module provides the PeerState dataclass that groups everything one
peer process needs while handling events: the X11 handles, the channel
used by the protocol handlers, the square, and the current exchange
session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from xdndpeer.session import ExchangeSession
from xdndpeer.square import Square

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window
    from Xlib.xobject.fontable import GC

    from xdndpeer.atoms import XdndAtoms
    from xdndpeer.channel import XdndChannel
    from xdndpeer.watchdog import SessionWatchdog

logger = logging.getLogger(__name__)


@dataclass
class PeerState:
    """State for one XDND peer.

    Attributes:
        name: Peer name, used as window title and in log lines.
        display: The X11 display connection.
        window: The peer's top-level window.
        channel: XDND operations bound to display and window.
        atoms: The interned atom table.
        offered_types: Types advertised when acting as source.
        square: The draggable square.
        session: The current exchange; replaced as a whole on reset.
        gc: Graphics context used to draw the square.
        pointer_in_window: True while a drag is still inside our window.
        running: Cleared when the window manager asks us to close.
        watchdog: Optional inactivity watchdog for stale exchanges.
    """

    name: str
    display: Display
    window: Window
    channel: XdndChannel
    atoms: XdndAtoms
    offered_types: tuple[int, ...] = ()
    square: Square = field(default_factory=Square)
    session: ExchangeSession = field(default_factory=ExchangeSession)
    gc: GC | None = None
    pointer_in_window: bool = False
    running: bool = True
    watchdog: SessionWatchdog | None = None

    def reset_session(self) -> None:
        """Discard the current exchange and return to idle."""
        if self.session.active:
            logger.debug("Resetting %s session with 0x%x",
                self.session.role.value, self.session.peer_window)
        self.session = ExchangeSession()
        if self.watchdog is not None:
            self.watchdog.cancel()

    def touch(self) -> None:
        """Record protocol activity for the watchdog."""
        if self.watchdog is not None and self.session.active:
            self.watchdog.touch()
