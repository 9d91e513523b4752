#!/usr/bin/env python3
"""ClientMessage dispatch.

This module decodes incoming ClientMessage events and routes XDND
messages to the source or target handlers. It enforces the rules that
apply to every message regardless of kind:
- XdndEnter is only accepted while idle
- Any other message is only accepted from the recorded peer window
- A message is only accepted by the role it is addressed to
Violations are logged and the message is dropped without touching the
session.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib.error import XError

from xdndpeer import source_handlers, target_handlers
from xdndpeer.messages import (
    Drop,
    Enter,
    Finished,
    Leave,
    MessageError,
    Position,
    Status,
    decode_message,
    message_name,
)

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.event import ClientMessage

    from xdndpeer.messages import XdndMessage
    from xdndpeer.peer_state import PeerState

logger = logging.getLogger(__name__)

_SOURCE_HANDLERS = {
    Status: source_handlers.handle_status,
    Finished: source_handlers.handle_finished,
}

_TARGET_HANDLERS = {
    Position: target_handlers.handle_position,
    Leave: target_handlers.handle_leave,
    Drop: target_handlers.handle_drop,
}


def handle_client_message(state: PeerState, event: ClientMessage) -> None:
    """Handle a ClientMessage delivered to the peer window.

    WM_DELETE_WINDOW stops the peer; XDND messages are decoded and
    dispatched; anything else is logged at debug level.

    Args:
        state: The peer state.
        event: The ClientMessage event.
    """
    atoms = state.atoms
    fmt, words = event.data
    words = list(words)

    if event.client_type == atoms.wm_protocols:
        if words and words[0] == atoms.wm_delete_window:
            logger.info("close requested by window manager")
            state.running = False
        return

    try:
        message = decode_message(event.client_type, fmt, words, atoms)
    except MessageError as e:
        logger.warning("Ignoring malformed XDND message: %s", e)
        return
    if message is None:
        logger.debug("received %s", describe_client_message(state.display, event))
        return
    dispatch_message(state, message)


def dispatch_message(state: PeerState, message: XdndMessage) -> None:
    """Route a decoded XDND message to its handler.

    Args:
        state: The peer state.
        message: The decoded message.
    """
    name = message_name(message)
    logger.info("received %s from window 0x%x", name, message.sender)
    session = state.session

    if isinstance(message, Enter):
        if session.active:
            logger.warning("Ignoring %s from 0x%x: already in an exchange with 0x%x",
                name, message.sender, session.peer_window)
            return
        target_handlers.handle_enter(state, message)
        return

    if not session.active:
        logger.debug("Ignoring %s from 0x%x: no exchange in progress", name, message.sender)
        return
    if message.sender != session.peer_window:
        logger.warning("Ignoring %s from unexpected window 0x%x (peer is 0x%x)",
            name, message.sender, session.peer_window)
        return

    handlers = _SOURCE_HANDLERS if session.is_source else _TARGET_HANDLERS
    handler = handlers.get(type(message))
    if handler is None:
        logger.warning("Ignoring %s: not valid for the %s role", name, session.role.value)
        return
    handler(state, message)


def describe_client_message(display: Display, event: ClientMessage) -> str:
    """Format a non-XDND ClientMessage for logging.

    Args:
        display: The X11 display connection, used to name the type atom.
        event: The ClientMessage event.

    Returns:
        A one-line description with the type name, word size and data.
    """
    fmt, words = event.data
    try:
        type_name = display.get_atom_name(event.client_type)
    except XError:
        type_name = str(event.client_type)
    kind = {8: "bytes", 16: "shorts", 32: "longs"}.get(fmt, "items")
    values = " ".join(str(w) for w in words)
    return f"ClientMessage {type_name} ({fmt}-bit {kind}): {values}"
