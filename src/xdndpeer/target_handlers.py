#!/usr/bin/env python3
"""Target-side XDND handlers.

This module handles the peer that a square is being dragged onto:
- handle_enter: take the target role and choose a payload type
- handle_position: track the pointer and send the single XdndStatus
- handle_leave: forget the exchange
- handle_drop: request the payload through XdndSelection
- handle_selection_notify: apply the payload and send XdndFinished

The target answers only the first XdndPosition of an exchange. Later
positions update the tracked pointer and action but never produce a
second XdndStatus; the source stops listening after the first one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib import X

from xdndpeer.messages import Finished, Status
from xdndpeer.negotiation import negotiate_type
from xdndpeer.outbound import send_to_peer
from xdndpeer.payload import PayloadError, deserialize_state, unframe_payload
from xdndpeer.peer_constants import XDND_PROTOCOL_VERSION
from xdndpeer.peer_window import draw_square
from xdndpeer.session import Phase, Role

if TYPE_CHECKING:
    from Xlib.protocol.event import SelectionNotify

    from xdndpeer.messages import Drop, Enter, Leave, Position
    from xdndpeer.peer_state import PeerState

logger = logging.getLogger(__name__)


def handle_enter(state: PeerState, message: Enter) -> None:
    """Start an exchange as target and negotiate the payload type.

    A failed negotiation keeps the session open with no proposed type; the
    first XdndPosition is then refused so the source can abandon. An Enter
    announcing a protocol version newer than ours is ignored, and so is the
    rest of that exchange.
    """
    if message.version > XDND_PROTOCOL_VERSION:
        logger.warning("Ignoring XdndEnter from 0x%x: unsupported version %d",
            message.sender, message.version)
        return
    state.session.begin(Role.TARGET, message.sender)
    state.session.proposed_type = negotiate_type(
        message, state.atoms.accepted_types, state.channel.fetch_type_list
    )
    if state.session.proposed_type is None:
        logger.warning("No compatible type offered by 0x%x", message.sender)
    else:
        logger.debug("Negotiated type %s with 0x%x (version %d)",
            state.session.proposed_type, message.sender, message.version)
    state.touch()


def handle_position(state: PeerState, message: Position) -> None:
    """Record the pointer and answer the first XdndPosition."""
    session = state.session
    session.pointer_root = (message.root_x, message.root_y)
    session.last_position_timestamp = message.time
    session.proposed_action = message.action
    session.mark("position_received")
    state.touch()

    if session.proposed_type is None:
        send_to_peer(state, session.peer_window, Status(
            sender=state.window.id, accept=False, action=0,
        ))
        logger.info("refused exchange with 0x%x: no compatible type", session.peer_window)
        state.reset_session()
        return

    if not session.status_sent:
        session.mark("status_sent")
        send_to_peer(state, session.peer_window, Status(
            sender=state.window.id, accept=True, action=message.action,
        ))


def handle_leave(state: PeerState, message: Leave) -> None:
    """Forget the exchange the source has abandoned."""
    logger.info("exchange with 0x%x abandoned by source", message.sender)
    state.reset_session()


def handle_drop(state: PeerState, message: Drop) -> None:
    """Request the payload after XdndDrop.

    A drop without any prior XdndPosition, or a repeated drop, is a
    protocol violation and is ignored.
    """
    session = state.session
    if not session.position_received:
        logger.warning("Ignoring XdndDrop from 0x%x: no XdndPosition received",
            message.sender)
        return
    if session.drop_received:
        logger.warning("Ignoring repeated XdndDrop from 0x%x", message.sender)
        return
    session.mark("drop_received")
    session.drop_timestamp = message.time
    state.channel.request_payload(session.proposed_type, message.time)
    state.touch()


def handle_selection_notify(state: PeerState, event: SelectionNotify) -> None:
    """Apply the payload delivered for our request and finish the exchange.

    The square takes the received colour, becomes visible and is centred
    on the last pointer location, clamped to the window. XdndFinished is
    sent with success cleared if the payload was refused or unreadable.
    """
    session = state.session
    if event.selection != state.atoms.selection:
        return
    if not session.is_target or session.phase is not Phase.TARGET_DROPPED:
        logger.warning("Ignoring SelectionNotify in phase %s", session.phase.value)
        return
    if event.property not in (state.atoms.data, X.NONE):
        return

    data = None
    if event.property == state.atoms.data:
        data = state.channel.read_payload()
    if data is None:
        logger.warning("Source 0x%x did not deliver a payload", session.peer_window)
        _finish(state, success=False)
        return

    try:
        colour = deserialize_state(unframe_payload(data))
    except PayloadError as e:
        logger.warning("Discarding payload from 0x%x: %s", session.peer_window, e)
        _finish(state, success=False)
        return

    session.mark("payload_received")
    square = state.square
    square.colour = colour
    square.visible = True
    square.place_centred(*state.channel.root_to_window(*session.pointer_root))
    logger.info("received %s square at (%d, %d)", colour.name.lower(), square.x, square.y)

    _finish(state, success=True)
    draw_square(state)


def _finish(state: PeerState, success: bool) -> None:
    """Send XdndFinished to the source and reset the session."""
    session = state.session
    action = session.proposed_action if success and session.proposed_action else 0
    send_to_peer(state, session.peer_window, Finished(
        sender=state.window.id, success=success, action=action,
    ))
    state.reset_session()
