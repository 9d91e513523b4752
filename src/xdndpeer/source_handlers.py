#!/usr/bin/env python3
"""Source-side XDND handlers.

This module drives the exchange from the peer that is dragging its
square out of its own window:
- handle_drag_motion: open, retarget and track the exchange
- handle_status: react to the target's accept/refuse reply
- handle_button_release: drop or abandon
- handle_selection_request: hand the square state to the target
- handle_finished: hide the square once the target has it
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from xdndpeer.messages import INLINE_TYPE_SLOTS, Drop, Enter, Leave, Position
from xdndpeer.outbound import send_to_peer
from xdndpeer.payload import frame_payload, serialize_state
from xdndpeer.peer_constants import XDND_PROTOCOL_VERSION
from xdndpeer.peer_window import draw_square
from xdndpeer.session import Phase, Role

if TYPE_CHECKING:
    from Xlib.protocol.event import SelectionRequest

    from xdndpeer.messages import Finished, Status
    from xdndpeer.peer_state import PeerState

logger = logging.getLogger(__name__)

# Phases in which the source may still abandon without dropping.
_PRE_DROP_PHASES = (Phase.SOURCE_NEGOTIATING, Phase.SOURCE_AWAITING_ACK)

# Phases in which the target may request the payload.
_PAYLOAD_PHASES = (Phase.SOURCE_DROPPED, Phase.SOURCE_DONE)


def abandon_exchange(state: PeerState, reason: str) -> None:
    """Send XdndLeave to the current target and reset the session."""
    logger.info("abandoning exchange with 0x%x: %s", state.session.peer_window, reason)
    send_to_peer(state, state.session.peer_window, Leave(sender=state.window.id))
    state.reset_session()


def handle_drag_motion(state: PeerState, root_x: int, root_y: int, time: int) -> None:
    """Handle a pointer-motion sample while the square is dragged outside.

    Leaves the current target if the pointer is now over another window,
    opens an exchange with an XDND-aware window when idle, and sends
    XdndPosition until the target has answered.

    Args:
        state: The peer state.
        root_x: Pointer x in root coordinates.
        root_y: Pointer y in root coordinates.
        time: X server timestamp of the motion event.
    """
    if state.session.is_target:
        logger.debug("Ignoring drag motion while acting as target")
        return

    over = state.channel.window_at(root_x, root_y)

    if state.session.active and over != state.session.peer_window:
        abandon_exchange(state, f"pointer moved to window 0x{over:x}")

    if not state.session.active:
        if over == state.window.id:
            return
        version = state.channel.xdnd_version(over)
        if version == 0:
            return
        _open_exchange(state, over, version, time)

    if not state.session.status_received:
        send_to_peer(state, state.session.peer_window, Position(
            sender=state.window.id,
            root_x=root_x,
            root_y=root_y,
            time=time,
            action=state.atoms.action_copy,
        ))
        state.session.last_position_timestamp = time
        state.session.mark("position_sent")


def _open_exchange(state: PeerState, target: int, version: int, time: int) -> None:
    """Claim XdndSelection and send XdndEnter to target."""
    state.channel.claim_selection(time)

    offered = state.offered_types
    more_types = len(offered) > INLINE_TYPE_SLOTS
    if more_types:
        state.channel.publish_type_list(offered)

    send_to_peer(state, target, Enter(
        sender=state.window.id,
        version=min(version, XDND_PROTOCOL_VERSION),
        types=() if more_types else offered,
        more_types=more_types,
    ))
    state.session.begin(Role.SOURCE, target)


def handle_status(state: PeerState, message: Status) -> None:
    """Handle XdndStatus from the target.

    Only the first Status of an exchange counts. A refusal abandons the
    exchange; an acceptance records the action and enables the drop.
    """
    session = state.session
    if session.status_received:
        logger.debug("Ignoring repeated XdndStatus from 0x%x", message.sender)
        return
    session.mark("status_received")
    if not message.accept:
        abandon_exchange(state, "target refused the drop")
        return
    session.proposed_action = message.action
    logger.debug("Target 0x%x accepted action %s", message.sender, message.action)


def handle_button_release(state: PeerState) -> None:
    """Drop on an accepting target, or abandon an unanswered exchange."""
    session = state.session
    if not session.is_source:
        return
    phase = session.phase
    if phase is Phase.SOURCE_ACKED:
        send_to_peer(state, session.peer_window, Drop(
            sender=state.window.id,
            time=session.last_position_timestamp,
        ))
        session.mark("drop_sent")
    elif phase in _PRE_DROP_PHASES:
        abandon_exchange(state, "button released before the target accepted")


def handle_selection_request(state: PeerState, event: SelectionRequest) -> None:
    """Answer the target's request for the square state.

    The request is refused (SelectionNotify with property None) unless it
    comes from the current target after the drop, for XdndSelection, and
    asks for one of the accepted types.
    """
    session = state.session
    atoms = state.atoms

    if event.selection != atoms.selection:
        logger.warning("Refusing SelectionRequest for selection %s", event.selection)
        state.channel.answer_selection_request(event, None)
        return
    if not session.is_source or session.phase not in _PAYLOAD_PHASES:
        logger.warning("Refusing SelectionRequest in phase %s", session.phase.value)
        state.channel.answer_selection_request(event, None)
        return
    if event.requestor.id != session.peer_window:
        logger.warning("Refusing SelectionRequest from unexpected window 0x%x",
            event.requestor.id)
        state.channel.answer_selection_request(event, None)
        return
    if event.target not in atoms.accepted_types:
        logger.warning("Refusing SelectionRequest for unsupported type %s", event.target)
        state.channel.answer_selection_request(event, None)
        return

    data = frame_payload(
        serialize_state(state.square.colour), uri=event.target == atoms.uri_list
    )
    logger.info("sending %d byte payload to window 0x%x", len(data), event.requestor.id)
    state.channel.answer_selection_request(event, data)
    session.mark("payload_sent")
    state.touch()


def handle_finished(state: PeerState, message: Finished) -> None:
    """Handle XdndFinished: the exchange is over."""
    state.reset_session()
    if message.success:
        state.square.visible = False
        state.square.selected = False
    else:
        logger.warning("Target 0x%x reported an unsuccessful drop", message.sender)
    draw_square(state)
