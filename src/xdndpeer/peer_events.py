#!/usr/bin/env python3
"""X11 event routing for a peer.

This module turns raw X events on the peer window into square movements
and protocol handler calls:
- ButtonPress / MotionNotify / ButtonRelease drag the square, and drive
  the source handlers once the pointer leaves the window
- EnterNotify / LeaveNotify track whether the drag is still inside
- KeyRelease of "a" toggles the square colour
- ClientMessage, SelectionRequest and SelectionNotify feed the protocol
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib import X, XK

from xdndpeer.dispatch import handle_client_message
from xdndpeer.peer_window import draw_square
from xdndpeer.source_handlers import (
    abandon_exchange,
    handle_button_release,
    handle_drag_motion,
    handle_selection_request,
)
from xdndpeer.target_handlers import handle_selection_notify

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event

    from xdndpeer.peer_state import PeerState

logger = logging.getLogger(__name__)


def handle_x_event(state: PeerState, event: Event) -> None:
    """Handle one X event delivered to the peer.

    Args:
        state: The peer state.
        event: The X event.
    """
    handler = _HANDLERS.get(event.type)
    if handler is None:
        logger.debug("Unhandled X11 event type=%s class=%s", event.type, type(event).__name__)
        return
    handler(state, event)


def process_pending_events(display: Display) -> list[Event]:
    """Collect the events already queued without blocking.

    Args:
        display: The X11 display connection.

    Returns:
        The pending events in arrival order.
    """
    events: list[Event] = []
    while display.pending_events() > 0:
        events.append(display.next_event())
    return events


def _on_button_press(state: PeerState, event: Event) -> None:
    square = state.square
    if square.visible and square.contains(event.event_x, event.event_y):
        square.grab(event.event_x, event.event_y)
        state.pointer_in_window = True
        draw_square(state)


def _on_motion(state: PeerState, event: Event) -> None:
    square = state.square
    if square.selected:
        square.drag_to(event.event_x, event.event_y)
        if not state.pointer_in_window:
            handle_drag_motion(state, event.root_x, event.root_y, event.time)
    draw_square(state)


def _on_button_release(state: PeerState, event: Event) -> None:
    handle_button_release(state)
    if state.square.selected:
        state.square.release()
        draw_square(state)


def _on_key_release(state: PeerState, event: Event) -> None:
    if not state.square.visible:
        return
    keysym = state.display.keycode_to_keysym(event.detail, 0)
    if keysym == XK.XK_a:
        state.square.toggle_colour()
        draw_square(state)


def _on_expose(state: PeerState, event: Event) -> None:
    draw_square(state)


def _on_enter(state: PeerState, event: Event) -> None:
    if state.square.selected:
        state.pointer_in_window = True
        if state.session.is_source:
            abandon_exchange(state, "pointer returned to our window")


def _on_leave(state: PeerState, event: Event) -> None:
    if state.square.selected:
        state.pointer_in_window = False


def _on_client_message(state: PeerState, event: Event) -> None:
    handle_client_message(state, event)


def _on_selection_request(state: PeerState, event: Event) -> None:
    handle_selection_request(state, event)


def _on_selection_notify(state: PeerState, event: Event) -> None:
    handle_selection_notify(state, event)


_HANDLERS = {
    X.ButtonPress: _on_button_press,
    X.MotionNotify: _on_motion,
    X.ButtonRelease: _on_button_release,
    X.KeyRelease: _on_key_release,
    X.Expose: _on_expose,
    X.EnterNotify: _on_enter,
    X.LeaveNotify: _on_leave,
    X.ClientMessage: _on_client_message,
    X.SelectionRequest: _on_selection_request,
    X.SelectionNotify: _on_selection_notify,
}
