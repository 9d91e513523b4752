"""Peer window creation and drawing.

This module creates the visible window each peer uses as drag source and
drop target, marks it XDND aware, and draws the square. It handles:
- Creating and mapping the window with the events the peer listens to
- Advertising XdndAware and WM_DELETE_WINDOW
- Clearing the window and filling the square in its current colour
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from Xlib import X, Xatom

from xdndpeer.peer_constants import (
    BLUE_PIXEL,
    GREEN_PIXEL,
    RED_PIXEL,
    SLOT_WIDTH,
    WINDOW_BORDER,
    WINDOW_SIZE,
    XDND_PROTOCOL_VERSION,
)
from xdndpeer.square import SquareColour

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window
    from Xlib.xobject.fontable import GC

    from xdndpeer.atoms import XdndAtoms
    from xdndpeer.peer_state import PeerState

# Events each peer window listens to.
EVENT_MASK: int = (
    X.PointerMotionMask | X.KeyPressMask | X.KeyReleaseMask
    | X.ButtonPressMask | X.ButtonReleaseMask | X.ExposureMask
    | X.EnterWindowMask | X.LeaveWindowMask
)


def create_peer_window(
    display: Display, atoms: XdndAtoms, name: str, slot: int
) -> tuple[Window, GC]:
    """Create, title and map a peer window.

    Args:
        display: The X11 display connection.
        atoms: The interned atom table.
        name: Window title.
        slot: Horizontal slot; the window is placed at x = slot * SLOT_WIDTH.

    Returns:
        Tuple of (window, graphics context for drawing the square).
    """
    screen = display.screen()
    window = screen.root.create_window(
        slot * SLOT_WIDTH, 0, WINDOW_SIZE, WINDOW_SIZE, WINDOW_BORDER,
        screen.root_depth,
        background_pixel=screen.white_pixel,
        border_pixel=RED_PIXEL,
        event_mask=EVENT_MASK,
    )
    window.set_wm_name(name)
    window.change_property(atoms.aware, Xatom.ATOM, 32, [XDND_PROTOCOL_VERSION])
    window.set_wm_protocols([atoms.wm_delete_window])
    window.map()

    gc = window.create_gc(foreground=RED_PIXEL, background=screen.white_pixel)
    display.flush()
    return window, gc


def colour_pixel(colour: SquareColour) -> int:
    """Return the pixel value used to fill a square of colour."""
    return BLUE_PIXEL if colour == SquareColour.BLUE else RED_PIXEL


def draw_square(state: PeerState) -> None:
    """Clear the window and draw the square if this peer holds it.

    A selected square is drawn green; otherwise it uses its own colour.
    Does nothing until the graphics context exists.
    """
    if state.gc is None:
        return
    square = state.square
    state.window.clear_area()
    if square.visible:
        pixel = GREEN_PIXEL if square.selected else colour_pixel(square.colour)
        state.gc.change(foreground=pixel)
        state.window.fill_rectangle(state.gc, square.x, square.y, square.size, square.size)
    state.display.flush()
