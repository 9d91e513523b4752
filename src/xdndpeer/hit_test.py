#!/usr/bin/env python3
"""Window tree queries used while dragging.

This module provides the two read-only queries the source runs on every
pointer-motion sample: which window lies under the pointer, and whether
that window speaks XDND.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib import X
from Xlib.error import XError

from xdndpeer.peer_constants import XDND_PROTOCOL_VERSION

if TYPE_CHECKING:
    from Xlib.xobject.drawable import Window

    from xdndpeer.atoms import XdndAtoms

logger = logging.getLogger(__name__)


def window_at_point(start: Window, root_x: int, root_y: int) -> Window:
    """Return the deepest window containing a root point.

    Descends iteratively from start. At each level the children are
    checked from topmost (last in stacking order) to bottommost; the first
    child whose geometry contains the point becomes the next level. The
    search stops at a window none of whose children contain the point.

    A window covers its border as well as its inside. Children that vanish
    while being inspected are skipped.

    Args:
        start: Window to start from, normally the root window, whose
            origin is taken as (0, 0).
        root_x: Pointer x in root coordinates.
        root_y: Pointer y in root coordinates.

    Returns:
        The deepest matching window, or start if no child matches.
    """
    current, origin_x, origin_y = start, 0, 0
    while True:
        try:
            children = current.query_tree().children
        except XError:
            return current
        for child in reversed(children):
            try:
                geom = child.get_geometry()
            except XError:
                continue
            # geom.x/y locate the outer border corner; children are placed
            # relative to the inside of that border
            left = origin_x + geom.x
            top = origin_y + geom.y
            outer_width = geom.width + 2 * geom.border_width
            outer_height = geom.height + 2 * geom.border_width
            if left <= root_x < left + outer_width and top <= root_y < top + outer_height:
                current = child
                origin_x = left + geom.border_width
                origin_y = top + geom.border_width
                break
        else:
            return current


def xdnd_version(window: Window, atoms: XdndAtoms) -> int:
    """Return the XDND version advertised by a window.

    Reads the XdndAware property. Versions newer than ours are treated as
    unsupported.

    Args:
        window: The window to inspect.
        atoms: The interned atom table.

    Returns:
        The advertised version, or 0 if the window is not XDND aware, the
        version is too new, or the window no longer exists.
    """
    try:
        prop = window.get_full_property(atoms.aware, X.AnyPropertyType)
    except XError as e:
        logger.debug("Could not read XdndAware: %s", e)
        return 0
    if prop is None or len(prop.value) == 0:
        return 0
    version = int(prop.value[0])
    if version > XDND_PROTOCOL_VERSION:
        return 0
    return version
