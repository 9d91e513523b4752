"""XDND atom table.

Both peers intern the same atom names on the same X server, so atom values
agree between processes without any further coordination. The table is
interned once per display connection and handed to the codec, the
negotiator and the handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from Xlib.display import Display


# Payload formats accepted by a peer, in local preference order.
ACCEPTED_TYPE_NAMES: tuple[str, ...] = (
    "text/uri-list",
    "UTF8_STRING",
    "TEXT",
    "STRING",
    "text/plain;charset=utf-8",
    "text/plain",
)

# Format whose payload carries a URI scheme prefix.
URI_LIST_TYPE_NAME: str = "text/uri-list"


@dataclass(frozen=True)
class XdndAtoms:
    """Interned atoms used by the XDND exchange.

    Attributes:
        aware: XdndAware window property holding the protocol version.
        enter: XdndEnter message type.
        position: XdndPosition message type.
        leave: XdndLeave message type.
        status: XdndStatus message type.
        drop: XdndDrop message type.
        finished: XdndFinished message type.
        selection: XdndSelection, the selection owned by the source.
        type_list: XdndTypeList source window property.
        action_copy: XdndActionCopy, the only action offered.
        data: XDND_DATA, the target property receiving the payload.
        wm_protocols: WM_PROTOCOLS message type.
        wm_delete_window: WM_DELETE_WINDOW protocol atom.
        accepted_types: Atoms of ACCEPTED_TYPE_NAMES in the same order.
    """

    aware: int
    enter: int
    position: int
    leave: int
    status: int
    drop: int
    finished: int
    selection: int
    type_list: int
    action_copy: int
    data: int
    wm_protocols: int
    wm_delete_window: int
    accepted_types: tuple[int, ...]

    @property
    def uri_list(self) -> int:
        """Atom of the text/uri-list format."""
        return self.accepted_types[ACCEPTED_TYPE_NAMES.index(URI_LIST_TYPE_NAME)]

    def message_types(self) -> tuple[int, ...]:
        """Return the six XDND message type atoms."""
        return (
            self.enter, self.position, self.leave,
            self.status, self.drop, self.finished,
        )


def intern_atoms(display: Display) -> XdndAtoms:
    """Intern every atom the exchange needs.

    Args:
        display: The X11 display connection.

    Returns:
        The populated atom table.
    """
    return XdndAtoms(
        aware=display.intern_atom("XdndAware"),
        enter=display.intern_atom("XdndEnter"),
        position=display.intern_atom("XdndPosition"),
        leave=display.intern_atom("XdndLeave"),
        status=display.intern_atom("XdndStatus"),
        drop=display.intern_atom("XdndDrop"),
        finished=display.intern_atom("XdndFinished"),
        selection=display.intern_atom("XdndSelection"),
        type_list=display.intern_atom("XdndTypeList"),
        action_copy=display.intern_atom("XdndActionCopy"),
        data=display.intern_atom("XDND_DATA"),
        wm_protocols=display.intern_atom("WM_PROTOCOLS"),
        wm_delete_window=display.intern_atom("WM_DELETE_WINDOW"),
        accepted_types=tuple(display.intern_atom(name) for name in ACCEPTED_TYPE_NAMES),
    )


def resolve_type_names(display: Display, names: list[str] | tuple[str, ...]) -> tuple[int, ...]:
    """Intern a list of format names, preserving order.

    Args:
        display: The X11 display connection.
        names: Format names such as "text/uri-list".

    Returns:
        Tuple of interned atoms.
    """
    return tuple(display.intern_atom(name) for name in names)
