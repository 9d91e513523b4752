"""X11 channel used by the XDND state machine.

This module wraps the python-xlib calls the protocol needs behind a small
XdndChannel object so the handlers never touch the display directly. It
covers:
- Sending XDND ClientMessages to another window
- Owning XdndSelection and publishing XdndTypeList
- Requesting, reading and deleting the XDND_DATA payload property
- Answering SelectionRequest events from the target
- Querying the window under the pointer and translating coordinates

Failures of the X connection itself are raised as ChannelError; a peer
cannot continue without a working channel.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib import X, Xatom
from Xlib.error import ConnectionClosedError, XError
from Xlib.protocol.event import ClientMessage
from Xlib.protocol.event import SelectionNotify as SelectionNotifyEvent

from xdndpeer.hit_test import window_at_point, xdnd_version
from xdndpeer.messages import MESSAGE_FORMAT, encode_message, message_name

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.event import SelectionRequest
    from Xlib.xobject.drawable import Window

    from xdndpeer.atoms import XdndAtoms
    from xdndpeer.messages import XdndMessage

logger = logging.getLogger(__name__)

# X errors that mean the channel to the server is unusable.
CHANNEL_ERRORS = (XError, ConnectionClosedError, OSError)


class ChannelError(Exception):
    """
    Exception raised when the X11 channel fails.

    Raised when a message cannot be sent or the selection machinery cannot
    be read or written. Fatal to the peer process.
    """

    pass


class XdndChannel:
    """XDND operations on one display connection and peer window.

    Attributes:
        display: The X11 display connection.
        window: This peer's top-level window.
        atoms: The interned atom table.
    """

    def __init__(self, display: Display, window: Window, atoms: XdndAtoms) -> None:
        self.display = display
        self.window = window
        self.atoms = atoms

    def _resource(self, window_id: int) -> Window:
        return self.display.create_resource_object("window", window_id)

    def send_message(self, target: int, message: XdndMessage) -> None:
        """Send an XDND message to the target window.

        Args:
            target: Window id of the receiving peer.
            message: The message to send.

        Raises:
            ChannelError: If the event cannot be sent.
        """
        message_type, words = encode_message(message, self.atoms)
        event = ClientMessage(
            window=target,
            client_type=message_type,
            data=(MESSAGE_FORMAT, words),
        )
        try:
            self._resource(target).send_event(event, event_mask=0)
            self.display.flush()
        except CHANNEL_ERRORS as e:
            raise ChannelError(f"Failed to send {message_name(message)}: {e}") from e

    def claim_selection(self, time: int) -> None:
        """Take ownership of XdndSelection for a new exchange."""
        try:
            self.window.set_selection_owner(self.atoms.selection, time)
            self.display.flush()
        except CHANNEL_ERRORS as e:
            raise ChannelError(f"Failed to own XdndSelection: {e}") from e

    def publish_type_list(self, types: tuple[int, ...]) -> None:
        """Write XdndTypeList on our window for targets that need the full list."""
        try:
            self.window.change_property(self.atoms.type_list, Xatom.ATOM, 32, list(types))
            self.display.flush()
        except CHANNEL_ERRORS as e:
            raise ChannelError(f"Failed to publish XdndTypeList: {e}") from e

    def fetch_type_list(self, window_id: int) -> list[int] | None:
        """Read XdndTypeList from a source window.

        Returns:
            The advertised type atoms, or None if the property is absent,
            malformed, or the window no longer exists.
        """
        try:
            prop = self._resource(window_id).get_full_property(
                self.atoms.type_list, X.AnyPropertyType
            )
        except XError as e:
            logger.warning("Could not read XdndTypeList from 0x%x: %s", window_id, e)
            return None
        if prop is None or prop.format != 32:
            logger.warning("XdndTypeList on 0x%x is missing or malformed", window_id)
            return None
        return [int(atom) for atom in prop.value]

    def request_payload(self, type_atom: int, time: int) -> None:
        """Ask the XdndSelection owner to convert the payload into XDND_DATA."""
        try:
            self.window.convert_selection(
                self.atoms.selection, type_atom, self.atoms.data, time
            )
            self.display.flush()
        except CHANNEL_ERRORS as e:
            raise ChannelError(f"Failed to request XdndSelection: {e}") from e

    def read_payload(self) -> bytes | None:
        """Read and delete the XDND_DATA property from our window.

        Returns:
            The property bytes, or None if the property is absent.

        Raises:
            ChannelError: If the property cannot be read or deleted.
        """
        try:
            prop = self.window.get_full_property(self.atoms.data, X.AnyPropertyType)
            self.window.delete_property(self.atoms.data)
            self.display.flush()
        except CHANNEL_ERRORS as e:
            raise ChannelError(f"Failed to read XDND_DATA: {e}") from e
        if prop is None:
            return None
        data = prop.value
        if isinstance(data, str):
            return data.encode("utf-8")
        return bytes(data)

    def answer_selection_request(
        self, event: SelectionRequest, data: bytes | None
    ) -> None:
        """Write data to the requestor's property and send SelectionNotify.

        A None data refuses the request by notifying with property None.
        """
        prop = event.property
        try:
            if data is None:
                prop = X.NONE
            else:
                event.requestor.change_property(prop, event.target, 8, data)
            event.requestor.send_event(
                SelectionNotifyEvent(
                    time=event.time,
                    requestor=event.requestor.id,
                    selection=event.selection,
                    target=event.target,
                    property=prop,
                ),
                event_mask=0,
            )
            self.display.flush()
        except CHANNEL_ERRORS as e:
            raise ChannelError(f"Failed to answer SelectionRequest: {e}") from e

    def window_at(self, root_x: int, root_y: int) -> int:
        """Return the id of the deepest window under a root point."""
        root = self.display.screen().root
        return window_at_point(root, root_x, root_y).id

    def xdnd_version(self, window_id: int) -> int:
        """Return the XDND version a window supports, 0 if none."""
        return xdnd_version(self._resource(window_id), self.atoms)

    def root_to_window(self, root_x: int, root_y: int) -> tuple[int, int]:
        """Translate root coordinates into our window's coordinates."""
        root = self.display.screen().root
        try:
            reply = self.window.translate_coords(root, root_x, root_y)
        except CHANNEL_ERRORS as e:
            raise ChannelError(f"Failed to translate coordinates: {e}") from e
        return reply.x, reply.y
