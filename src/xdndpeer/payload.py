#!/usr/bin/env python3
"""
Payload framing for the dragged square.

The source answers the target's selection request with a small byte
string: an optional URI scheme prefix (only for text/uri-list), the
serialized square state, and a trailing CR LF line terminator. The target
strips both frames to recover the raw state.

Example: the BLUE square offered as text/uri-list is b"file://blue\\r\\n";
the same square offered as UTF8_STRING is b"blue\\r\\n".
"""

from xdndpeer.square import SquareColour

# Scheme prefix added for URI-style formats.
URI_PREFIX: bytes = b"file://"

# Scheme prefixes stripped on receipt.
KNOWN_PREFIXES: tuple[bytes, ...] = (URI_PREFIX,)

# Two-byte line terminator appended to every payload.
LINE_TERMINATOR: bytes = b"\r\n"

# Wire names of each colour.
_COLOUR_NAMES: dict[SquareColour, bytes] = {
    SquareColour.RED: b"red",
    SquareColour.BLUE: b"blue",
}


class PayloadError(Exception):
    """
    Exception raised for payloads that do not describe a square.

    Raised by deserialize_state when the unframed bytes are not a known
    colour name.
    """

    pass


def serialize_state(colour: SquareColour) -> bytes:
    """
    Serialize the square state.

    Args:
        colour: The colour of the dragged square.

    Returns:
        The raw state bytes.
    """
    return _COLOUR_NAMES[colour]


def deserialize_state(blob: bytes) -> SquareColour:
    """
    Deserialize raw state bytes produced by serialize_state.

    Args:
        blob: Raw state bytes with all framing removed.

    Returns:
        The square colour.

    Raises:
        PayloadError: If blob is not a known colour name.
    """
    for colour, name in _COLOUR_NAMES.items():
        if blob == name:
            return colour
    raise PayloadError(f"Unknown square state: {blob!r}")


def frame_payload(blob: bytes, uri: bool) -> bytes:
    """
    Frame raw state for delivery through the selection.

    Args:
        blob: Raw state bytes.
        uri: True if the negotiated type is text/uri-list.

    Returns:
        Framed payload bytes.
    """
    prefix = URI_PREFIX if uri else b""
    return prefix + blob + LINE_TERMINATOR


def unframe_payload(data: bytes) -> bytes:
    """
    Remove a leading scheme prefix and a trailing CR LF, if present.

    Args:
        data: Bytes read from the selection property.

    Returns:
        The raw state bytes.
    """
    for prefix in KNOWN_PREFIXES:
        if data.startswith(prefix):
            data = data[len(prefix):]
            break
    if data.endswith(LINE_TERMINATOR):
        data = data[: -len(LINE_TERMINATOR)]
    return bytes(data)
