#!/usr/bin/env python3
"""
XDND message codec.

Every XDND message travels as a 32-bit format ClientMessage carrying five
words. Word 0 always holds the sender window; the remaining words depend on
the message kind:

    XdndEnter     source  version<<24 | more-types  type1  type2  type3
    XdndPosition  source  0  x<<16 | y  time  action
    XdndLeave     source  0  0  0  0
    XdndStatus    target  accept | want-position<<1  0  0  action
    XdndDrop      source  0  time  0  0
    XdndFinished  target  success  action  0  0

This module models each kind as a frozen dataclass and provides a pure
encode/decode pair between those values and (message type, words).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from xdndpeer.atoms import XdndAtoms

# Number of data words in a ClientMessage of format 32.
MESSAGE_WORDS: int = 5

# Word size required for XDND messages.
MESSAGE_FORMAT: int = 32

# Maximum number of types carried inline by XdndEnter.
INLINE_TYPE_SLOTS: int = 3

_WORD_MASK = 0xFFFFFFFF
_COORD_MASK = 0xFFFF


class MessageError(Exception):
    """
    Exception raised for malformed XDND messages.

    Raised by decode_message when a ClientMessage claims an XDND message
    type but does not carry five 32-bit words.
    """

    pass


@dataclass(frozen=True)
class Enter:
    """XdndEnter: the source offers a drag to the target."""

    sender: int
    version: int
    types: tuple[int, ...] = ()
    more_types: bool = False


@dataclass(frozen=True)
class Position:
    """XdndPosition: pointer location in root coordinates."""

    sender: int
    root_x: int
    root_y: int
    time: int
    action: int


@dataclass(frozen=True)
class Leave:
    """XdndLeave: the source abandons the exchange."""

    sender: int


@dataclass(frozen=True)
class Status:
    """XdndStatus: the target accepts or refuses the drop."""

    sender: int
    accept: bool
    action: int
    want_position: bool = False


@dataclass(frozen=True)
class Drop:
    """XdndDrop: the source released the button over the target."""

    sender: int
    time: int


@dataclass(frozen=True)
class Finished:
    """XdndFinished: the target has consumed the payload."""

    sender: int
    success: bool
    action: int


XdndMessage = Union[Enter, Position, Leave, Status, Drop, Finished]


def encode_message(message: XdndMessage, atoms: XdndAtoms) -> tuple[int, list[int]]:
    """
    Encode a message into its ClientMessage type and five data words.

    Args:
        message: The message to encode.
        atoms: The interned atom table.

    Returns:
        Tuple of (message type atom, list of five 32-bit words).

    Raises:
        TypeError: If message is not one of the six XDND message kinds.
    """
    if isinstance(message, Enter):
        types = list(message.types[:INLINE_TYPE_SLOTS])
        types += [0] * (INLINE_TYPE_SLOTS - len(types))
        flags = (message.version << 24) | (1 if message.more_types else 0)
        return atoms.enter, _words(message.sender, flags, *types)
    if isinstance(message, Position):
        coords = ((message.root_x & _COORD_MASK) << 16) | (message.root_y & _COORD_MASK)
        return atoms.position, _words(message.sender, 0, coords, message.time, message.action)
    if isinstance(message, Leave):
        return atoms.leave, _words(message.sender)
    if isinstance(message, Status):
        flags = (1 if message.accept else 0) | (2 if message.want_position else 0)
        return atoms.status, _words(message.sender, flags, 0, 0, message.action)
    if isinstance(message, Drop):
        return atoms.drop, _words(message.sender, 0, message.time)
    if isinstance(message, Finished):
        success = 1 if message.success else 0
        return atoms.finished, _words(message.sender, success, message.action)
    raise TypeError(f"Not an XDND message: {message!r}")


def decode_message(
    message_type: int, fmt: int, words: list[int], atoms: XdndAtoms
) -> XdndMessage | None:
    """
    Decode a ClientMessage into an XDND message.

    Args:
        message_type: The ClientMessage type atom.
        fmt: The ClientMessage word size (8, 16 or 32).
        words: The data items of the ClientMessage.
        atoms: The interned atom table.

    Returns:
        The decoded message, or None if message_type is not an XDND
        message type.

    Raises:
        MessageError: If the message type is XDND but the payload is not
            five 32-bit words.
    """
    if message_type not in atoms.message_types():
        return None
    if fmt != MESSAGE_FORMAT or len(words) < MESSAGE_WORDS:
        raise MessageError(
            f"Expected {MESSAGE_WORDS} words of format {MESSAGE_FORMAT}, "
            f"got {len(words)} of format {fmt}"
        )
    w = [int(word) & _WORD_MASK for word in words[:MESSAGE_WORDS]]
    sender = w[0]

    if message_type == atoms.enter:
        return Enter(
            sender=sender,
            version=w[1] >> 24,
            types=tuple(t for t in w[2:5] if t != 0),
            more_types=bool(w[1] & 1),
        )
    if message_type == atoms.position:
        return Position(
            sender=sender,
            root_x=(w[2] >> 16) & _COORD_MASK,
            root_y=w[2] & _COORD_MASK,
            time=w[3],
            action=w[4],
        )
    if message_type == atoms.leave:
        return Leave(sender=sender)
    if message_type == atoms.status:
        return Status(
            sender=sender,
            accept=bool(w[1] & 1),
            action=w[4],
            want_position=bool(w[1] & 2),
        )
    if message_type == atoms.drop:
        return Drop(sender=sender, time=w[2])
    return Finished(sender=sender, success=bool(w[1] & 1), action=w[2])


def message_name(message: XdndMessage) -> str:
    """Return the protocol name of a message, e.g. "XdndEnter"."""
    return "Xdnd" + type(message).__name__


def _words(*values: int) -> list[int]:
    """Pad values with zeros to five words, masking each to 32 bits."""
    padded = list(values) + [0] * (MESSAGE_WORDS - len(values))
    return [v & _WORD_MASK for v in padded]
