"""Payload type negotiation.

The target picks the payload format it will request from the list the
source advertises. The advertised list comes either inline in XdndEnter (up
to three atoms) or, when the Enter flag says there are more, from the
XdndTypeList property on the source window.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xdndpeer.messages import Enter


def select_type(advertised: Iterable[int], accepted: Sequence[int]) -> int | None:
    """Return the first advertised type that is also accepted.

    The advertised order decides: the peer's first acceptable type wins,
    regardless of where it sits in the local preference list. Zero entries
    (unused Enter slots) are skipped.

    Args:
        advertised: Type atoms in the order supplied by the peer.
        accepted: Locally accepted type atoms.

    Returns:
        The chosen type atom, or None if the lists do not overlap.
    """
    accepted_set = set(accepted)
    for atom in advertised:
        if atom and atom in accepted_set:
            return atom
    return None


def advertised_types(
    enter: Enter, fetch_type_list: Callable[[int], list[int] | None]
) -> list[int]:
    """Resolve the full list of types advertised by an XdndEnter.

    Args:
        enter: The received XdndEnter message.
        fetch_type_list: Reads XdndTypeList from a window id; returns None
            when the property is missing or malformed.

    Returns:
        Advertised type atoms in peer order, empty if none could be read.
    """
    if enter.more_types:
        return list(fetch_type_list(enter.sender) or [])
    return list(enter.types)


def negotiate_type(
    enter: Enter,
    accepted: Sequence[int],
    fetch_type_list: Callable[[int], list[int] | None],
) -> int | None:
    """Pick the payload type for an exchange opened by enter."""
    return select_type(advertised_types(enter, fetch_type_list), accepted)
