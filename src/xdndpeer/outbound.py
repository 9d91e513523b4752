"""Outbound XDND messages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from xdndpeer.messages import message_name

if TYPE_CHECKING:
    from xdndpeer.messages import XdndMessage
    from xdndpeer.peer_state import PeerState

logger = logging.getLogger(__name__)


def send_to_peer(state: PeerState, target: int, message: XdndMessage) -> None:
    """Send an XDND message and count it as protocol activity.

    Args:
        state: The peer state.
        target: Window id of the receiving peer.
        message: The message to send.

    Raises:
        ChannelError: If the X11 channel fails.
    """
    logger.info("sending %s to window 0x%x", message_name(message), target)
    state.channel.send_message(target, message)
    state.touch()
