#!/usr/bin/env python3
"""
Exchange session state.

An ExchangeSession describes the single XDND exchange a peer may take part
in at any time. It is created empty (idle), gains a role and a peer window
exactly once through begin(), accumulates monotone progress flags, and is
discarded as a whole on completion or abandonment: the owner replaces it
with a fresh ExchangeSession() instead of clearing individual fields.

The protocol phase is derived from role and flags rather than stored, so
it can never disagree with them.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

# Flags that may be passed to ExchangeSession.mark().
FLAGS: frozenset[str] = frozenset({
    "started",
    "position_sent",
    "position_received",
    "status_sent",
    "status_received",
    "drop_sent",
    "drop_received",
    "payload_sent",
    "payload_received",
})


class Role(enum.Enum):
    """Part played by this peer in the current exchange."""

    NONE = "none"
    SOURCE = "source"
    TARGET = "target"


class Phase(enum.Enum):
    """Protocol state of a peer, derived from its session."""

    IDLE = "idle"
    SOURCE_NEGOTIATING = "source-negotiating"
    SOURCE_AWAITING_ACK = "source-awaiting-ack"
    SOURCE_ACKED = "source-acked"
    SOURCE_DROPPED = "source-dropped"
    SOURCE_DONE = "source-done"
    TARGET_NEGOTIATING = "target-negotiating"
    TARGET_TRACKING = "target-tracking"
    TARGET_DROPPED = "target-dropped"
    TARGET_DONE = "target-done"


class SessionError(Exception):
    """
    Exception raised when session invariants would be broken.

    Raised on begin() for a session that already has a role, or on mark()
    with an unknown flag. These indicate a bug in the caller, not a
    protocol violation by the peer.
    """

    pass


@dataclass
class ExchangeSession:
    """
    State of one XDND exchange.

    Attributes:
        role: Role of this peer, Role.NONE while idle.
        peer_window: Window id of the other peer, 0 while idle.
        started: Enter was sent (source) or received (target).
        position_sent: At least one Position was sent.
        position_received: At least one Position was received.
        status_sent: The Status reply was sent.
        status_received: A Status reply was received.
        drop_sent: Drop was sent.
        drop_received: Drop was received.
        payload_sent: The payload was written for the target.
        payload_received: The payload was read from the source.
        last_position_timestamp: Time of the last Position sent or received.
        drop_timestamp: Time carried by the received Drop.
        proposed_action: Action agreed for the exchange.
        proposed_type: Payload type chosen by the target, None if none fits.
        pointer_root: Last pointer location in root coordinates.
    """

    role: Role = Role.NONE
    peer_window: int = 0
    started: bool = False
    position_sent: bool = False
    position_received: bool = False
    status_sent: bool = False
    status_received: bool = False
    drop_sent: bool = False
    drop_received: bool = False
    payload_sent: bool = False
    payload_received: bool = False
    last_position_timestamp: int = 0
    drop_timestamp: int = 0
    proposed_action: int | None = None
    proposed_type: int | None = None
    pointer_root: tuple[int, int] = (0, 0)

    @property
    def active(self) -> bool:
        """True while an exchange is in progress."""
        return self.role is not Role.NONE

    @property
    def is_source(self) -> bool:
        return self.role is Role.SOURCE

    @property
    def is_target(self) -> bool:
        return self.role is Role.TARGET

    def begin(self, role: Role, peer_window: int) -> None:
        """
        Assign the role and peer window of a new exchange.

        Args:
            role: Role.SOURCE or Role.TARGET.
            peer_window: Window id of the other peer.

        Raises:
            SessionError: If the session already has a role, or role is
                Role.NONE.
        """
        if self.active:
            raise SessionError(
                f"Session already active as {self.role.value} with 0x{self.peer_window:x}"
            )
        if role is Role.NONE:
            raise SessionError("Cannot begin an exchange without a role")
        self.role = role
        self.peer_window = peer_window
        self.started = True

    def mark(self, flag: str) -> None:
        """
        Set a progress flag. Flags are never cleared individually.

        Raises:
            SessionError: If flag is not a known progress flag.
        """
        if flag not in FLAGS:
            raise SessionError(f"Unknown session flag: {flag}")
        setattr(self, flag, True)

    def is_from_peer(self, sender: int) -> bool:
        """True if sender is the recorded peer window."""
        return self.active and sender == self.peer_window

    @property
    def phase(self) -> Phase:
        """The protocol state implied by role and flags."""
        if self.role is Role.SOURCE:
            if self.payload_sent:
                return Phase.SOURCE_DONE
            if self.drop_sent:
                return Phase.SOURCE_DROPPED
            if self.status_received:
                return Phase.SOURCE_ACKED
            if self.position_sent:
                return Phase.SOURCE_AWAITING_ACK
            return Phase.SOURCE_NEGOTIATING
        if self.role is Role.TARGET:
            if self.payload_received:
                return Phase.TARGET_DONE
            if self.drop_received:
                return Phase.TARGET_DROPPED
            if self.status_sent:
                return Phase.TARGET_TRACKING
            return Phase.TARGET_NEGOTIATING
        return Phase.IDLE
