#!/usr/bin/env python3
"""Pytest fixtures for xdndpeer tests.

Provides a fixed atom table, mock-channel peer states for handler tests,
and an Xvfb display for integration tests.
"""

import shutil
import subprocess
import time
from collections.abc import Callable, Generator
from unittest.mock import MagicMock

import pytest
from Xlib.error import XError

from xdndpeer.atoms import XdndAtoms
from xdndpeer.channel import XdndChannel
from xdndpeer.peer_state import PeerState

ATOMS = XdndAtoms(
    aware=1,
    enter=10,
    position=11,
    leave=12,
    status=13,
    drop=14,
    finished=15,
    selection=20,
    type_list=21,
    action_copy=22,
    data=23,
    wm_protocols=30,
    wm_delete_window=31,
    accepted_types=(40, 41, 42, 43, 44, 45),
)

# Atoms outside the accepted list, e.g. image/png.
FOREIGN_TYPES = (90, 91, 92)

SOURCE_WINDOW = 0x100
TARGET_WINDOW = 0x200
OTHER_WINDOW = 0x300

XVFB_DISPLAY = ":98"


def make_peer_state(
    window_id: int = TARGET_WINDOW,
    offered_types: tuple[int, ...] = (ATOMS.uri_list,),
) -> PeerState:
    """Create a PeerState whose channel is a MagicMock."""
    window = MagicMock()
    window.id = window_id
    channel = MagicMock(spec=XdndChannel)
    channel.root_to_window.side_effect = lambda x, y: (x, y)
    return PeerState(
        name=f"peer-{window_id:x}",
        display=MagicMock(),
        window=window,
        channel=channel,
        atoms=ATOMS,
        offered_types=offered_types,
    )


def sent_messages(state: PeerState) -> list:
    """Return the (target, message) pairs sent through a mock channel."""
    return [call.args for call in state.channel.send_message.call_args_list]


@pytest.fixture
def atoms() -> XdndAtoms:
    """The fixed atom table used across tests."""
    return ATOMS


@pytest.fixture
def peer_factory() -> Callable[..., PeerState]:
    """Factory for mock-channel peer states."""
    return make_peer_state


@pytest.fixture
def source_state() -> PeerState:
    """A peer that will act as drag source, holding a visible square."""
    state = make_peer_state(SOURCE_WINDOW)
    state.square.visible = True
    return state


@pytest.fixture
def target_state() -> PeerState:
    """A peer that will act as drop target."""
    return make_peer_state(TARGET_WINDOW)


@pytest.fixture
def xvfb_display(monkeypatch: pytest.MonkeyPatch) -> Generator[str | None, None, None]:
    """Run Xvfb on XVFB_DISPLAY and point DISPLAY at it.

    Yields None when Xvfb is not installed or fails to start.
    """
    if shutil.which("Xvfb") is None:
        yield None
        return
    server = subprocess.Popen(
        ["Xvfb", XVFB_DISPLAY, "-screen", "0", "800x600x24", "-nolisten", "tcp"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    try:
        time.sleep(0.5)
        if server.poll() is not None:
            yield None
            return
        monkeypatch.setenv("DISPLAY", XVFB_DISPLAY)
        yield XVFB_DISPLAY
    finally:
        server.terminate()
        server.wait()


def make_xerror() -> XError:
    """Create a BadWindow XError without a real display."""
    error = XError.__new__(XError)
    error._data = {
        "code": 3,
        "resource_id": 0,
        "sequence_number": 0,
        "major_opcode": 0,
        "minor_opcode": 0,
    }
    return error
