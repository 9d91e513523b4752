#!/usr/bin/env python3
"""
Unit tests for payload framing and square state serialization.

Tests frame_payload, unframe_payload, serialize_state, deserialize_state
and PayloadError behavior.
"""
import pytest

from xdndpeer.payload import (
    LINE_TERMINATOR,
    URI_PREFIX,
    PayloadError,
    deserialize_state,
    frame_payload,
    serialize_state,
    unframe_payload,
)
from xdndpeer.square import SquareColour


def test_frame_payload_uri_format() -> None:
    """Test URI framing adds the scheme prefix and CR LF."""
    assert frame_payload(b"blue", uri=True) == b"file://blue\r\n"


def test_frame_payload_plain_format() -> None:
    """Test plain framing adds only CR LF."""
    assert frame_payload(b"red", uri=False) == b"red\r\n"


def test_unframe_strips_prefix_and_terminator() -> None:
    assert unframe_payload(b"file://blue\r\n") == b"blue"


def test_unframe_without_framing_is_identity() -> None:
    """Test unframed data passes through unchanged."""
    assert unframe_payload(b"red") == b"red"


def test_unframe_only_strips_leading_prefix() -> None:
    """Test a scheme prefix in the middle of the data is kept."""
    assert unframe_payload(b"xfile://red\r\n") == b"xfile://red"


def test_unframe_only_strips_one_terminator() -> None:
    assert unframe_payload(b"red\r\n\r\n") == b"red\r\n"


def test_unframe_returns_new_bytes() -> None:
    """Test the result is a bytes object even for bytearray input."""
    result = unframe_payload(bytearray(b"red\r\n"))
    assert type(result) is bytes


@pytest.mark.parametrize("colour", list(SquareColour))
@pytest.mark.parametrize("uri", [True, False])
def test_state_round_trip(colour: SquareColour, uri: bool) -> None:
    """Test every colour survives framing in both formats."""
    data = frame_payload(serialize_state(colour), uri=uri)
    assert deserialize_state(unframe_payload(data)) is colour


def test_serialized_state_has_no_reserved_bytes() -> None:
    """Test serialized states never contain the terminator or prefix."""
    for colour in SquareColour:
        blob = serialize_state(colour)
        assert LINE_TERMINATOR not in blob
        assert not blob.startswith(URI_PREFIX)


def test_deserialize_unknown_state_raises() -> None:
    with pytest.raises(PayloadError, match="Unknown square state"):
        deserialize_state(b"green")
