#!/usr/bin/env python3
"""Draggable square model.

The square is the object dragged between peers. Its colour is the state
that travels with the drop; its position is local to each peer window and
is recomputed by the target from the drop location.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from xdndpeer.peer_constants import SQUARE_SIZE, WINDOW_SIZE


class SquareColour(enum.IntEnum):
    """Visual variant of the square."""

    RED = 0
    BLUE = 1


@dataclass
class Square:
    """The square drawn inside a peer window.

    Attributes:
        x: Left edge in window coordinates.
        y: Top edge in window coordinates.
        mouse_x: Pointer x at the last drag step.
        mouse_y: Pointer y at the last drag step.
        size: Edge length in pixels.
        visible: True while this peer holds the square.
        selected: True while the button is held on the square.
        colour: Current visual variant.
    """

    x: int = 0
    y: int = 0
    mouse_x: int = 0
    mouse_y: int = 0
    size: int = SQUARE_SIZE
    visible: bool = False
    selected: bool = False
    colour: SquareColour = SquareColour.RED

    def contains(self, x: int, y: int) -> bool:
        """Return True if the window point (x, y) is inside the square."""
        return self.x <= x < self.x + self.size and self.y <= y < self.y + self.size

    def grab(self, x: int, y: int) -> None:
        """Start dragging from the window point (x, y)."""
        self.selected = True
        self.mouse_x = x
        self.mouse_y = y

    def drag_to(self, x: int, y: int, bounds: int = WINDOW_SIZE) -> None:
        """Move by the pointer delta since the last step, clamped to bounds."""
        self.x = _clamp(self.x + x - self.mouse_x, bounds - self.size)
        self.y = _clamp(self.y + y - self.mouse_y, bounds - self.size)
        self.mouse_x = x
        self.mouse_y = y

    def release(self) -> None:
        self.selected = False

    def toggle_colour(self) -> None:
        if self.colour == SquareColour.RED:
            self.colour = SquareColour.BLUE
        else:
            self.colour = SquareColour.RED

    def place_centred(self, x: int, y: int, bounds: int = WINDOW_SIZE) -> None:
        """Centre the square on (x, y), clamped to a bounds x bounds window."""
        half = self.size // 2
        self.x = _clamp(x - half, bounds - self.size)
        self.y = _clamp(y - half, bounds - self.size)


def _clamp(value: int, upper: int) -> int:
    return max(0, min(value, upper))
