#!/usr/bin/env python3
"""Constants for peer windows, the XDND protocol and start-up retries.

These constants control the geometry of the demo windows, the XDND
protocol version advertised in XdndAware, and the exponential backoff used
while waiting for the X server to accept connections.
"""

# XDND protocol version written to XdndAware and sent in XdndEnter.
XDND_PROTOCOL_VERSION: int = 5

# Width and height of each peer window in pixels.
WINDOW_SIZE: int = 200

# Horizontal distance between the windows of consecutive slots.
SLOT_WIDTH: int = 200

# Edge length of the draggable square in pixels.
SQUARE_SIZE: int = 50

# Border width of the peer window.
WINDOW_BORDER: int = 1

# Window colours (24-bit TrueColor pixel values).
RED_PIXEL: int = 0xFF << 16
BLUE_PIXEL: int = 0xFF
GREEN_PIXEL: int = 0xFF << 8

# Display connection retry parameters for exponential backoff.
# Initial delay between connection attempts in seconds.
DISPLAY_INITIAL_WAIT: float = 0.1

# Maximum delay between connection attempts in seconds.
DISPLAY_MAX_WAIT: float = 2.0

# Number of connection attempts before giving up.
DISPLAY_ATTEMPTS: int = 5

# Inactivity timeout for an exchange in seconds. 0 disables the watchdog.
DEFAULT_WATCHDOG_TIMEOUT: float = 0.0

# Names of the two demo peers started by --pair, indexed by slot.
PAIR_NAMES: tuple[str, str] = ("Phil", "Stuart")
