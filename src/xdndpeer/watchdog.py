#!/usr/bin/env python3
"""Inactivity watchdog for XDND exchanges.

The protocol has no liveness guarantee: if the peer's Finished or Leave
never arrives, the session stays active forever. A SessionWatchdog is an
optional timer, re-armed on every bit of protocol activity, that calls
back into the peer when an exchange has been quiet for too long.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class SessionWatchdog:
    """Timer that fires after a period without protocol activity.

    Attributes:
        timeout: Seconds of inactivity before on_expire is called.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        timeout: float,
        on_expire: Callable[[], None],
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"Watchdog timeout must be positive, got {timeout}")
        self.timeout = timeout
        self._loop = loop
        self._on_expire = on_expire
        self._handle: asyncio.TimerHandle | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def touch(self) -> None:
        """Restart the countdown."""
        self.cancel()
        self._handle = self._loop.call_later(self.timeout, self._expire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _expire(self) -> None:
        self._handle = None
        logger.warning("Exchange inactive for %.1f seconds, abandoning", self.timeout)
        self._on_expire()
