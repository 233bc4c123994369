"""
Commit Scheduler

Trailing-edge debounce timer owned by a single draft session.
Runs on the asyncio event loop; arm/cancel/fire are serialized by the loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CommitScheduler:
    """
    Cancelable one-shot delay.

    ``arm()`` replaces any pending fire, so only the last arm within the
    window reaches the callback. After ``cancel()`` a previously armed fire
    never runs, even if its loop callback was already queued: each arm gets
    a generation number and a fire whose generation is stale is dropped.

    Usage::

        scheduler = CommitScheduler(on_fire, delay=2.0)
        scheduler.arm()      # fires on_fire() in 2s
        scheduler.arm()      # restarts the window
        scheduler.cancel()   # nothing fires
    """

    def __init__(self, callback: Callable[[], None], delay: float) -> None:
        self._callback = callback
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        """True while an armed fire is outstanding."""
        return self._handle is not None

    def arm(self, delay: float | None = None) -> None:
        """Schedule a fire after ``delay`` seconds, replacing any pending one."""
        self.cancel()
        loop = asyncio.get_running_loop()
        generation = self._generation
        self._handle = loop.call_later(
            self.delay if delay is None else delay, self._fire, generation
        )

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._generation += 1

    def _fire(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug("Dropping stale commit timer (generation %d)", generation)
            return
        self._handle = None
        self._generation += 1
        self._callback()
