"""Host timer facilities used by ``Promise.timeout``.

Defines the Scheduler interface plus two implementations:

- ``AsyncioScheduler`` runs callbacks on an asyncio event loop, which gives the
  single cooperative execution context promises are designed for.
- ``ManualScheduler`` keeps a virtual clock that only moves when ``advance`` is
  called. Useful for deterministic tests and simulations.

Delays are always expressed in milliseconds.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from src.core.config import SCHEDULER_BACKENDS, config

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Abstract timer facility (Strategy pattern)."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> Any:
        """Schedule ``callback`` to run once after ``delay_ms`` milliseconds.

        Returns:
            Opaque handle accepted by ``cancel``.
        """
        raise NotImplementedError

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Cancel a scheduled callback. Unknown or spent handles are ignored."""
        raise NotImplementedError


class AsyncioScheduler(Scheduler):
    """Timer facility backed by ``loop.call_later``.

    Without an explicit loop the running loop is looked up each time a
    callback is scheduled, so ``call_later`` must then be called from inside a
    coroutine or loop callback.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return self._get_loop().call_later(delay_ms / 1000.0, callback)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler driven explicitly by ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, Callable[[], Any]]] = []
        self._cancelled: set[int] = set()
        self._counter = itertools.count()

    @property
    def pending(self) -> int:
        """Number of callbacks scheduled but neither fired nor cancelled."""
        return sum(1 for _, seq, _ in self._queue if seq not in self._cancelled)

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> int:
        seq = next(self._counter)
        heapq.heappush(self._queue, (self.now + max(delay_ms, 0.0), seq, callback))
        return seq

    def cancel(self, handle: int) -> None:
        if any(seq == handle for _, seq, _ in self._queue):
            self._cancelled.add(handle)

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms`` and run every callback that came due.

        Callbacks run in deadline order, ties in scheduling order. Callbacks
        scheduled while advancing also run if their deadline falls inside the
        window.

        Returns:
            Number of callbacks that ran.
        """
        target = self.now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            deadline, seq, callback = heapq.heappop(self._queue)
            if seq in self._cancelled:
                self._cancelled.discard(seq)
                continue
            self.now = deadline
            callback()
            fired += 1
        self.now = target
        return fired


_manual_clock: ManualScheduler | None = None


class SchedulerFactory:
    """Factory for creating scheduler instances.

    The "manual" backend is one process-wide virtual clock, so promises that
    picked it up by default can all be driven through ``manual_clock()``.
    """

    @staticmethod
    def manual_clock() -> ManualScheduler:
        """Return the shared virtual clock used by the "manual" backend."""
        global _manual_clock
        if _manual_clock is None:
            _manual_clock = ManualScheduler()
        return _manual_clock

    @staticmethod
    def create_scheduler(backend: str | None = None) -> Scheduler:
        """Create a scheduler for the given backend name.

        Args:
            backend: ``"asyncio"`` or ``"manual"``. Defaults to
                ``config.scheduler_backend``.

        Returns:
            Configured scheduler; unknown names fall back to asyncio. The
            manual backend always returns the shared ``manual_clock()``.
        """
        name = (backend or config.scheduler_backend).lower()
        if name not in SCHEDULER_BACKENDS:
            logger.warning("Unknown scheduler backend '%s'; falling back to asyncio", name)
            name = "asyncio"
        if name == "manual":
            return SchedulerFactory.manual_clock()
        return AsyncioScheduler()


__all__ = ["AsyncioScheduler", "ManualScheduler", "Scheduler", "SchedulerFactory"]
