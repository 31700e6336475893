"""Single-fire promise built on top of an Observable.

A promise stands for the outcome of one asynchronous operation. The producer
creates it, hands it to callers, and later settles it with ``emit_success`` or
``emit_error``. Callers listen with ``add_callback`` / ``add_errback`` and may
``cancel`` it, in which case the producer can react through a cancel listener:

    def fetch_friends(user_id):
        promise = Promise()
        client.get(f"/users/{user_id}/friends",
                   on_ok=promise.emit_success,
                   on_fail=promise.emit_error)
        promise.add_cancelback(client.abort)
        return promise

    fetch_friends(42).timeout(10_000).add_callback(show).add_errback(report)

A promise emits at most one of success/error, at most once. A timeout that
expires first emits ``PromiseTimeoutError`` (message ``"timeout"``) through
the error event.
"""

from __future__ import annotations

import logging
from numbers import Real
from typing import Any

from src.core.conc.errors import PromiseTimeoutError
from src.core.conc.observable import Listener, Observable
from src.core.conc.scheduler import Scheduler, SchedulerFactory
from src.core.models import PromiseState

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"
CANCEL = "cancel"


class Promise:
    """Deferred result that settles exactly once."""

    def __init__(self, scheduler: Scheduler | None = None) -> None:
        self._events = Observable()
        self._scheduler = scheduler
        self._has_fired = False
        self._cancelled = False
        self._state = PromiseState.PENDING
        self._timeout_duration: float | None = None
        self._timer: Any = None

    def __repr__(self) -> str:
        return f"<Promise state={self._state.value} timeout={self._timeout_duration!r}>"

    @property
    def state(self) -> PromiseState:
        return self._state

    @property
    def has_fired(self) -> bool:
        """True once success or error has been emitted."""
        return self._has_fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def is_pending(self) -> bool:
        return self._state is PromiseState.PENDING

    def add_callback(self, listener: Listener) -> Promise:
        """Add a 'success' listener. Returns the promise for cascading."""
        self._events.add_listener(SUCCESS, listener)
        return self

    def add_errback(self, listener: Listener) -> Promise:
        """Add an 'error' listener. Returns the promise for cascading."""
        self._events.add_listener(ERROR, listener)
        return self

    def add_cancelback(self, listener: Listener) -> Promise:
        """Add a 'cancel' listener. Returns the promise for cascading."""
        self._events.add_listener(CANCEL, listener)
        return self

    def emit_success(self, *args: Any) -> None:
        """Settle the promise successfully and pass ``args`` to callbacks.

        Ignored if success or error was already emitted.
        """
        self._fire(SUCCESS, PromiseState.FULFILLED, args)

    def emit_error(self, *args: Any) -> None:
        """Settle the promise with an error and pass ``args`` to errbacks.

        Ignored if success or error was already emitted.
        """
        self._fire(ERROR, PromiseState.REJECTED, args)

    def _fire(self, event_name: str, target: PromiseState, args: tuple[Any, ...]) -> None:
        if self._has_fired:
            logger.debug("Ignoring '%s' on %r: already fired", event_name, self)
            return

        self._has_fired = True
        # After cancel() the state stays CANCELLED; the emit still happens but
        # success/error listeners were already removed.
        if self._state is PromiseState.PENDING:
            self._state = target
        self._release_timer()
        logger.debug("Promise emitting '%s' (state=%s)", event_name, self._state.value)
        self._events.emit(event_name, *args)

    def cancel(self) -> None:
        """Cancel the promise and emit 'cancel'.

        Success and error listeners are dropped first, so a producer that
        settles the promise afterwards reaches nobody. Cancelling a promise
        that already fired, or cancelling twice, does nothing.
        """
        if self._cancelled or self._has_fired:
            logger.debug("Ignoring cancel on %r", self)
            return

        self._cancelled = True
        self._state = PromiseState.CANCELLED
        self._release_timer()
        self._events.remove_listener(SUCCESS)
        self._events.remove_listener(ERROR)
        logger.debug("Promise cancelled")
        self._events.emit(CANCEL)

    def timeout(self, delay: float | None = None) -> Any:
        """Arm a timeout, or read back the current one.

        ``timeout(delay)`` schedules an error after ``delay`` milliseconds,
        replacing any timeout armed earlier, and returns the promise. If the
        promise has neither fired nor been cancelled by then it emits
        ``PromiseTimeoutError`` to its errbacks.

        ``timeout()`` has no side effects and returns the last delay set, or
        ``None`` if no timeout was ever set.

        Raises:
            TypeError: ``delay`` is not a real number.
            ValueError: ``delay`` is negative.
            RuntimeError: The default asyncio scheduler found no running loop.
                The promise keeps its previous timeout in that case.
        """
        if delay is None:
            return self._timeout_duration

        if isinstance(delay, bool) or not isinstance(delay, Real):
            raise TypeError(f"timeout delay must be a number of milliseconds, got {delay!r}")
        if delay < 0:
            raise ValueError(f"timeout delay must not be negative, got {delay!r}")

        # Nothing changes unless the new timer was actually scheduled
        scheduler = self._scheduler
        if scheduler is None:
            scheduler = SchedulerFactory.create_scheduler()
        handle = scheduler.call_later(delay, self._on_timeout)

        self._release_timer()
        self._scheduler = scheduler
        self._timer = handle
        self._timeout_duration = delay
        logger.debug("Promise timeout armed for %sms", delay)
        return self

    def _on_timeout(self) -> None:
        self._timer = None
        if not self._has_fired and not self._cancelled:
            logger.info("Promise timed out after %sms", self._timeout_duration)
            self.emit_error(PromiseTimeoutError(self._timeout_duration))

    def _release_timer(self) -> None:
        if self._timer is not None and self._scheduler is not None:
            self._scheduler.cancel(self._timer)
        self._timer = None


__all__ = ["CANCEL", "ERROR", "Promise", "SUCCESS"]
