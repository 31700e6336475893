"""Error taxonomy for the concurrency primitives.

Producer errors are whatever a producer hands to ``Promise.emit_error`` and are
never wrapped. The classes here cover the values this package synthesizes
itself.
"""

from __future__ import annotations


class ConcError(Exception):
    """Base class for errors raised by ``src.core.conc``."""


class PromiseTimeoutError(ConcError, TimeoutError):
    """Emitted through the error event when a promise times out.

    ``str(err)`` is always ``"timeout"`` so listeners can match on the message
    the same way they would for any other error payload.
    """

    message = "timeout"

    def __init__(self, delay: float | None = None) -> None:
        super().__init__(self.message)
        self.delay = delay

    def __str__(self) -> str:
        return self.message


class ListenerError(ConcError):
    """One or more listeners raised during a single emit.

    Attributes:
        event_name: Event that was being emitted.
        errors: Exceptions raised by listeners, in listener order.
    """

    def __init__(self, event_name: str, errors: list[BaseException]) -> None:
        self.event_name = event_name
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} listener(s) failed while emitting '{event_name}'"
        )


__all__ = ["ConcError", "ListenerError", "PromiseTimeoutError"]
