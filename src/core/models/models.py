"""Data models shared by the concurrency primitives.

Provides the PromiseState enum and the PromiseOutcome dataclass used to
report how a promise settled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PromiseState(str, Enum):
    """Lifecycle state of a promise.

    ``PENDING`` is the only non-terminal state; the other three are mutually
    exclusive and never left once entered.
    """

    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not PromiseState.PENDING


@dataclass
class PromiseOutcome:
    """Snapshot of how a promise settled.

    Attributes:
        state: Terminal (or still pending) state.
        args: Arguments delivered with the terminal event.
        elapsed_ms: Optional time from creation to settlement.
    """

    state: PromiseState = PromiseState.PENDING
    args: tuple[Any, ...] = field(default_factory=tuple)
    elapsed_ms: float | None = None

    @property
    def timed_out(self) -> bool:
        """True when the promise was rejected by its own timeout."""
        from src.core.conc.errors import PromiseTimeoutError

        return self.state is PromiseState.REJECTED and any(
            isinstance(arg, PromiseTimeoutError) for arg in self.args
        )

    def describe(self) -> str:
        """Return a one-line human readable summary."""
        if self.timed_out:
            return "timed out"
        if self.state is PromiseState.FULFILLED:
            return "fulfilled: " + ", ".join(repr(a) for a in self.args)
        if self.state is PromiseState.REJECTED:
            return "rejected: " + ", ".join(str(a) for a in self.args)
        return self.state.value

    def to_dict(self) -> dict[str, Any]:
        """Convert PromiseOutcome to a plain dict suitable for JSON/logging."""
        return {
            "state": self.state.value,
            "args": [repr(a) for a in self.args],
            "elapsed_ms": float(self.elapsed_ms) if self.elapsed_ms is not None else None,
            "timed_out": self.timed_out,
        }
