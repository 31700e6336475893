"""Concurrency primitives: Observable and single-fire Promise.

Usage:
    from src.core.conc import Promise

    promise = Promise().add_callback(print).add_errback(log_error)
    promise.timeout(5000)
    ...
    promise.emit_success(result)
"""

from __future__ import annotations

from .errors import ConcError, ListenerError, PromiseTimeoutError
from .observable import Observable
from .promise import Promise
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler, SchedulerFactory

__all__ = [
    "AsyncioScheduler",
    "ConcError",
    "ListenerError",
    "ManualScheduler",
    "Observable",
    "Promise",
    "PromiseTimeoutError",
    "Scheduler",
    "SchedulerFactory",
]
