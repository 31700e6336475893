"""Named-event registry with synchronous fan-out.

Listeners are kept per event name in registration order. ``emit`` calls each
of them in turn on the caller's thread; a failing listener never prevents its
siblings from running.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from src.core.config import config
from src.core.conc.errors import ListenerError

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class Observable:
    """Generic publish/subscribe registry keyed by event name."""

    def __init__(self, error_policy: str | None = None) -> None:
        """Create an empty registry.

        Args:
            error_policy: ``"log"`` or ``"raise"``. When ``None`` the policy is
                read from ``config.listener_error_policy`` on every emit.
        """
        self.listeners: dict[str, list[Listener]] = {}
        self._error_policy = error_policy

    @property
    def error_policy(self) -> str:
        return self._error_policy or config.listener_error_policy

    def add_listener(self, event_name: str, callback: Listener) -> None:
        """Append ``callback`` to the listeners of ``event_name``."""
        self.listeners.setdefault(event_name, []).append(callback)

    def remove_listener(self, event_name: str) -> None:
        """Drop every listener registered for ``event_name``."""
        self.listeners.pop(event_name, None)

    def listener_count(self, event_name: str) -> int:
        """Return how many listeners are registered for ``event_name``."""
        return len(self.listeners.get(event_name, ()))

    def emit(self, event_name: str, *args: Any) -> None:
        """Call every listener of ``event_name`` with ``args``, in order.

        The listener list is copied before dispatch, so registrations made by a
        listener take effect from the next emit on.

        Raises:
            ListenerError: Only under the ``"raise"`` policy, after all
                listeners ran, when at least one of them raised.
        """
        callbacks = list(self.listeners.get(event_name, ()))
        if not callbacks:
            return

        errors: list[BaseException] = []
        for callback in callbacks:
            try:
                callback(*args)
            except Exception as e:
                logger.exception("Listener %r failed on event '%s'", callback, event_name)
                errors.append(e)

        if errors and self.error_policy == "raise":
            raise ListenerError(event_name, errors)


__all__ = ["Listener", "Observable"]
