"""Pytest configuration and shared fixtures for tests."""

import logging
from typing import Any

import pytest

from src.core.conc import ManualScheduler
from src.core.config import config

logger = logging.getLogger(__name__)


def pytest_configure(config):
    """Register custom markers to avoid pytest warnings and document usage."""
    config.addinivalue_line(
        "markers",
        "realtime: test drives a real asyncio loop and depends on wall-clock timers",
    )


class Recorder:
    """Callable that remembers every call it receives."""

    def __init__(self, name: str = "recorder", log: list | None = None) -> None:
        self.name = name
        self.calls: list[tuple[Any, ...]] = []
        self._log = log

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)
        if self._log is not None:
            self._log.append((self.name, args))

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Make every test start from default configuration and a fresh shared clock."""
    for var in (
        "LISTENER_ERROR_POLICY",
        "PROMISE_SCHEDULER",
        "DEMO_TIMEOUT_MS",
        "DEMO_RESOLVE_AFTER_MS",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("src.core.conc.scheduler._manual_clock", None)
    config.reload()
    yield
    config.reload()


@pytest.fixture
def scheduler():
    """Provide a virtual-clock scheduler."""
    return ManualScheduler()


@pytest.fixture
def call_log():
    """Shared list recording (listener name, args) in invocation order."""
    return []


@pytest.fixture
def make_recorder(call_log):
    """Factory for recorders that share ``call_log``."""

    def _make(name: str = "recorder") -> Recorder:
        return Recorder(name, call_log)

    return _make
