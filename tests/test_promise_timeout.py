"""Tests for Promise.timeout on virtual and real clocks."""

from __future__ import annotations

import asyncio

import pytest

from src.core.conc import (
    AsyncioScheduler,
    ManualScheduler,
    Promise,
    PromiseTimeoutError,
    SchedulerFactory,
)
from src.core.models import PromiseState


def test_timeout_accessor_before_and_after_setting(scheduler) -> None:
    promise = Promise(scheduler)

    assert promise.timeout() is None
    assert scheduler.pending == 0

    assert promise.timeout(250) is promise
    assert promise.timeout() == 250
    assert promise.timeout() == 250
    assert scheduler.pending == 1


def test_failed_first_arm_leaves_timeout_unset() -> None:
    promise = Promise()

    # No running loop for the default asyncio scheduler
    with pytest.raises(RuntimeError):
        promise.timeout(10)

    assert promise.timeout() is None


class FlakyScheduler(ManualScheduler):
    def __init__(self) -> None:
        super().__init__()
        self.broken = False

    def call_later(self, delay_ms, callback):
        if self.broken:
            raise RuntimeError("timer facility unavailable")
        return super().call_later(delay_ms, callback)


def test_failed_rearm_keeps_previous_timer(make_recorder) -> None:
    flaky = FlakyScheduler()
    promise = Promise(flaky).timeout(100)
    errback = make_recorder()
    promise.add_errback(errback)

    flaky.broken = True
    with pytest.raises(RuntimeError):
        promise.timeout(10)

    assert promise.timeout() == 100
    assert flaky.pending == 1

    flaky.advance(100)
    assert errback.call_count == 1
    assert errback.calls[0][0].delay == 100


def test_default_manual_backend_is_driven_by_shared_clock(monkeypatch, make_recorder) -> None:
    from src.core.config import config

    monkeypatch.setenv("PROMISE_SCHEDULER", "manual")
    config.reload()
    first, second = Promise(), Promise()
    errback = make_recorder()
    first.add_errback(errback).timeout(10)
    second.add_errback(errback).timeout(30)

    clock = SchedulerFactory.manual_clock()
    clock.advance(10)

    assert [str(args[0]) for args in errback.calls] == ["timeout"]
    assert first.state is PromiseState.REJECTED
    assert second.is_pending

    clock.advance(20)
    assert second.state is PromiseState.REJECTED


def test_timeout_rejects_pending_promise(scheduler, make_recorder) -> None:
    promise = Promise(scheduler).timeout(10)
    errback = make_recorder()
    promise.add_errback(errback)

    scheduler.advance(9)
    assert errback.calls == []

    scheduler.advance(1)

    assert errback.call_count == 1
    (error,) = errback.calls[0]
    assert isinstance(error, PromiseTimeoutError)
    assert str(error) == "timeout"
    assert error.delay == 10
    assert promise.state is PromiseState.REJECTED


def test_rearming_supersedes_previous_timer(scheduler, make_recorder) -> None:
    promise = Promise(scheduler)
    errback = make_recorder()
    promise.add_errback(errback)

    promise.timeout(100)
    promise.timeout(50)
    assert scheduler.pending == 1

    scheduler.advance(50)
    assert errback.call_count == 1

    scheduler.advance(100)
    assert errback.call_count == 1
    assert promise.timeout() == 50


def test_resolution_before_deadline_wins(scheduler, make_recorder) -> None:
    promise = Promise(scheduler).timeout(20)
    callback, errback = make_recorder("cb"), make_recorder("eb")
    promise.add_callback(callback).add_errback(errback)

    scheduler.advance(5)
    promise.emit_success("fast")
    scheduler.advance(100)

    assert callback.calls == [("fast",)]
    assert errback.calls == []
    assert scheduler.pending == 0


def test_cancel_before_deadline_suppresses_timeout(scheduler, make_recorder) -> None:
    promise = Promise(scheduler).timeout(20)
    errback, cancelback = make_recorder("eb"), make_recorder("cancel")
    promise.add_errback(errback).add_cancelback(cancelback)

    promise.cancel()
    scheduler.advance(100)

    assert errback.calls == []
    assert cancelback.call_count == 1
    assert promise.state is PromiseState.CANCELLED


def test_timeout_after_resolution_never_fires(scheduler, make_recorder) -> None:
    promise = Promise(scheduler)
    errback = make_recorder()
    promise.add_errback(errback)

    promise.emit_success("done")
    promise.timeout(5)
    scheduler.advance(10)

    assert errback.calls == []
    assert promise.state is PromiseState.FULFILLED


def test_timeout_error_is_distinguishable_from_producer_error(scheduler, make_recorder) -> None:
    producer_failed = Promise(scheduler).timeout(10)
    timed_out = Promise(scheduler).timeout(10)
    errors = make_recorder()
    producer_failed.add_errback(errors)
    timed_out.add_errback(errors)

    producer_failed.emit_error(RuntimeError("server said no"))
    scheduler.advance(10)

    messages = [str(args[0]) for args in errors.calls]
    assert messages == ["server said no", "timeout"]


@pytest.mark.parametrize("delay", ["10", True, object()])
def test_timeout_rejects_non_numeric_delay(delay) -> None:
    with pytest.raises(TypeError):
        Promise().timeout(delay)


def test_timeout_rejects_negative_delay(scheduler) -> None:
    promise = Promise(scheduler)

    with pytest.raises(ValueError):
        promise.timeout(-1)

    assert promise.timeout() is None
    assert scheduler.pending == 0


@pytest.mark.realtime
def test_timeout_on_asyncio_loop() -> None:
    async def scenario():
        promise = Promise(AsyncioScheduler())
        errors: list = []
        promise.add_errback(errors.append)
        promise.timeout(100).timeout(20)

        await asyncio.sleep(0.3)
        return promise, errors

    promise, errors = asyncio.run(scenario())

    assert len(errors) == 1
    assert str(errors[0]) == "timeout"
    assert errors[0].delay == 20
    assert promise.state is PromiseState.REJECTED


@pytest.mark.realtime
def test_default_scheduler_uses_running_loop() -> None:
    async def scenario():
        promise = Promise()
        settled = asyncio.Event()
        promise.add_errback(lambda err: settled.set())
        promise.timeout(10)
        await asyncio.wait_for(settled.wait(), timeout=2)
        return promise

    promise = asyncio.run(scenario())

    assert promise.state is PromiseState.REJECTED
