"""CLI entry point demonstrating promises on an asyncio loop.

Simulates an asynchronous operation that settles after a delay and reports
how the promise returned for it ended: fulfilled, rejected, timed out or
cancelled.
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from src.core.conc import AsyncioScheduler, Promise
from src.core.config import config
from src.core.models import PromiseOutcome, PromiseState
from src.utils.logging_config import get_logger, setup_logging

# Load environment variables once at startup
load_dotenv()

logger = get_logger(__name__)


def simulate_operation(resolve_after_ms: float, outcome: str = "success") -> Promise:
    """Start a fake asynchronous operation and return its promise.

    Must be called from inside a running event loop. Cancelling the returned
    promise aborts the pending work.
    """
    loop = asyncio.get_running_loop()
    promise = Promise(AsyncioScheduler(loop))

    def finish() -> None:
        if outcome == "error":
            promise.emit_error(RuntimeError("operation failed"))
        else:
            promise.emit_success("done")

    handle = loop.call_later(resolve_after_ms / 1000.0, finish)
    promise.add_cancelback(handle.cancel)
    return promise


async def run_demo(
    timeout_ms: float,
    resolve_after_ms: float,
    outcome: str = "success",
    cancel_after_ms: float | None = None,
) -> PromiseOutcome:
    """Run one simulated operation and wait until its promise settles."""
    loop = asyncio.get_running_loop()
    settled = asyncio.Event()
    started = loop.time()
    result = PromiseOutcome()

    def record(state: PromiseState):
        def listener(*args) -> None:
            result.state = state
            result.args = args
            result.elapsed_ms = (loop.time() - started) * 1000.0
            settled.set()

        return listener

    promise = simulate_operation(resolve_after_ms, outcome)
    promise.add_callback(record(PromiseState.FULFILLED)).add_errback(
        record(PromiseState.REJECTED)
    ).add_cancelback(record(PromiseState.CANCELLED))
    promise.timeout(timeout_ms)

    if cancel_after_ms is not None:
        loop.call_later(cancel_after_ms / 1000.0, promise.cancel)

    await settled.wait()
    logger.info("Demo promise settled: %s", result.to_dict())
    return result


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the demo and return a process exit code."""
    parser = argparse.ArgumentParser(
        description="Run a simulated asynchronous operation through a Promise"
    )
    parser.add_argument(
        "--timeout-ms",
        type=float,
        default=config.demo_timeout_ms,
        help="Promise timeout in milliseconds (default: DEMO_TIMEOUT_MS env var or 1000)",
    )
    parser.add_argument(
        "--resolve-after-ms",
        type=float,
        default=config.demo_resolve_after_ms,
        help="Delay before the operation completes (default: DEMO_RESOLVE_AFTER_MS or 200)",
    )
    parser.add_argument(
        "--outcome",
        default="success",
        choices=["success", "error"],
        help="How the simulated operation completes",
    )
    parser.add_argument(
        "--cancel-after-ms",
        type=float,
        default=None,
        help="Cancel the promise after this many milliseconds",
    )

    args = parser.parse_args(argv)

    if args.timeout_ms < 0:
        parser.error(f"--timeout-ms must not be negative, got {args.timeout_ms}")
    if args.resolve_after_ms < 0:
        parser.error(f"--resolve-after-ms must not be negative, got {args.resolve_after_ms}")
    if args.cancel_after_ms is not None and args.cancel_after_ms < 0:
        parser.error(f"--cancel-after-ms must not be negative, got {args.cancel_after_ms}")

    setup_logging()

    for issue in config.validate():
        logger.warning("Configuration issue: %s", issue)

    result = asyncio.run(
        run_demo(
            timeout_ms=args.timeout_ms,
            resolve_after_ms=args.resolve_after_ms,
            outcome=args.outcome,
            cancel_after_ms=args.cancel_after_ms,
        )
    )

    print(result.describe())
    return 0 if result.state is PromiseState.FULFILLED else 1


if __name__ == "__main__":
    sys.exit(main())
