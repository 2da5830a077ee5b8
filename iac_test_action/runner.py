"""Check runner that executes a battery of named checks concurrently."""

import asyncio
import inspect
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from iac_test_action.aggregator import ResultAggregator
from iac_test_action.errors import SkipCheck
from iac_test_action.models.result import Status, TestOutcome

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Check:
    """A named check.

    ``func`` takes no arguments and may be sync or async. It passes by
    returning, fails by raising ``AssertionError`` (or any other exception),
    and skips by raising ``SkipCheck``.
    """

    name: str
    func: Callable[[], object]
    timeout: float | None = None


async def _invoke(func: Callable[[], object]) -> None:
    """Await async checks, run sync checks on a worker thread."""
    if inspect.iscoroutinefunction(func):
        await func()
        return
    result = await asyncio.to_thread(func)
    if inspect.isawaitable(result):
        await result


async def run_check(
    check: Check,
    aggregator: ResultAggregator,
    default_timeout: float | None = None,
) -> TestOutcome:
    """Run one check inside a failure boundary and record its outcome.

    Whatever the check does, exactly one outcome is recorded. A sync check
    that times out keeps running on its worker thread; only its outcome is
    settled.
    """
    timeout = check.timeout if check.timeout is not None else default_timeout
    status: Status = "PASS"
    error: str | None = None
    start = time.monotonic()

    try:
        async with asyncio.timeout(timeout):
            await _invoke(check.func)
    except SkipCheck as e:
        status = "SKIP"
        log.info("Check %s skipped: %s", check.name, e)
    except TimeoutError as e:
        status = "FAIL"
        if timeout is not None and not str(e):
            error = f"timed out after {timeout:g}s"
        else:
            error = f"timed out: {e}"
    except AssertionError as e:
        status = "FAIL"
        error = str(e) or "assertion failed"
    except Exception as e:
        log.error("Check %s raised: %s", check.name, e, exc_info=e)
        status = "FAIL"
        error = f"unexpected error: {type(e).__name__}: {e}"

    outcome = TestOutcome(
        name=check.name,
        status=status,
        duration=time.monotonic() - start,
        error=error,
    )
    aggregator.record(outcome)
    log.info(
        "Check completed: name=%s status=%s duration=%.2fs",
        outcome.name,
        outcome.status,
        outcome.duration,
    )
    return outcome


@dataclass(frozen=True, kw_only=True)
class CheckRunner:
    """Runs checks concurrently and records every outcome in one aggregator."""

    aggregator: ResultAggregator
    max_concurrency: int = 4
    default_timeout: float | None = None

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ValueError(
                f"max_concurrency must be at least 1, got {self.max_concurrency}"
            )

    async def run_all(self, checks: Sequence[Check]) -> Sequence[TestOutcome]:
        """Run all checks and wait for every one of them.

        Returns:
            Every outcome recorded so far, in completion order

        """
        if not checks:
            log.info("No checks to run")
            return self.aggregator.outcomes

        log.info(
            "Running %d check(s) with concurrency %d",
            len(checks),
            self.max_concurrency,
        )
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(check: Check) -> TestOutcome:
            async with semaphore:
                return await run_check(check, self.aggregator, self.default_timeout)

        await asyncio.gather(*(bounded(check) for check in checks))
        log.info("Check execution completed")
        return self.aggregator.outcomes
