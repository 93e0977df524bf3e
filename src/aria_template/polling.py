"""
Polling loop for callers that wait for a page to reach a matching state.

Each attempt captures a fresh accessible tree and matches it; attempts run
strictly one after another. The loop stops on the first match, when the
deadline of the injected clock passes, or when the cancellation event is set.
"""

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from .config import load_matcher_config
from .matcher import match
from .types import AccessibleNode, MatchResult, TemplateNode

logger = logging.getLogger(__name__)

Capture = Callable[[], AccessibleNode | Awaitable[AccessibleNode]]


@dataclass(frozen=True)
class PollOutcome:
    """Last match result plus how the loop ended."""

    result: MatchResult
    attempts: int
    timed_out: bool = False
    cancelled: bool = False


async def _sleep_unless_cancelled(
    sleep: Callable[[float], Awaitable[object]],
    seconds: float,
    cancel_event: asyncio.Event | None,
) -> None:
    """Sleep for ``seconds`` or until ``cancel_event`` is set, whichever comes first."""
    if cancel_event is None:
        await sleep(seconds)
        return

    tasks = {asyncio.ensure_future(sleep(seconds)), asyncio.ensure_future(cancel_event.wait())}
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


async def wait_for_match(
    capture: Capture,
    template: TemplateNode,
    *,
    timeout: float | None = None,
    interval: float | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    cancel_event: asyncio.Event | None = None,
) -> PollOutcome:
    """
    Re-capture and match until the template matches or polling stops.

    At least one attempt is always made.

    Args:
        capture: Returns (or resolves to) a freshly captured accessible tree
        template: Parsed template
        timeout: Seconds before giving up, measured with ``clock``
            (default: ARIA_TEMPLATE_POLL_TIMEOUT_MS)
        interval: Seconds to sleep between attempts
            (default: ARIA_TEMPLATE_POLL_INTERVAL_MS)
        clock: Monotonic clock in seconds
        sleep: Coroutine function used to wait between attempts
        cancel_event: Stops polling once set

    Returns:
        PollOutcome holding the last MatchResult

    Raises:
        ContractViolationError: If a capture yields a malformed tree
        ValueError: If timeout or interval is out of range
    """
    if timeout is None or interval is None:
        config = load_matcher_config()
        if timeout is None:
            timeout = config["poll_timeout_ms"] / 1000
        if interval is None:
            interval = config["poll_interval_ms"] / 1000

    if timeout < 0:
        raise ValueError("timeout must be >= 0")
    if interval <= 0:
        raise ValueError("interval must be > 0")

    deadline = clock() + timeout
    attempts = 0

    while True:
        tree = capture()
        if inspect.isawaitable(tree):
            tree = await tree
        attempts += 1

        result = match(template, tree)  # type: ignore[arg-type]
        if result.ok:
            logger.debug(f"Template matched after {attempts} attempt(s)")
            return PollOutcome(result=result, attempts=attempts)

        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Polling cancelled after {attempts} attempt(s)")
            return PollOutcome(result=result, attempts=attempts, cancelled=True)

        remaining = deadline - clock()
        if remaining <= 0:
            logger.info(f"Polling timed out after {attempts} attempt(s)")
            return PollOutcome(result=result, attempts=attempts, timed_out=True)

        logger.debug(f"Attempt {attempts} did not match, retrying in {min(interval, remaining):.3f}s")
        await _sleep_unless_cancelled(sleep, min(interval, remaining), cancel_event)

        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Polling cancelled after {attempts} attempt(s)")
            return PollOutcome(result=result, attempts=attempts, cancelled=True)
