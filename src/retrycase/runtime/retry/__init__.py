"""Retry orchestration: backoff schedules, the retry state machine, and adapters.

Example:
    >>> from retrycase.runtime.retry import compute_timeouts, operation, retry_async
    >>> compute_timeouts({"retries": 4, "min_timeout": 100})
    [100, 200, 400, 800]
    >>>
    >>> async def flaky(retry, number, op):
    ...     try:
    ...         return await fetch()
    ...     except ConnectionError as e:
    ...         return retry(e)
    >>> await retry_async(flaky, {"retries": 3, "min_timeout": 50})
"""

from .adapter import (
    Continue,
    Done,
    Retry,
    RetrySignal,
    Signal,
    retry_async,
    retry_result,
    retry_result_sync,
    retry_sync,
)
from .backoff import RetryOptions, compute_timeouts, resolve_options
from .operation import RetryOperation, RetryState, monotonic_ms, operation
from .scheduler import AsyncioScheduler, Scheduler, ThreadScheduler

__all__ = [
    # Schedule
    "RetryOptions",
    "compute_timeouts",
    "resolve_options",
    # State machine
    "RetryOperation",
    "RetryState",
    "operation",
    "monotonic_ms",
    # Timers
    "Scheduler",
    "ThreadScheduler",
    "AsyncioScheduler",
    # Adapters
    "Continue",
    "Done",
    "Retry",
    "RetrySignal",
    "Signal",
    "retry_async",
    "retry_sync",
    "retry_result",
    "retry_result_sync",
]
