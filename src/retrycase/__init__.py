"""Retrycase - bounded, observable retries with precomputed backoff.

Computes delay schedules from a declarative policy, drives sequential timed
attempts, keeps the error history, and stops on whichever comes first: the
schedule running out or the wall-clock budget being spent. The caller's
operation always decides whether a failure is worth another attempt.

Quick Start (async):
    >>> from retrycase import retry_async
    >>>
    >>> async def fetch(retry, number, operation):
    ...     try:
    ...         return await client.get(url)
    ...     except ConnectionError as e:
    ...         return retry(e)
    >>>
    >>> body = await retry_async(fetch, {"retries": 5, "min_timeout": 200})

Quick Start (sync):
    >>> from retrycase import retry_sync
    >>> value = retry_sync(lambda retry, n, op: read_sensor() or retry(), [100, 200, 400])

Schedules:
    >>> from retrycase import compute_timeouts
    >>> compute_timeouts({"retries": 3, "factor": 0.5, "min_timeout": 1000})
    [250, 500, 1000]

Low-level state machine:
    >>> from retrycase import operation
    >>> op = operation({"retries": 3, "min_timeout": 100, "max_retry_time": 5000})
    >>> op.attempt(lambda number: work() or op.retry(RuntimeError("not ready")))
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
    ConfigurationError,
    Err,
    Ok,
    Result,
    RetrycaseError,
    RetryTimeoutError,
    UnspecifiedError,
)

# Config
from .foundation.config import RetrycaseSettings, clear_settings_cache, get_settings

# Retry
from .runtime.retry import (
    AsyncioScheduler,
    Continue,
    Done,
    Retry,
    RetryOperation,
    RetryOptions,
    RetrySignal,
    RetryState,
    Scheduler,
    Signal,
    ThreadScheduler,
    compute_timeouts,
    operation,
    resolve_options,
    retry_async,
    retry_result,
    retry_result_sync,
    retry_sync,
)

# Observability
from .runtime.observability import configure_logging

__all__ = [
    # Version
    "__version__",
    # Errors
    "RetrycaseError",
    "ConfigurationError",
    "RetryTimeoutError",
    "UnspecifiedError",
    "Result",
    "Ok",
    "Err",
    # Config
    "RetrycaseSettings",
    "get_settings",
    "clear_settings_cache",
    # Schedule
    "RetryOptions",
    "compute_timeouts",
    "resolve_options",
    # State machine
    "RetryOperation",
    "RetryState",
    "operation",
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
    # Observability
    "configure_logging",
]
